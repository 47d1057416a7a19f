"""
core/browser - 리소스 목록 화면 엔진

필터 -> 정렬 -> 페이지네이션 파이프라인과, 이를 묶는 반응형 화면 상태(ResourceBrowser)입니다.
"""

from .filter import FilterState, apply_filters, fuzzy_match, match_field_filter, match_tag_filter
from .pagination import PAGE_SIZE, PaginationController, PaginationState
from .sort import SortState, compare_values, find_column_by_name, sort_resources
from .surface import ResourceBrowser

__all__ = [
    "PAGE_SIZE",
    "FilterState",
    "PaginationController",
    "PaginationState",
    "ResourceBrowser",
    "SortState",
    "apply_filters",
    "compare_values",
    "find_column_by_name",
    "fuzzy_match",
    "match_field_filter",
    "match_tag_filter",
    "sort_resources",
]
