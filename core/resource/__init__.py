"""
core/resource - 리소스 & capability 모델

모든 리소스 종류가 공유하는 계약과, 선택적으로 구현하는 capability를 정의합니다.
"""

from .capabilities import (
    BaseFormatter,
    Column,
    DataFetcher,
    DisplayFormatter,
    Navigation,
    Navigator,
    PaginatedFetcher,
    SummaryField,
    get_metric_spec,
    get_navigations,
    supports_pagination,
)
from .types import (
    BaseResource,
    RegionalResource,
    Resource,
    get_resource_region,
    tags_from_list,
    unwrap_resource,
    wrap_with_region,
)

__all__ = [
    "BaseFormatter",
    "BaseResource",
    "Column",
    "DataFetcher",
    "DisplayFormatter",
    "Navigation",
    "Navigator",
    "PaginatedFetcher",
    "RegionalResource",
    "Resource",
    "SummaryField",
    "get_metric_spec",
    "get_navigations",
    "get_resource_region",
    "supports_pagination",
    "tags_from_list",
    "unwrap_resource",
    "wrap_with_region",
]
