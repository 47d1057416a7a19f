"""
core/browser/filter.py - 필터 엔진

리소스 목록에 세 가지 필터를 고정 순서로 적용합니다.

    1. 필드 필터 (네비게이션으로 진입한 경우, 예: VpcId=vpc-123)
    2. 태그 필터 (key / key=value / key~substring)
    3. 텍스트 필터 (ID, 이름, 각 컬럼 값에 대한 부분열 퍼지 매칭)

모든 필터가 비어 있으면 입력 순서 그대로 반환합니다.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from core.aws.arn import extract_resource_name, is_arn
from core.resource.capabilities import Column, FieldValueProvider
from core.resource.types import unwrap_resource

logger = logging.getLogger(__name__)

TAG_OP_EXACT = "="
TAG_OP_CONTAINS = "~"


@dataclass
class FilterState:
    """화면별 필터 상태

    Attributes:
        field_filter: 필드 필터 이름 (예: VpcId)
        field_value: 필드 필터 값
        tag_filter: 태그 필터 식
        text_filter: 텍스트 필터 패턴
    """

    field_filter: str = ""
    field_value: str = ""
    tag_filter: str = ""
    text_filter: str = ""

    @property
    def has_field_filter(self) -> bool:
        return bool(self.field_filter and self.field_value)

    @property
    def is_empty(self) -> bool:
        return not (self.has_field_filter or self.tag_filter.strip() or self.text_filter)

    def clear(self) -> None:
        """텍스트/필드 필터 해제 (태그 필터는 tag 명령으로만 해제)"""
        self.text_filter = ""
        self.field_filter = ""
        self.field_value = ""


# =============================================================================
# 텍스트 필터
# =============================================================================


def fuzzy_match(candidate: str, pattern: str) -> bool:
    """대소문자 무시 부분열(subsequence) 매칭

    "abcd"는 "acd"와 매칭되지만 "deva"와는 매칭되지 않습니다. 빈 패턴은 항상 매칭.
    """
    if not pattern:
        return True
    it = iter(candidate.lower())
    return all(ch in it for ch in pattern.lower())


def match_text_filter(resource: Any, columns: Iterable[Column], pattern: str) -> bool:
    """ID, 이름, 컬럼 값 순서로 하나라도 매칭되면 True"""
    if not pattern:
        return True
    if fuzzy_match(resource.id, pattern) or fuzzy_match(resource.name, pattern):
        return True
    return any(fuzzy_match(col.value(resource), pattern) for col in columns)


# =============================================================================
# 태그 필터
# =============================================================================


@dataclass(frozen=True)
class TagFilter:
    """파싱된 태그 필터

    Attributes:
        key: 태그 키
        op: "" (키 존재) / "=" (정확히 일치) / "~" (부분 문자열, 대소문자 무시)
        value: 비교 값
    """

    key: str
    op: str = ""
    value: str = ""


def parse_tag_filter(expr: str) -> TagFilter | None:
    """태그 필터 식 파싱 (빈 식이면 None)"""
    expr = expr.strip()
    if not expr:
        return None
    match = re.search(r"[=~]", expr)
    if match is None:
        return TagFilter(expr)
    idx = match.start()
    return TagFilter(expr[:idx].strip(), expr[idx], expr[idx + 1 :].strip())


def match_tag_filter(tags: Mapping[str, str] | None, expr: str) -> bool:
    """태그 필터 적용

    태그 정보가 없는 리소스는 비어 있지 않은 필터와 매칭되지 않습니다.
    """
    tag_filter = parse_tag_filter(expr)
    if tag_filter is None:
        return True
    if not tags or tag_filter.key not in tags:
        return False

    value = tags[tag_filter.key]
    if tag_filter.op == TAG_OP_EXACT:
        return value == tag_filter.value
    if tag_filter.op == TAG_OP_CONTAINS:
        return tag_filter.value.lower() in value.lower()
    return True


# =============================================================================
# 필드 필터
# =============================================================================


def _snake_case(name: str) -> str:
    return re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", name).lower()


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def get_field_value(data: Any, field_name: str) -> str | None:
    """원본 페이로드에서 필드 값 조회

    dict이면 키로, 객체면 속성으로 찾습니다. 정확한 이름이 없으면 snake_case 이름도 시도합니다.
    찾지 못하면 None.
    """
    if data is None:
        return None

    for name in (field_name, _snake_case(field_name)):
        if isinstance(data, Mapping):
            if name in data:
                value = data[name]
                return None if value is None else _stringify(value)
        elif hasattr(data, name):
            value = getattr(data, name)
            if callable(value):
                continue
            return None if value is None else _stringify(value)

    return None


def resource_field_value(resource: Any, field_name: str) -> str | None:
    """명시적 field_value capability 우선, 없으면 raw 조회"""
    inner = unwrap_resource(resource)
    if isinstance(inner, FieldValueProvider):
        value = inner.field_value(field_name)
        if value is not None:
            return value
    return get_field_value(inner.raw, field_name)


def match_field_filter(resource: Any, field_name: str, value: str) -> bool:
    """필드 필터 적용

    1. ID 또는 이름이 값과 같으면 매칭
    2. 값이 ARN이면 마지막 세그먼트로 다시 비교
    3. 필드 값을 찾아 비어 있지 않으면 같아야 매칭
    4. 필드가 없거나 비어 있으면 통과
    """
    inner = unwrap_resource(resource)
    if inner.id == value or inner.name == value:
        return True

    if is_arn(value):
        short = extract_resource_name(value)
        if inner.id == short or inner.name == short:
            return True

    if inner.raw is None and not isinstance(inner, FieldValueProvider):
        return True

    actual = resource_field_value(inner, field_name)
    if not actual:
        return True
    return actual == value


# =============================================================================
# 파이프라인
# =============================================================================


def apply_filters(resources: list[Any], state: FilterState, columns: list[Column]) -> list[Any]:
    """필드 -> 태그 -> 텍스트 순서로 필터 적용 (입력 순서 유지)"""
    result = resources

    if state.has_field_filter:
        result = [r for r in result if match_field_filter(r, state.field_filter, state.field_value)]

    if state.tag_filter.strip():
        result = [r for r in result if match_tag_filter(r.tags, state.tag_filter)]

    if state.text_filter:
        result = [r for r in result if match_text_filter(r, columns, state.text_filter)]

    if result is resources:
        return list(resources)
    return result


# =============================================================================
# 태그 자동완성
# =============================================================================


def collect_tag_keys(resources: Iterable[Any]) -> list[str]:
    """로드된 리소스의 고유 태그 키 (정렬)"""
    keys: set[str] = set()
    for r in resources:
        if r.tags:
            keys.update(r.tags.keys())
    return sorted(keys)


def collect_tag_values(resources: Iterable[Any], key: str) -> list[str]:
    """특정 태그 키의 고유 값 (키 대소문자 무시, 정렬)"""
    lowered = key.lower()
    values: set[str] = set()
    for r in resources:
        for k, v in (r.tags or {}).items():
            if k.lower() == lowered and v:
                values.add(v)
    return sorted(values)
