"""
core/resource/capabilities.py - 리소스 종류별 capability 계약

fetcher/formatter/리소스가 선택적으로 구현하는 기능을 typing.Protocol로 정의합니다.
실행 시점에 isinstance로 감지하며, 구현하지 않은 기능은 조용히 비활성화됩니다.

필수 계약:
- DataFetcher.list_resources(ctx) -> list[Resource]
- DisplayFormatter.columns() / render_detail() / render_summary()

선택 계약:
- PaginatedFetcher.list_page(ctx, page_size, token)
- ResourceGetter.get(ctx, id)
- Navigator.navigations(resource)
- MetricSpecProvider.metric_spec()
- PrivateIPProvider / ClusterArnProvider / ContainerNameProvider / LogGroupNameProvider
- FieldValueProvider.field_value(name)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from .types import unwrap_resource

if TYPE_CHECKING:
    from core.context import FetchContext
    from core.metrics.types import MetricSpec

    from .types import Resource


# =============================================================================
# 표시 타입
# =============================================================================


@dataclass(frozen=True)
class Column:
    """테이블 컬럼

    필터/정렬이 리소스 내용을 볼 수 있는 유일한 일반 경로입니다.

    Attributes:
        name: 헤더 이름
        width: 표시 폭 (셀 단위)
        getter: 리소스 -> 셀 문자열
        priority: 좁은 화면에서 숨길 순서 (클수록 먼저 숨김)
    """

    name: str
    width: int
    getter: Callable[[Any], str]
    priority: int = 0

    def value(self, resource: Any) -> str:
        return self.getter(unwrap_resource(resource))


@dataclass(frozen=True)
class SummaryField:
    """요약 패널 항목"""

    label: str
    value: str
    style: str = ""


@dataclass(frozen=True)
class Navigation:
    """관련 리소스로 이동하는 단축키

    Attributes:
        key: 단축키
        label: 표시 라벨
        domain / kind: 대상 리소스 타입
        filter_field: 대상 목록에 적용할 필드 이름 (예: VpcId)
        filter_value: 필드 값
    """

    key: str
    label: str
    domain: str
    kind: str
    filter_field: str = ""
    filter_value: str = ""


# =============================================================================
# fetcher 계약
# =============================================================================


@runtime_checkable
class DataFetcher(Protocol):
    def list_resources(self, ctx: FetchContext) -> list[Resource]: ...


@runtime_checkable
class PaginatedFetcher(Protocol):
    def list_page(self, ctx: FetchContext, page_size: int, token: str) -> tuple[list[Resource], str]: ...


@runtime_checkable
class ResourceGetter(Protocol):
    def get(self, ctx: FetchContext, resource_id: str) -> Resource: ...


# =============================================================================
# formatter 계약
# =============================================================================


@runtime_checkable
class DisplayFormatter(Protocol):
    def columns(self) -> list[Column]: ...

    def render_detail(self, resource: Any) -> str: ...

    def render_summary(self, resource: Any) -> list[SummaryField]: ...


@runtime_checkable
class Navigator(Protocol):
    def navigations(self, resource: Any) -> list[Navigation]: ...


@runtime_checkable
class MetricSpecProvider(Protocol):
    def metric_spec(self) -> MetricSpec: ...


# =============================================================================
# 리소스 측 계약 (변수 치환 / 필드 필터)
# =============================================================================


@runtime_checkable
class PrivateIPProvider(Protocol):
    def private_ip(self) -> str: ...


@runtime_checkable
class ClusterArnProvider(Protocol):
    def cluster_arn(self) -> str: ...


@runtime_checkable
class ContainerNameProvider(Protocol):
    def first_container_name(self) -> str: ...


@runtime_checkable
class LogGroupNameProvider(Protocol):
    def log_group_name(self) -> str: ...


@runtime_checkable
class FieldValueProvider(Protocol):
    def field_value(self, name: str) -> str | None: ...


# =============================================================================
# 감지 헬퍼
# =============================================================================


def supports_pagination(fetcher: Any) -> bool:
    return isinstance(fetcher, PaginatedFetcher)


def get_navigations(formatter: Any, resource: Any) -> list[Navigation]:
    """Navigator 미구현이면 빈 목록"""
    if resource is None or not isinstance(formatter, Navigator):
        return []
    return list(formatter.navigations(unwrap_resource(resource)))


def get_metric_spec(formatter: Any) -> MetricSpec | None:
    """MetricSpecProvider 미구현이면 None"""
    if isinstance(formatter, MetricSpecProvider):
        return formatter.metric_spec()
    return None


# =============================================================================
# 기본 formatter
# =============================================================================


class BaseFormatter:
    """컬럼 목록으로 상세/요약을 기본 렌더링하는 formatter

    리소스 종류별 formatter는 columns를 넘기고 필요한 메서드만 재정의합니다.
    """

    summary_columns = 3

    def __init__(self, columns: list[Column]):
        self._columns = list(columns)

    def columns(self) -> list[Column]:
        return list(self._columns)

    def render_detail(self, resource: Any) -> str:
        inner = unwrap_resource(resource)
        label_width = max([len(c.name) for c in self._columns] + [4])
        lines = [f"{'ID':<{label_width}}  {inner.id}"]
        if inner.arn:
            lines.append(f"{'ARN':<{label_width}}  {inner.arn}")
        lines.extend(f"{c.name:<{label_width}}  {c.getter(inner)}" for c in self._columns)
        if inner.tags:
            lines.append("")
            lines.append("Tags:")
            lines.extend(f"  {k} = {v}" for k, v in sorted(inner.tags.items()))
        return "\n".join(lines)

    def render_summary(self, resource: Any) -> list[SummaryField]:
        inner = unwrap_resource(resource)
        return [SummaryField(c.name, c.getter(inner)) for c in self._columns[: self.summary_columns]]
