"""
core/registry/wrapper.py - 리전 래핑 fetcher

컨텍스트에 리전 오버라이드가 있으면 fetcher가 반환하는 리소스를
RegionalResource로 감쌉니다. 페이지네이션/get 지원 여부는 원본 fetcher를 따릅니다.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from core.resource.capabilities import PaginatedFetcher, ResourceGetter
from core.resource.types import wrap_with_region

if TYPE_CHECKING:
    from core.context import FetchContext


def strip_region_prefix(resource_id: str, region: str) -> str:
    """"region:id" -> "id" (접두사가 없으면 그대로)"""
    prefix = f"{region}:"
    if region and resource_id.startswith(prefix):
        return resource_id[len(prefix) :]
    return resource_id


class RegionalFetcher:
    """list_resources 결과를 리전으로 래핑"""

    def __init__(self, delegate: Any, region: str):
        self.delegate = delegate
        self.region = region

    def list_resources(self, ctx: FetchContext) -> list[Any]:
        return [wrap_with_region(r, self.region) for r in self.delegate.list_resources(ctx)]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.delegate!r}, region={self.region!r})"


class PaginatedRegionalFetcher(RegionalFetcher):
    """list_page 결과도 리전으로 래핑"""

    def list_page(self, ctx: FetchContext, page_size: int, token: str) -> tuple[list[Any], str]:
        resources, next_token = self.delegate.list_page(ctx, page_size, token)
        return [wrap_with_region(r, self.region) for r in resources], next_token


class _RegionalGetMixin:
    """get() 지원 fetcher용: "region:id"를 원본 ID로 되돌려 조회"""

    delegate: Any
    region: str

    def get(self, ctx: FetchContext, resource_id: str) -> Any:
        resource = self.delegate.get(ctx, strip_region_prefix(resource_id, self.region))
        return wrap_with_region(resource, self.region)


class GettableRegionalFetcher(_RegionalGetMixin, RegionalFetcher):
    pass


class GettablePaginatedRegionalFetcher(_RegionalGetMixin, PaginatedRegionalFetcher):
    pass


def wrap_regional(ctx: FetchContext, fetcher: Any) -> Any:
    """리전 오버라이드가 있을 때만 래핑"""
    if not ctx.region:
        return fetcher
    paginated = isinstance(fetcher, PaginatedFetcher)
    if isinstance(fetcher, ResourceGetter):
        cls = GettablePaginatedRegionalFetcher if paginated else GettableRegionalFetcher
    else:
        cls = PaginatedRegionalFetcher if paginated else RegionalFetcher
    return cls(fetcher, ctx.region)
