"""
core/browser/fetch.py - 리소스 조회 (단일/멀티 리전)

페이지네이션 지원 fetcher는 list_page로, 아니면 list_resources 한 번으로 조회합니다.
멀티 리전은 리전마다 하나의 future로 병렬 조회한 뒤 합칩니다.

- 일부 리전 실패: 성공한 리전 결과 + 실패 목록
- 모든 리전 실패: FetchError
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from core.exceptions import FetchError, format_error_for_user
from core.resource.capabilities import PaginatedFetcher

if TYPE_CHECKING:
    from core.context import FetchContext
    from core.registry import Registry

logger = logging.getLogger(__name__)

MULTI_REGION_FETCH_TIMEOUT = 30.0  # 초
MAX_REGION_WORKERS = 10


@dataclass
class FetchResult:
    """조회 결과

    Attributes:
        resources: 리소스 목록 (리전 순서대로 이어 붙임)
        next_token: 단일 리전 다음 페이지 토큰
        next_tokens: 리전별 다음 페이지 토큰
        errors: "region: message" 형식의 부분 실패 목록
    """

    resources: list[Any] = field(default_factory=list)
    next_token: str = ""
    next_tokens: dict[str, str] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)


def fetch_page(ctx: FetchContext, fetcher: Any, page_size: int, token: str = "") -> tuple[list[Any], str]:
    """한 페이지 조회

    페이지네이션을 지원하지 않는 fetcher는 첫 요청에서 전체를 반환하고 토큰은 비어 있습니다.
    """
    ctx.check()
    if isinstance(fetcher, PaginatedFetcher):
        resources, next_token = fetcher.list_page(ctx, page_size, token)
        return list(resources), next_token or ""
    if token:
        return [], ""
    return list(fetcher.list_resources(ctx)), ""


def fetch_single(
    ctx: FetchContext,
    registry: Registry,
    domain: str,
    kind: str,
    page_size: int,
    token: str = "",
) -> FetchResult:
    fetcher = registry.get_fetcher(ctx, domain, kind)
    resources, next_token = fetch_page(ctx, fetcher, page_size, token)
    return FetchResult(resources=resources, next_token=next_token)


def fetch_multi_region(
    ctx: FetchContext,
    registry: Registry,
    domain: str,
    kind: str,
    regions: list[str],
    page_size: int,
    tokens: dict[str, str] | None = None,
) -> FetchResult:
    """리전별 병렬 조회

    Args:
        ctx: 기본 조회 컨텍스트 (리전별로 with_region 적용)
        registry: 레지스트리
        domain / kind: 리소스 타입
        regions: 조회할 리전 목록
        page_size: 페이지 크기
        tokens: 다음 페이지 조회 시 리전별 토큰 (토큰이 있는 리전만 조회)

    Raises:
        FetchError: 모든 리전이 실패한 경우
    """
    if tokens is not None:
        regions = [r for r in regions if tokens.get(r)]
    if not regions:
        return FetchResult()

    ctx = ctx.with_timeout(MULTI_REGION_FETCH_TIMEOUT)

    def fetch_region(region: str) -> tuple[list[Any], str]:
        region_ctx = ctx.with_region(region)
        fetcher = registry.get_fetcher(region_ctx, domain, kind)
        token = (tokens or {}).get(region, "")
        return fetch_page(region_ctx, fetcher, page_size, token)

    by_region: dict[str, tuple[list[Any], str]] = {}
    errors: dict[str, str] = {}

    with ThreadPoolExecutor(max_workers=min(len(regions), MAX_REGION_WORKERS)) as executor:
        futures = {executor.submit(fetch_region, region): region for region in regions}
        for future in as_completed(futures):
            region = futures[future]
            try:
                by_region[region] = future.result()
            except Exception as e:
                logger.warning(f"리전 조회 실패 [{domain}/{kind} {region}]: {e}")
                errors[region] = format_error_for_user(e)

    # 결과는 요청한 리전 순서로 정렬
    result = FetchResult(errors=[f"{r}: {errors[r]}" for r in regions if r in errors])
    for region in regions:
        if region not in by_region:
            continue
        resources, next_token = by_region[region]
        result.resources.extend(resources)
        if next_token:
            result.next_tokens[region] = next_token

    if not by_region:
        raise FetchError(domain, kind, f"all regions failed: {'; '.join(result.errors)}")

    return result


def fetch_resources(
    ctx: FetchContext,
    registry: Registry,
    domain: str,
    kind: str,
    regions: list[str],
    page_size: int,
    token: str = "",
    tokens: dict[str, str] | None = None,
) -> FetchResult:
    """리전 수에 따라 단일/멀티 리전 조회 선택"""
    if len(regions) > 1:
        return fetch_multi_region(ctx, registry, domain, kind, regions, page_size, tokens)
    return fetch_single(ctx, registry, domain, kind, page_size, token)
