"""
core/aws/paging.py - fetcher 공통 API 호출 헬퍼

페이지 파라미터 구성과 ClientError -> FetchError 변환을 한곳에서 처리합니다.

Example:
    params = page_params(token, page_size, high=1000)
    resp = call_api("ec2", "instances", "DescribeInstances", ec2.describe_instances, **params)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from core.exceptions import FetchError


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def page_params(
    token: str,
    page_size: int,
    *,
    token_key: str = "NextToken",
    size_key: str = "MaxResults",
    low: int = 1,
    high: int = 1000,
) -> dict[str, Any]:
    """페이지 요청 파라미터 (API별 최소/최대 페이지 크기 보정)"""
    params: dict[str, Any] = {size_key: clamp(page_size, low, high)}
    if token:
        params[token_key] = token
    return params


def call_api(domain: str, kind: str, operation: str, fn: Callable[..., Any], **params: Any) -> Any:
    """AWS API 호출, 실패 시 FetchError

    Raises:
        FetchError: ClientError / BotoCoreError
    """
    try:
        return fn(**params)
    except ClientError as e:
        raise FetchError.from_client_error(domain, kind, operation, e) from e
    except BotoCoreError as e:
        raise FetchError(domain, kind, f"{operation}: {e}", cause=e) from e
