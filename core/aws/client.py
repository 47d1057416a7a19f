"""
core/aws/client.py - boto3 session/client 생성 헬퍼

조회 컨텍스트의 프로파일 선택/리전으로 boto3 Session을 만들고,
Retry(adaptive 모드) + 타임아웃 + 연결 풀이 설정된 client를 생성합니다.

주요 구성 요소:
- session_for: FetchContext -> boto3.Session
- get_client: retry 설정이 적용된 boto3 client 생성

Example:
    session = session_for(ctx)
    ec2 = get_client(session, "ec2", region_name=ctx.effective_region or None)
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any, Literal, cast

import boto3
import botocore.session

if TYPE_CHECKING:
    from core.config import ProfileSelection
    from core.context import FetchContext

logger = logging.getLogger(__name__)

# Retry mode 타입 (botocore TypedDict와 호환)
RetryMode = Literal["legacy", "standard", "adaptive"]

# 기본 retry 설정
DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_RETRY_MODE: RetryMode = "adaptive"
DEFAULT_CONNECT_TIMEOUT = 10  # 초
DEFAULT_READ_TIMEOUT = 30  # 초
DEFAULT_MAX_POOL_CONNECTIONS = 25


def build_session(selection: ProfileSelection | None, region: str = "") -> boto3.Session:
    """프로파일 선택으로 boto3 Session 생성

    - NAMED_PROFILE: profile_name 지정
    - ENV_ONLY: ~/.aws/config, ~/.aws/credentials 무시 (환경변수/IMDS만)
    - SDK_DEFAULT: boto3 기본 체인
    """
    region_name = region or None

    if selection is not None and selection.is_named_profile:
        return boto3.Session(profile_name=selection.profile_name, region_name=region_name)

    if selection is not None and selection.is_env_only:
        core_session = botocore.session.Session()
        core_session.set_config_variable("config_file", os.devnull)
        core_session.set_config_variable("credentials_file", os.devnull)
        return boto3.Session(botocore_session=core_session, region_name=region_name)

    return boto3.Session(region_name=region_name)


def session_for(ctx: FetchContext) -> boto3.Session:
    """조회 컨텍스트에 맞는 boto3 Session"""
    return build_session(ctx.effective_selection, ctx.effective_region)


def get_client(
    session: boto3.Session,
    service_name: str,
    region_name: str | None = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    retry_mode: RetryMode = DEFAULT_RETRY_MODE,
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT,
    read_timeout: int = DEFAULT_READ_TIMEOUT,
    max_pool_connections: int = DEFAULT_MAX_POOL_CONNECTIONS,
    **kwargs: Any,
) -> Any:
    """Retry가 적용된 boto3 client 생성

    Args:
        session: boto3 Session
        service_name: AWS 서비스 이름 (ec2, sqs, iam 등)
        region_name: 리전 (None이면 세션 기본값)
        max_attempts: 최대 시도 횟수 (기본: 5)
        retry_mode: 재시도 모드 ('adaptive' 또는 'standard')
        connect_timeout: 연결 타임아웃 (초)
        read_timeout: 읽기 타임아웃 (초)
        max_pool_connections: HTTP 연결 풀 크기
        **kwargs: session.client()에 전달할 추가 인자

    Returns:
        boto3 client
    """
    from botocore.config import Config

    config = Config(
        retries={"max_attempts": max_attempts, "mode": retry_mode},  # pyright: ignore[reportArgumentType]
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
        max_pool_connections=max_pool_connections,
    )

    # 기존 config가 있으면 병합
    if "config" in kwargs:
        existing = kwargs.pop("config")
        config = config.merge(existing)

    return session.client(  # pyright: ignore[reportCallIssue]
        cast(Any, service_name),
        region_name=region_name,
        config=config,
        **kwargs,
    )


def client_for(ctx: FetchContext, service_name: str, **kwargs: Any) -> Any:
    """컨텍스트의 세션/리전으로 client 생성 (fetcher 공통 진입점)"""
    session = session_for(ctx)
    return get_client(session, service_name, region_name=ctx.effective_region or None, **kwargs)
