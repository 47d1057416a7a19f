"""
core/action/env.py - exec 하위 프로세스 환경변수

현재 프로파일 선택/리전을 AWS CLI가 이해하는 환경변수로 전달합니다.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.context import FetchContext

_PROFILE_VARS = ("AWS_PROFILE", "AWS_DEFAULT_PROFILE")


def build_subprocess_env(ctx: FetchContext, base: Mapping[str, str] | None = None) -> dict[str, str]:
    """하위 프로세스 환경변수

    - 명명된 프로파일: AWS_PROFILE 설정
    - 환경변수 전용: 프로파일 변수 제거, ~/.aws 설정 파일 무시
    - SDK 기본: 프로파일 변수 유지
    - 리전: AWS_REGION / AWS_DEFAULT_REGION 설정
    """
    env = dict(os.environ if base is None else base)

    selection = ctx.effective_selection
    if selection is not None and selection.is_named_profile:
        env["AWS_PROFILE"] = selection.profile_name
        env.pop("AWS_DEFAULT_PROFILE", None)
    elif selection is not None and selection.is_env_only:
        for name in _PROFILE_VARS:
            env.pop(name, None)
        env["AWS_CONFIG_FILE"] = os.devnull
        env["AWS_SHARED_CREDENTIALS_FILE"] = os.devnull

    region = ctx.effective_region
    if region:
        env["AWS_REGION"] = region
        env["AWS_DEFAULT_REGION"] = region

    return env
