"""
core/action/policy.py - 읽기 전용 정책

읽기 전용 모드에서 허용되는 액션을 결정합니다.

- VIEW: 항상 허용
- EXEC: READ_ONLY_EXEC_ALLOWLIST에 이름이 있을 때만
- API: READ_ONLY_API_ALLOWLIST에 operation이 있을 때만

operation이 없는 API 액션은 정책 검사 전에 설정 오류로 거부됩니다.
"""

from __future__ import annotations

import logging
from typing import Any

from core.exceptions import EmptyOperationError, ReadOnlyDeniedError

from .types import (
    ACTION_NAME_LOGIN,
    ACTION_NAME_SSO_LOGIN,
    ACTION_NAME_TAIL_LOGS,
    ACTION_NAME_VIEW_RECENT_1H,
    ACTION_NAME_VIEW_RECENT_24H,
    Action,
    ActionType,
)

logger = logging.getLogger(__name__)

# operation -> 허용 근거
READ_ONLY_API_ALLOWLIST: dict[str, str] = {
    "DetectStackDrift": "드리프트 분석만 수행하며 스택 리소스를 변경하지 않음",
    "InvokeFunctionDryRun": "DryRun 호출로 권한/파라미터 검증만 수행",
    "SwitchProfile": "로컬 프로파일 선택만 변경",
}

# 액션 이름 -> 허용 근거
READ_ONLY_EXEC_ALLOWLIST: dict[str, str] = {
    ACTION_NAME_SSO_LOGIN: "로컬 자격 증명 캐시만 갱신",
    ACTION_NAME_LOGIN: "로컬 자격 증명 캐시만 갱신",
    ACTION_NAME_TAIL_LOGS: "로그 조회만 수행",
    ACTION_NAME_VIEW_RECENT_1H: "로그 조회만 수행",
    ACTION_NAME_VIEW_RECENT_24H: "로그 조회만 수행",
}


def validate_action(action: Action) -> None:
    """액션 정의 검증

    Raises:
        EmptyOperationError: operation이 없는 API 액션
    """
    if action.type == ActionType.API and not action.operation:
        raise EmptyOperationError(action.name)


def is_allowed_in_read_only(action: Action) -> bool:
    if action.type == ActionType.VIEW:
        return True
    if action.type == ActionType.EXEC:
        return action.name in READ_ONLY_EXEC_ALLOWLIST
    if action.type == ActionType.API:
        return action.operation in READ_ONLY_API_ALLOWLIST
    return False


def check_read_only(action: Action, read_only: bool) -> None:
    """읽기 전용 모드 정책 검사

    Raises:
        ReadOnlyDeniedError: 허용되지 않은 액션
    """
    if read_only and not is_allowed_in_read_only(action):
        logger.info(f"읽기 전용 모드 거부: {action.name} ({action.type.value})")
        raise ReadOnlyDeniedError(action.name, action.type.value)


def visible_actions(actions: list[Action], resource: Any, read_only: bool) -> list[Action]:
    """메뉴에 표시할 액션 (리소스 필터 + 읽기 전용 정책)"""
    return [a for a in actions if a.applies_to(resource) and (not read_only or is_allowed_in_read_only(a))]
