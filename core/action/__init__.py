"""
core/action - 액션 안전 계층

읽기 전용 정책, 셸 변수 치환 검사, 입력 확인을 거쳐 리소스 액션을 실행합니다.
"""

from .confirm import ConfirmOutcome, ConfirmPhase, ConfirmState, confirm_suffix
from .executor import ExecRequest, execute_action, prepare_exec, run_exec
from .menu import ActionMenu
from .policy import (
    READ_ONLY_API_ALLOWLIST,
    READ_ONLY_EXEC_ALLOWLIST,
    check_read_only,
    is_allowed_in_read_only,
    validate_action,
    visible_actions,
)
from .registry import ActionExecutor, ActionRegistry
from .types import Action, ActionResult, ActionType, ConfirmLevel
from .variables import contains_shell_metachar, expand_variables

__all__ = [
    "READ_ONLY_API_ALLOWLIST",
    "READ_ONLY_EXEC_ALLOWLIST",
    "Action",
    "ActionExecutor",
    "ActionMenu",
    "ActionRegistry",
    "ActionResult",
    "ActionType",
    "ConfirmLevel",
    "ConfirmOutcome",
    "ConfirmPhase",
    "ConfirmState",
    "ExecRequest",
    "check_read_only",
    "confirm_suffix",
    "contains_shell_metachar",
    "execute_action",
    "expand_variables",
    "is_allowed_in_read_only",
    "prepare_exec",
    "run_exec",
    "validate_action",
    "visible_actions",
]
