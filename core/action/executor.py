"""
core/action/executor.py - 액션 실행

모든 액션은 다음 순서를 거칩니다.

    1. 정의 검증 (operation 없는 api 액션 -> EmptyOperationError)
    2. 읽기 전용 정책 (-> ReadOnlyDeniedError)
    3. 종류별 실행
       - exec: 변수 치환(메타문자 검사) 후 /bin/sh -c 실행
       - api: (domain, kind) 실행기 호출
       - view: 호스트가 이동할 대상 반환

에러는 예외로 전파하지 않고 ActionResult로 반환합니다.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from botocore.exceptions import BotoCoreError, ClientError

from core.exceptions import (
    ActionExecutionError,
    APICallError,
    BrowserError,
    EmptyCommandError,
    ExecutorNotFoundError,
    UnknownActionTypeError,
)
from core.resource.types import unwrap_resource

from .env import build_subprocess_env
from .policy import check_read_only, validate_action
from .types import Action, ActionResult, ActionType
from .variables import expand_variables

if TYPE_CHECKING:
    from core.config import AppConfig
    from core.context import FetchContext

    from .registry import ActionRegistry

logger = logging.getLogger(__name__)

SHELL = "/bin/sh"

Runner = Callable[..., "subprocess.CompletedProcess[Any]"]


@dataclass
class ExecRequest:
    """호스트에 넘기는 exec 실행 요청 (화면 렌더링을 멈추고 터미널을 넘겨줌)

    Attributes:
        action: 실행할 액션
        resource: 대상 리소스
        command: 변수 치환이 끝난 명령
        env: 하위 프로세스 환경변수 (None이면 현재 환경 그대로)
    """

    action: Action
    resource: Any
    command: str
    env: dict[str, str] | None = field(default=None, repr=False)

    @property
    def argv(self) -> list[str]:
        return [SHELL, "-c", self.command]


def _check(action: Action, read_only: bool) -> None:
    validate_action(action)
    check_read_only(action, read_only)


def prepare_exec(ctx: FetchContext, action: Action, resource: Any, *, config: AppConfig) -> ExecRequest:
    """exec 액션 실행 준비 (검증 + 정책 + 변수 치환)

    Raises:
        ConfigurationError / ReadOnlyDeniedError / UnsafeValueError / EmptyCommandError
    """
    _check(action, config.read_only)
    command = expand_variables(action.command, resource).strip()
    if not command:
        raise EmptyCommandError(action.name)
    env = None if action.skip_aws_env else build_subprocess_env(ctx)
    return ExecRequest(action=action, resource=resource, command=command, env=env)


def run_exec(request: ExecRequest, runner: Runner | None = None) -> ActionResult:
    """준비된 exec 요청 실행 (터미널 상속)"""
    run = runner or subprocess.run
    logger.info(f"exec 실행: {request.action.name}")
    try:
        completed = run(request.argv, env=request.env, check=False)
    except OSError as e:
        logger.error(f"exec 실행 실패 [{request.action.name}]: {e}")
        return ActionResult.fail(e)

    if completed.returncode != 0:
        error = ActionExecutionError(request.action.name, completed.returncode)
        logger.warning(str(error))
        return ActionResult.fail(error)

    follow_up = None
    if request.action.post_exec_follow_up is not None:
        follow_up = request.action.post_exec_follow_up(request.resource)
    return ActionResult.ok(f"{request.action.name} 완료", follow_up=follow_up)


def execute_action(
    ctx: FetchContext,
    action: Action,
    resource: Any,
    domain: str,
    kind: str,
    *,
    config: AppConfig,
    actions: ActionRegistry,
    runner: Runner | None = None,
) -> ActionResult:
    """액션 실행

    Args:
        ctx: 조회 컨텍스트 (세션/리전)
        action: 실행할 액션
        resource: 대상 리소스
        domain / kind: 리소스 타입 (실행기 조회 키)
        config: 애플리케이션 설정 (읽기 전용 여부)
        actions: 액션/실행기 레지스트리
        runner: exec 실행 함수 (기본: subprocess.run)

    Returns:
        ActionResult (실패도 값으로 반환)
    """
    logger.info(f"액션 실행: {action.name} [{domain}/{kind}] {getattr(resource, 'id', '')}")

    try:
        _check(action, config.read_only)
    except BrowserError as e:
        return ActionResult.fail(e)

    if action.type == ActionType.EXEC:
        try:
            request = prepare_exec(ctx, action, resource, config=config)
        except BrowserError as e:
            logger.warning(f"exec 준비 실패 [{action.name}]: {e}")
            return ActionResult.fail(e)
        return run_exec(request, runner)

    if action.type == ActionType.API:
        executor = actions.get_executor(domain, kind)
        if executor is None:
            return ActionResult.fail(ExecutorNotFoundError(domain, kind))
        try:
            result = executor(ctx, action, unwrap_resource(resource))
        except ClientError as e:
            result = ActionResult.fail(APICallError.from_client_error(domain, action.operation, e))
        except (BrowserError, BotoCoreError) as e:
            result = ActionResult.fail(e)
        log = logger.info if result.success else logger.warning
        log(f"액션 결과 [{action.name}]: {result.message}")
        return result

    if action.type == ActionType.VIEW:
        return ActionResult.ok(action.target, follow_up=action.target)

    return ActionResult.fail(UnknownActionTypeError(action.name, action.type))
