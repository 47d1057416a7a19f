"""
core/action/types.py - 액션 타입 정의

리소스에 대해 실행할 수 있는 액션과 그 결과를 정의합니다.

액션 종류:
- EXEC: 셸 명령 실행 (AWS CLI 등, 터미널을 넘겨받음)
- API: 등록된 실행기를 통한 AWS API 호출
- VIEW: 다른 화면으로 이동
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

# 읽기 전용 모드에서도 허용되는 exec 액션 이름
ACTION_NAME_SSO_LOGIN = "SSO Login"
ACTION_NAME_LOGIN = "Login"
ACTION_NAME_TAIL_LOGS = "Tail Logs"
ACTION_NAME_VIEW_RECENT_1H = "View Recent (1h)"
ACTION_NAME_VIEW_RECENT_24H = "View Recent (24h)"


class ActionType(str, Enum):
    EXEC = "exec"
    API = "api"
    VIEW = "view"


class ConfirmLevel(Enum):
    """실행 전 확인 수준

    - NONE: 즉시 실행
    - SIMPLE: y/n 확인
    - DANGEROUS: 토큰 접미사 입력 확인
    """

    NONE = "none"
    SIMPLE = "simple"
    DANGEROUS = "dangerous"


@dataclass(frozen=True)
class Action:
    """리소스 액션

    Attributes:
        name: 표시 이름 (읽기 전용 exec 허용 목록의 키)
        shortcut: 메뉴 단축키
        type: 액션 종류
        command: EXEC 명령 템플릿 (${ID} 등 변수 치환)
        operation: API 작업 이름 (실행기 분기 키, 읽기 전용 api 허용 목록의 키)
        target: VIEW 대상 ("domain/kind")
        confirm: 확인 수준
        skip_aws_env: True면 하위 프로세스에 AWS_PROFILE/AWS_REGION을 넣지 않음
        filter: 리소스별 표시 여부 (None이면 항상 표시)
        confirm_token: DANGEROUS 확인 토큰 (None이면 리소스 ID)
        post_exec_follow_up: EXEC 종료 후 호출 (반환값은 ActionResult.follow_up)
    """

    name: str
    shortcut: str = ""
    type: ActionType = ActionType.API
    command: str = ""
    operation: str = ""
    target: str = ""
    confirm: ConfirmLevel = ConfirmLevel.NONE
    skip_aws_env: bool = False
    filter: Callable[[Any], bool] | None = None
    confirm_token: Callable[[Any], str] | None = None
    post_exec_follow_up: Callable[[Any], Any] | None = None

    def applies_to(self, resource: Any) -> bool:
        return self.filter is None or bool(self.filter(resource))

    def token_for(self, resource: Any) -> str:
        if self.confirm_token is not None:
            return self.confirm_token(resource)
        return resource.id if resource is not None else ""


@dataclass
class ActionResult:
    """액션 실행 결과 (항상 호출한 화면에 표시)"""

    success: bool
    message: str = ""
    error: BaseException | None = None
    follow_up: Any = None

    @classmethod
    def ok(cls, message: str, follow_up: Any = None) -> ActionResult:
        return cls(success=True, message=message, follow_up=follow_up)

    @classmethod
    def fail(cls, error: BaseException, message: str = "") -> ActionResult:
        return cls(success=False, message=message or str(error), error=error)
