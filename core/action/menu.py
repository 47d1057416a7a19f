"""
core/action/menu.py - 액션 메뉴 상태

선택한 리소스에 표시할 액션 목록, 커서, 확인 상태, 마지막 결과를 관리합니다.
입력 장치와 무관하며, 호스트(cli/ui/action_menu.py)가 키/선택을 전달합니다.
"""

from __future__ import annotations

import logging
from typing import Any

from . import confirm
from .confirm import ConfirmOutcome, ConfirmState
from .policy import visible_actions
from .types import Action, ActionResult

logger = logging.getLogger(__name__)


class ActionMenu:
    """액션 메뉴

    Attributes:
        resource: 대상 리소스
        domain / kind: 리소스 타입
        actions: 표시되는 액션 (리소스 필터 + 읽기 전용 정책 적용 후)
        cursor: 선택 인덱스
        confirm_state: 확인 상태
        result: 마지막 실행 결과
    """

    def __init__(self, resource: Any, domain: str, kind: str, actions: list[Action], read_only: bool = False):
        self.resource = resource
        self.domain = domain
        self.kind = kind
        self.actions = visible_actions(actions, resource, read_only)
        self.cursor = 0
        self.confirm_state: ConfirmState = confirm.IDLE
        self.result: ActionResult | None = None

    @property
    def has_active_input(self) -> bool:
        """입력 버퍼를 사용 중인지 (TYPED 확인 중이면 단축키 처리 안 함)"""
        return self.confirm_state.has_active_input

    @property
    def confirming(self) -> Action | None:
        if not self.confirm_state.active:
            return None
        return self.actions[self.confirm_state.action_index]

    def find_by_shortcut(self, key: str) -> int:
        for i, action in enumerate(self.actions):
            if action.shortcut and action.shortcut == key:
                return i
        return -1

    def select(self, index: int) -> Action | None:
        """액션 선택. 확인 없이 바로 실행해야 하면 해당 액션 반환"""
        if not 0 <= index < len(self.actions):
            return None
        self.cursor = index
        self.result = None
        step = confirm.begin(self.actions[index], index, self.resource)
        self.confirm_state = step.state
        if step.outcome == ConfirmOutcome.EXECUTE:
            return self.actions[index]
        return None

    def key(self, key: str) -> Action | None:
        """키 입력 처리. 실행해야 하면 액션 반환"""
        if self.confirm_state.active:
            step = confirm.transition(self.confirm_state, key)
            self.confirm_state = step.state
            if step.outcome == ConfirmOutcome.EXECUTE:
                return self.actions[step.action_index]
            if step.outcome == ConfirmOutcome.CANCELLED:
                logger.debug("액션 확인 취소")
            return None

        if key in ("up", "k"):
            self.cursor = max(0, self.cursor - 1)
            return None
        if key in ("down", "j"):
            self.cursor = min(len(self.actions) - 1, self.cursor + 1) if self.actions else 0
            return None
        if key == confirm.KEY_ENTER:
            return self.select(self.cursor)

        index = self.find_by_shortcut(key)
        if index >= 0:
            return self.select(index)
        return None

    def enter_text(self, text: str) -> Action | None:
        """TYPED 확인에 한 줄 입력 (기존 입력을 지우고 입력 후 enter)"""
        if not self.confirm_state.has_active_input:
            return None
        state = self.confirm_state
        for _ in state.input:
            state = confirm.transition(state, confirm.KEY_BACKSPACE).state
        self.confirm_state = confirm.type_text(state, text)
        return self.key(confirm.KEY_ENTER)

    def cancel(self) -> None:
        if self.confirm_state.active:
            self.key(confirm.KEY_ESC)

    def record(self, result: ActionResult) -> None:
        self.result = result
