"""
core/action/confirm.py - 실행 확인 상태 머신

    NONE ──begin(SIMPLE)──> SIMPLE ──y──> 실행
                                   ──n/esc──> 취소
    NONE ──begin(DANGEROUS)──> TYPED ──enter(접미사 일치)──> 실행
                                     ──enter(불일치)──> TYPED (입력 유지)
                                     ──esc──> 취소 (상태/입력 초기화)

모든 전이는 순수 함수입니다. 상태는 불변이며 새 상태를 반환합니다.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, NamedTuple

from .types import Action, ConfirmLevel

CONFIRM_SUFFIX_LENGTH = 6
SUFFIX_SEPARATORS = "-:/_"

KEY_ENTER = "enter"
KEY_ESC = "esc"
KEY_BACKSPACE = "backspace"


def confirm_suffix(token: str) -> str:
    """확인 입력으로 요구하는 토큰 접미사

    마지막 6자(짧으면 전체)에서 앞쪽 구분자(- : / _)를 뗍니다.
    "i-12345" -> "12345", "i-0123456789abcdef0" -> "bcdef0"
    """
    return token[-CONFIRM_SUFFIX_LENGTH:].lstrip(SUFFIX_SEPARATORS)


class ConfirmPhase(Enum):
    NONE = "none"
    SIMPLE = "simple"
    TYPED = "typed"


class ConfirmOutcome(Enum):
    PENDING = "pending"
    EXECUTE = "execute"
    CANCELLED = "cancelled"
    IGNORED = "ignored"


@dataclass(frozen=True)
class ConfirmState:
    """확인 상태

    Attributes:
        phase: 현재 단계
        action_index: 확인 중인 액션 인덱스
        token: 확인 토큰 (TYPED)
        input: 입력 버퍼 (TYPED)
    """

    phase: ConfirmPhase = ConfirmPhase.NONE
    action_index: int = -1
    token: str = ""
    input: str = ""

    @property
    def active(self) -> bool:
        return self.phase != ConfirmPhase.NONE

    @property
    def has_active_input(self) -> bool:
        return self.phase == ConfirmPhase.TYPED

    @property
    def expected(self) -> str:
        return confirm_suffix(self.token)


class Transition(NamedTuple):
    state: ConfirmState
    outcome: ConfirmOutcome
    action_index: int = -1


IDLE = ConfirmState()


def begin(action: Action, action_index: int, resource: Any) -> Transition:
    """액션 선택 시 확인 시작"""
    if action.confirm == ConfirmLevel.DANGEROUS:
        state = ConfirmState(ConfirmPhase.TYPED, action_index, token=action.token_for(resource))
        return Transition(state, ConfirmOutcome.PENDING, action_index)
    if action.confirm == ConfirmLevel.SIMPLE:
        return Transition(ConfirmState(ConfirmPhase.SIMPLE, action_index), ConfirmOutcome.PENDING, action_index)
    return Transition(IDLE, ConfirmOutcome.EXECUTE, action_index)


def transition(state: ConfirmState, key: str) -> Transition:
    """키 입력에 따른 전이"""
    if state.phase == ConfirmPhase.NONE:
        return Transition(state, ConfirmOutcome.IGNORED)

    if key == KEY_ESC:
        return Transition(IDLE, ConfirmOutcome.CANCELLED, state.action_index)

    if state.phase == ConfirmPhase.SIMPLE:
        if key in ("y", "Y"):
            return Transition(IDLE, ConfirmOutcome.EXECUTE, state.action_index)
        if key in ("n", "N"):
            return Transition(IDLE, ConfirmOutcome.CANCELLED, state.action_index)
        return Transition(state, ConfirmOutcome.PENDING, state.action_index)

    # TYPED
    if key == KEY_ENTER:
        if state.input == state.expected:
            return Transition(IDLE, ConfirmOutcome.EXECUTE, state.action_index)
        return Transition(state, ConfirmOutcome.PENDING, state.action_index)

    if key == KEY_BACKSPACE:
        return Transition(replace(state, input=state.input[:-1]), ConfirmOutcome.PENDING, state.action_index)

    if len(key) == 1 and key.isprintable():
        return Transition(replace(state, input=state.input + key), ConfirmOutcome.PENDING, state.action_index)

    return Transition(state, ConfirmOutcome.PENDING, state.action_index)


def type_text(state: ConfirmState, text: str) -> ConfirmState:
    """문자열을 한 글자씩 입력"""
    for ch in text:
        state = transition(state, ch).state
    return state
