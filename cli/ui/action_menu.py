"""
cli/ui/action_menu.py - 액션 메뉴 (questionary)

ActionMenu 상태와 확인 상태 머신을 questionary 프롬프트로 구동합니다.

    1. 액션 선택 (questionary.select)
    2. 확인
       - SIMPLE: questionary.confirm (y/n)
       - DANGEROUS: questionary.text 로 토큰 접미사 입력, 불일치 시 다시 입력
    3. 실행
       - exec: 명령 치환/검증 후 터미널을 넘겨 실행
       - api / view: execute_action

Ctrl+C 또는 ESC(None 응답)는 언제든 취소입니다.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import questionary

from cli.i18n import t
from core.action.executor import Runner, execute_action, prepare_exec, run_exec
from core.action.menu import ActionMenu
from core.action.types import ActionResult, ActionType
from core.context import FetchContext
from core.exceptions import BrowserError

from .console import console, print_error, print_success, print_warning

if TYPE_CHECKING:
    from core.action.registry import ActionRegistry
    from core.browser.messages import ActionMenuEffect
    from core.config import AppConfig

logger = logging.getLogger(__name__)

CANCEL = -1


class Prompter:
    """questionary 프롬프트 (테스트에서는 같은 메서드를 가진 객체로 대체)"""

    def select(self, message: str, choices: list[tuple[str, int]]) -> int | None:
        return questionary.select(
            message,
            choices=[questionary.Choice(title, value=value) for title, value in choices],
        ).ask()

    def confirm(self, message: str) -> bool | None:
        return questionary.confirm(message, default=False).ask()

    def text(self, message: str) -> str | None:
        return questionary.text(message).ask()


def _choices(menu: ActionMenu) -> list[tuple[str, int]]:
    choices = []
    for i, action in enumerate(menu.actions):
        shortcut = f"[{action.shortcut}] " if action.shortcut else ""
        choices.append((f"{shortcut}{action.name}", i))
    choices.append((t("action.cancel"), CANCEL))
    return choices


def _confirm(menu: ActionMenu, prompter: Prompter) -> Any:
    """확인 단계 진행. 실행할 액션 또는 None(취소)"""
    resource = menu.resource
    while menu.confirm_state.active:
        action = menu.confirming
        if menu.confirm_state.has_active_input:
            answer = prompter.text(t("action.confirm_typed", suffix=menu.confirm_state.expected))
            if answer is None:
                menu.cancel()
                return None
            chosen = menu.enter_text(answer.strip())
            if chosen is not None:
                return chosen
            print_warning(t("action.confirm_mismatch"))
        else:
            answer = prompter.confirm(t("action.confirm_simple", action=action.name, name=resource.name or resource.id))
            return menu.key("y" if answer else "n")
    return None


def run_action_menu(
    effect: ActionMenuEffect,
    *,
    config: AppConfig,
    actions: ActionRegistry,
    prompter: Prompter | None = None,
    runner: Runner | None = None,
) -> ActionResult | None:
    """액션 메뉴 표시부터 실행까지

    Returns:
        실행 결과, 선택/확인을 취소했으면 None
    """
    prompter = prompter or Prompter()
    resource = effect.resource
    menu = ActionMenu(resource, effect.domain, effect.kind, actions.get(effect.domain, effect.kind), config.read_only)
    if not menu.actions:
        print_warning(t("action.no_actions"))
        return None

    try:
        index = prompter.select(t("action.menu_title", name=resource.name or resource.id), _choices(menu))
        if index is None or index == CANCEL:
            return None
        action = menu.select(index)
        if action is None:
            action = _confirm(menu, prompter)
    except KeyboardInterrupt:
        menu.cancel()
        action = None

    if action is None:
        console.print(f"[dim]{t('action.cancelled')}[/dim]")
        return None

    ctx = effect.ctx or FetchContext(config=config)
    if action.type == ActionType.EXEC:
        try:
            request = prepare_exec(ctx, action, resource, config=config)
        except BrowserError as e:
            logger.warning(f"exec 준비 실패 [{action.name}]: {e}")
            result = ActionResult.fail(e)
        else:
            console.print(f"[dim]{t('action.exec_start', command=request.command)}[/dim]")
            result = run_exec(request, runner)
    else:
        result = execute_action(ctx, action, resource, effect.domain, effect.kind, config=config, actions=actions)

    menu.record(result)
    if result.success:
        print_success(t("action.succeeded", message=result.message))
    else:
        print_error(t("action.failed", message=result.message))
    return result
