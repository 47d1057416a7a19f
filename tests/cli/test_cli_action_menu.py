"""
tests/cli/test_cli_action_menu.py - cli/ui/action_menu.py 테스트

questionary 대신 응답을 미리 정한 Prompter로 메뉴를 구동합니다.
"""

import subprocess
from unittest.mock import MagicMock

import pytest

from cli.ui.action_menu import CANCEL, run_action_menu
from core.action.types import Action, ActionResult, ActionType, ConfirmLevel
from core.browser.messages import ActionMenuEffect


class ScriptedPrompter:
    """select/confirm/text 응답을 순서대로 반환"""

    def __init__(self, selection=0, confirms=(), texts=()):
        self.selection = selection
        self.confirms = list(confirms)
        self.texts = list(texts)
        self.messages = []

    def select(self, message, choices):
        self.messages.append(message)
        self.choices = choices
        return self.selection

    def confirm(self, message):
        self.messages.append(message)
        return self.confirms.pop(0)

    def text(self, message):
        self.messages.append(message)
        return self.texts.pop(0)


@pytest.fixture
def target(resource_factory):
    return resource_factory("i-0123456789abcdef0", "web-1")


@pytest.fixture
def executor(action_registry):
    fn = MagicMock(return_value=ActionResult.ok("web-1: 완료"))
    action_registry.register_executor("test", "items", fn)
    return fn


def register(action_registry, *actions):
    action_registry.register("test", "items", list(actions))


def effect_for(resource):
    return ActionMenuEffect(resource, "test", "items")


class TestRunActionMenu:
    """run_action_menu 테스트"""

    def test_no_actions(self, app_config, action_registry, target):
        prompter = ScriptedPrompter()
        assert run_action_menu(effect_for(target), config=app_config, actions=action_registry, prompter=prompter) is None
        assert prompter.messages == []

    def test_choices_include_shortcut_and_cancel(self, app_config, action_registry, target, executor):
        register(action_registry, Action("Refresh", "f", ActionType.API, operation="Refresh"))
        prompter = ScriptedPrompter(selection=CANCEL)

        result = run_action_menu(effect_for(target), config=app_config, actions=action_registry, prompter=prompter)

        assert result is None
        assert prompter.choices == [("[f] Refresh", 0), ("취소", CANCEL)]
        executor.assert_not_called()

    def test_no_confirm_executes(self, app_config, action_registry, target, executor):
        register(action_registry, Action("Refresh", "f", ActionType.API, operation="Refresh"))

        result = run_action_menu(
            effect_for(target), config=app_config, actions=action_registry, prompter=ScriptedPrompter()
        )

        assert result.success is True
        executor.assert_called_once()

    def test_simple_confirm_declined(self, app_config, action_registry, target, executor):
        register(action_registry, Action("Stop", "S", ActionType.API, operation="Stop", confirm=ConfirmLevel.SIMPLE))
        prompter = ScriptedPrompter(confirms=[False])

        result = run_action_menu(effect_for(target), config=app_config, actions=action_registry, prompter=prompter)

        assert result is None
        executor.assert_not_called()

    def test_simple_confirm_accepted(self, app_config, action_registry, target, executor):
        register(action_registry, Action("Stop", "S", ActionType.API, operation="Stop", confirm=ConfirmLevel.SIMPLE))
        prompter = ScriptedPrompter(confirms=[True])

        result = run_action_menu(effect_for(target), config=app_config, actions=action_registry, prompter=prompter)

        assert result.success is True
        assert "Stop" in prompter.messages[-1]
        executor.assert_called_once()

    def test_typed_confirm_retries_until_match(self, app_config, action_registry, target, executor):
        """불일치 입력 후 다시 묻고, 접미사가 맞으면 실행"""
        register(
            action_registry,
            Action("Terminate", "D", ActionType.API, operation="Terminate", confirm=ConfirmLevel.DANGEROUS),
        )
        prompter = ScriptedPrompter(texts=["wrong", " bcdef0 "])

        result = run_action_menu(effect_for(target), config=app_config, actions=action_registry, prompter=prompter)

        assert result.success is True
        assert sum("bcdef0" in m for m in prompter.messages) == 2
        executor.assert_called_once()

    def test_typed_confirm_cancelled(self, app_config, action_registry, target, executor):
        register(
            action_registry,
            Action("Terminate", "D", ActionType.API, operation="Terminate", confirm=ConfirmLevel.DANGEROUS),
        )
        prompter = ScriptedPrompter(texts=[None])

        result = run_action_menu(effect_for(target), config=app_config, actions=action_registry, prompter=prompter)

        assert result is None
        executor.assert_not_called()

    def test_read_only_hides_mutating_actions(self, app_config, action_registry, target, executor):
        register(action_registry, Action("Stop", "S", ActionType.API, operation="StopInstances"))
        app_config.set_read_only(True)
        prompter = ScriptedPrompter()

        assert run_action_menu(effect_for(target), config=app_config, actions=action_registry, prompter=prompter) is None
        assert prompter.messages == []

    def test_exec_uses_runner(self, app_config, action_registry, target):
        register(action_registry, Action("Echo", "e", ActionType.EXEC, command="echo ${ID}"))
        runner = MagicMock(return_value=subprocess.CompletedProcess(args=[], returncode=0))

        result = run_action_menu(
            effect_for(target),
            config=app_config,
            actions=action_registry,
            prompter=ScriptedPrompter(),
            runner=runner,
        )

        assert result.success is True
        args, kwargs = runner.call_args
        assert args[0][-1] == "echo i-0123456789abcdef0"
        assert kwargs["check"] is False

    def test_exec_failure_is_reported(self, app_config, action_registry, target):
        register(action_registry, Action("Echo", "e", ActionType.EXEC, command="echo ${ID}"))
        runner = MagicMock(return_value=subprocess.CompletedProcess(args=[], returncode=3))

        result = run_action_menu(
            effect_for(target),
            config=app_config,
            actions=action_registry,
            prompter=ScriptedPrompter(),
            runner=runner,
        )

        assert result.success is False

    def test_keyboard_interrupt_cancels(self, app_config, action_registry, target, executor):
        register(action_registry, Action("Refresh", "f", ActionType.API, operation="Refresh"))
        prompter = ScriptedPrompter()
        prompter.select = MagicMock(side_effect=KeyboardInterrupt)

        result = run_action_menu(effect_for(target), config=app_config, actions=action_registry, prompter=prompter)

        assert result is None
        executor.assert_not_called()
