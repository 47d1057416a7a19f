"""
tests/cli/test_cli_shell.py - cli/ui/shell.py 테스트

작업은 스레드 풀 대신 현재 스레드에서 실행해 결과를 큐에 넣고 pump()로 처리합니다.
"""

from unittest.mock import MagicMock

import pytest

from cli.ui.shell import Shell
from core.action.types import Action, ActionResult, ActionType
from core.browser.messages import NoticeEffect, ResourcesLoaded, ScheduleReloadEffect


class ScriptedPrompter:
    def __init__(self, selection=0):
        self.selection = selection

    def select(self, message, choices):
        return self.selection

    def confirm(self, message):
        return True

    def text(self, message):
        return None


@pytest.fixture
def shell(fake_registry, app_config, action_registry):
    sh = Shell(fake_registry, app_config, action_registry, prompter=ScriptedPrompter(), max_workers=1)
    sh.submit = lambda browser, task: sh._queue.put((browser, task()))
    yield sh
    sh.close()


@pytest.fixture
def opened(shell):
    """test/items 화면을 열고 첫 로드까지 처리"""
    assert shell.goto("it") is True
    shell.pump()
    return shell


class TestGoto:
    """이동 명령 테스트"""

    def test_goto_alias(self, opened):
        browser = opened.current
        assert (browser.domain, browser.kind) == ("test", "items")
        assert browser.loading is False
        assert browser.resources[0].id == "id-1"

    def test_goto_unknown(self, shell):
        assert shell.goto("zzz") is False
        assert shell.stack == []
        notice = shell.notices[-1]
        assert notice.error is True
        assert notice.text.startswith("알 수 없는 대상: zzz")

    def test_goto_typo_suggests(self, shell):
        shell.goto("tset")
        assert "test" in shell.notices[-1].text


class TestHandleInput:
    """한 줄 입력 처리 테스트"""

    def test_empty_line(self, opened):
        assert opened.handle_input("   ") is True

    def test_no_screen(self, shell):
        assert shell.handle_input("j") is False

    def test_quit_last_screen(self, opened):
        assert opened.handle_input("q") is False
        assert opened.stack == []

    def test_text_filter(self, opened):
        opened.handle_input("/dev")
        assert opened.current.filters.text_filter == "dev"
        assert [r.id for r in opened.current.filtered] == ["id-1"]

    def test_clear_text_filter(self, opened):
        opened.handle_input("/dev")
        opened.handle_input("/")
        assert opened.current.filters.text_filter == ""

    def test_tag_command(self, opened):
        opened.handle_input(":tag env=prod")
        assert opened.current.filters.tag_filter == "env=prod"
        assert [r.id for r in opened.current.filtered] == ["id-2"]

    def test_command_goto(self, opened):
        opened.handle_input(":test/others")
        opened.pump()
        assert len(opened.stack) == 2
        assert opened.current.kind == "others"

    def test_keys_move_cursor(self, opened):
        opened.handle_input("j")
        assert opened.current.cursor == 1

    def test_navigation_pushes_screen(self, opened):
        opened.handle_input("o")
        opened.pump()

        assert len(opened.stack) == 2
        child = opened.current
        assert (child.domain, child.kind) == ("test", "others")
        assert child.filters.field_filter == "OwnerId"

        assert opened.handle_input("back") is True
        assert opened.handle_input("q") is True
        assert opened.current.kind == "items"

    def test_unavailable_navigation_notice(self, opened):
        opened.handle_input("x")
        assert opened.notices[-1] == NoticeEffect("not available: missing/things", error=True)
        assert len(opened.stack) == 1


class TestPump:
    """메시지 큐 처리 테스트"""

    def test_messages_for_closed_screen_are_dropped(self, opened):
        closed = opened.current
        opened.handle_input(":test/others")
        opened.pump()
        opened.handle_input("q")

        opened._queue.put((closed.navigate("test", "others"), ResourcesLoaded(99, [])))
        assert opened.pump() == 0

    def test_empty_queue(self, shell):
        assert shell.pump() == 0


class TestRunAction:
    """액션 효과 처리 테스트"""

    def test_success_adds_notice_and_refreshes(self, opened, action_registry):
        executor = MagicMock(return_value=ActionResult.ok("dev-api: 완료"))
        action_registry.register("test", "items", [Action("Touch", "t", ActionType.API, operation="Touch")])
        action_registry.register_executor("test", "items", executor)
        browser = opened.current
        generation = browser.generation

        opened.handle_input("a")

        executor.assert_called_once()
        assert opened.notices[-1] == NoticeEffect("dev-api: 완료")
        assert browser.generation == generation + 1

    def test_failure_adds_error_notice(self, opened, action_registry):
        action_registry.register("test", "items", [Action("Touch", "t", ActionType.API, operation="Touch")])

        opened.handle_input("a")

        notice = opened.notices[-1]
        assert notice.error is True
        assert "test/items" in notice.text

    def test_view_follow_up_opens_target(self, opened, action_registry):
        action_registry.register("test", "items", [Action("Others", "v", ActionType.VIEW, target="test/others")])

        opened.handle_input("a")
        opened.pump()

        assert opened.current.kind == "others"


class TestAutoReload:
    """자동 새로고침 예약 테스트"""

    def test_timer_queues_tick(self, opened):
        browser = opened.current
        generation = browser.generation

        timer = opened.schedule_reload(browser, ScheduleReloadEffect(0.01, generation))
        timer.join(timeout=2)

        assert opened.pump() >= 1
        assert browser.generation == generation + 1
        assert browser.loading is False

    def test_effect_from_loaded_screen_schedules_timer(self, fake_registry, app_config, action_registry):
        sh = Shell(fake_registry, app_config, action_registry, prompter=ScriptedPrompter(), auto_reload=30)
        sh.submit = lambda browser, task: sh._queue.put((browser, task()))
        try:
            sh.goto("it")
            sh.pump()
            assert len(sh._timers) == 1
            assert sh._timers[0].is_alive()
        finally:
            sh.close()
        sh._timers[0].join(timeout=2)
        assert not sh._timers[0].is_alive()


class TestClose:
    def test_close_cancels_contexts(self, opened):
        browser = opened.current
        opened.close()
        assert browser.ctx.cancelled is True
