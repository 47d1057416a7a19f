"""
cli/ui/shell.py - 리소스 브라우저 호스트 셸

ResourceBrowser(반응형 화면 상태)를 구동하는 호스트입니다.

    입력 ──> browser.update(msg) ──> UpdateResult
                                      ├─ tasks   : 스레드 풀에서 실행, 결과 메시지는 큐로
                                      └─ effects : 셸이 즉시 처리 (이동/상세/비교/액션/안내)
    큐 ──> (browser, msg) ──> browser.update(msg) ...

모든 update() 호출은 셸 스레드에서만 일어납니다.

입력 (한 줄 단위):
    j k enter ...   공백으로 구분한 키 이름 (예: "j j enter")
    /text           텍스트 필터 (빈 "/" 는 해제)
    :command        명령 (sort/tag/diff/이동, 예: ":sort desc NAME", ":ec2/instances")
    q               뒤로 (마지막 화면이면 종료)
    (빈 줄)         화면 갱신
"""

from __future__ import annotations

import logging
import queue
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from itertools import zip_longest
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from cli.i18n import t
from core.browser.commands import GotoCommand, did_you_mean, parse_command, suggestions
from core.browser.fetch import MULTI_REGION_FETCH_TIMEOUT
from core.browser.messages import (
    ActionMenuEffect,
    AutoReloadTick,
    DetailEffect,
    DiffEffect,
    KeyPress,
    NavigateEffect,
    NoticeEffect,
    Refresh,
    Resize,
    ScheduleReloadEffect,
    TextFilterChanged,
    UpdateResult,
)
from core.browser.surface import ResourceBrowser
from core.browser.table import render_header, render_line, scroll_offset
from core.exceptions import ResourceTypeNotFoundError, format_error_for_user

from .action_menu import Prompter, run_action_menu
from .console import console, print_panel, wait_for_any_key

if TYPE_CHECKING:
    from core.action.registry import ActionRegistry
    from core.config import AppConfig
    from core.registry import Registry

logger = logging.getLogger(__name__)

MAX_WORKERS = 8
POLL_INTERVAL = 0.1
# 헤더/탭/상태/안내/프롬프트 줄
CHROME_ROWS = 8

QUIT_INPUTS = frozenset({"q", "quit", ":q", ":quit"})
KEY_ALIASES = {
    ">": "tab",
    "<": "shift+tab",
    "refresh": "ctrl+r",
    "ctrl-r": "ctrl+r",
    "back": "esc",
}


class Shell:
    """브라우저 화면 스택과 작업 실행기

    Attributes:
        stack: 화면 스택 (마지막이 현재 화면)
        notices: 다음 렌더링에 표시할 안내
    """

    def __init__(
        self,
        registry: Registry,
        config: AppConfig,
        actions: ActionRegistry,
        *,
        prompter: Prompter | None = None,
        auto_reload: float = 0.0,
        max_workers: int = MAX_WORKERS,
    ):
        self.registry = registry
        self.config = config
        self.actions = actions
        self.prompter = prompter or Prompter()
        self.auto_reload = auto_reload
        self.stack: list[ResourceBrowser] = []
        self.notices: list[NoticeEffect] = []
        self._queue: queue.Queue[tuple[ResourceBrowser, Any]] = queue.Queue()
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="ab-task")
        self._offsets: dict[int, int] = {}
        self._timers: list[threading.Timer] = []

    @property
    def current(self) -> ResourceBrowser | None:
        return self.stack[-1] if self.stack else None

    # =========================================================================
    # 작업 / 메시지
    # =========================================================================

    def _post(self, browser: ResourceBrowser, future: Future) -> None:
        try:
            msg = future.result()
        except Exception as e:
            # 작업은 자체 예외를 메시지로 바꾸므로 여기까지 오면 버그
            logger.error(f"작업 실패 [{browser.title}]: {e}", exc_info=True)
            return
        if msg is not None:
            self._queue.put((browser, msg))

    def submit(self, browser: ResourceBrowser, task: Any) -> None:
        future = self._pool.submit(task)
        future.add_done_callback(lambda f: self._post(browser, f))

    def dispatch(self, browser: ResourceBrowser, result: UpdateResult) -> None:
        for task in result.tasks:
            self.submit(browser, task)
        for effect in result.effects:
            self.handle_effect(browser, effect)

    def send(self, msg: Any, browser: ResourceBrowser | None = None) -> None:
        browser = browser or self.current
        if browser is not None:
            self.dispatch(browser, browser.update(msg))

    def pump(self, timeout: float | None = None) -> int:
        """큐에 쌓인 메시지 처리

        Args:
            timeout: 첫 메시지를 기다릴 시간 (None이면 기다리지 않음)

        Returns:
            처리한 메시지 수
        """
        handled = 0
        try:
            item = self._queue.get(timeout=timeout) if timeout else self._queue.get_nowait()
        except queue.Empty:
            return 0
        while True:
            browser, msg = item
            # 스택에서 빠진 화면의 결과는 버림
            if any(b is browser for b in self.stack):
                self.send(msg, browser)
                handled += 1
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                return handled

    def wait_loaded(self, limit: float = MULTI_REGION_FETCH_TIMEOUT) -> None:
        """현재 화면의 첫 페이지 로드를 기다림"""
        browser = self.current
        if browser is None or not browser.loading:
            return
        waited = 0.0
        with console.status(t("browser.loading")):
            while browser.loading and waited < limit:
                self.pump(timeout=POLL_INTERVAL)
                waited += POLL_INTERVAL
                if browser is not self.current:
                    return

    # =========================================================================
    # 화면 스택
    # =========================================================================

    def push(self, browser: ResourceBrowser) -> None:
        self.stack.append(browser)
        self.dispatch(browser, browser.init())

    def pop(self) -> bool:
        """현재 화면 닫기. 남은 화면이 있으면 True"""
        if self.stack:
            closed = self.stack.pop()
            self._offsets.pop(id(closed), None)
        return bool(self.stack)

    def new_browser(self, domain: str, kind: str) -> ResourceBrowser:
        return ResourceBrowser(
            self.registry,
            self.config,
            domain,
            kind,
            actions=self.actions,
            auto_reload=self.auto_reload,
        )

    def goto(self, target: str) -> bool:
        """이동 명령 해석 후 새 화면 열기"""
        try:
            domain, kind = self.registry.resolve(target)
        except ResourceTypeNotFoundError:
            text = t("browser.unknown_target", target=target)
            completions = self.complete(target)
            candidates = did_you_mean(self.registry, target)
            if completions:
                text += " " + t("browser.suggestions", candidates=", ".join(completions[:5]))
            elif candidates:
                text += " " + t("browser.did_you_mean", candidates=", ".join(candidates))
            self.notices.append(NoticeEffect(text, error=True))
            return False
        self.push(self.new_browser(domain, kind))
        return True

    # =========================================================================
    # 효과
    # =========================================================================

    def handle_effect(self, browser: ResourceBrowser, effect: Any) -> None:
        if isinstance(effect, NavigateEffect):
            self.push(effect.browser)
        elif isinstance(effect, NoticeEffect):
            self.notices.append(effect)
        elif isinstance(effect, DetailEffect):
            print_panel(effect.title, effect.text)
            wait_for_any_key()
        elif isinstance(effect, DiffEffect):
            self.show_diff(effect)
            wait_for_any_key()
        elif isinstance(effect, ActionMenuEffect):
            self.run_action(browser, effect)
        elif isinstance(effect, ScheduleReloadEffect):
            self.schedule_reload(browser, effect)
        else:
            logger.debug(f"처리하지 않는 효과: {effect!r}")

    def schedule_reload(self, browser: ResourceBrowser, effect: ScheduleReloadEffect) -> threading.Timer:
        """자동 새로고침 틱 예약 (작업 스레드 풀을 점유하지 않음)"""
        self._timers = [timer for timer in self._timers if timer.is_alive()]
        timer = threading.Timer(effect.delay, self._queue.put, args=((browser, AutoReloadTick(effect.generation)),))
        timer.daemon = True
        timer.start()
        self._timers.append(timer)
        return timer

    def run_action(self, browser: ResourceBrowser, effect: ActionMenuEffect) -> None:
        result = run_action_menu(effect, config=self.config, actions=self.actions, prompter=self.prompter)
        if result is None:
            return
        if not result.success:
            self.notices.append(NoticeEffect(result.message, error=True))
            return
        if isinstance(result.follow_up, str) and result.follow_up:
            self.goto(result.follow_up)
            return
        self.notices.append(NoticeEffect(result.message))
        self.send(Refresh(), browser)

    def show_diff(self, effect: DiffEffect) -> None:
        table = Table(title=t("browser.diff_title", left=effect.left_title, right=effect.right_title), expand=True)
        table.add_column(effect.left_title, overflow="fold")
        table.add_column(effect.right_title, overflow="fold")
        left_lines, right_lines = effect.left_text.splitlines(), effect.right_text.splitlines()
        for left, right in zip_longest(left_lines, right_lines, fillvalue=""):
            style = "" if left == right else "yellow"
            table.add_row(Text(left), Text(right), style=style)
        console.print(table)

    # =========================================================================
    # 입력
    # =========================================================================

    def handle_input(self, line: str) -> bool:
        """한 줄 입력 처리. 종료해야 하면 False"""
        browser = self.current
        if browser is None:
            return False
        text = line.strip()
        if not text:
            return True

        if text in QUIT_INPUTS:
            return self.pop()

        if text.startswith("/"):
            self.send(TextFilterChanged(text[1:].strip()))
            return True

        if text.startswith(":"):
            self.run_command(text[1:])
            return True

        for key in text.split():
            self.send(KeyPress(KEY_ALIASES.get(key, key)))
            if self.current is not browser:
                break
        return True

    def run_command(self, text: str) -> None:
        parsed = parse_command(text)
        if parsed is None:
            return
        if isinstance(parsed, GotoCommand):
            self.goto(parsed.target)
            return
        self.send(parsed)

    def complete(self, text: str) -> list[str]:
        """명령 자동완성 후보"""
        browser = self.current
        if browser is None:
            return suggestions(self.registry, text)
        return suggestions(self.registry, text, browser.tag_keys(), browser.tag_values)

    # =========================================================================
    # 렌더링
    # =========================================================================

    def render(self) -> None:
        browser = self.current
        if browser is None:
            return
        width, height = console.size
        self.send(Resize(width, height))

        console.clear()
        header = f"[bold #FF9900]{browser.registry.display_name(browser.domain)}[/] "
        header += f"[dim]{self.config.mask_account_id(self.config.account_id)} · {', '.join(self.config.regions)}[/dim]"
        console.print(header)
        if len(browser.kinds) > 1:
            tabs = "  ".join(
                f"[reverse] {n}:{kind} [/reverse]" if active else f"[dim]{n}:{kind}[/dim]"
                for n, kind, active in browser.tabs()
            )
            console.print(tabs)

        self._render_table(browser, width, height)

        status = Text(browser.status_line(), style="bold")
        if browser.metrics_loading:
            status.append(f"  {t('browser.metrics_loading')}", style="dim")
        console.print(status)
        for notice in self.notices:
            console.print(Text(notice.text, style="red" if notice.error else "cyan"))
        self.notices.clear()
        console.print(f"[dim]{t('browser.help_keys')}[/dim]")

    def _render_table(self, browser: ResourceBrowser, width: int, height: int) -> None:
        if browser.error is not None and not browser.resources:
            console.print(Text(t("browser.load_failed", error=format_error_for_user(browser.error)), style="red"))
            return
        if browser.loading and not browser.resources:
            console.print(f"[dim]{t('browser.loading')}[/dim]")
            return

        table_spec, rows = browser.table(width)
        console.print(Text(render_header(table_spec.columns), style="bold"))
        if not rows:
            key = "browser.no_match" if browser.resources else "browser.empty"
            console.print(f"[dim]{t(key)}[/dim]")
            return

        visible_rows = max(1, height - CHROME_ROWS)
        offset = scroll_offset(browser.cursor, self._offsets.get(id(browser), 0), visible_rows)
        self._offsets[id(browser)] = offset
        for i in range(offset, min(len(rows), offset + visible_rows)):
            style = "reverse" if i == browser.cursor else ""
            console.print(Text(render_line(rows[i], table_spec.columns), style=style), overflow="crop")

    # =========================================================================
    # 실행
    # =========================================================================

    def run(self, target: str = "") -> None:
        """대화형 루프 (Ctrl+C / 마지막 화면에서 q 로 종료)"""
        if target:
            if not self.goto(target):
                for notice in self.notices:
                    console.print(Text(notice.text, style="red"))
                return
        else:
            domains = self.registry.list_domains()
            if not domains:
                return
            self.push(self.new_browser(domains[0], ""))

        try:
            while self.stack:
                self.wait_loaded()
                self.pump()
                self.render()
                line = self.prompter.text(t("browser.prompt"))
                if line is None or not self.handle_input(line):
                    break
        except KeyboardInterrupt:
            logger.debug("사용자 중단")
        finally:
            self.close()

    def close(self) -> None:
        for timer in self._timers:
            timer.cancel()
        for browser in self.stack:
            browser.ctx.cancel()
        self._pool.shutdown(wait=False, cancel_futures=True)
