"""
tests/core/browser/test_browser_surface.py - ResourceBrowser 반응형 상태 테스트

작업(task)은 drain 픽스처로 현재 스레드에서 실행하고 결과를 다시 update()에 넣습니다.
"""

import pytest

from core.action.types import Action
from core.browser.messages import (
    ActionMenuEffect,
    AutoReloadTick,
    DetailEffect,
    DetailLoaded,
    DiffEffect,
    DiffRequested,
    KeyPress,
    NavigateEffect,
    NextPageFailed,
    NoticeEffect,
    Refresh,
    Resize,
    ResourcesLoaded,
    ScheduleReloadEffect,
    SetCursor,
    SortRequested,
    TagFilterRequested,
    TextFilterChanged,
)
from core.browser.surface import ResourceBrowser
from core.config import AppConfig
from core.registry import Registry
from core.resource.capabilities import BaseFormatter, Column
from core.resource.types import BaseResource


class FailingFetcher:
    def __init__(self, error):
        self.error = error

    def list_resources(self, ctx):
        raise self.error


class PageTwoFailingFetcher:
    """두 번째 페이지 응답 형태가 달라 ValueError를 내는 fetcher"""

    def __init__(self, resources):
        self.resources = resources

    def list_page(self, ctx, page_size, token):
        if token:
            raise ValueError("unexpected payload shape")
        return self.resources[:2], "page-2"

    def list_resources(self, ctx):
        return self.list_page(ctx, 100, "")[0]


class StaticFetcher:
    def __init__(self, resources):
        self.resources = resources

    def list_resources(self, ctx):
        return list(self.resources)


class GettableFetcher:
    """get()이 갱신된 이름을 돌려주는 fetcher"""

    def list_resources(self, ctx):
        return [BaseResource(id="g-1", name="old")]

    def get(self, ctx, resource_id):
        return BaseResource(id=resource_id, name="fresh")


def name_formatter():
    return BaseFormatter([Column("NAME", 20, lambda r: r.name)])


@pytest.fixture
def browser(fake_registry, app_config):
    return ResourceBrowser(fake_registry, app_config, "test", "items")


@pytest.fixture
def loaded(browser, drain):
    drain(browser, browser.init())
    return browser


def ids(items):
    return [r.id for r in items]


class TestLoading:
    """조회 흐름"""

    def test_init_loads_and_auto_loads_next_page(self, browser, drain, fake_fetcher):
        """첫 페이지가 목록 끝 근처이므로 다음 페이지를 한 번 자동 로드"""
        drain(browser, browser.init())

        assert ids(browser.resources) == ["id-1", "id-2", "id-3"]
        assert browser.loading is False
        assert browser.error is None
        assert fake_fetcher.calls == [(100, ""), (100, "page-2")]
        assert browser.pagination.state.has_more is False

    def test_next_page_requested_once(self, browser):
        result = browser.init()
        step = browser.update(result.tasks[0]())

        assert len(step.tasks) == 1
        assert browser.pagination.state.is_loading_more is True
        assert browser.update(SetCursor(1)).tasks == []
        assert browser.update(KeyPress("N")).tasks == []

    def test_manual_next_page_refused_while_loading(self, browser):
        browser.init()
        assert browser.loading is True
        assert browser.update(KeyPress("N")).tasks == []

    def test_stale_result_discarded(self, browser):
        """새로고침 이전 세대의 결과는 버림"""
        first = browser.init()
        browser.update(Refresh())
        browser.update(first.tasks[0]())

        assert browser.resources == []
        assert browser.loading is True

    def test_fetch_failure(self, app_config, drain, client_error):
        registry = Registry()
        error = client_error("AccessDenied", "denied", "ListItems")
        registry.register("test", "items", lambda ctx: FailingFetcher(error), name_formatter)
        browser = ResourceBrowser(registry, app_config, "test")

        drain(browser, browser.init())

        assert browser.loading is False
        assert browser.error is error
        assert browser.resources == []

    def test_unexpected_fetch_exception_is_surfaced(self, app_config, drain):
        registry = Registry()
        error = KeyError("Reservations")
        registry.register("test", "items", lambda ctx: FailingFetcher(error), name_formatter)
        browser = ResourceBrowser(registry, app_config, "test")

        drain(browser, browser.init())

        assert browser.loading is False
        assert browser.error is error

    def test_unexpected_next_page_exception_releases_guard(self, app_config, drain, resources):
        """다음 페이지의 예상 밖 예외도 실패로 처리되어 로딩 상태가 풀림"""
        registry = Registry()
        registry.register("test", "items", lambda ctx: PageTwoFailingFetcher(resources), name_formatter)
        browser = ResourceBrowser(registry, app_config, "test")

        drain(browser, browser.init())

        state = browser.pagination.state
        assert ids(browser.resources) == ["id-1", "id-2"]
        assert state.is_loading_more is False
        assert state.has_more is False
        assert isinstance(state.last_error, ValueError)
        assert browser.error is None

    def test_next_page_failure_with_results_degrades(self, browser):
        browser.init()
        browser.update(ResourcesLoaded(browser.generation, [BaseResource(id="a")], next_token="t"))
        browser.update(NextPageFailed(browser.generation, RuntimeError("boom")))

        assert browser.error is None
        assert browser.pagination.state.has_more is False
        assert browser.count_text() == "1 items"

    def test_partial_errors_become_notices(self, browser):
        browser.init()
        step = browser.update(ResourcesLoaded(browser.generation, [], partial_errors=["eu-west-1: 권한 없음"]))
        assert NoticeEffect("eu-west-1: 권한 없음", error=True) in step.effects
        assert browser.partial_errors == ["eu-west-1: 권한 없음"]

    def test_auto_reload_tick(self, fake_registry, app_config):
        browser = ResourceBrowser(fake_registry, app_config, "test", "items", auto_reload=0.01)
        result = browser.init()
        step = browser.update(result.tasks[0]())
        assert len(step.tasks) == 1
        assert ScheduleReloadEffect(0.01, browser.generation) in step.effects

        generation = browser.generation
        assert browser.update(AutoReloadTick(generation - 1)).tasks == []

        reload = browser.update(AutoReloadTick(generation))
        assert len(reload.tasks) == 1
        assert browser.generation == generation + 1


class TestFiltersAndSort:
    """필터 / 정렬 메시지"""

    def test_text_filter(self, loaded):
        loaded.update(TextFilterChanged("prod"))
        assert ids(loaded.filtered) == ["id-2"]
        assert loaded.count_text() == "1/3 items"

    def test_tag_filter(self, loaded):
        loaded.update(TagFilterRequested(" env=prod "))
        assert loaded.filters.tag_filter == "env=prod"
        assert ids(loaded.filtered) == ["id-2"]

        loaded.update(TagFilterRequested(""))
        assert ids(loaded.filtered) == ["id-1", "id-2", "id-3"]

    def test_clear_key_keeps_tag_filter(self, loaded):
        loaded.update(TagFilterRequested("env"))
        loaded.update(TextFilterChanged("dev"))
        loaded.update(KeyPress("c"))

        assert loaded.filters.text_filter == ""
        assert ids(loaded.filtered) == ["id-1", "id-2"]

    def test_sort_descending_by_size(self, loaded):
        loaded.update(SortRequested("size", ascending=False))
        assert ids(loaded.filtered) == ["id-2", "id-1", "id-3"]

        loaded.update(SortRequested(""))
        assert ids(loaded.filtered) == ["id-1", "id-2", "id-3"]

    def test_unknown_sort_column(self, loaded):
        result = loaded.update(SortRequested("nope"))
        assert result.effects == [NoticeEffect("unknown column: nope", error=True)]
        assert not loaded.sort.is_active

    def test_cursor_clamped_after_filter(self, loaded):
        loaded.update(KeyPress("G"))
        assert loaded.cursor == 2
        loaded.update(TextFilterChanged("prod"))
        assert loaded.cursor == 0


class TestMarkAndDiff:
    """마크 / 비교"""

    def test_toggle_mark(self, loaded):
        loaded.update(KeyPress("m"))
        assert loaded.marked.id == "id-1"
        loaded.update(KeyPress("m"))
        assert loaded.marked is None

    def test_mark_cleared_when_filtered_out(self, loaded):
        """마크한 리소스가 필터로 사라지면 마크 해제"""
        loaded.update(KeyPress("m"))
        loaded.update(TextFilterChanged("prod"))
        assert loaded.marked is None

    def test_mark_kept_when_still_visible(self, loaded):
        loaded.update(KeyPress("m"))
        loaded.update(TextFilterChanged("api"))
        assert loaded.marked.id == "id-1"

    def test_esc_clears_mark(self, loaded):
        loaded.update(KeyPress("m"))
        loaded.update(KeyPress("esc"))
        assert loaded.marked is None

    def test_detail_with_mark_opens_diff(self, loaded):
        loaded.update(KeyPress("m"))
        loaded.update(KeyPress("j"))
        result = loaded.update(KeyPress("d"))

        (effect,) = result.effects
        assert isinstance(effect, DiffEffect)
        assert (effect.left_title, effect.right_title) == ("dev-api", "prod-api")

    def test_diff_command_by_names(self, loaded):
        (effect,) = loaded.update(DiffRequested("batch", "dev-api")).effects
        assert isinstance(effect, DiffEffect)
        assert effect.left_title == "batch"

    def test_diff_command_one_name_uses_selection(self, loaded):
        (effect,) = loaded.update(DiffRequested("prod-api")).effects
        assert (effect.left_title, effect.right_title) == ("dev-api", "prod-api")

    def test_diff_unknown_name(self, loaded):
        result = loaded.update(DiffRequested("nope", "dev-api"))
        assert result.effects == [NoticeEffect("diff: resource not found", error=True)]

    def test_diff_same_resource(self, loaded):
        result = loaded.update(DiffRequested("dev-api"))
        assert result.effects == [NoticeEffect("diff: same resource", error=True)]

    def test_diff_without_mark(self, loaded):
        result = loaded.update(DiffRequested())
        assert result.effects == [NoticeEffect("diff: resource not found", error=True)]

    def test_mark_column_in_table(self, loaded):
        loaded.update(KeyPress("m"))
        _, rows = loaded.table()
        assert [row[0] for row in rows] == ["◆", "", ""]


class TestDetail:
    """상세 보기"""

    def test_detail_effect_without_getter(self, loaded):
        (effect,) = loaded.update(KeyPress("enter")).effects
        assert isinstance(effect, DetailEffect)
        assert effect.title == "test/items dev-api"
        assert "id-1" in effect.text

    def test_detail_task_with_getter(self, app_config, drain):
        registry = Registry()
        registry.register("test", "things", lambda ctx: GettableFetcher(), name_formatter)
        browser = ResourceBrowser(registry, app_config, "test")
        drain(browser, browser.init())

        effects = drain(browser, browser.update(KeyPress("d")))

        (effect,) = effects
        assert effect.title == "test/things fresh"

    def test_stale_detail_discarded(self, loaded):
        result = loaded.update(DetailLoaded(loaded.generation - 1, BaseResource(id="x")))
        assert result.effects == []

    def test_detail_on_empty_list(self, browser):
        browser.init()
        assert browser.update(KeyPress("d")).effects == []

    def test_demo_mode_masks_account_in_detail(self, drain):
        config = AppConfig(regions=["ap-northeast-2"])
        config.set_account_id("111122223333")
        config.set_demo_mode(True)
        role = BaseResource(id="r-1", name="app", arn="arn:aws:iam::111122223333:role/app")
        registry = Registry()
        registry.register("test", "roles", lambda ctx: StaticFetcher([role]), name_formatter)
        browser = ResourceBrowser(registry, config, "test")
        drain(browser, browser.init())

        (effect,) = browser.update(KeyPress("d")).effects
        assert "111122223333" not in effect.text
        assert "123456789012" in effect.text


class TestNavigation:
    """관련 리소스 이동"""

    def test_navigate_to_registered_target(self, loaded):
        (effect,) = loaded.update(KeyPress("o")).effects

        assert isinstance(effect, NavigateEffect)
        child = effect.browser
        assert child.title == "test/others"
        assert child.filters.field_filter == "OwnerId"
        assert child.filters.field_value == "id-1"
        assert "[OwnerId=id-1]" in child.status_line()

    def test_navigate_to_unregistered_target(self, loaded):
        """등록되지 않은 대상은 안내 메시지만"""
        result = loaded.update(KeyPress("x"))
        assert result.effects == [NoticeEffect("not available: missing/things", error=True)]
        assert result.tasks == []

    def test_child_shares_cancellation(self, loaded):
        (effect,) = loaded.update(KeyPress("o")).effects
        loaded.ctx.cancel()
        assert effect.browser.ctx.cancelled


class TestKinds:
    """같은 도메인 리소스 타입 전환"""

    def test_tabs(self, browser):
        assert browser.tabs() == [(1, "items", True), (2, "others", False)]

    def test_switch_by_number_resets_state(self, loaded):
        loaded.update(TextFilterChanged("prod"))
        loaded.update(SortRequested("name"))
        loaded.update(KeyPress("m"))
        generation = loaded.generation

        result = loaded.update(KeyPress("2"))

        assert loaded.kind == "others"
        assert loaded.filters.text_filter == ""
        assert not loaded.sort.is_active
        assert loaded.marked is None
        assert loaded.resources == []
        assert loaded.generation == generation + 1
        assert len(result.tasks) == 1

    def test_tab_cycles(self, browser):
        browser.update(KeyPress("tab"))
        assert browser.kind == "others"
        browser.update(KeyPress("shift+tab"))
        assert browser.kind == "items"

    def test_out_of_range_number(self, browser):
        assert browser.update(KeyPress("9")).tasks == []
        assert browser.kind == "items"


class TestCursorAndActions:
    """커서 이동 / 액션 메뉴"""

    def test_moves(self, loaded):
        loaded.update(KeyPress("j"))
        assert loaded.cursor == 1
        loaded.update(KeyPress("G"))
        assert loaded.cursor == 2
        loaded.update(KeyPress("j"))
        assert loaded.cursor == 2
        loaded.update(KeyPress("g"))
        assert loaded.cursor == 0
        loaded.update(KeyPress("k"))
        assert loaded.cursor == 0

    def test_page_moves_use_height(self, loaded):
        loaded.update(Resize(80, 5))
        loaded.update(KeyPress("pgdown"))
        assert loaded.cursor == 1

    def test_action_menu_effect(self, fake_registry, app_config, action_registry, drain):
        action_registry.register("test", "items", [Action("Stop", "S", operation="StopItem")])
        browser = ResourceBrowser(fake_registry, app_config, "test", "items", actions=action_registry)
        drain(browser, browser.init())

        (effect,) = browser.update(KeyPress("a")).effects

        assert isinstance(effect, ActionMenuEffect)
        assert effect.resource.id == "id-1"
        assert (effect.domain, effect.kind) == ("test", "items")

    def test_action_key_without_actions(self, loaded):
        assert loaded.update(KeyPress("a")).effects == []

    def test_metrics_key_without_spec(self, loaded):
        assert loaded.update(KeyPress("M")).tasks == []
        assert loaded.metrics_enabled is False


class TestDisplay:
    """표시 문자열"""

    def test_status_line(self, loaded):
        loaded.update(TagFilterRequested("env"))
        loaded.update(SortRequested("name"))
        assert loaded.status_line() == "test/items [tag: env] [sort: NAME↑] • 2/3 items"

    def test_status_line_read_only(self, loaded):
        loaded.config.set_read_only(True)
        assert loaded.status_line().endswith("[READ-ONLY]")

    def test_count_text_has_more(self, browser):
        browser.init()
        browser.update(ResourcesLoaded(browser.generation, [BaseResource(id="a")], next_token="t"))
        assert browser.count_text() == "1+ items"

    def test_tag_completion_sources(self, loaded):
        assert loaded.tag_keys() == ["env", "team"]
        assert loaded.tag_values("env") == ["dev", "prod"]

    def test_table_header_shows_sort(self, loaded):
        loaded.update(SortRequested("size"))
        spec, rows = loaded.table()
        assert [c.title for c in spec.columns] == ["", "NAME", "SIZE ▲", "AGE"]
        assert rows[0][1:] == ["dev-api", "900 MiB", "3d"]
