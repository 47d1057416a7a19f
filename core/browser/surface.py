"""
core/browser/surface.py - 리소스 브라우저 화면 상태

한 리소스 타입의 목록 화면입니다. 단일 스레드 반응형 모델로 동작합니다.

    result = browser.update(message)
    # result.tasks   : 호스트가 스레드 풀에서 실행, 반환값을 다시 update()로 전달
    # result.effects : 호스트가 처리 (화면 이동, 상세 보기, 액션 메뉴 ...)

모든 상태 변경은 update()를 호출한 스레드에서만 일어납니다. 작업(task)은
실행 시점의 상태를 캡처한 클로저이며 화면 상태를 직접 건드리지 않습니다.

세대(generation) 번호로 리소스 타입 전환/새로고침 이전에 시작된 작업의 결과를 버립니다.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from core.context import FetchContext
from core.metrics.fetcher import load_metrics
from core.resource.capabilities import Column, ResourceGetter, get_metric_spec, get_navigations
from core.resource.types import get_resource_region, unwrap_resource

from .fetch import fetch_multi_region, fetch_resources
from .filter import FilterState, apply_filters, collect_tag_keys, collect_tag_values
from .messages import (
    ActionMenuEffect,
    AutoReloadTick,
    DetailEffect,
    DetailLoaded,
    DiffEffect,
    DiffRequested,
    KeyPress,
    MetricsLoaded,
    NavigateEffect,
    NextPageFailed,
    NextPageLoaded,
    NoticeEffect,
    Refresh,
    Resize,
    ResourcesFailed,
    ResourcesLoaded,
    ScheduleReloadEffect,
    SetCursor,
    SortRequested,
    TagFilterRequested,
    Task,
    TextFilterChanged,
    UpdateResult,
)
from .pagination import PAGE_SIZE, PaginationController
from .sort import SortState, find_column_by_name
from .table import TableSpec, build_columns, build_row

if TYPE_CHECKING:
    from core.action.registry import ActionRegistry
    from core.config import AppConfig
    from core.registry import Registry

logger = logging.getLogger(__name__)

DEFAULT_PAGE_JUMP = 10


class ResourceBrowser:
    """리소스 목록 화면

    Attributes:
        domain / kind: 현재 리소스 타입
        kinds: 같은 도메인의 리소스 타입 (탭)
        resources: 조회 순서대로의 전체 리소스
        filtered: 필터 + 정렬 적용 결과 (표시 순서)
        cursor: filtered 안의 선택 인덱스
        marked: 비교용으로 마크한 리소스
    """

    def __init__(
        self,
        registry: Registry,
        config: AppConfig,
        domain: str,
        kind: str = "",
        *,
        ctx: FetchContext | None = None,
        actions: ActionRegistry | None = None,
        field_filter: str = "",
        field_value: str = "",
        auto_reload: float = 0.0,
        page_size: int = PAGE_SIZE,
    ):
        self.registry = registry
        self.config = config
        self.actions = actions
        self.ctx = ctx or FetchContext(config=config)
        self.domain = domain
        self.kinds = registry.list_kinds(domain)
        self.kind = kind or (self.kinds[0] if self.kinds else "")
        self.auto_reload = auto_reload

        self.filters = FilterState(field_filter=field_filter, field_value=field_value)
        self.sort = SortState()
        self.pagination = PaginationController(page_size)

        self.resources: list[Any] = []
        self.filtered: list[Any] = []
        self.cursor = 0
        self.marked: Any = None

        self.loading = False
        self.error: BaseException | None = None
        self.partial_errors: list[str] = []

        self.metrics_enabled = False
        self.metrics_loading = False
        self.metrics_data: Any = None

        self.width = 0
        self.height = 0
        self.generation = 0

        self.formatter: Any = None
        self.columns: list[Column] = []
        self._load_formatter()

    def __repr__(self) -> str:
        return f"ResourceBrowser({self.title!r}, items={len(self.filtered)}/{len(self.resources)})"

    # =========================================================================
    # 조회
    # =========================================================================

    @property
    def title(self) -> str:
        return f"{self.domain}/{self.kind}"

    @property
    def selected(self) -> Any:
        if 0 <= self.cursor < len(self.filtered):
            return self.filtered[self.cursor]
        return None

    @property
    def metric_spec(self) -> Any:
        return get_metric_spec(self.formatter)

    @property
    def multi_region(self) -> bool:
        return self.config.is_multi_region

    def _load_formatter(self) -> None:
        self.formatter = self.registry.get_formatter(self.domain, self.kind)
        self.columns = self.formatter.columns()

    def _fetch_context(self) -> FetchContext:
        ctx = self.ctx
        if self.filters.has_field_filter:
            ctx = ctx.with_filter(self.filters.field_filter, self.filters.field_value)
        return ctx

    def context_for(self, resource: Any) -> FetchContext:
        """리소스의 리전이 반영된 컨텍스트 (멀티 리전 결과용)"""
        region = get_resource_region(resource)
        return self.ctx.with_region(region) if region else self.ctx

    # =========================================================================
    # 작업 (스레드 풀에서 실행)
    # =========================================================================

    def _load_task(self, generation: int) -> Task:
        registry, domain, kind = self.registry, self.domain, self.kind
        ctx = self._fetch_context()
        regions = self.config.regions
        page_size = self.pagination.page_size

        def load() -> Any:
            try:
                result = fetch_resources(ctx, registry, domain, kind, regions, page_size)
            except Exception as e:
                logger.warning(f"리소스 조회 실패 [{domain}/{kind}]: {e}")
                return ResourcesFailed(generation, e)
            return ResourcesLoaded(
                generation,
                result.resources,
                next_token=result.next_token,
                next_tokens=result.next_tokens,
                partial_errors=result.errors,
            )

        return load

    def _next_page_task(self, generation: int) -> Task:
        registry, domain, kind = self.registry, self.domain, self.kind
        ctx = self._fetch_context()
        regions = self.config.regions
        page_size = self.pagination.page_size
        token = self.pagination.state.next_token
        tokens = dict(self.pagination.state.next_tokens)

        def load_next() -> Any:
            try:
                if len(regions) > 1:
                    result = fetch_multi_region(ctx, registry, domain, kind, regions, page_size, tokens)
                else:
                    result = fetch_resources(ctx, registry, domain, kind, regions, page_size, token=token)
            except Exception as e:
                return NextPageFailed(generation, e)
            return NextPageLoaded(generation, result.resources, result.next_token, result.next_tokens)

        return load_next

    def _metrics_task(self, generation: int) -> Task:
        spec = self.metric_spec
        ctx = self.ctx
        resources = list(self.resources)

        def load() -> Any:
            try:
                return MetricsLoaded(generation, data=load_metrics(ctx, spec, resources))
            except Exception as e:
                return MetricsLoaded(generation, error=e)

        return load

    def _detail_task(self, generation: int, resource: Any) -> Task:
        ctx = self.context_for(resource)
        registry, domain, kind = self.registry, self.domain, self.kind
        fetcher = registry.get_fetcher(ctx, domain, kind)

        def load() -> Any:
            try:
                fresh = fetcher.get(ctx, resource.id)
            except Exception as e:
                logger.debug(f"상세 조회 실패, 목록 값 사용: {e}")
                fresh = resource
            return DetailLoaded(generation, fresh)

        return load

    def _reload_effect(self) -> ScheduleReloadEffect:
        return ScheduleReloadEffect(self.auto_reload, self.generation)

    # =========================================================================
    # 상태 변경
    # =========================================================================

    def init(self) -> UpdateResult:
        return self._start_load()

    def _start_load(self) -> UpdateResult:
        self.generation += 1
        self.loading = True
        self.error = None
        self.pagination.reset()
        result = UpdateResult(tasks=[self._load_task(self.generation)])
        if self.metrics_enabled and self.metric_spec is not None:
            self.metrics_loading = True
        return result

    def apply_filter(self) -> None:
        """필터 -> 정렬 -> 마크 검사 -> 커서 보정"""
        filtered = apply_filters(self.resources, self.filters, self.columns)
        self.filtered = self.sort.apply(filtered, self.columns)

        if self.marked is not None and all(r.id != self.marked.id for r in self.filtered):
            self.marked = None

        if self.cursor >= len(self.filtered):
            self.cursor = max(0, len(self.filtered) - 1)

    def set_cursor(self, row: int) -> None:
        if not self.filtered:
            self.cursor = 0
            return
        self.cursor = max(0, min(row, len(self.filtered) - 1))

    def _maybe_load_more(self, manual: bool = False) -> UpdateResult:
        started = self.pagination.begin(
            self.cursor,
            len(self.filtered),
            self.filters.text_filter,
            manual=manual,
            loading=self.loading,
        )
        if not started:
            return UpdateResult()
        return UpdateResult(tasks=[self._next_page_task(self.generation)])

    def switch_kind(self, index: int) -> UpdateResult:
        """같은 도메인의 다른 리소스 타입으로 전환"""
        if not 0 <= index < len(self.kinds):
            return UpdateResult()
        self.kind = self.kinds[index]
        self._load_formatter()
        self.resources = []
        self.filtered = []
        self.cursor = 0
        self.marked = None
        self.filters.clear()
        self.sort.clear()
        self.metrics_enabled = False
        self.metrics_data = None
        self.partial_errors = []
        return self._start_load()

    def cycle_kind(self, delta: int) -> UpdateResult:
        if len(self.kinds) <= 1:
            return UpdateResult()
        current = self.kinds.index(self.kind) if self.kind in self.kinds else 0
        return self.switch_kind((current + delta) % len(self.kinds))

    def navigate(self, domain: str, kind: str, field_filter: str = "", field_value: str = "") -> ResourceBrowser:
        return ResourceBrowser(
            self.registry,
            self.config,
            domain,
            kind,
            ctx=self.ctx,
            actions=self.actions,
            field_filter=field_filter,
            field_value=field_value,
            auto_reload=self.auto_reload,
            page_size=self.pagination.page_size,
        )

    # =========================================================================
    # update
    # =========================================================================

    def update(self, msg: Any) -> UpdateResult:
        if isinstance(msg, ResourcesLoaded):
            return self._on_loaded(msg)
        if isinstance(msg, ResourcesFailed):
            return self._on_failed(msg)
        if isinstance(msg, NextPageLoaded):
            return self._on_next_page(msg)
        if isinstance(msg, NextPageFailed):
            return self._on_next_page_failed(msg)
        if isinstance(msg, MetricsLoaded):
            return self._on_metrics(msg)
        if isinstance(msg, DetailLoaded):
            if msg.generation != self.generation:
                return UpdateResult()
            return UpdateResult(effects=[self._detail_effect(msg.resource)])
        if isinstance(msg, AutoReloadTick):
            if msg.generation != self.generation:
                return UpdateResult()
            return self._start_load()
        if isinstance(msg, Refresh):
            if self.metrics_enabled:
                self.metrics_data = None
            return self._start_load()
        if isinstance(msg, KeyPress):
            return self.handle_key(msg.key)
        if isinstance(msg, SetCursor):
            self.set_cursor(msg.row)
            return self._maybe_load_more()
        if isinstance(msg, TextFilterChanged):
            self.filters.text_filter = msg.text
            self.apply_filter()
            return self._maybe_load_more()
        if isinstance(msg, SortRequested):
            return self._on_sort(msg)
        if isinstance(msg, TagFilterRequested):
            self.filters.tag_filter = msg.expr.strip()
            self.apply_filter()
            return UpdateResult()
        if isinstance(msg, DiffRequested):
            return self._on_diff(msg)
        if isinstance(msg, Resize):
            self.width, self.height = msg.width, msg.height
            return UpdateResult()
        return UpdateResult()

    def _on_loaded(self, msg: ResourcesLoaded) -> UpdateResult:
        if msg.generation != self.generation:
            return UpdateResult()
        self.loading = False
        self.error = None
        self.resources = list(msg.resources)
        self.partial_errors = list(msg.partial_errors)
        self.pagination.reset(msg.next_token, msg.next_tokens)
        self.apply_filter()

        result = UpdateResult()
        for err in self.partial_errors:
            result.effects.append(NoticeEffect(err, error=True))
        if self.auto_reload > 0:
            result.effects.append(self._reload_effect())
        if self.metrics_enabled and self.metric_spec is not None:
            self.metrics_loading = True
            result.tasks.append(self._metrics_task(self.generation))
        return result.extend(self._maybe_load_more())

    def _on_failed(self, msg: ResourcesFailed) -> UpdateResult:
        if msg.generation != self.generation:
            return UpdateResult()
        self.loading = False
        self.error = msg.error
        if self.auto_reload > 0:
            return UpdateResult(effects=[self._reload_effect()])
        return UpdateResult()

    def _on_next_page(self, msg: NextPageLoaded) -> UpdateResult:
        if msg.generation != self.generation:
            return UpdateResult()
        self.resources.extend(msg.resources)
        self.pagination.complete(msg.next_token, msg.next_tokens)
        self.apply_filter()
        logger.debug(f"다음 페이지 로드: {self.title} +{len(msg.resources)} (총 {len(self.resources)})")
        return UpdateResult()

    def _on_next_page_failed(self, msg: NextPageFailed) -> UpdateResult:
        if msg.generation != self.generation:
            return UpdateResult()
        if not self.pagination.fail(msg.error, have_results=bool(self.resources)):
            self.error = msg.error
        return UpdateResult()

    def _on_metrics(self, msg: MetricsLoaded) -> UpdateResult:
        if msg.generation != self.generation:
            return UpdateResult()
        self.metrics_loading = False
        if msg.error is not None:
            logger.warning(f"메트릭 조회 실패 [{self.title}]: {msg.error}")
        else:
            self.metrics_data = msg.data
        return UpdateResult()

    def _on_sort(self, msg: SortRequested) -> UpdateResult:
        if not msg.column:
            self.sort.clear()
        else:
            idx = find_column_by_name(self.columns, msg.column)
            if idx < 0:
                return UpdateResult(effects=[NoticeEffect(f"unknown column: {msg.column}", error=True)])
            self.sort.set(idx, msg.ascending)
        self.apply_filter()
        return UpdateResult()

    def _find_by_name(self, name: str) -> Any:
        for res in self.filtered:
            if res.name == name:
                return res
        for res in self.filtered:
            if res.id == name or unwrap_resource(res).id == name:
                return res
        return None

    def _on_diff(self, msg: DiffRequested) -> UpdateResult:
        names = [n for n in (msg.left, msg.right) if n]
        if len(names) == 2:
            left, right = self._find_by_name(names[0]), self._find_by_name(names[1])
        elif len(names) == 1:
            left, right = self.selected, self._find_by_name(names[0])
        else:
            left, right = self.marked, self.selected

        if left is None or right is None:
            return UpdateResult(effects=[NoticeEffect("diff: resource not found", error=True)])
        if left.id == right.id:
            return UpdateResult(effects=[NoticeEffect("diff: same resource", error=True)])
        return UpdateResult(effects=[self._diff_effect(left, right)])

    def _detail_effect(self, resource: Any) -> DetailEffect:
        inner = unwrap_resource(resource)
        title = f"{self.title} {inner.name or inner.id}"
        return DetailEffect(title, self.config.mask_account_id(self.formatter.render_detail(inner)))

    def _diff_effect(self, left: Any, right: Any) -> DiffEffect:
        left_inner, right_inner = unwrap_resource(left), unwrap_resource(right)
        return DiffEffect(
            left_inner.name or left_inner.id,
            right_inner.name or right_inner.id,
            self.config.mask_account_id(self.formatter.render_detail(left_inner)),
            self.config.mask_account_id(self.formatter.render_detail(right_inner)),
        )

    # =========================================================================
    # 키 입력
    # =========================================================================

    def handle_key(self, key: str) -> UpdateResult:
        selected = self.selected

        # 네비게이션 단축키가 우선
        for nav in get_navigations(self.formatter, selected):
            if nav.key != key:
                continue
            if not self.registry.contains(nav.domain, nav.kind):
                return UpdateResult(effects=[NoticeEffect(f"not available: {nav.domain}/{nav.kind}", error=True)])
            child = self.navigate(nav.domain, nav.kind, nav.filter_field, nav.filter_value)
            return UpdateResult(effects=[NavigateEffect(child)])

        if key == "ctrl+r":
            return self.update(Refresh())

        if key == "c":
            self.filters.clear()
            self.marked = None
            self.apply_filter()
            return UpdateResult()

        if key == "esc":
            self.marked = None
            return UpdateResult()

        if key == "m":
            if selected is not None:
                self.marked = None if self.marked is not None and self.marked.id == selected.id else selected
            return UpdateResult()

        if key == "M":
            return self._toggle_metrics()

        if key in ("d", "enter"):
            if selected is None:
                return UpdateResult()
            if self.marked is not None and self.marked.id != selected.id:
                return UpdateResult(effects=[self._diff_effect(self.marked, selected)])
            fetcher = self.registry.get_fetcher(self.context_for(selected), self.domain, self.kind)
            if isinstance(fetcher, ResourceGetter):
                return UpdateResult(tasks=[self._detail_task(self.generation, selected)])
            return UpdateResult(effects=[self._detail_effect(selected)])

        if key == "a":
            if selected is not None and self.actions is not None and self.actions.get(self.domain, self.kind):
                effect = ActionMenuEffect(selected, self.domain, self.kind, ctx=self.context_for(selected))
                return UpdateResult(effects=[effect])
            return UpdateResult()

        if key == "tab":
            return self.cycle_kind(1)
        if key == "shift+tab":
            return self.cycle_kind(-1)
        if len(key) == 1 and key in "123456789":
            return self.switch_kind(int(key) - 1)

        if key == "N":
            return self._maybe_load_more(manual=True)

        page = max(1, self.height - 4) if self.height else DEFAULT_PAGE_JUMP
        moves = {
            "j": self.cursor + 1,
            "down": self.cursor + 1,
            "k": self.cursor - 1,
            "up": self.cursor - 1,
            "g": 0,
            "home": 0,
            "G": len(self.filtered) - 1,
            "end": len(self.filtered) - 1,
            "pgdown": self.cursor + page,
            "pgup": self.cursor - page,
        }
        if key in moves:
            self.set_cursor(moves[key])
            return self._maybe_load_more()

        return UpdateResult()

    def _toggle_metrics(self) -> UpdateResult:
        if self.metric_spec is None:
            return UpdateResult()
        self.metrics_enabled = not self.metrics_enabled
        if self.metrics_enabled and self.metrics_data is None and self.resources:
            self.metrics_loading = True
            return UpdateResult(tasks=[self._metrics_task(self.generation)])
        return UpdateResult()

    # =========================================================================
    # 표시
    # =========================================================================

    def count_text(self) -> str:
        more = "+" if self.pagination.state.has_more else ""
        if len(self.filtered) != len(self.resources):
            return f"{len(self.filtered)}/{len(self.resources)}{more} items"
        return f"{len(self.resources)}{more} items"

    def status_line(self) -> str:
        """예: ec2/instances [VpcId=vpc-1] [tag: env=prod] [sort: NAME↑] • 10/25 items"""
        parts = [self.title]
        if self.filters.has_field_filter:
            parts.append(f"[{self.filters.field_filter}={self.filters.field_value}]")
        if self.filters.tag_filter:
            parts.append(f"[tag: {self.filters.tag_filter}]")
        if self.filters.text_filter:
            parts.append(f"[/{self.filters.text_filter}]")
        sort_info = self.sort.info(self.columns)
        if sort_info:
            parts.append(sort_info)
        line = " ".join(parts) + f" • {self.count_text()}"
        if self.pagination.state.is_loading_more:
            line += " (loading more...)"
        if self.config.read_only:
            line += " [READ-ONLY]"
        return line

    def tabs(self) -> list[tuple[int, str, bool]]:
        """(번호, kind, 현재 여부)"""
        return [(i + 1, k, k == self.kind) for i, k in enumerate(self.kinds)]

    def table(self, width: int = 0) -> tuple[TableSpec, list[list[str]]]:
        """표시용 컬럼 구성과 행"""
        spec = self.metric_spec if self.metrics_enabled else None
        table_spec = build_columns(self.columns, self.sort, width, self.multi_region, spec)
        marked_id = self.marked.id if self.marked is not None else None
        rows = [
            build_row(
                res,
                self.columns,
                table_spec.indices,
                marked=res.id == marked_id,
                multi_region=self.multi_region,
                metric_data=self.metrics_data,
                metric_spec=spec,
            )
            for res in self.filtered
        ]
        return table_spec, rows

    def tag_keys(self) -> list[str]:
        return collect_tag_keys(self.resources)

    def tag_values(self, key: str) -> list[str]:
        return collect_tag_values(self.resources, key)
