"""
core/browser/table.py - 리소스 테이블 레이아웃

컬럼 폭 계산, 셀 맞춤(동아시아 문자 폭 고려), 행 구성, 마우스 행 판정을 담당합니다.
렌더링 라이브러리와 무관한 문자열 결과를 만들며, 셸은 이를 rich로 출력합니다.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from rich.cells import cell_len, set_cell_size

from core.metrics.types import COLUMN_WIDTH as METRIC_COLUMN_WIDTH
from core.metrics.types import MetricData, MetricSpec, render_metric_cell
from core.resource.capabilities import Column
from core.resource.types import get_resource_region

from .sort import SortState

MARK_COLUMN_WIDTH = 2
REGION_COLUMN_WIDTH = 14
COLUMN_GAP = 1
MARK_SYMBOL = "◆"
ELLIPSIS = "…"


def fit(text: str, width: int) -> str:
    """셀 폭에 맞게 자르거나 공백으로 채움"""
    if width <= 0:
        return ""
    if cell_len(text) <= width:
        return set_cell_size(text, width)
    return set_cell_size(text, width - 1) + ELLIPSIS


@dataclass(frozen=True)
class TableColumn:
    title: str
    width: int


@dataclass
class TableSpec:
    """표시할 컬럼 구성

    Attributes:
        columns: 화면 컬럼 (마크/리전/메트릭 포함)
        indices: 표시되는 리소스 컬럼의 원래 인덱스
    """

    columns: list[TableColumn]
    indices: list[int]


@dataclass(frozen=True)
class TableLayout:
    """행 판정에 필요한 화면 배치

    Attributes:
        top: 테이블 헤더 줄의 화면 y 좌표
        header_rows: 헤더 줄 수
        offset: 스크롤 오프셋 (첫 표시 행의 인덱스)
        visible_rows: 표시 가능한 데이터 행 수
    """

    top: int
    header_rows: int = 1
    offset: int = 0
    visible_rows: int = 0


def row_at(y: int, layout: TableLayout, row_count: int) -> int:
    """화면 y 좌표의 데이터 행 인덱스 (행이 아니면 -1)"""
    relative = y - layout.top - layout.header_rows
    if relative < 0:
        return -1
    if layout.visible_rows and relative >= layout.visible_rows:
        return -1
    index = layout.offset + relative
    if index >= row_count:
        return -1
    return index


def scroll_offset(cursor: int, offset: int, visible_rows: int) -> int:
    """커서가 보이도록 스크롤 오프셋 조정"""
    if visible_rows <= 0:
        return 0
    if cursor < offset:
        return cursor
    if cursor >= offset + visible_rows:
        return cursor - visible_rows + 1
    return offset


def build_columns(
    columns: list[Column],
    sort: SortState,
    width: int = 0,
    multi_region: bool = False,
    metric_spec: MetricSpec | None = None,
) -> TableSpec:
    """표시 컬럼 (마크 + [리전] + 리소스 컬럼 + [메트릭])

    width가 주어지면 폭이 넘칠 때 priority가 큰 컬럼부터 숨기고,
    남는 폭은 마지막 컬럼에 더합니다.
    """
    visible = list(range(len(columns)))
    fixed = MARK_COLUMN_WIDTH + COLUMN_GAP
    if multi_region:
        fixed += REGION_COLUMN_WIDTH + COLUMN_GAP
    if metric_spec is not None:
        fixed += METRIC_COLUMN_WIDTH + COLUMN_GAP

    def total(indices: list[int]) -> int:
        return fixed + sum(columns[i].width + COLUMN_GAP for i in indices)

    if width:
        by_priority = sorted(visible, key=lambda i: (-columns[i].priority, -i))
        for i in by_priority:
            if total(visible) <= width or len(visible) <= 1 or columns[i].priority <= 0:
                break
            visible.remove(i)

    result = [TableColumn("", MARK_COLUMN_WIDTH)]
    if multi_region:
        result.append(TableColumn("REGION", REGION_COLUMN_WIDTH))
    for i in visible:
        result.append(TableColumn(columns[i].name + sort.indicator(i), columns[i].width))
    if metric_spec is not None:
        result.append(TableColumn(metric_spec.column_header, METRIC_COLUMN_WIDTH))

    if width and len(result) > 1:
        extra = width - total(visible)
        if extra > 0:
            last = result[-1]
            result[-1] = TableColumn(last.title, last.width + extra)
    return TableSpec(result, visible)


def build_row(
    resource: Any,
    columns: list[Column],
    column_indices: list[int],
    marked: bool = False,
    multi_region: bool = False,
    metric_data: MetricData | None = None,
    metric_spec: MetricSpec | None = None,
) -> list[str]:
    cells = [MARK_SYMBOL if marked else ""]
    if multi_region:
        cells.append(get_resource_region(resource))
    cells.extend(columns[i].value(resource) for i in column_indices)
    if metric_spec is not None:
        result = metric_data.get(resource.id) if metric_data is not None else None
        cells.append(render_metric_cell(result, metric_spec.unit))
    return cells


def render_line(cells: list[str], table_columns: list[TableColumn]) -> str:
    """셀을 컬럼 폭에 맞춰 한 줄로"""
    gap = " " * COLUMN_GAP
    return gap.join(fit(cell, col.width) for cell, col in zip(cells, table_columns)).rstrip()


def render_header(table_columns: list[TableColumn]) -> str:
    return render_line([c.title for c in table_columns], table_columns)
