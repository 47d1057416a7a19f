"""
core/browser/sort.py - 정렬 엔진

컬럼 getter 값을 다음 순서로 비교합니다.

    1. 단위가 붙은 숫자 (B KB MB GB TB KiB MiB GiB TiB %)
    2. 기간 (s m h d w mo y)
    3. 대소문자 무시 문자열

정렬은 안정(stable)하며, 정렬 해제 시 조회 순서로 돌아갑니다.
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass
from typing import Any

from core.resource.capabilities import Column

SORT_ASC_INDICATOR = " ▲"
SORT_DESC_INDICATOR = " ▼"

# 숫자가 아닌 것으로 취급하는 값
_NON_NUMERIC = frozenset({"", "-", "N/A"})

_NUMERIC_RE = re.compile(
    r"^([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*(TiB|GiB|MiB|KiB|TB|GB|MB|KB|B|%)?$"
)

_SIZE_MULTIPLIERS = {
    "B": 1,
    "KB": 1000,
    "MB": 1000**2,
    "GB": 1000**3,
    "TB": 1000**4,
    "KiB": 1024,
    "MiB": 1024**2,
    "GiB": 1024**3,
    "TiB": 1024**4,
    "%": 1,
}

_DURATION_SECONDS = {
    "s": 1,
    "m": 60,
    "h": 3600,
    "d": 86400,
    "w": 7 * 86400,
    "y": 365 * 86400,
}
_MONTH_SECONDS = 30 * 86400


def parse_numeric(value: str) -> float | None:
    """단위가 붙은 숫자 해석 ("1.5 GiB" -> 바이트 수). 숫자가 아니면 None"""
    value = value.strip()
    if value in _NON_NUMERIC:
        return None
    match = _NUMERIC_RE.match(value)
    if match is None:
        return None
    number = float(match.group(1))
    unit = match.group(2)
    return number * _SIZE_MULTIPLIERS[unit] if unit else number


def parse_age(value: str) -> float | None:
    """기간 해석 ("5d" -> 초). 기간이 아니면 None"""
    value = value.strip()
    if len(value) < 2:
        return None

    if value.endswith("mo"):
        number, multiplier = value[:-2], _MONTH_SECONDS
    elif value[-1] in _DURATION_SECONDS:
        number, multiplier = value[:-1], _DURATION_SECONDS[value[-1]]
    else:
        return None

    try:
        return float(number) * multiplier
    except ValueError:
        return None


def _cmp(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


def compare_values(a: str, b: str) -> int:
    """두 셀 값 비교 (-1, 0, 1)"""
    num_a, num_b = parse_numeric(a), parse_numeric(b)
    if num_a is not None and num_b is not None:
        return _cmp(num_a, num_b)

    age_a, age_b = parse_age(a), parse_age(b)
    if age_a is not None and age_b is not None:
        return _cmp(age_a, age_b)

    return _cmp(a.lower(), b.lower())


def sort_resources(resources: list[Any], column: Column, ascending: bool = True) -> list[Any]:
    """컬럼 값 기준 안정 정렬

    내림차순은 비교 결과를 뒤집어 정렬하므로 같은 값끼리는 조회 순서를 유지합니다.
    """
    sign = 1 if ascending else -1
    # getter는 리소스당 한 번만 호출
    keyed = [(column.value(r), r) for r in resources]
    keyed.sort(key=functools.cmp_to_key(lambda x, y: sign * compare_values(x[0], y[0])))
    return [r for _, r in keyed]


@dataclass
class SortState:
    """화면별 정렬 상태 (column == -1 이면 정렬 안 함)"""

    column: int = -1
    ascending: bool = True

    @property
    def is_active(self) -> bool:
        return self.column >= 0

    def set(self, column: int, ascending: bool = True) -> None:
        self.column = column
        self.ascending = ascending

    def clear(self) -> None:
        self.column = -1
        self.ascending = True

    def apply(self, resources: list[Any], columns: list[Column]) -> list[Any]:
        if not self.is_active or self.column >= len(columns):
            return resources
        return sort_resources(resources, columns[self.column], self.ascending)

    def indicator(self, column: int) -> str:
        """헤더에 붙일 정렬 표시"""
        if column != self.column:
            return ""
        return SORT_ASC_INDICATOR if self.ascending else SORT_DESC_INDICATOR

    def info(self, columns: list[Column]) -> str:
        """상태 표시줄 문구 (예: [sort: NAME↑])"""
        if not self.is_active or self.column >= len(columns):
            return ""
        arrow = "↑" if self.ascending else "↓"
        return f"[sort: {columns[self.column].name}{arrow}]"


def find_column_by_name(columns: list[Column], name: str) -> int:
    """컬럼 이름으로 인덱스 찾기 (정확히 -> 접두사 -> 포함, 대소문자 무시). 없으면 -1"""
    target = name.strip().lower()
    if not target:
        return -1

    names = [c.name.lower() for c in columns]
    for match in (
        lambda n: n == target,
        lambda n: n.startswith(target),
        lambda n: target in n,
    ):
        for i, n in enumerate(names):
            if match(n):
                return i
    return -1
