"""
core/resource/format.py - 셀 값 포맷 헬퍼

컬럼 getter에서 공통으로 쓰는 나이/크기/태그 포맷입니다.
나이와 크기 문자열은 정렬 엔진(core.browser.sort)이 다시 해석할 수 있는 형식을 따릅니다.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from .capabilities import Column

EMPTY = "-"

_SIZE_UNITS = ["B", "KiB", "MiB", "GiB", "TiB"]


def format_age(when: datetime | None, now: datetime | None = None) -> str:
    """생성 시각으로부터 경과 시간 (예: 45s, 12m, 3h, 5d, 2mo, 1y)"""
    if when is None:
        return EMPTY
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)

    seconds = max(0, int((now - when).total_seconds()))
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m"
    if seconds < 86400:
        return f"{seconds // 3600}h"
    days = seconds // 86400
    if days < 30:
        return f"{days}d"
    if days < 365:
        return f"{days // 30}mo"
    return f"{days // 365}y"


def format_size(num_bytes: int | float | None) -> str:
    """바이트 수를 이진 단위로 표시 (예: 1.5 GiB)"""
    if num_bytes is None:
        return EMPTY
    size = float(num_bytes)
    for unit in _SIZE_UNITS:
        if abs(size) < 1024 or unit == _SIZE_UNITS[-1]:
            if unit == "B":
                return f"{int(size)} B"
            return f"{size:.1f} {unit}"
        size /= 1024
    return EMPTY


def format_tags(tags: Mapping[str, str] | None, skip: tuple[str, ...] = ("Name",)) -> str:
    """태그를 "k=v, k=v" 형식으로 (정렬된 키 순서)"""
    if not tags:
        return EMPTY
    pairs = [f"{k}={v}" for k, v in sorted(tags.items()) if k not in skip]
    return ", ".join(pairs) or EMPTY


def or_empty(value: Any) -> str:
    """None/빈 값은 "-" 로"""
    if value is None or value == "":
        return EMPTY
    return str(value)


def tags_column(width: int = 30) -> Column:
    return Column("TAGS", width, lambda r: format_tags(r.tags), priority=9)


def age_column(attr: str = "created_at", width: int = 6) -> Column:
    return Column("AGE", width, lambda r: format_age(getattr(r, attr, None)), priority=5)
