"""
core/context.py - 조회 컨텍스트

fetcher/실행기에 전달되는 불변 컨텍스트입니다. 리전/프로파일 오버라이드,
네비게이션 필터, 협력적 취소(cancel event + deadline)를 담습니다.

with_* 메서드는 새 컨텍스트를 반환하며, 취소 이벤트는 파생 컨텍스트와 공유됩니다.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from core.exceptions import FetchCancelledError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from core.config import AppConfig, ProfileSelection


@dataclass(frozen=True)
class FetchContext:
    """조회 컨텍스트

    Attributes:
        config: 애플리케이션 설정 (세션 생성에 사용)
        region: 리전 오버라이드 (멀티 리전 조회 시 설정, 빈 문자열이면 config 기본값)
        selection: 프로파일 선택 오버라이드
        filters: 네비게이션 필터 (필드명 -> 값)
        cancel_event: 협력적 취소 이벤트
        deadline: time.monotonic() 기준 마감 시각
    """

    config: AppConfig | None = field(default=None, compare=False, repr=False)
    region: str = ""
    selection: ProfileSelection | None = None
    filters: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    cancel_event: threading.Event = field(default_factory=threading.Event, compare=False, repr=False)
    deadline: float | None = field(default=None, compare=False)

    def with_region(self, region: str) -> FetchContext:
        return replace(self, region=region)

    def with_selection(self, selection: ProfileSelection) -> FetchContext:
        return replace(self, selection=selection)

    def with_filter(self, field_name: str, value: str) -> FetchContext:
        filters = dict(self.filters)
        filters[field_name] = value
        return replace(self, filters=MappingProxyType(filters))

    def with_timeout(self, seconds: float) -> FetchContext:
        deadline = time.monotonic() + seconds
        if self.deadline is not None:
            deadline = min(deadline, self.deadline)
        return replace(self, deadline=deadline)

    def get_filter(self, field_name: str) -> str:
        return self.filters.get(field_name, "")

    @property
    def effective_region(self) -> str:
        """오버라이드 리전, 없으면 설정의 기본 리전"""
        if self.region:
            return self.region
        return self.config.region if self.config else ""

    @property
    def effective_selection(self) -> ProfileSelection | None:
        if self.selection is not None:
            return self.selection
        return self.config.selection if self.config else None

    def cancel(self) -> None:
        self.cancel_event.set()

    @property
    def cancelled(self) -> bool:
        if self.cancel_event.is_set():
            return True
        return self.deadline is not None and time.monotonic() >= self.deadline

    def check(self, domain: str = "", kind: str = "") -> None:
        """취소되었으면 FetchCancelledError 발생 (각 fetch 시작 시 호출)"""
        if self.cancelled:
            raise FetchCancelledError(domain, kind)

    def to_dict(self) -> dict[str, Any]:
        return {
            "region": self.effective_region,
            "selection": self.selection.id if self.selection else None,
            "filters": dict(self.filters),
        }
