"""
core/browser/messages.py - 브라우저 메시지/효과 타입

ResourceBrowser.update()가 받는 메시지와, 호스트 셸이 처리해야 하는 효과(effect)를 정의합니다.

- 메시지: 사용자 입력 또는 백그라운드 작업 결과 (update()의 입력)
- Task: 호스트가 스레드 풀에서 실행하는 callable, 반환값은 다시 update()로 전달되는 메시지
- 효과: 화면 전환/상세 보기/액션 메뉴 등 호스트만 할 수 있는 일
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

Task = Callable[[], Any]


# =============================================================================
# 백그라운드 작업 결과
# =============================================================================


@dataclass
class ResourcesLoaded:
    """첫 페이지(또는 새로고침) 결과"""

    generation: int
    resources: list[Any]
    next_token: str = ""
    next_tokens: dict[str, str] = field(default_factory=dict)
    partial_errors: list[str] = field(default_factory=list)


@dataclass
class ResourcesFailed:
    generation: int
    error: BaseException


@dataclass
class NextPageLoaded:
    generation: int
    resources: list[Any]
    next_token: str = ""
    next_tokens: dict[str, str] = field(default_factory=dict)


@dataclass
class NextPageFailed:
    generation: int
    error: BaseException


@dataclass
class MetricsLoaded:
    generation: int
    data: Any = None
    error: BaseException | None = None


@dataclass
class DetailLoaded:
    """상세 보기용 최신 리소스 (ResourceGetter 지원 fetcher)"""

    generation: int
    resource: Any


# =============================================================================
# 사용자 입력
# =============================================================================


@dataclass
class KeyPress:
    key: str


@dataclass
class SetCursor:
    row: int


@dataclass
class TextFilterChanged:
    text: str


@dataclass
class SortRequested:
    """column이 비어 있으면 정렬 해제"""

    column: str = ""
    ascending: bool = True


@dataclass
class TagFilterRequested:
    """expr이 비어 있으면 태그 필터 해제"""

    expr: str = ""


@dataclass
class DiffRequested:
    """이름으로 비교

    left가 비어 있으면 마크한 리소스, right가 비어 있으면 현재 선택을 사용합니다.
    """

    left: str = ""
    right: str = ""


@dataclass
class Refresh:
    pass


@dataclass
class AutoReloadTick:
    generation: int


@dataclass
class Resize:
    width: int
    height: int


# =============================================================================
# 호스트 효과
# =============================================================================


@dataclass
class NavigateEffect:
    """새 브라우저 화면으로 이동"""

    browser: Any


@dataclass
class DetailEffect:
    title: str
    text: str


@dataclass
class DiffEffect:
    left_title: str
    right_title: str
    left_text: str
    right_text: str


@dataclass
class ActionMenuEffect:
    """액션 메뉴 열기 (ctx는 리소스 리전이 반영된 컨텍스트)"""

    resource: Any
    domain: str
    kind: str
    ctx: Any = None


@dataclass
class ScheduleReloadEffect:
    """delay 초 뒤 AutoReloadTick(generation) 전달 예약"""

    delay: float
    generation: int


@dataclass
class NoticeEffect:
    """상태 표시줄 안내 메시지"""

    text: str
    error: bool = False


@dataclass
class UpdateResult:
    """update() 결과

    Attributes:
        tasks: 호스트 스레드 풀에서 실행할 작업
        effects: 호스트가 동기 처리할 효과
    """

    tasks: list[Task] = field(default_factory=list)
    effects: list[Any] = field(default_factory=list)

    def extend(self, other: UpdateResult) -> UpdateResult:
        self.tasks.extend(other.tasks)
        self.effects.extend(other.effects)
        return self
