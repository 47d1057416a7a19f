"""
core/browser/pagination.py - 페이지네이션 컨트롤러

커서가 목록 끝 근처에 오면 다음 페이지를 자동으로 요청합니다.

상태 전이:
    IDLE -> LOADING_MORE -> IDLE
                        -> ERROR (결과가 있으면 has_more를 내리고 IDLE로 강등)

begin()이 유일한 진입점이며, 로딩 중에는 False를 반환하므로
한 화면에서 동시에 두 페이지를 요청하지 않습니다.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)

PAGE_SIZE = 100
LOAD_MORE_BUFFER = 10
MIN_FILTERED_FOR_AUTO_LOAD = 10


class PaginationPhase(Enum):
    IDLE = "idle"
    LOADING_MORE = "loading_more"
    ERROR = "error"


@dataclass
class PaginationState:
    """페이지네이션 상태

    Attributes:
        next_token: 다음 페이지 토큰 (빈 문자열 = 마지막 페이지)
        next_tokens: 멀티 리전 조회 시 리전별 토큰
        has_more: 더 불러올 페이지가 있는지
        is_loading_more: 다음 페이지 요청 중인지
        last_error: 마지막 페이지 요청 에러
    """

    next_token: str = ""
    next_tokens: dict[str, str] = field(default_factory=dict)
    has_more: bool = False
    is_loading_more: bool = False
    last_error: BaseException | None = None

    @property
    def has_token(self) -> bool:
        return bool(self.next_token) or any(self.next_tokens.values())

    @property
    def phase(self) -> PaginationPhase:
        if self.is_loading_more:
            return PaginationPhase.LOADING_MORE
        if self.last_error is not None:
            return PaginationPhase.ERROR
        return PaginationPhase.IDLE


class PaginationController:
    """화면별 페이지네이션 컨트롤러"""

    def __init__(self, page_size: int = PAGE_SIZE, buffer: int = LOAD_MORE_BUFFER):
        self.page_size = page_size
        self.buffer = buffer
        self.state = PaginationState()

    def reset(self, next_token: str = "", next_tokens: Mapping[str, str] | None = None) -> None:
        """첫 페이지 로드 후 상태 초기화"""
        self.state = PaginationState()
        self._set_tokens(next_token, next_tokens)

    def _set_tokens(self, next_token: str, next_tokens: Mapping[str, str] | None) -> None:
        self.state.next_token = next_token
        self.state.next_tokens = {k: v for k, v in (next_tokens or {}).items() if v}
        self.state.has_more = self.state.has_token

    def should_auto_load(self, cursor: int, filtered_count: int, text_filter: str = "", loading: bool = False) -> bool:
        """커서 위치 기준 자동 로드 여부"""
        s = self.state
        if not s.has_more or s.is_loading_more or loading or not s.has_token:
            return False
        if filtered_count == 0:
            return False
        # 텍스트 필터로 결과가 적으면 계속 불러오지 않음
        if text_filter and filtered_count < MIN_FILTERED_FOR_AUTO_LOAD:
            return False
        return cursor >= filtered_count - self.buffer

    def can_load_manually(self, loading: bool = False) -> bool:
        s = self.state
        return s.has_more and not s.is_loading_more and not loading and s.has_token

    def begin(
        self,
        cursor: int = 0,
        filtered_count: int = 0,
        text_filter: str = "",
        *,
        manual: bool = False,
        loading: bool = False,
    ) -> bool:
        """다음 페이지 요청 시작. 요청해야 하면 True (LOADING_MORE로 전이)"""
        if manual:
            allowed = self.can_load_manually(loading)
        else:
            allowed = self.should_auto_load(cursor, filtered_count, text_filter, loading)
        if not allowed:
            return False
        self.state.is_loading_more = True
        self.state.last_error = None
        return True

    def complete(self, next_token: str = "", next_tokens: Mapping[str, str] | None = None) -> None:
        """다음 페이지 수신 완료"""
        self.state.is_loading_more = False
        self.state.last_error = None
        self._set_tokens(next_token, next_tokens)

    def fail(self, error: BaseException, have_results: bool) -> bool:
        """다음 페이지 요청 실패

        Returns:
            True면 "더 이상 없음"으로 강등됨 (화면은 기존 결과 유지),
            False면 화면에 에러를 표시해야 함
        """
        s = self.state
        s.is_loading_more = False
        s.last_error = error
        if s.has_more and have_results:
            logger.warning(f"다음 페이지 로드 실패, 추가 로드 중단: {error}")
            s.has_more = False
            s.next_token = ""
            s.next_tokens = {}
            return True
        return False
