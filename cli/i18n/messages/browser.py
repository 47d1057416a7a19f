"""
cli/i18n/messages/browser.py - Resource Browser Messages

Contains translations for the browser shell (status, prompts, notices).
"""

from __future__ import annotations

BROWSER_MESSAGES = {
    # =========================================================================
    # Status
    # =========================================================================
    "loading": {
        "ko": "불러오는 중...",
        "en": "Loading...",
    },
    "load_failed": {
        "ko": "조회 실패: {error}",
        "en": "Failed to load: {error}",
    },
    "empty": {
        "ko": "리소스가 없습니다",
        "en": "No resources",
    },
    "no_match": {
        "ko": "필터와 일치하는 리소스가 없습니다",
        "en": "No resources match the filter",
    },
    "metrics_loading": {
        "ko": "메트릭 조회 중...",
        "en": "Loading metrics...",
    },
    "read_only_banner": {
        "ko": "읽기 전용 모드: 변경 액션이 비활성화됩니다",
        "en": "Read-only mode: mutating actions are disabled",
    },
    # =========================================================================
    # Prompt / Help
    # =========================================================================
    "prompt": {
        "ko": "키 또는 명령",
        "en": "Key or command",
    },
    "help_keys": {
        "ko": "j/k 이동 · enter 상세 · a 액션 · m 마크 · M 메트릭 · tab 탭 · N 다음 페이지 · /텍스트 필터 · :명령 · q 뒤로",
        "en": "j/k move · enter detail · a actions · m mark · M metrics · tab tabs · N next page · /text filter · :command · q back",
    },
    "press_any_key": {
        "ko": "아무 키나 누르면 돌아갑니다...",
        "en": "Press any key to return...",
    },
    # =========================================================================
    # Commands
    # =========================================================================
    "unknown_target": {
        "ko": "알 수 없는 대상: {target}",
        "en": "Unknown target: {target}",
    },
    "did_you_mean": {
        "ko": "혹시 이것을 찾으셨나요? {candidates}",
        "en": "Did you mean: {candidates}",
    },
    "suggestions": {
        "ko": "후보: {candidates}",
        "en": "Candidates: {candidates}",
    },
    "types_title": {
        "ko": "리소스 타입",
        "en": "Resource Types",
    },
    "col_target": {
        "ko": "대상",
        "en": "Target",
    },
    "col_service": {
        "ko": "서비스",
        "en": "Service",
    },
    "col_aliases": {
        "ko": "별칭",
        "en": "Aliases",
    },
    "diff_title": {
        "ko": "비교: {left} ↔ {right}",
        "en": "Diff: {left} ↔ {right}",
    },
}
