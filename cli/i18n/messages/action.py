"""
cli/i18n/messages/action.py - Action Menu Messages
"""

from __future__ import annotations

ACTION_MESSAGES = {
    "menu_title": {
        "ko": "액션 - {name}",
        "en": "Actions - {name}",
    },
    "no_actions": {
        "ko": "실행할 수 있는 액션이 없습니다",
        "en": "No actions available",
    },
    "cancel": {
        "ko": "취소",
        "en": "Cancel",
    },
    "confirm_simple": {
        "ko": "{action} 을(를) {name} 에 실행하시겠습니까?",
        "en": "Run {action} on {name}?",
    },
    "confirm_typed": {
        "ko": "위험한 작업입니다. 계속하려면 '{suffix}' 를 입력하세요",
        "en": "Dangerous action. Type '{suffix}' to continue",
    },
    "confirm_mismatch": {
        "ko": "입력이 일치하지 않습니다",
        "en": "Input does not match",
    },
    "cancelled": {
        "ko": "취소됨",
        "en": "Cancelled",
    },
    "exec_start": {
        "ko": "실행: {command}",
        "en": "Running: {command}",
    },
    "succeeded": {
        "ko": "성공: {message}",
        "en": "Succeeded: {message}",
    },
    "failed": {
        "ko": "실패: {message}",
        "en": "Failed: {message}",
    },
}
