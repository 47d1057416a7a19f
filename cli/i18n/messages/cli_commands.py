"""
cli/i18n/messages/cli_commands.py - CLI Command Messages

Contains translations for CLI options, validation and headless output.
"""

from __future__ import annotations

CLI_MESSAGES = {
    # =========================================================================
    # Help
    # =========================================================================
    "help_intro": {
        "ko": "터미널에서 AWS 리소스를 탐색하고 관리합니다.",
        "en": "Browse and manage AWS resources from the terminal.",
    },
    "help_basic_usage": {
        "ko": "[기본 사용법]",
        "en": "[Basic Usage]",
    },
    "help_browse": {
        "ko": "대화형 브라우저",
        "en": "Interactive browser",
    },
    "help_browse_target": {
        "ko": "특정 리소스 타입으로 시작",
        "en": "Start at a resource type",
    },
    "help_list_types": {
        "ko": "리소스 타입 목록",
        "en": "List resource types",
    },
    "help_get": {
        "ko": "리소스 목록 출력 (비대화형)",
        "en": "Print resources (non-interactive)",
    },
    # =========================================================================
    # Validation / Startup
    # =========================================================================
    "invalid_profile": {
        "ko": "잘못된 프로파일 이름: {name}",
        "en": "Invalid profile name: {name}",
    },
    "invalid_region": {
        "ko": "잘못된 리전 형식: {region}",
        "en": "Invalid region format: {region}",
    },
    "profile_env_conflict": {
        "ko": "--profile 과 --env 는 함께 사용할 수 없습니다",
        "en": "--profile and --env cannot be used together",
    },
    "account_refresh_failed": {
        "ko": "계정 ID 조회 실패: {error}",
        "en": "Failed to resolve account ID: {error}",
    },
    "target_not_found": {
        "ko": "알 수 없는 리소스 타입: {target}",
        "en": "Unknown resource type: {target}",
    },
    "fetch_failed": {
        "ko": "조회 실패: {error}",
        "en": "Fetch failed: {error}",
    },
    "items_count": {
        "ko": "{count}개 항목",
        "en": "{count} items",
    },
}
