# cli/ui - TUI 컴포넌트 (questionary, rich)
"""
TUI 컴포넌트 모듈

리소스 브라우저 셸, 액션 메뉴, 콘솔 출력
"""

from .console import (
    SYMBOL_ERROR,
    SYMBOL_INFO,
    SYMBOL_SUCCESS,
    SYMBOL_WARNING,
    configure_logging,
    console,
    get_console,
    print_error,
    print_info,
    print_panel,
    print_success,
    print_table,
    print_warning,
    wait_for_any_key,
)

__all__ = [
    "SYMBOL_ERROR",
    "SYMBOL_INFO",
    "SYMBOL_SUCCESS",
    "SYMBOL_WARNING",
    "configure_logging",
    "console",
    "get_console",
    "print_error",
    "print_info",
    "print_panel",
    "print_success",
    "print_table",
    "print_warning",
    "wait_for_any_key",
]
