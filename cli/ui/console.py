"""
cli/ui/console.py - Rich 콘솔 유틸리티

일관된 콘솔 출력과 로깅 설정을 위한 함수들
"""

from __future__ import annotations

import logging
import platform
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from cli.i18n import t

# botocore 노이즈 로그 제한
for _name in ("botocore.httpchecksum", "botocore.credentials", "botocore.loaders", "botocore.session"):
    logging.getLogger(_name).setLevel(logging.WARNING)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_console() -> Console:
    """Rich Console 인스턴스를 생성하고 반환합니다."""
    is_windows = platform.system().lower() == "windows"

    return Console(
        color_system="auto",
        highlight=False,
        soft_wrap=False,
        markup=True,
        emoji=not is_windows,
    )


# 전역 콘솔 인스턴스
console = get_console()


def configure_logging(log_file: str | None = None, verbose: bool = False) -> None:
    """루트 로거 설정

    로그 파일이 없으면 WARNING 이상만 콘솔(RichHandler)로 출력하여
    브라우저 화면과 섞이지 않도록 합니다.

    Args:
        log_file: 로그 파일 경로 (지정 시 DEBUG 이상 파일 기록)
        verbose: 콘솔에 INFO 이상 출력
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    console_handler = RichHandler(console=console, rich_tracebacks=True, show_path=False)
    console_handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    console_handler.setLevel(logging.INFO if verbose else logging.WARNING)
    root.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        file_handler.setLevel(logging.DEBUG)
        root.addHandler(file_handler)
        root.setLevel(logging.DEBUG)
    else:
        root.setLevel(logging.INFO if verbose else logging.WARNING)


# =============================================================================
# 표준 출력 스타일
# =============================================================================

SYMBOL_SUCCESS = "✓"
SYMBOL_ERROR = "✗"
SYMBOL_WARNING = "!"
SYMBOL_INFO = "•"


def print_success(message: str) -> None:
    console.print(f"[green]{SYMBOL_SUCCESS} {message}[/green]")


def print_error(message: str) -> None:
    console.print(f"[red]{SYMBOL_ERROR} {message}[/red]")


def print_warning(message: str) -> None:
    console.print(f"[yellow]{SYMBOL_WARNING} {message}[/yellow]")


def print_info(message: str) -> None:
    console.print(f"[blue]{SYMBOL_INFO} {message}[/blue]")


def print_panel(title: str, body: str, style: str = "blue") -> None:
    """본문을 패널로 출력 (markup 해석 안 함)

    Args:
        title: 패널 제목
        body: 본문 (리소스 상세 등 임의 문자열)
        style: 테두리 색
    """
    from rich.text import Text

    console.print(Panel(Text(body), title=title, border_style=style, padding=(0, 1)))


def print_table(title: str, columns: list[str], rows: list[list]) -> None:
    """테이블 형식으로 데이터를 출력합니다.

    Args:
        title: 테이블 제목
        columns: 컬럼 헤더 리스트
        rows: 행 데이터 리스트
    """
    table = Table(title=title, show_header=True, header_style="bold magenta")
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*[str(cell) for cell in row])
    console.print(table)


# =============================================================================
# 키 입력 대기
# =============================================================================


def wait_for_any_key(prompt: str | None = None) -> None:
    """아무 키나 누르면 진행 (Enter 불필요)

    크로스 플랫폼 지원:
    - Windows: msvcrt.getwch() 사용
    - Unix/Mac: termios로 터미널 raw 모드 설정 후 단일 문자 읽기

    터미널이 아니면 한 줄 입력으로 대체합니다.
    """
    if prompt is None:
        prompt = f"[dim]{t('browser.press_any_key')}[/dim]"
    console.print(prompt, end="")

    if not sys.stdin.isatty():
        console.input("")
        return

    if sys.platform == "win32":
        import msvcrt

        msvcrt.getwch()
    else:
        import termios
        import tty

        fd = sys.stdin.fileno()
        old_settings = termios.tcgetattr(fd)
        try:
            tty.setraw(fd)
            sys.stdin.read(1)
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)

    console.print()
