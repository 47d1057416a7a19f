"""
cli/i18n/__init__.py - Internationalization (i18n) Module

Korean (ko) is the default language, with English (en) as an option.
The language is selected once by `ab --lang` and stored in a context variable.

Usage:
    from cli.i18n import t, set_lang

    t("browser.loading")                       # "불러오는 중..."
    t("cli.invalid_region", region="moon-1")   # "잘못된 리전 형식: moon-1"

    set_lang("en")
    t("browser.loading")                       # "Loading..."
"""

from __future__ import annotations

import contextlib
from contextvars import ContextVar
from typing import Any

_current_lang: ContextVar[str] = ContextVar("lang", default="ko")

SUPPORTED_LANGS = ("ko", "en")
DEFAULT_LANG = "ko"


def get_lang() -> str:
    return _current_lang.get()


def set_lang(lang: str) -> None:
    """현재 언어 설정 (지원하지 않는 언어는 기본값)"""
    if lang not in SUPPORTED_LANGS:
        lang = DEFAULT_LANG
    _current_lang.set(lang)


def t(key: str, lang: str | None = None, **kwargs: Any) -> str:
    """메시지 키 번역

    Args:
        key: "namespace.key" 형식
        lang: 언어 오버라이드 (없으면 현재 언어)
        **kwargs: 포맷 인자

    Returns:
        번역된 문자열. 키가 없으면 키 자체, 영어가 없으면 한국어
    """
    from cli.i18n.messages import MESSAGES

    lang = lang or get_lang()
    if lang not in SUPPORTED_LANGS:
        lang = DEFAULT_LANG

    entry = MESSAGES.get(key)
    if entry is None:
        return key

    text = entry.get(lang) or entry.get(DEFAULT_LANG, key)
    if kwargs:
        with contextlib.suppress(KeyError, ValueError):
            text = text.format(**kwargs)
    return text


__all__ = [
    "t",
    "get_lang",
    "set_lang",
    "SUPPORTED_LANGS",
    "DEFAULT_LANG",
]
