"""
cli/i18n/messages/__init__.py - Message Registry

Aggregates all message dictionaries from sub-modules.
Messages are organized by namespace (cli, browser, action)

Structure:
    MESSAGES = {
        "cli.invalid_region": {"ko": "...", "en": "..."},
        "browser.loading": {"ko": "...", "en": "..."},
        "action.confirm_typed": {"ko": "...", "en": "..."},
        ...
    }
"""

from __future__ import annotations

from typing import TypedDict


class MessageDict(TypedDict):
    """Message dictionary type."""

    ko: str
    en: str


# Master message registry
MESSAGES: dict[str, MessageDict] = {}


def register_messages(namespace: str, messages: dict[str, MessageDict]) -> None:
    """Register messages for a namespace.

    Args:
        namespace: Namespace prefix (e.g., "cli", "browser")
        messages: Dictionary of message key -> translations
    """
    for key, value in messages.items():
        MESSAGES[f"{namespace}.{key}"] = value


# These imports must come after register_messages is defined
from cli.i18n.messages.action import ACTION_MESSAGES  # noqa: E402
from cli.i18n.messages.browser import BROWSER_MESSAGES  # noqa: E402
from cli.i18n.messages.cli_commands import CLI_MESSAGES  # noqa: E402

register_messages("cli", CLI_MESSAGES)
register_messages("browser", BROWSER_MESSAGES)
register_messages("action", ACTION_MESSAGES)

__all__ = ["MESSAGES", "register_messages", "MessageDict"]
