"""
core/action/registry.py - 액션/실행기 레지스트리

(domain, kind)별 액션 목록과 API 실행기를 보관합니다.
리소스 타입 레지스트리와 같이 CLI에서 생성하여 주입합니다.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from core.registry.lock import ReadWriteLock

from .types import Action, ActionResult

if TYPE_CHECKING:
    from core.context import FetchContext

logger = logging.getLogger(__name__)

# (ctx, action, resource) -> ActionResult
ActionExecutor = Callable[["FetchContext", Action, Any], ActionResult]


class ActionRegistry:
    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._actions: dict[str, list[Action]] = {}
        self._executors: dict[str, ActionExecutor] = {}

    @staticmethod
    def _key(domain: str, kind: str) -> str:
        return f"{domain}/{kind}"

    def register(self, domain: str, kind: str, actions: list[Action]) -> None:
        """액션 목록 등록 (같은 타입은 교체)"""
        with self._lock.write():
            self._actions[self._key(domain, kind)] = list(actions)

    def get(self, domain: str, kind: str) -> list[Action]:
        with self._lock.read():
            return list(self._actions.get(self._key(domain, kind), []))

    def register_executor(self, domain: str, kind: str, executor: ActionExecutor) -> None:
        with self._lock.write():
            self._executors[self._key(domain, kind)] = executor
        logger.debug(f"실행기 등록: {domain}/{kind}")

    def get_executor(self, domain: str, kind: str) -> ActionExecutor | None:
        with self._lock.read():
            return self._executors.get(self._key(domain, kind))
