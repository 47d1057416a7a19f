"""
core/registry/registry.py - 리소스 타입 레지스트리

(domain, kind) -> (fetcher 팩토리, formatter 팩토리) 카탈로그입니다.
CLI에서 명시적으로 생성하여 각 컴포넌트에 주입하며, 읽기/쓰기 락으로 보호합니다.

조회 규칙:
- get(): 없으면 ResourceTypeNotFoundError (None을 반환하지 않음)
- resolve(): 별칭 -> 정확히 일치 -> 접두사 일치 순서
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from core.exceptions import ResourceTypeNotFoundError

from .lock import ReadWriteLock
from .wrapper import wrap_regional

if TYPE_CHECKING:
    from core.context import FetchContext

logger = logging.getLogger(__name__)

FetcherFactory = Callable[["FetchContext"], Any]
FormatterFactory = Callable[[], Any]


@dataclass(frozen=True)
class RegistryEntry:
    """등록된 리소스 타입

    Attributes:
        domain: 서비스 도메인 (예: ec2)
        kind: 리소스 종류 (예: instances)
        fetcher_factory: ctx -> DataFetcher
        formatter_factory: () -> DisplayFormatter
    """

    domain: str
    kind: str
    fetcher_factory: FetcherFactory
    formatter_factory: FormatterFactory

    @property
    def key(self) -> str:
        return f"{self.domain}/{self.kind}"


class Registry:
    """리소스 타입 레지스트리 (스레드 세이프)"""

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        # dict는 삽입 순서를 유지하므로 등록 순서 = 표시 순서
        self._entries: dict[str, RegistryEntry] = {}
        self._aliases: dict[str, tuple[str, str]] = {}
        self._display_names: dict[str, str] = {}

    @staticmethod
    def _key(domain: str, kind: str) -> str:
        return f"{domain}/{kind}"

    # -------------------------------------------------------------------------
    # 등록
    # -------------------------------------------------------------------------

    def register(
        self,
        domain: str,
        kind: str,
        fetcher_factory: FetcherFactory,
        formatter_factory: FormatterFactory,
    ) -> None:
        """리소스 타입 등록 (같은 키는 나중 등록이 우선)"""
        entry = RegistryEntry(domain, kind, fetcher_factory, formatter_factory)
        with self._lock.write():
            replaced = entry.key in self._entries
            self._entries[entry.key] = entry
        if replaced:
            logger.debug(f"리소스 타입 재등록: {entry.key}")

    def register_alias(self, alias: str, domain: str, kind: str = "") -> None:
        """별칭 등록 (kind가 비어 있으면 도메인의 첫 번째 kind로 해석)"""
        with self._lock.write():
            self._aliases[alias] = (domain, kind)

    def set_display_name(self, domain: str, display_name: str) -> None:
        with self._lock.write():
            self._display_names[domain] = display_name

    # -------------------------------------------------------------------------
    # 조회
    # -------------------------------------------------------------------------

    def get(self, domain: str, kind: str) -> RegistryEntry:
        with self._lock.read():
            entry = self._entries.get(self._key(domain, kind))
        if entry is None:
            raise ResourceTypeNotFoundError(domain, kind)
        return entry

    def contains(self, domain: str, kind: str) -> bool:
        with self._lock.read():
            return self._key(domain, kind) in self._entries

    def get_fetcher(self, ctx: FetchContext, domain: str, kind: str) -> Any:
        """fetcher 생성 (컨텍스트에 리전 오버라이드가 있으면 리전 래핑)"""
        entry = self.get(domain, kind)
        return wrap_regional(ctx, entry.fetcher_factory(ctx))

    def get_formatter(self, domain: str, kind: str) -> Any:
        return self.get(domain, kind).formatter_factory()

    def list_domains(self) -> list[str]:
        with self._lock.read():
            return list(dict.fromkeys(e.domain for e in self._entries.values()))

    def list_kinds(self, domain: str) -> list[str]:
        with self._lock.read():
            return [e.kind for e in self._entries.values() if e.domain == domain]

    def list_types(self) -> list[str]:
        """등록된 모든 "domain/kind" (등록 순서)"""
        with self._lock.read():
            return list(self._entries)

    def aliases(self) -> dict[str, tuple[str, str]]:
        with self._lock.read():
            return dict(self._aliases)

    def display_name(self, domain: str) -> str:
        with self._lock.read():
            return self._display_names.get(domain, domain)

    def resolve_alias(self, name: str) -> tuple[str, str] | None:
        with self._lock.read():
            return self._aliases.get(name)

    # -------------------------------------------------------------------------
    # 이름 해석
    # -------------------------------------------------------------------------

    def resolve(self, text: str) -> tuple[str, str]:
        """사용자 입력을 (domain, kind)로 해석

        순서: "domain/kind" 분리 -> 별칭 -> 정확히 일치 -> 접두사 일치.
        kind가 없으면 도메인의 첫 번째 kind를 사용합니다.

        Raises:
            ResourceTypeNotFoundError: 해석할 수 없는 경우
        """
        text = text.strip()
        domain, _, kind = text.partition("/")

        alias = self.resolve_alias(domain)
        if alias is not None:
            domain = alias[0]
            if alias[1] and not kind:
                kind = alias[1]

        if not kind:
            kinds = self.list_kinds(domain)
            if kinds:
                kind = kinds[0]

        if domain and kind and self.contains(domain, kind):
            return domain, kind

        if domain:
            for candidate in self.list_domains():
                if not candidate.startswith(domain):
                    continue
                kinds = self.list_kinds(candidate)
                if not kind:
                    return candidate, kinds[0]
                for k in kinds:
                    if k.startswith(kind):
                        return candidate, k
                break

        raise ResourceTypeNotFoundError(domain, kind)
