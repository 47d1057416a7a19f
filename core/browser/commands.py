"""
core/browser/commands.py - 명령 해석 및 자동완성

명령 문법:
    sort                 정렬 해제
    sort <col>           오름차순 정렬
    sort asc|desc <col>  방향 지정 정렬
    tag                  태그 필터 해제
    tag <key|key=value|key~sub>
    diff [<name> [<name>]] 두 리소스 비교 (인자 없으면 마크한 리소스와 현재 선택)
    <service>[/<resource>] 또는 별칭  화면 이동

자동완성은 접두사 일치, "did you mean" 제안은 rapidfuzz 유사도를 사용합니다.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from rapidfuzz import fuzz

from .messages import DiffRequested, SortRequested, TagFilterRequested

if TYPE_CHECKING:
    from core.registry import Registry

FUZZY_MIN_SCORE = 60
BROWSER_COMMANDS = ("sort", "tag", "diff")


@dataclass
class GotoCommand:
    """화면 이동 (레지스트리로 해석되지 않은 원문)"""

    target: str


def parse_sort_command(args: str) -> SortRequested:
    parts = args.split(None, 1)
    if not parts:
        return SortRequested()
    direction = parts[0].lower()
    if direction in ("asc", "desc") and len(parts) == 2:
        return SortRequested(parts[1].strip(), ascending=direction == "asc")
    return SortRequested(args.strip(), ascending=True)


def parse_command(text: str) -> Any:
    """명령 문자열 해석

    Returns:
        SortRequested / TagFilterRequested / DiffRequested / GotoCommand, 빈 입력이면 None
    """
    text = text.strip()
    if not text:
        return None

    name, _, args = text.partition(" ")
    args = args.strip()

    if name == "sort":
        return parse_sort_command(args)
    if name == "tag":
        return TagFilterRequested(args)
    if name == "diff":
        parts = args.split()
        return DiffRequested(parts[0] if parts else "", parts[1] if len(parts) > 1 else "")
    return GotoCommand(text)


# =============================================================================
# 자동완성
# =============================================================================


def target_names(registry: Registry) -> list[str]:
    """이동 가능한 이름 (서비스, service/resource, 별칭)"""
    names: list[str] = []
    for domain in registry.list_domains():
        names.append(domain)
        names.extend(f"{domain}/{kind}" for kind in registry.list_kinds(domain))
    names.extend(registry.aliases())
    return list(dict.fromkeys(names))


def tag_completions(
    prefix: str,
    tag_keys: list[str],
    tag_values: Callable[[str], list[str]],
) -> list[str]:
    """tag 명령 인자 자동완성 (키, 또는 =/~ 뒤의 값)"""
    for op in ("=", "~"):
        if op in prefix:
            key, _, partial = prefix.partition(op)
            return [f"tag {key}{op}{v}" for v in tag_values(key) if v.lower().startswith(partial.lower())]
    return [f"tag {k}" for k in tag_keys if k.lower().startswith(prefix.lower())]


def suggestions(
    registry: Registry,
    text: str,
    tag_keys: list[str] | None = None,
    tag_values: Callable[[str], list[str]] | None = None,
) -> list[str]:
    """입력 중인 명령의 접두사 자동완성 후보"""
    lowered = text.lower()

    if lowered.startswith("tag "):
        return tag_completions(text[4:], tag_keys or [], tag_values or (lambda _k: []))

    candidates = [c for c in BROWSER_COMMANDS if c.startswith(lowered)]
    candidates.extend(n for n in target_names(registry) if n.startswith(lowered))
    return candidates


def did_you_mean(registry: Registry, text: str, limit: int = 3) -> list[str]:
    """해석 실패한 대상과 비슷한 이름 (유사도 내림차순)"""
    query = text.strip().lower()
    if not query:
        return []

    scored = []
    for name in target_names(registry):
        score = fuzz.ratio(query, name)
        if score >= FUZZY_MIN_SCORE:
            scored.append((score, name))

    scored.sort(key=lambda item: (-item[0], item[1]))
    return [name for _, name in scored[:limit]]
