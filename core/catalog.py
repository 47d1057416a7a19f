"""
core/catalog.py - 플러그인 카탈로그 로더

plugins/ 하위 폴더를 탐색하여 리소스 타입을 레지스트리에 등록합니다.

플러그인 규약:
    plugins/<folder>/__init__.py
        CATEGORY = {"name": "ec2", "display_name": "EC2", "aliases": [...], ...}
        RESOURCES = [{"kind": "instances", "module": "instances", "aliases": [...]}, ...]

    plugins/<folder>/<module>.py
        register(registry, actions): 필수. fetcher/formatter/액션 등록.

폴더 이름과 도메인 이름은 다를 수 있습니다 ('lambda'는 예약어이므로 폴더는 'fn').
"""

from __future__ import annotations

import importlib
import logging
import pkgutil
from types import ModuleType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.action.registry import ActionRegistry
    from core.registry import Registry

logger = logging.getLogger(__name__)

PLUGIN_PACKAGE = "plugins"


def discover_plugins(package: str = PLUGIN_PACKAGE) -> list[ModuleType]:
    """CATEGORY와 RESOURCES를 정의한 플러그인 패키지 목록 (폴더 이름순)"""
    root = importlib.import_module(package)
    found = []
    for info in pkgutil.iter_modules(root.__path__):
        if not info.ispkg or info.name.startswith("_"):
            continue
        module = importlib.import_module(f"{package}.{info.name}")
        if hasattr(module, "CATEGORY") and hasattr(module, "RESOURCES"):
            found.append(module)
        else:
            logger.debug(f"플러그인 규약 미충족, 건너뜀: {info.name}")
    return found


def load_catalog(registry: Registry, actions: ActionRegistry, package: str = PLUGIN_PACKAGE) -> int:
    """플러그인을 레지스트리에 등록

    Returns:
        등록한 리소스 타입 수
    """
    count = 0
    for plugin in discover_plugins(package):
        category = plugin.CATEGORY
        domain = category["name"]
        registry.set_display_name(domain, category.get("display_name", domain))

        for spec in plugin.RESOURCES:
            module = importlib.import_module(f"{plugin.__name__}.{spec['module']}")
            module.register(registry, actions)
            count += 1
            for alias in spec.get("aliases", []):
                registry.register_alias(alias, domain, spec["kind"])

        for alias in category.get("aliases", []):
            registry.register_alias(alias, domain)

    logger.debug(f"카탈로그 로드 완료: {count}개 리소스 타입")
    return count
