"""
core/registry - 리소스 타입 레지스트리
"""

from .lock import ReadWriteLock
from .registry import Registry, RegistryEntry
from .wrapper import strip_region_prefix, wrap_regional

__all__ = [
    "ReadWriteLock",
    "Registry",
    "RegistryEntry",
    "strip_region_prefix",
    "wrap_regional",
]
