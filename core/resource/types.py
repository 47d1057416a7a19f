"""
core/resource/types.py - 리소스 기본 타입

모든 리소스 종류가 공유하는 최소 계약(Resource)과 기본 구현(BaseResource),
멀티 리전 조회 시 사용하는 리전 래퍼(RegionalResource)를 정의합니다.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Resource(Protocol):
    """리소스 계약

    Attributes:
        id: 고유 식별자
        name: 표시 이름
        arn: 전역 식별자 (없으면 빈 문자열)
        tags: 태그 (None = 태그 정보 없음, {} = 태그 없음)
        raw: 프로바이더 원본 페이로드
    """

    @property
    def id(self) -> str: ...

    @property
    def name(self) -> str: ...

    @property
    def arn(self) -> str: ...

    @property
    def tags(self) -> Mapping[str, str] | None: ...

    @property
    def raw(self) -> Any: ...


@dataclass(frozen=True)
class BaseResource:
    """불변 리소스 기본 구현

    리소스 종류별 클래스는 이를 상속하여 raw에서 값을 읽는 프로퍼티를 추가합니다.
    """

    id: str
    name: str = ""
    arn: str = ""
    tags: Mapping[str, str] | None = None
    raw: Any = None

    def tag(self, key: str) -> str:
        return (self.tags or {}).get(key, "")


def tags_from_list(tag_list: list[dict[str, str]] | None, key_name: str = "Key", value_name: str = "Value") -> dict[str, str]:
    """AWS [{"Key": k, "Value": v}] 형식 태그를 dict로 변환"""
    return {t[key_name]: t.get(value_name, "") for t in tag_list or [] if key_name in t}


@dataclass(frozen=True)
class RegionalResource:
    """리전 정보를 덧붙인 리소스 래퍼

    멀티 리전 조회 결과에서 리전 간 ID 충돌을 막기 위해 id를 "region:id"로 노출합니다.
    그 외 속성과 capability 메서드는 내부 리소스에 위임합니다.
    """

    resource: Any
    region: str

    @property
    def id(self) -> str:
        return f"{self.region}:{self.resource.id}"

    @property
    def name(self) -> str:
        return self.resource.name

    @property
    def arn(self) -> str:
        return self.resource.arn

    @property
    def tags(self) -> Mapping[str, str] | None:
        return self.resource.tags

    @property
    def raw(self) -> Any:
        return self.resource.raw

    def __getattr__(self, item: str) -> Any:
        # dataclass 필드 조회 중 재귀 방지
        if item in ("resource", "region"):
            raise AttributeError(item)
        return getattr(self.resource, item)


def wrap_with_region(resource: Any, region: str) -> Any:
    if not region or isinstance(resource, RegionalResource):
        return resource
    return RegionalResource(resource, region)


def unwrap_resource(resource: Any) -> Any:
    """RegionalResource이면 내부 리소스, 아니면 그대로"""
    while isinstance(resource, RegionalResource):
        resource = resource.resource
    return resource


def get_resource_region(resource: Any) -> str:
    """RegionalResource의 리전 (래핑되지 않았으면 빈 문자열)"""
    if isinstance(resource, RegionalResource):
        return resource.region
    return ""
