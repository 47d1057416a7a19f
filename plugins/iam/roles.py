"""
plugins/iam/roles.py - IAM 역할

ListRoles는 태그를 반환하지 않으므로 목록의 tags는 None(태그 정보 없음)입니다.
단건 조회(GetRole)는 태그를 포함합니다.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from core.aws.client import client_for
from core.aws.paging import call_api, page_params
from core.resource.capabilities import BaseFormatter, Column
from core.resource.format import age_column, format_age, or_empty
from core.resource.types import BaseResource, tags_from_list

if TYPE_CHECKING:
    from core.action.registry import ActionRegistry
    from core.context import FetchContext
    from core.registry import Registry

DOMAIN = "iam"
KIND = "roles"

MAX_PAGE_SIZE = 1000


@dataclass(frozen=True)
class Role(BaseResource):
    @classmethod
    def from_api(cls, data: dict[str, Any], with_tags: bool = False) -> Role:
        tags = tags_from_list(data.get("Tags")) if with_tags else None
        return cls(id=data["RoleName"], name=data["RoleName"], arn=data.get("Arn", ""), tags=tags, raw=data)

    @property
    def path(self) -> str:
        return self.raw.get("Path", "/")

    @property
    def created_at(self) -> datetime | None:
        return self.raw.get("CreateDate")

    @property
    def last_used_at(self) -> datetime | None:
        return (self.raw.get("RoleLastUsed") or {}).get("LastUsedDate")

    @property
    def is_service_linked(self) -> bool:
        return self.path.startswith("/aws-service-role/")


class RoleFetcher:
    def __init__(self, ctx: FetchContext):
        self.ctx = ctx

    def list_page(self, ctx: FetchContext, page_size: int, token: str) -> tuple[list[Role], str]:
        iam = client_for(ctx, "iam")
        params = page_params(token, page_size, token_key="Marker", size_key="MaxItems", high=MAX_PAGE_SIZE)
        resp = call_api(DOMAIN, KIND, "ListRoles", iam.list_roles, **params)
        next_token = resp.get("Marker", "") if resp.get("IsTruncated") else ""
        return [Role.from_api(r) for r in resp.get("Roles", [])], next_token

    def list_resources(self, ctx: FetchContext) -> list[Role]:
        roles, _ = self.list_page(ctx, MAX_PAGE_SIZE, "")
        return roles

    def get(self, ctx: FetchContext, resource_id: str) -> Role:
        iam = client_for(ctx, "iam")
        resp = call_api(DOMAIN, KIND, "GetRole", iam.get_role, RoleName=resource_id)
        return Role.from_api(resp["Role"], with_tags=True)


class RoleFormatter(BaseFormatter):
    def __init__(self) -> None:
        super().__init__(
            [
                Column("NAME", 40, lambda r: r.name),
                Column("PATH", 24, lambda r: r.path, priority=3),
                Column("LAST USED", 9, lambda r: format_age(r.last_used_at), priority=2),
                Column("DESCRIPTION", 30, lambda r: or_empty(r.raw.get("Description")), priority=4),
                age_column(),
            ]
        )


def register(registry: Registry, actions: ActionRegistry) -> None:
    registry.register(DOMAIN, KIND, RoleFetcher, RoleFormatter)
