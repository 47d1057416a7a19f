"""
plugins/ec2/security_groups.py - 보안 그룹

인스턴스 화면의 'g' 네비게이션 대상입니다 (VpcId 필터).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from core.aws.client import client_for
from core.aws.paging import call_api, page_params
from core.resource.capabilities import BaseFormatter, Column
from core.resource.format import or_empty, tags_column
from core.resource.types import BaseResource, tags_from_list

if TYPE_CHECKING:
    from core.action.registry import ActionRegistry
    from core.context import FetchContext
    from core.registry import Registry

DOMAIN = "ec2"
KIND = "security-groups"


@dataclass(frozen=True)
class SecurityGroup(BaseResource):
    @classmethod
    def from_api(cls, data: dict[str, Any]) -> SecurityGroup:
        return cls(
            id=data["GroupId"],
            name=data.get("GroupName", ""),
            arn=data.get("SecurityGroupArn", ""),
            tags=tags_from_list(data.get("Tags")),
            raw=data,
        )

    @property
    def vpc_id(self) -> str:
        return self.raw.get("VpcId", "")

    @property
    def description(self) -> str:
        return self.raw.get("Description", "")

    @property
    def inbound_rules(self) -> int:
        return len(self.raw.get("IpPermissions", []))

    @property
    def outbound_rules(self) -> int:
        return len(self.raw.get("IpPermissionsEgress", []))


class SecurityGroupFetcher:
    def __init__(self, ctx: FetchContext):
        self.ctx = ctx

    def list_page(self, ctx: FetchContext, page_size: int, token: str) -> tuple[list[SecurityGroup], str]:
        ec2 = client_for(ctx, "ec2")
        params = page_params(token, page_size, low=5, high=1000)
        vpc_id = ctx.get_filter("VpcId")
        if vpc_id:
            params["Filters"] = [{"Name": "vpc-id", "Values": [vpc_id]}]
        resp = call_api(DOMAIN, KIND, "DescribeSecurityGroups", ec2.describe_security_groups, **params)
        groups = [SecurityGroup.from_api(g) for g in resp.get("SecurityGroups", [])]
        return groups, resp.get("NextToken", "")

    def list_resources(self, ctx: FetchContext) -> list[SecurityGroup]:
        groups, _ = self.list_page(ctx, 1000, "")
        return groups


class SecurityGroupFormatter(BaseFormatter):
    def __init__(self) -> None:
        super().__init__(
            [
                Column("NAME", 28, lambda r: or_empty(r.name)),
                Column("ID", 22, lambda r: r.id),
                Column("VPC", 22, lambda r: or_empty(r.vpc_id)),
                Column("IN", 4, lambda r: str(r.inbound_rules)),
                Column("OUT", 4, lambda r: str(r.outbound_rules)),
                Column("DESCRIPTION", 30, lambda r: or_empty(r.description), priority=4),
                tags_column(),
            ]
        )


def register(registry: Registry, actions: ActionRegistry) -> None:
    registry.register(DOMAIN, KIND, SecurityGroupFetcher, SecurityGroupFormatter)
