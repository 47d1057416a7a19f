"""
plugins/vpc/vpcs.py - VPC
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from core.aws.client import client_for
from core.aws.paging import call_api, page_params
from core.resource.capabilities import BaseFormatter, Column, Navigation
from core.resource.format import or_empty, tags_column
from core.resource.types import BaseResource, tags_from_list

if TYPE_CHECKING:
    from core.action.registry import ActionRegistry
    from core.context import FetchContext
    from core.registry import Registry

DOMAIN = "vpc"
KIND = "vpcs"


@dataclass(frozen=True)
class Vpc(BaseResource):
    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Vpc:
        tags = tags_from_list(data.get("Tags"))
        return cls(id=data["VpcId"], name=tags.get("Name", ""), tags=tags, raw=data)

    @property
    def cidr_block(self) -> str:
        return self.raw.get("CidrBlock", "")

    @property
    def state(self) -> str:
        return self.raw.get("State", "")

    @property
    def is_default(self) -> bool:
        return bool(self.raw.get("IsDefault"))

    def field_value(self, name: str) -> str | None:
        if name == "VpcId":
            return self.id
        return None


class VpcFetcher:
    """DescribeVpcs (ctx 필터 VpcId가 있으면 해당 VPC만)"""

    def __init__(self, ctx: FetchContext):
        self.ctx = ctx

    def list_page(self, ctx: FetchContext, page_size: int, token: str) -> tuple[list[Vpc], str]:
        ec2 = client_for(ctx, "ec2")
        params = page_params(token, page_size, low=5, high=1000)
        vpc_id = ctx.get_filter("VpcId")
        if vpc_id:
            params["Filters"] = [{"Name": "vpc-id", "Values": [vpc_id]}]
        resp = call_api(DOMAIN, KIND, "DescribeVpcs", ec2.describe_vpcs, **params)
        return [Vpc.from_api(v) for v in resp.get("Vpcs", [])], resp.get("NextToken", "")

    def list_resources(self, ctx: FetchContext) -> list[Vpc]:
        vpcs, _ = self.list_page(ctx, 1000, "")
        return vpcs


class VpcFormatter(BaseFormatter):
    def __init__(self) -> None:
        super().__init__(
            [
                Column("NAME", 24, lambda r: or_empty(r.name)),
                Column("ID", 22, lambda r: r.id),
                Column("CIDR", 18, lambda r: or_empty(r.cidr_block)),
                Column("STATE", 10, lambda r: or_empty(r.state)),
                Column("DEFAULT", 7, lambda r: "yes" if r.is_default else "no", priority=3),
                tags_column(),
            ]
        )

    def navigations(self, resource: Vpc) -> list[Navigation]:
        return [
            Navigation("s", "Subnets", "vpc", "subnets", "VpcId", resource.id),
            Navigation("i", "Instances", "ec2", "instances", "VpcId", resource.id),
            Navigation("g", "Security Groups", "ec2", "security-groups", "VpcId", resource.id),
        ]


def register(registry: Registry, actions: ActionRegistry) -> None:
    registry.register(DOMAIN, KIND, VpcFetcher, VpcFormatter)
