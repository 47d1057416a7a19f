"""
plugins/vpc/subnets.py - 서브넷

VpcId 필터는 서버 측 필터로, SubnetId 필터는 필드 필터(raw의 SubnetId)로 처리됩니다.
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

DOMAIN = "vpc"
KIND = "subnets"


@dataclass(frozen=True)
class Subnet(BaseResource):
    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Subnet:
        tags = tags_from_list(data.get("Tags"))
        return cls(
            id=data["SubnetId"],
            name=tags.get("Name", ""),
            arn=data.get("SubnetArn", ""),
            tags=tags,
            raw=data,
        )

    @property
    def vpc_id(self) -> str:
        return self.raw.get("VpcId", "")

    @property
    def cidr_block(self) -> str:
        return self.raw.get("CidrBlock", "")

    @property
    def availability_zone(self) -> str:
        return self.raw.get("AvailabilityZone", "")

    @property
    def available_ips(self) -> int:
        return int(self.raw.get("AvailableIpAddressCount", 0))


class SubnetFetcher:
    def __init__(self, ctx: FetchContext):
        self.ctx = ctx

    def list_page(self, ctx: FetchContext, page_size: int, token: str) -> tuple[list[Subnet], str]:
        ec2 = client_for(ctx, "ec2")
        params = page_params(token, page_size, low=5, high=1000)
        vpc_id = ctx.get_filter("VpcId")
        if vpc_id:
            params["Filters"] = [{"Name": "vpc-id", "Values": [vpc_id]}]
        resp = call_api(DOMAIN, KIND, "DescribeSubnets", ec2.describe_subnets, **params)
        return [Subnet.from_api(s) for s in resp.get("Subnets", [])], resp.get("NextToken", "")

    def list_resources(self, ctx: FetchContext) -> list[Subnet]:
        subnets, _ = self.list_page(ctx, 1000, "")
        return subnets


class SubnetFormatter(BaseFormatter):
    def __init__(self) -> None:
        super().__init__(
            [
                Column("NAME", 24, lambda r: or_empty(r.name)),
                Column("ID", 24, lambda r: r.id),
                Column("VPC", 22, lambda r: or_empty(r.vpc_id)),
                Column("CIDR", 18, lambda r: or_empty(r.cidr_block)),
                Column("AZ", 12, lambda r: or_empty(r.availability_zone), priority=3),
                Column("FREE IPS", 8, lambda r: str(r.available_ips), priority=2),
                tags_column(),
            ]
        )


def register(registry: Registry, actions: ActionRegistry) -> None:
    registry.register(DOMAIN, KIND, SubnetFetcher, SubnetFormatter)
