"""
plugins/ec2/instances.py - EC2 인스턴스

목록(페이지 단위), 단건 조회, VPC/보안 그룹/IAM 역할 네비게이션,
CPU 메트릭 컬럼, 시작/중지/재부팅/종료/SSM 세션 액션을 제공합니다.

플러그인 규약:
    - register(registry, actions): 필수. fetcher/formatter/액션 등록.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from core.action.types import Action, ActionResult, ActionType, ConfirmLevel
from core.aws.arn import extract_resource_name
from core.aws.client import client_for
from core.aws.paging import call_api, page_params
from core.exceptions import FetchError, InvalidResourceTypeError, UnknownOperationError
from core.metrics.types import MetricSpec
from core.resource.capabilities import BaseFormatter, Column, Navigation
from core.resource.format import EMPTY, age_column, or_empty, tags_column
from core.resource.types import BaseResource, tags_from_list

if TYPE_CHECKING:
    from core.action.registry import ActionRegistry
    from core.context import FetchContext
    from core.registry import Registry

logger = logging.getLogger(__name__)

DOMAIN = "ec2"
KIND = "instances"

# DescribeInstances MaxResults 허용 범위
MIN_PAGE_SIZE = 5
MAX_PAGE_SIZE = 1000


@dataclass(frozen=True)
class Instance(BaseResource):
    """EC2 인스턴스 (raw = DescribeInstances Instance 항목)"""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Instance:
        tags = tags_from_list(data.get("Tags"))
        instance_id = data["InstanceId"]
        return cls(id=instance_id, name=tags.get("Name", ""), tags=tags, raw=data)

    @property
    def state(self) -> str:
        return self.raw.get("State", {}).get("Name", "")

    @property
    def instance_type(self) -> str:
        return self.raw.get("InstanceType", "")

    @property
    def vpc_id(self) -> str:
        return self.raw.get("VpcId", "")

    @property
    def subnet_id(self) -> str:
        return self.raw.get("SubnetId", "")

    @property
    def availability_zone(self) -> str:
        return self.raw.get("Placement", {}).get("AvailabilityZone", "")

    @property
    def created_at(self) -> datetime | None:
        return self.raw.get("LaunchTime")

    @property
    def security_group_ids(self) -> list[str]:
        return [g["GroupId"] for g in self.raw.get("SecurityGroups", []) if "GroupId" in g]

    @property
    def role_name(self) -> str:
        """인스턴스 프로파일 이름 (역할 이름과 같은 경우가 대부분)"""
        arn = self.raw.get("IamInstanceProfile", {}).get("Arn", "")
        return extract_resource_name(arn) if arn else ""

    def private_ip(self) -> str:
        return self.raw.get("PrivateIpAddress", "")

    def public_ip(self) -> str:
        return self.raw.get("PublicIpAddress", "")

    def field_value(self, name: str) -> str | None:
        if name == "RoleName":
            return self.role_name
        return None


# =============================================================================
# Fetcher
# =============================================================================


class InstanceFetcher:
    """DescribeInstances 페이지 조회

    ctx 필터 VpcId가 있으면 서버 측 vpc-id 필터로 전달합니다.
    """

    def __init__(self, ctx: FetchContext):
        self.ctx = ctx

    def _filters(self, ctx: FetchContext) -> list[dict[str, Any]]:
        vpc_id = ctx.get_filter("VpcId")
        return [{"Name": "vpc-id", "Values": [vpc_id]}] if vpc_id else []

    def list_page(self, ctx: FetchContext, page_size: int, token: str) -> tuple[list[Instance], str]:
        ec2 = client_for(ctx, "ec2")
        params = page_params(token, page_size, low=MIN_PAGE_SIZE, high=MAX_PAGE_SIZE)
        filters = self._filters(ctx)
        if filters:
            params["Filters"] = filters
        resp = call_api(DOMAIN, KIND, "DescribeInstances", ec2.describe_instances, **params)

        instances = [
            Instance.from_api(item)
            for reservation in resp.get("Reservations", [])
            for item in reservation.get("Instances", [])
        ]
        return instances, resp.get("NextToken", "")

    def list_resources(self, ctx: FetchContext) -> list[Instance]:
        instances, _ = self.list_page(ctx, MAX_PAGE_SIZE, "")
        return instances

    def get(self, ctx: FetchContext, resource_id: str) -> Instance:
        ec2 = client_for(ctx, "ec2")
        resp = call_api(DOMAIN, KIND, "DescribeInstances", ec2.describe_instances, InstanceIds=[resource_id])
        for reservation in resp.get("Reservations", []):
            for item in reservation.get("Instances", []):
                return Instance.from_api(item)
        raise FetchError(DOMAIN, KIND, f"인스턴스 없음: {resource_id}", error_code="InvalidInstanceID.NotFound")


# =============================================================================
# Formatter
# =============================================================================


class InstanceFormatter(BaseFormatter):
    def __init__(self) -> None:
        super().__init__(
            [
                Column("NAME", 24, lambda r: or_empty(r.name)),
                Column("ID", 20, lambda r: r.id),
                Column("STATE", 10, lambda r: or_empty(r.state)),
                Column("TYPE", 12, lambda r: or_empty(r.instance_type)),
                Column("PRIVATE IP", 15, lambda r: or_empty(r.private_ip()), priority=2),
                Column("AZ", 12, lambda r: or_empty(r.availability_zone), priority=3),
                age_column(),
                tags_column(),
            ]
        )

    def navigations(self, resource: Instance) -> list[Navigation]:
        navs = []
        if resource.vpc_id:
            navs.append(Navigation("v", "VPC", "vpc", "vpcs", "VpcId", resource.vpc_id))
            navs.append(Navigation("g", "Security Groups", "ec2", "security-groups", "VpcId", resource.vpc_id))
        if resource.subnet_id:
            navs.append(Navigation("u", "Subnet", "vpc", "subnets", "SubnetId", resource.subnet_id))
        if resource.role_name:
            navs.append(Navigation("r", "IAM Role", "iam", "roles", "RoleName", resource.role_name))
        return navs

    def metric_spec(self) -> MetricSpec:
        return MetricSpec("AWS/EC2", "CPUUtilization", "InstanceId", "Average", "CPU(15m)", "%")

    def render_detail(self, resource: Any) -> str:
        detail = super().render_detail(resource)
        groups = ", ".join(resource.security_group_ids) or EMPTY
        return f"{detail}\n\nVPC     {or_empty(resource.vpc_id)}\nSubnet  {or_empty(resource.subnet_id)}\nSGs     {groups}"


# =============================================================================
# 액션
# =============================================================================

_OPERATIONS = {
    "StartInstances": ("start_instances", "시작 요청 완료"),
    "StopInstances": ("stop_instances", "중지 요청 완료"),
    "RebootInstances": ("reboot_instances", "재부팅 요청 완료"),
    "TerminateInstances": ("terminate_instances", "종료 요청 완료"),
}

ACTIONS = [
    Action(
        "Start",
        "R",
        ActionType.API,
        operation="StartInstances",
        confirm=ConfirmLevel.SIMPLE,
        filter=lambda r: r.state == "stopped",
    ),
    Action(
        "Stop",
        "S",
        ActionType.API,
        operation="StopInstances",
        confirm=ConfirmLevel.SIMPLE,
        filter=lambda r: r.state == "running",
    ),
    Action(
        "Reboot",
        "B",
        ActionType.API,
        operation="RebootInstances",
        confirm=ConfirmLevel.SIMPLE,
        filter=lambda r: r.state == "running",
    ),
    Action("Terminate", "D", ActionType.API, operation="TerminateInstances", confirm=ConfirmLevel.DANGEROUS),
    Action(
        "SSM Session",
        "x",
        ActionType.EXEC,
        command="aws ssm start-session --target ${ID}",
        filter=lambda r: r.state == "running",
    ),
]


def execute(ctx: FetchContext, action: Action, resource: Any) -> ActionResult:
    """인스턴스 API 액션 실행기"""
    if not isinstance(resource, Instance):
        raise InvalidResourceTypeError("Instance", resource)
    if action.operation not in _OPERATIONS:
        raise UnknownOperationError(action.operation)
    method, message = _OPERATIONS[action.operation]
    ec2 = client_for(ctx, "ec2")
    getattr(ec2, method)(InstanceIds=[resource.id])
    logger.info(f"{action.operation}: {resource.id}")
    return ActionResult.ok(f"{resource.name or resource.id}: {message}")


def register(registry: Registry, actions: ActionRegistry) -> None:
    registry.register(DOMAIN, KIND, InstanceFetcher, InstanceFormatter)
    actions.register(DOMAIN, KIND, ACTIONS)
    actions.register_executor(DOMAIN, KIND, execute)
