"""
plugins/cloudformation/stacks.py - CloudFormation Stack

DescribeStacks는 페이지 크기를 받지 않으므로 NextToken만 전달합니다.
삭제 완료된 Stack(DELETE_COMPLETE)은 목록에서 제외됩니다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from core.action.types import Action, ActionResult, ActionType, ConfirmLevel
from core.aws.client import client_for
from core.aws.paging import call_api
from core.exceptions import FetchError, UnknownOperationError
from core.resource.capabilities import BaseFormatter, Column
from core.resource.format import age_column, or_empty
from core.resource.types import BaseResource, tags_from_list

if TYPE_CHECKING:
    from core.action.registry import ActionRegistry
    from core.context import FetchContext
    from core.registry import Registry

logger = logging.getLogger(__name__)

DOMAIN = "cloudformation"
KIND = "stacks"

DELETED_STATUS = "DELETE_COMPLETE"


@dataclass(frozen=True)
class Stack(BaseResource):
    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Stack:
        return cls(
            id=data["StackName"],
            name=data["StackName"],
            arn=data.get("StackId", ""),
            tags=tags_from_list(data.get("Tags")),
            raw=data,
        )

    @property
    def status(self) -> str:
        return self.raw.get("StackStatus", "")

    @property
    def drift_status(self) -> str:
        return self.raw.get("DriftInformation", {}).get("StackDriftStatus", "")

    @property
    def created_at(self) -> datetime | None:
        return self.raw.get("CreationTime")

    @property
    def termination_protection(self) -> bool:
        return bool(self.raw.get("EnableTerminationProtection"))


class StackFetcher:
    def __init__(self, ctx: FetchContext):
        self.ctx = ctx

    def list_page(self, ctx: FetchContext, page_size: int, token: str) -> tuple[list[Stack], str]:
        cfn = client_for(ctx, "cloudformation")
        params = {"NextToken": token} if token else {}
        resp = call_api(DOMAIN, KIND, "DescribeStacks", cfn.describe_stacks, **params)
        stacks = [Stack.from_api(s) for s in resp.get("Stacks", []) if s.get("StackStatus") != DELETED_STATUS]
        return stacks, resp.get("NextToken", "")

    def list_resources(self, ctx: FetchContext) -> list[Stack]:
        stacks, _ = self.list_page(ctx, 0, "")
        return stacks

    def get(self, ctx: FetchContext, resource_id: str) -> Stack:
        cfn = client_for(ctx, "cloudformation")
        resp = call_api(DOMAIN, KIND, "DescribeStacks", cfn.describe_stacks, StackName=resource_id)
        stacks = resp.get("Stacks", [])
        if not stacks:
            raise FetchError(DOMAIN, KIND, f"Stack 없음: {resource_id}")
        return Stack.from_api(stacks[0])


class StackFormatter(BaseFormatter):
    def __init__(self) -> None:
        super().__init__(
            [
                Column("NAME", 40, lambda r: r.name),
                Column("STATUS", 24, lambda r: or_empty(r.status)),
                Column("DRIFT", 12, lambda r: or_empty(r.drift_status), priority=3),
                Column("PROTECTED", 9, lambda r: "yes" if r.termination_protection else "no", priority=4),
                age_column(),
            ]
        )

    def render_detail(self, resource: Any) -> str:
        detail = super().render_detail(resource)
        outputs = resource.raw.get("Outputs", [])
        if not outputs:
            return detail
        lines = [detail, "", "Outputs:"]
        lines.extend(f"  {o.get('OutputKey')} = {o.get('OutputValue')}" for o in outputs)
        return "\n".join(lines)


ACTIONS = [
    Action("Detect Drift", "f", ActionType.API, operation="DetectStackDrift"),
    Action(
        "Delete",
        "D",
        ActionType.API,
        operation="DeleteStack",
        confirm=ConfirmLevel.DANGEROUS,
        filter=lambda r: not r.termination_protection,
    ),
]


def execute(ctx: FetchContext, action: Action, resource: Any) -> ActionResult:
    cfn = client_for(ctx, "cloudformation")
    if action.operation == "DetectStackDrift":
        resp = cfn.detect_stack_drift(StackName=resource.name)
        detection_id = resp.get("StackDriftDetectionId", "")
        logger.info(f"드리프트 감지 시작: {resource.name} ({detection_id})")
        return ActionResult.ok(f"{resource.name}: 드리프트 감지 시작 ({detection_id})")
    if action.operation == "DeleteStack":
        cfn.delete_stack(StackName=resource.name)
        logger.info(f"Stack 삭제 요청: {resource.name}")
        return ActionResult.ok(f"{resource.name}: 삭제 요청 완료")
    raise UnknownOperationError(action.operation)


def register(registry: Registry, actions: ActionRegistry) -> None:
    registry.register(DOMAIN, KIND, StackFetcher, StackFormatter)
    actions.register(DOMAIN, KIND, ACTIONS)
    actions.register_executor(DOMAIN, KIND, execute)
