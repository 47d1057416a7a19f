"""
plugins/fn/functions.py - Lambda 함수

ListFunctions(Marker/MaxItems) 페이지 조회, 호출 수 메트릭, 로그 그룹 이동,
DryRun 호출(읽기 전용 허용) 액션을 제공합니다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import TYPE_CHECKING, Any

from core.action.types import ACTION_NAME_TAIL_LOGS, Action, ActionResult, ActionType
from core.aws.client import client_for
from core.aws.paging import call_api, page_params
from core.exceptions import UnknownOperationError
from core.metrics.types import MetricSpec
from core.resource.capabilities import BaseFormatter, Column, Navigation
from core.resource.format import format_age, format_size, or_empty
from core.resource.types import BaseResource

if TYPE_CHECKING:
    from core.action.registry import ActionRegistry
    from core.context import FetchContext
    from core.registry import Registry

logger = logging.getLogger(__name__)

DOMAIN = "lambda"
KIND = "functions"

MAX_PAGE_SIZE = 50


def _parse_last_modified(value: str) -> datetime | None:
    """Lambda LastModified (예: 2024-01-01T00:00:00.000+0000)"""
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%dT%H:%M:%S.%f%z")
    except ValueError:
        return None


@dataclass(frozen=True)
class Function(BaseResource):
    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Function:
        return cls(
            id=data["FunctionName"],
            name=data["FunctionName"],
            arn=data.get("FunctionArn", ""),
            raw=data,
        )

    @property
    def runtime(self) -> str:
        return self.raw.get("Runtime", "") or self.raw.get("PackageType", "")

    @property
    def memory_mb(self) -> int:
        return int(self.raw.get("MemorySize", 0))

    @property
    def timeout(self) -> int:
        return int(self.raw.get("Timeout", 0))

    @property
    def code_size(self) -> int:
        return int(self.raw.get("CodeSize", 0))

    @property
    def modified_at(self) -> datetime | None:
        return _parse_last_modified(self.raw.get("LastModified", ""))

    @property
    def role_name(self) -> str:
        role = self.raw.get("Role", "")
        return role.rsplit("/", 1)[-1] if role else ""

    @property
    def vpc_id(self) -> str:
        return (self.raw.get("VpcConfig") or {}).get("VpcId", "")

    def log_group_name(self) -> str:
        custom = (self.raw.get("LoggingConfig") or {}).get("LogGroup", "")
        return custom or f"/aws/lambda/{self.name}"

    def field_value(self, name: str) -> str | None:
        if name == "RoleName":
            return self.role_name
        if name == "VpcId":
            return self.vpc_id
        return None


class FunctionFetcher:
    def __init__(self, ctx: FetchContext):
        self.ctx = ctx

    def list_page(self, ctx: FetchContext, page_size: int, token: str) -> tuple[list[Function], str]:
        client = client_for(ctx, "lambda")
        params = page_params(token, page_size, token_key="Marker", size_key="MaxItems", high=MAX_PAGE_SIZE)
        resp = call_api(DOMAIN, KIND, "ListFunctions", client.list_functions, **params)
        return [Function.from_api(f) for f in resp.get("Functions", [])], resp.get("NextMarker", "")

    def list_resources(self, ctx: FetchContext) -> list[Function]:
        functions, _ = self.list_page(ctx, MAX_PAGE_SIZE, "")
        return functions

    def get(self, ctx: FetchContext, resource_id: str) -> Function:
        client = client_for(ctx, "lambda")
        resp = call_api(DOMAIN, KIND, "GetFunction", client.get_function, FunctionName=resource_id)
        data = dict(resp.get("Configuration", {}))
        tags = resp.get("Tags")
        return replace(Function.from_api(data), tags=dict(tags) if tags is not None else None)


class FunctionFormatter(BaseFormatter):
    def __init__(self) -> None:
        super().__init__(
            [
                Column("NAME", 36, lambda r: r.name),
                Column("RUNTIME", 12, lambda r: or_empty(r.runtime)),
                Column("MEMORY", 8, lambda r: f"{r.memory_mb} MB"),
                Column("TIMEOUT", 8, lambda r: f"{r.timeout}s", priority=3),
                Column("CODE SIZE", 10, lambda r: format_size(r.code_size), priority=2),
                Column("MODIFIED", 8, lambda r: format_age(r.modified_at), priority=4),
            ]
        )

    def navigations(self, resource: Function) -> list[Navigation]:
        navs = [Navigation("l", "Log Group", "cloudwatch", "log-groups", "LogGroupName", resource.log_group_name())]
        if resource.role_name:
            navs.append(Navigation("r", "IAM Role", "iam", "roles", "RoleName", resource.role_name))
        return navs

    def metric_spec(self) -> MetricSpec:
        return MetricSpec("AWS/Lambda", "Invocations", "FunctionName", "Sum", "INVOC(15m)")


ACTIONS = [
    Action("Invoke (DryRun)", "i", ActionType.API, operation="InvokeFunctionDryRun"),
    Action(ACTION_NAME_TAIL_LOGS, "t", ActionType.EXEC, command="aws logs tail ${LOG_GROUP} --follow"),
]


def execute(ctx: FetchContext, action: Action, resource: Any) -> ActionResult:
    """DryRun 호출은 권한/파라미터만 검증하며 함수를 실행하지 않습니다."""
    if action.operation != "InvokeFunctionDryRun":
        raise UnknownOperationError(action.operation)
    client = client_for(ctx, "lambda")
    resp = client.invoke(FunctionName=resource.id, InvocationType="DryRun")
    status = resp.get("StatusCode", 0)
    logger.info(f"DryRun 호출: {resource.id} -> {status}")
    return ActionResult.ok(f"{resource.name}: DryRun 성공 (status {status})")


def register(registry: Registry, actions: ActionRegistry) -> None:
    registry.register(DOMAIN, KIND, FunctionFetcher, FunctionFormatter)
    actions.register(DOMAIN, KIND, ACTIONS)
    actions.register_executor(DOMAIN, KIND, execute)
