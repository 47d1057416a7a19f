"""
plugins/cloudwatch/alarms.py - CloudWatch 메트릭 알람
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from core.aws.client import client_for
from core.aws.paging import call_api, page_params
from core.resource.capabilities import BaseFormatter, Column
from core.resource.format import format_age, or_empty
from core.resource.types import BaseResource

if TYPE_CHECKING:
    from core.action.registry import ActionRegistry
    from core.context import FetchContext
    from core.registry import Registry

DOMAIN = "cloudwatch"
KIND = "alarms"


@dataclass(frozen=True)
class Alarm(BaseResource):
    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Alarm:
        return cls(id=data["AlarmName"], name=data["AlarmName"], arn=data.get("AlarmArn", ""), raw=data)

    @property
    def state(self) -> str:
        return self.raw.get("StateValue", "")

    @property
    def metric(self) -> str:
        namespace = self.raw.get("Namespace", "")
        metric_name = self.raw.get("MetricName", "")
        return f"{namespace}/{metric_name}" if namespace else metric_name

    @property
    def updated_at(self) -> datetime | None:
        return self.raw.get("StateUpdatedTimestamp")

    def field_value(self, name: str) -> str | None:
        """네비게이션 필드 (예: InstanceId, FunctionName)는 알람 차원에서 찾음"""
        for dim in self.raw.get("Dimensions", []):
            if dim.get("Name") == name:
                return dim.get("Value", "")
        return None


class AlarmFetcher:
    def __init__(self, ctx: FetchContext):
        self.ctx = ctx

    def list_page(self, ctx: FetchContext, page_size: int, token: str) -> tuple[list[Alarm], str]:
        cloudwatch = client_for(ctx, "cloudwatch")
        params = page_params(token, page_size, size_key="MaxRecords", high=100)
        params["AlarmTypes"] = ["MetricAlarm"]
        resp = call_api(DOMAIN, KIND, "DescribeAlarms", cloudwatch.describe_alarms, **params)
        return [Alarm.from_api(a) for a in resp.get("MetricAlarms", [])], resp.get("NextToken", "")

    def list_resources(self, ctx: FetchContext) -> list[Alarm]:
        alarms, _ = self.list_page(ctx, 100, "")
        return alarms


class AlarmFormatter(BaseFormatter):
    def __init__(self) -> None:
        super().__init__(
            [
                Column("NAME", 40, lambda r: r.name),
                Column("STATE", 17, lambda r: or_empty(r.state)),
                Column("METRIC", 30, lambda r: or_empty(r.metric)),
                Column("UPDATED", 8, lambda r: format_age(r.updated_at), priority=3),
                Column("ACTIONS", 7, lambda r: "on" if r.raw.get("ActionsEnabled") else "off", priority=4),
            ]
        )


def register(registry: Registry, actions: ActionRegistry) -> None:
    registry.register(DOMAIN, KIND, AlarmFetcher, AlarmFormatter)
