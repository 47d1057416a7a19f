"""
plugins/cloudwatch/log_groups.py - CloudWatch Logs 로그 그룹

ctx 필터 LogGroupName이 있으면 이름 접두사로 서버 측에서 좁힙니다.
로그 보기 액션은 모두 읽기 전용 모드에서 허용됩니다.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from core.action.types import (
    ACTION_NAME_TAIL_LOGS,
    ACTION_NAME_VIEW_RECENT_1H,
    ACTION_NAME_VIEW_RECENT_24H,
    Action,
    ActionType,
)
from core.aws.client import client_for
from core.aws.paging import call_api, page_params
from core.resource.capabilities import BaseFormatter, Column
from core.resource.format import age_column, format_size, or_empty
from core.resource.types import BaseResource

if TYPE_CHECKING:
    from core.action.registry import ActionRegistry
    from core.context import FetchContext
    from core.registry import Registry

DOMAIN = "cloudwatch"
KIND = "log-groups"

MAX_PAGE_SIZE = 50


@dataclass(frozen=True)
class LogGroup(BaseResource):
    @classmethod
    def from_api(cls, data: dict[str, Any]) -> LogGroup:
        name = data["logGroupName"]
        return cls(id=name, name=name, arn=data.get("arn", ""), raw=data)

    @property
    def retention(self) -> str:
        days = self.raw.get("retentionInDays")
        return f"{days}d" if days else "never"

    @property
    def stored_bytes(self) -> int:
        return int(self.raw.get("storedBytes", 0))

    @property
    def created_at(self) -> datetime | None:
        ms = self.raw.get("creationTime")
        return datetime.fromtimestamp(ms / 1000, tz=timezone.utc) if ms else None

    def log_group_name(self) -> str:
        return self.name

    def field_value(self, name: str) -> str | None:
        if name == "LogGroupName":
            return self.name
        return None


class LogGroupFetcher:
    def __init__(self, ctx: FetchContext):
        self.ctx = ctx

    def list_page(self, ctx: FetchContext, page_size: int, token: str) -> tuple[list[LogGroup], str]:
        logs = client_for(ctx, "logs")
        params = page_params(token, page_size, token_key="nextToken", size_key="limit", high=MAX_PAGE_SIZE)
        prefix = ctx.get_filter("LogGroupName")
        if prefix:
            params["logGroupNamePrefix"] = prefix
        resp = call_api(DOMAIN, KIND, "DescribeLogGroups", logs.describe_log_groups, **params)
        return [LogGroup.from_api(g) for g in resp.get("logGroups", [])], resp.get("nextToken", "")

    def list_resources(self, ctx: FetchContext) -> list[LogGroup]:
        groups, _ = self.list_page(ctx, MAX_PAGE_SIZE, "")
        return groups


class LogGroupFormatter(BaseFormatter):
    def __init__(self) -> None:
        super().__init__(
            [
                Column("NAME", 50, lambda r: r.name),
                Column("RETENTION", 9, lambda r: r.retention),
                Column("STORED", 10, lambda r: format_size(r.stored_bytes)),
                Column("CLASS", 10, lambda r: or_empty(r.raw.get("logGroupClass")), priority=4),
                age_column(),
            ]
        )


ACTIONS = [
    Action(ACTION_NAME_TAIL_LOGS, "t", ActionType.EXEC, command="aws logs tail ${LOG_GROUP} --follow"),
    Action(ACTION_NAME_VIEW_RECENT_1H, "1", ActionType.EXEC, command="aws logs tail ${LOG_GROUP} --since 1h"),
    Action(ACTION_NAME_VIEW_RECENT_24H, "2", ActionType.EXEC, command="aws logs tail ${LOG_GROUP} --since 24h"),
]


def register(registry: Registry, actions: ActionRegistry) -> None:
    registry.register(DOMAIN, KIND, LogGroupFetcher, LogGroupFormatter)
    actions.register(DOMAIN, KIND, ACTIONS)
