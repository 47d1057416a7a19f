"""
plugins/sqs/queues.py - SQS 큐

ListQueues로 URL 목록을 페이지 단위로 받고, 큐마다 GetQueueAttributes로 상세를 채웁니다.
개별 큐의 속성 조회 실패는 URL만으로 구성한 리소스로 대체합니다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from botocore.exceptions import ClientError

from core.action.types import Action, ActionResult, ActionType, ConfirmLevel
from core.aws.client import client_for
from core.aws.paging import call_api, page_params
from core.exceptions import InvalidResourceTypeError, UnknownOperationError
from core.resource.capabilities import BaseFormatter, Column
from core.resource.format import age_column, or_empty
from core.resource.types import BaseResource

if TYPE_CHECKING:
    from core.action.registry import ActionRegistry
    from core.context import FetchContext
    from core.registry import Registry

logger = logging.getLogger(__name__)

DOMAIN = "sqs"
KIND = "queues"

MAX_PAGE_SIZE = 1000


@dataclass(frozen=True)
class Queue(BaseResource):
    """SQS 큐 (id = 큐 URL, raw = 큐 속성)"""

    @classmethod
    def from_api(cls, url: str, attributes: dict[str, str] | None = None) -> Queue:
        attributes = attributes or {}
        return cls(id=url, name=url.rstrip("/").split("/")[-1], arn=attributes.get("QueueArn", ""), raw=attributes)

    def _int(self, key: str) -> int:
        try:
            return int(self.raw.get(key, 0))
        except (TypeError, ValueError):
            return 0

    @property
    def is_fifo(self) -> bool:
        return self.name.endswith(".fifo")

    @property
    def messages(self) -> int:
        return self._int("ApproximateNumberOfMessages")

    @property
    def in_flight(self) -> int:
        return self._int("ApproximateNumberOfMessagesNotVisible")

    @property
    def delayed(self) -> int:
        return self._int("ApproximateNumberOfMessagesDelayed")

    @property
    def created_at(self) -> datetime | None:
        ts = self._int("CreatedTimestamp")
        return datetime.fromtimestamp(ts, tz=timezone.utc) if ts else None

    def field_value(self, name: str) -> str | None:
        if name == "QueueName":
            return self.name
        return None


class QueueFetcher:
    def __init__(self, ctx: FetchContext):
        self.ctx = ctx

    def _describe(self, sqs: Any, url: str) -> Queue:
        try:
            attrs = sqs.get_queue_attributes(QueueUrl=url, AttributeNames=["All"]).get("Attributes", {})
        except ClientError as e:
            logger.debug(f"큐 속성 조회 실패, URL만 사용: {url} ({e})")
            attrs = {}
        return Queue.from_api(url, attrs)

    def list_page(self, ctx: FetchContext, page_size: int, token: str) -> tuple[list[Queue], str]:
        sqs = client_for(ctx, "sqs")
        params = page_params(token, page_size, high=MAX_PAGE_SIZE)
        resp = call_api(DOMAIN, KIND, "ListQueues", sqs.list_queues, **params)
        queues = []
        for url in resp.get("QueueUrls", []):
            ctx.check(DOMAIN, KIND)
            queues.append(self._describe(sqs, url))
        return queues, resp.get("NextToken", "")

    def list_resources(self, ctx: FetchContext) -> list[Queue]:
        queues, _ = self.list_page(ctx, MAX_PAGE_SIZE, "")
        return queues

    def get(self, ctx: FetchContext, resource_id: str) -> Queue:
        sqs = client_for(ctx, "sqs")
        resp = call_api(
            DOMAIN, KIND, "GetQueueAttributes", sqs.get_queue_attributes, QueueUrl=resource_id, AttributeNames=["All"]
        )
        return Queue.from_api(resource_id, resp.get("Attributes", {}))


class QueueFormatter(BaseFormatter):
    def __init__(self) -> None:
        super().__init__(
            [
                Column("NAME", 36, lambda r: r.name),
                Column("TYPE", 8, lambda r: "FIFO" if r.is_fifo else "Standard"),
                Column("MESSAGES", 10, lambda r: str(r.messages)),
                Column("IN FLIGHT", 10, lambda r: str(r.in_flight), priority=2),
                Column("DELAYED", 8, lambda r: str(r.delayed), priority=3),
                age_column(),
            ]
        )

    def render_detail(self, resource: Any) -> str:
        lines = [f"URL  {resource.id}", f"ARN  {or_empty(resource.arn)}", ""]
        lines.extend(f"{k}: {v}" for k, v in sorted((resource.raw or {}).items()))
        return "\n".join(lines)


ACTIONS = [
    Action(
        "Purge",
        "P",
        ActionType.API,
        operation="PurgeQueue",
        confirm=ConfirmLevel.DANGEROUS,
        confirm_token=lambda r: r.name,
    ),
]


def execute(ctx: FetchContext, action: Action, resource: Any) -> ActionResult:
    if not isinstance(resource, Queue):
        raise InvalidResourceTypeError("Queue", resource)
    if action.operation != "PurgeQueue":
        raise UnknownOperationError(action.operation)
    client_for(ctx, "sqs").purge_queue(QueueUrl=resource.id)
    return ActionResult.ok(f"{resource.name}: 메시지 삭제 요청 완료")


def register(registry: Registry, actions: ActionRegistry) -> None:
    registry.register(DOMAIN, KIND, QueueFetcher, QueueFormatter)
    actions.register(DOMAIN, KIND, ACTIONS)
    actions.register_executor(DOMAIN, KIND, execute)
