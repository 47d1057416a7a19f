"""
core/metrics/fetcher.py - CloudWatch 메트릭 배치 조회

GetMetricData API로 리소스 목록의 시계열을 한 번에 조회합니다.
요청당 최대 500개 쿼리, Throttling 시 지수 백오프로 재시도합니다.

멀티 리전 목록은 리전별로 나누어 조회한 뒤, 결과를 래핑된 ID("region:id")로 다시 매핑합니다.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

from botocore.exceptions import BotoCoreError, ClientError

from core.aws.client import client_for
from core.exceptions import is_throttling
from core.resource.types import get_resource_region, unwrap_resource

from .types import MetricData, MetricResult, MetricSpec

if TYPE_CHECKING:
    from core.context import FetchContext

logger = logging.getLogger(__name__)

MAX_QUERIES_PER_REQUEST = 500
DEFAULT_WINDOW = timedelta(minutes=15)
DEFAULT_PERIOD = 60  # 초
METRICS_LOAD_TIMEOUT = 30.0  # 초


@dataclass
class MetricQuery:
    """CloudWatch 메트릭 쿼리 정의

    Attributes:
        id: 쿼리 식별자 (결과 매핑용, 영문 소문자로 시작)
        resource_id: 차원 값으로 사용할 리소스 ID
    """

    id: str
    resource_id: str


def _chunks(lst: list, n: int) -> Iterator[list]:
    """리스트를 n개씩 분할"""
    for i in range(0, len(lst), n):
        yield lst[i : i + n]


def fetch_metric_series(
    cloudwatch_client: Any,
    spec: MetricSpec,
    resource_ids: list[str],
    start_time: datetime,
    end_time: datetime,
    period: int = DEFAULT_PERIOD,
    max_retries: int = 3,
) -> MetricData:
    """리소스 ID 목록의 시계열 조회

    Args:
        cloudwatch_client: boto3 CloudWatch client
        spec: 메트릭 정의
        resource_ids: 차원 값 목록
        start_time: 조회 시작 시간
        end_time: 조회 종료 시간
        period: 집계 주기 (초)
        max_retries: Throttling 시 재시도 횟수

    Returns:
        MetricData (데이터가 없는 리소스는 빈 values)
    """
    data = MetricData(spec)
    queries = [MetricQuery(id=f"m{i}", resource_id=rid) for i, rid in enumerate(resource_ids)]

    for chunk in _chunks(queries, MAX_QUERIES_PER_REQUEST):
        by_id = {q.id: q for q in chunk}
        metric_data_queries = [
            {
                "Id": q.id,
                "MetricStat": {
                    "Metric": {
                        "Namespace": spec.namespace,
                        "MetricName": spec.metric_name,
                        "Dimensions": [{"Name": spec.dimension_name, "Value": q.resource_id}],
                    },
                    "Period": period,
                    "Stat": spec.stat,
                },
            }
            for q in chunk
        ]

        next_token = None
        retries = 0

        while True:
            try:
                params: dict[str, Any] = {
                    "MetricDataQueries": metric_data_queries,
                    "StartTime": start_time,
                    "EndTime": end_time,
                    "ScanBy": "TimestampAscending",
                }
                if next_token:
                    params["NextToken"] = next_token

                response = cloudwatch_client.get_metric_data(**params)

                for result in response.get("MetricDataResults", []):
                    query = by_id.get(result["Id"])
                    if query is None:
                        continue
                    entry = data.results.setdefault(query.resource_id, MetricResult(query.resource_id))
                    entry.values.extend(float(v) for v in result.get("Values", []))

                next_token = response.get("NextToken")
                if not next_token:
                    break

                retries = 0

            except ClientError as e:
                if is_throttling(e) and retries < max_retries:
                    retries += 1
                    wait_time = 2**retries
                    logger.debug(f"CloudWatch Throttling, retry {retries}/{max_retries} after {wait_time}s")
                    time.sleep(wait_time)
                    continue
                raise

    return data


def load_metrics(ctx: FetchContext, spec: MetricSpec, resources: list[Any]) -> MetricData:
    """표시 중인 리소스의 메트릭 조회 (리전별 분할)

    한 리전의 실패는 해당 리전 셀만 비워 두고 나머지는 계속 조회합니다.
    """
    ctx = ctx.with_timeout(METRICS_LOAD_TIMEOUT)
    end_time = datetime.now(timezone.utc)
    start_time = end_time - DEFAULT_WINDOW

    # region -> [(full_id, unwrapped_id)]
    by_region: dict[str, list[tuple[str, str]]] = {}
    for res in resources:
        by_region.setdefault(get_resource_region(res), []).append((res.id, unwrap_resource(res).id))

    data = MetricData(spec)

    for region, infos in by_region.items():
        if ctx.cancelled:
            break
        region_ctx = ctx.with_region(region) if region else ctx
        unwrapped_ids = [unwrapped for _, unwrapped in infos]
        try:
            cloudwatch = client_for(region_ctx, "cloudwatch")
            region_data = fetch_metric_series(cloudwatch, spec, unwrapped_ids, start_time, end_time)
        except (ClientError, BotoCoreError) as e:
            logger.warning(f"메트릭 조회 실패 [{region or 'default'}]: {e}")
            continue

        for full_id, unwrapped in infos:
            result = region_data.get(unwrapped)
            if result is not None:
                data.results[full_id] = MetricResult(full_id, list(result.values))

    logger.debug(f"메트릭 조회 완료: {spec.metric_name} {len(data.results)}/{len(resources)}")
    return data
