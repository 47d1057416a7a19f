"""
core/metrics/types.py - 메트릭 오버레이 타입

리소스 목록에 한 개의 CloudWatch 시계열을 덧붙이는 데 필요한 타입과
셀 렌더링(스파크라인 + 최신값)을 정의합니다.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# 메트릭 컬럼 폭 (스파크라인 5칸 + 공백 + 값)
COLUMN_WIDTH = 12
SPARKLINE_WIDTH = 5
SPARK_CHARS = "▁▂▃▄▅▆▇█"
NO_DATA = "-"


@dataclass(frozen=True)
class MetricSpec:
    """리소스 종류별 메트릭 정의

    Attributes:
        namespace: CloudWatch 네임스페이스 (예: AWS/EC2)
        metric_name: 메트릭 이름 (예: CPUUtilization)
        dimension_name: 리소스 ID를 넣을 차원 이름 (예: InstanceId)
        stat: 통계 (Average, Sum, Maximum ...)
        column_header: 컬럼 헤더 (예: CPU(15m))
        unit: 값 뒤에 붙일 단위 (예: %)
    """

    namespace: str
    metric_name: str
    dimension_name: str
    stat: str
    column_header: str
    unit: str = ""


@dataclass
class MetricResult:
    """리소스 하나의 시계열 결과 (오래된 값 -> 최신 값 순서)"""

    resource_id: str
    values: list[float] = field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return bool(self.values)

    @property
    def latest(self) -> float:
        return self.values[-1] if self.values else 0.0


@dataclass
class MetricData:
    """리소스 ID -> MetricResult"""

    spec: MetricSpec
    results: dict[str, MetricResult] = field(default_factory=dict)

    def get(self, resource_id: str) -> MetricResult | None:
        return self.results.get(resource_id)


def sparkline(values: list[float], width: int = SPARKLINE_WIDTH) -> str:
    """최근 width개 값의 스파크라인"""
    recent = values[-width:]
    if not recent:
        return ""
    low, high = min(recent), max(recent)
    span = high - low
    chars = []
    for v in recent:
        idx = 0 if span == 0 else int((v - low) / span * (len(SPARK_CHARS) - 1))
        chars.append(SPARK_CHARS[idx])
    return "".join(chars)


def format_value(value: float, unit: str = "") -> str:
    if abs(value) >= 1000:
        text = f"{value / 1000:.1f}k"
    elif value == int(value):
        text = str(int(value))
    else:
        text = f"{value:.1f}"
    return f"{text}{unit}"


def render_metric_cell(result: MetricResult | None, unit: str = "") -> str:
    """메트릭 셀 문자열 (데이터가 없으면 "-")"""
    if result is None or not result.has_data:
        return NO_DATA
    return f"{sparkline(result.values)} {format_value(result.latest, unit)}"
