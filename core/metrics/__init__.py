"""
core/metrics - 리소스 목록 메트릭 오버레이
"""

from .types import COLUMN_WIDTH, MetricData, MetricResult, MetricSpec, render_metric_cell, sparkline

__all__ = [
    "COLUMN_WIDTH",
    "MetricData",
    "MetricResult",
    "MetricSpec",
    "render_metric_cell",
    "sparkline",
]
