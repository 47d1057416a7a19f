"""
core/aws/arn.py - ARN 파싱 헬퍼
"""

from __future__ import annotations

ARN_PREFIX = "arn:"


def is_arn(value: str) -> bool:
    """arn:<partition>:... 형식인지 확인"""
    return value.startswith(ARN_PREFIX) and value.count(":") >= 5


def extract_resource_name(arn: str) -> str:
    """ARN의 마지막 경로 세그먼트 추출

    Examples:
        arn:aws:iam::123456789012:role/service-role/MyRole -> MyRole
        arn:aws:sqs:ap-northeast-2:123456789012:my-queue -> my-queue
        arn:aws:lambda:us-east-1:123456789012:function:my-fn -> my-fn
    """
    if not is_arn(arn):
        return arn
    resource = arn.split(":", 5)[5]
    return resource.rsplit("/", 1)[-1].rsplit(":", 1)[-1]
