"""
core/aws - boto3 세션/클라이언트, 계정 조회, ARN 헬퍼
"""

from .arn import extract_resource_name, is_arn
from .client import get_client, session_for

__all__ = [
    "extract_resource_name",
    "get_client",
    "is_arn",
    "session_for",
]
