"""
core/action/variables.py - 명령 템플릿 변수 치환

exec 명령의 ${ID}, ${NAME} 등을 리소스 값으로 치환합니다.
명령에서 참조되는 값에 셸 메타문자가 있으면 UnsafeValueError로 실패하며,
우회 옵션은 없습니다.
"""

from __future__ import annotations

from typing import Any

from core.exceptions import UnsafeValueError
from core.resource.capabilities import (
    ClusterArnProvider,
    ContainerNameProvider,
    LogGroupNameProvider,
    PrivateIPProvider,
)
from core.resource.types import unwrap_resource

SHELL_METACHARACTERS = frozenset(";|&$`(){}<>\n\r")


def contains_shell_metachar(value: str) -> bool:
    return any(ch in SHELL_METACHARACTERS for ch in value)


def build_variables(resource: Any) -> dict[str, str]:
    """리소스에서 치환 변수 수집 (capability가 없으면 해당 변수는 제외)"""
    inner = unwrap_resource(resource)
    variables = {
        "${ID}": inner.id,
        "${NAME}": inner.name,
        "${ARN}": inner.arn,
        "${INSTANCE_ID}": inner.id,
        "${BUCKET}": inner.id,
    }
    if isinstance(inner, PrivateIPProvider):
        variables["${PRIVATE_IP}"] = inner.private_ip()
    if isinstance(inner, ClusterArnProvider):
        variables["${CLUSTER}"] = inner.cluster_arn()
    if isinstance(inner, ContainerNameProvider):
        variables["${CONTAINER}"] = inner.first_container_name()
    if isinstance(inner, LogGroupNameProvider):
        variables["${LOG_GROUP}"] = inner.log_group_name()
    return variables


def expand_variables(command: str, resource: Any) -> str:
    """명령 템플릿 치환

    Raises:
        UnsafeValueError: 참조된 값에 셸 메타문자가 포함된 경우
    """
    result = command
    for key, value in build_variables(resource).items():
        if key not in command:
            continue
        if contains_shell_metachar(value or ""):
            raise UnsafeValueError(key)
        result = result.replace(key, value or "")
    return result
