"""
core/exceptions.py - 통합 예외 계층 구조

리소스 브라우저 전체에서 사용되는 예외 클래스들을 정의합니다.
에러는 발생한 화면(surface)으로 값으로 전달되며, 프로세스를 종료시키지 않습니다.

예외 계층 구조:
    BrowserError (베이스)
    ├── ResourceTypeNotFoundError (등록되지 않은 domain/kind)
    ├── FetchError (리소스 조회 실패)
    │   └── FetchCancelledError
    ├── APICallError (액션 API 호출 실패)
    ├── ActionExecutionError (exec 액션 실패)
    ├── ConfigurationError (액션/실행기 설정 오류)
    │   ├── EmptyOperationError
    │   ├── EmptyCommandError
    │   ├── ExecutorNotFoundError
    │   └── UnknownOperationError
    ├── ReadOnlyDeniedError (읽기 전용 정책 거부)
    ├── UnsafeValueError (셸 메타문자 포함 값)
    └── InvalidResourceTypeError (실행기가 예상치 못한 리소스 수신)

Usage:
    from core.exceptions import FetchError

    try:
        resp = ec2.describe_instances(MaxResults=100)
    except ClientError as e:
        raise FetchError.from_client_error("ec2", "instances", "DescribeInstances", e) from e
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

# =============================================================================
# 베이스 예외
# =============================================================================


class BrowserError(Exception):
    """리소스 브라우저 기본 예외 클래스

    모든 커스텀 예외의 베이스 클래스입니다.

    Attributes:
        message: 에러 메시지
        cause: 원인 예외 (체이닝용)
        details: 추가 상세 정보
    """

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """예외 정보를 딕셔너리로 반환"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "cause": str(self.cause) if self.cause else None,
            "details": self.details,
        }


# =============================================================================
# 레지스트리 / 조회 관련 예외
# =============================================================================


class ResourceTypeNotFoundError(BrowserError):
    """등록되지 않은 리소스 타입"""

    def __init__(self, domain: str, kind: str = ""):
        target = f"{domain}/{kind}" if kind else domain
        super().__init__(f"알 수 없는 리소스 타입: {target}")
        self.domain = domain
        self.kind = kind
        self.details.update({"domain": domain, "kind": kind})


class FetchError(BrowserError):
    """리소스 목록 조회 실패

    화면에 표시되며, 페이지 추가 로드 중 발생한 경우 "더 이상 없음"으로 강등됩니다.
    """

    def __init__(
        self,
        domain: str,
        kind: str,
        message: str,
        error_code: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        full_message = f"조회 실패 [{domain}/{kind}]: {message}"
        super().__init__(full_message, cause)
        self.domain = domain
        self.kind = kind
        self.error_code = error_code
        self.details.update({"domain": domain, "kind": kind, "error_code": error_code})

    def __str__(self) -> str:
        # ClientError 메시지는 full_message에 이미 포함됨
        if self.cause and not self.error_code:
            return f"{self.message}: {self.cause}"
        return self.message

    @classmethod
    def from_client_error(
        cls,
        domain: str,
        kind: str,
        operation: str,
        client_error: BaseException,
    ) -> "FetchError":
        """botocore.exceptions.ClientError로부터 생성

        Args:
            domain: 서비스 도메인 (예: ec2)
            kind: 리소스 종류 (예: instances)
            operation: 실패한 API 작업 이름
            client_error: ClientError 예외

        Returns:
            FetchError 인스턴스
        """
        error_code = get_error_code(client_error) or None
        error_message = get_error_message(client_error)

        message = operation
        if error_code:
            message = f"{message} ({error_code})"
        if error_message:
            message = f"{message}: {error_message}"

        return cls(domain, kind, message, error_code=error_code, cause=client_error)


class FetchCancelledError(FetchError):
    """조회 컨텍스트가 취소되었거나 제한 시간이 지남"""

    def __init__(self, domain: str = "", kind: str = ""):
        super().__init__(domain, kind, "취소됨")


# =============================================================================
# 액션 실행 관련 예외
# =============================================================================


class APICallError(BrowserError):
    """AWS API 호출 관련 예외

    boto3/botocore의 ClientError를 래핑하여 일관된 예외 처리를 제공합니다.
    """

    def __init__(
        self,
        service: str,
        operation: str,
        error_code: Optional[str] = None,
        error_message: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        message = f"{service}.{operation}"
        if error_code:
            message = f"{message} 실패 ({error_code})"
        if error_message:
            message = f"{message}: {error_message}"

        super().__init__(message, cause)
        self.service = service
        self.operation = operation
        self.error_code = error_code
        self.error_message = error_message
        self.details.update(
            {
                "service": service,
                "operation": operation,
                "error_code": error_code,
            }
        )

    def __str__(self) -> str:
        return self.message

    @classmethod
    def from_client_error(
        cls,
        service: str,
        operation: str,
        client_error: BaseException,
    ) -> "APICallError":
        """botocore.exceptions.ClientError로부터 생성"""
        return cls(
            service=service,
            operation=operation,
            error_code=get_error_code(client_error) or None,
            error_message=get_error_message(client_error) or None,
            cause=client_error,
        )


class ActionExecutionError(BrowserError):
    """exec 액션이 0이 아닌 종료 코드로 끝남"""

    def __init__(self, action_name: str, returncode: int):
        super().__init__(f"액션 실행 실패 [{action_name}]: 종료 코드 {returncode}")
        self.action_name = action_name
        self.returncode = returncode
        self.details.update({"action_name": action_name, "returncode": returncode})


class ConfigurationError(BrowserError):
    """액션 또는 실행기 설정 오류"""

    def __init__(
        self,
        key: str,
        message: str,
        cause: Optional[BaseException] = None,
    ):
        full_message = f"설정 오류 [{key}]: {message}"
        super().__init__(full_message, cause)
        self.config_key = key
        self.details["config_key"] = key


class EmptyOperationError(ConfigurationError):
    """operation이 비어 있는 api 액션"""

    def __init__(self, action_name: str):
        super().__init__(action_name, "api 액션에 operation이 없습니다")
        self.action_name = action_name


class EmptyCommandError(ConfigurationError):
    """변수 치환 후 명령이 비어 있음"""

    def __init__(self, action_name: str):
        super().__init__(action_name, "실행할 명령이 비어 있습니다")
        self.action_name = action_name


class ExecutorNotFoundError(ConfigurationError):
    """해당 리소스 타입에 등록된 API 실행기가 없음"""

    def __init__(self, domain: str, kind: str):
        super().__init__(f"{domain}/{kind}", "등록된 실행기가 없습니다")
        self.domain = domain
        self.kind = kind


class UnknownOperationError(ConfigurationError):
    """실행기가 처리하지 않는 operation"""

    def __init__(self, operation: str):
        super().__init__(operation, "알 수 없는 operation")
        self.operation = operation


class UnknownActionTypeError(ConfigurationError):
    """exec/api/view 이외의 액션 타입"""

    def __init__(self, action_name: str, action_type: Any):
        super().__init__(action_name, f"알 수 없는 액션 타입: {action_type}")
        self.action_type = action_type


class ReadOnlyDeniedError(BrowserError):
    """읽기 전용 모드에서 허용되지 않은 액션"""

    def __init__(self, action_name: str, action_type: str = ""):
        super().__init__(f"읽기 전용 모드에서는 실행할 수 없습니다: {action_name}")
        self.action_name = action_name
        self.action_type = action_type
        self.details.update({"action_name": action_name, "action_type": action_type})


class UnsafeValueError(BrowserError):
    """셸 메타문자가 포함된 치환 값

    명령은 실행되지 않습니다.
    """

    def __init__(self, variable: str):
        super().__init__(f"안전하지 않은 값: {variable}에 셸 메타문자가 포함되어 있습니다")
        self.variable = variable
        self.details["variable"] = variable


class InvalidResourceTypeError(BrowserError):
    """실행기가 예상하지 않은 리소스 타입을 받음"""

    def __init__(self, expected: str, actual: Any = None):
        actual_name = type(actual).__name__ if actual is not None else "None"
        super().__init__(f"잘못된 리소스 타입: {expected} 필요, {actual_name} 수신")
        self.expected = expected
        self.details.update({"expected": expected, "actual": actual_name})


# =============================================================================
# 예외 유틸리티 함수
# =============================================================================

ACCESS_DENIED_CODES = frozenset(
    {
        "AccessDenied",
        "AccessDeniedException",
        "UnauthorizedAccess",
        "UnauthorizedOperation",
        "AuthFailure",
        "ExpiredToken",
        "ExpiredTokenException",
        "InvalidClientTokenId",
    }
)

THROTTLING_CODES = frozenset(
    {
        "Throttling",
        "ThrottlingException",
        "RequestLimitExceeded",
        "TooManyRequestsException",
        "RateExceeded",
    }
)

NOT_FOUND_CODES = frozenset(
    {
        "ResourceNotFoundException",
        "NotFoundException",
        "NoSuchEntity",
        "NoSuchBucket",
        "InvalidInstanceID.NotFound",
        "AWS.SimpleQueueService.NonExistentQueue",
    }
)

IN_USE_CODES = frozenset(
    {
        "ResourceInUseException",
        "DependencyViolation",
        "DeleteConflict",
        "ResourceConflictException",
    }
)

VALIDATION_CODES = frozenset(
    {
        "ValidationError",
        "ValidationException",
        "InvalidParameterValue",
        "InvalidParameterException",
        "InvalidParameterCombination",
    }
)


class ErrorKind(Enum):
    """에러 분류"""

    AUTH = "auth"
    THROTTLING = "throttling"
    NOT_FOUND = "not_found"
    IN_USE = "in_use"
    VALIDATION = "validation"
    UNKNOWN = "unknown"


def get_error_code(error: BaseException) -> str:
    """에러 코드 추출

    APICallError/FetchError는 보관된 코드를, ClientError는 응답의 코드를 반환합니다.
    """
    code = getattr(error, "error_code", None)
    if code:
        return str(code)

    response = getattr(error, "response", None)
    if isinstance(response, dict):
        return str(response.get("Error", {}).get("Code", ""))

    return ""


def get_error_message(error: BaseException) -> str:
    """ClientError 응답의 메시지 추출 (없으면 빈 문자열)"""
    response = getattr(error, "response", None)
    if isinstance(response, dict):
        return str(response.get("Error", {}).get("Message", ""))
    return ""


def is_access_denied(error: BaseException) -> bool:
    """액세스 거부/인증 오류인지 확인"""
    return get_error_code(error) in ACCESS_DENIED_CODES


def is_throttling(error: BaseException) -> bool:
    """스로틀링 오류인지 확인"""
    return get_error_code(error) in THROTTLING_CODES


def is_not_found(error: BaseException) -> bool:
    """리소스를 찾을 수 없는 오류인지 확인"""
    code = get_error_code(error)
    return code in NOT_FOUND_CODES or code.endswith(".NotFound")


def is_resource_in_use(error: BaseException) -> bool:
    """리소스 사용 중 오류인지 확인"""
    return get_error_code(error) in IN_USE_CODES


def is_validation_error(error: BaseException) -> bool:
    """파라미터 검증 오류인지 확인"""
    return get_error_code(error) in VALIDATION_CODES


def classify_error(error: BaseException) -> ErrorKind:
    """에러를 ErrorKind로 분류"""
    if is_access_denied(error):
        return ErrorKind.AUTH
    if is_throttling(error):
        return ErrorKind.THROTTLING
    if is_not_found(error):
        return ErrorKind.NOT_FOUND
    if is_resource_in_use(error):
        return ErrorKind.IN_USE
    if is_validation_error(error):
        return ErrorKind.VALIDATION
    return ErrorKind.UNKNOWN


def format_error_for_user(error: BaseException) -> str:
    """사용자에게 표시할 에러 메시지 포맷팅

    Args:
        error: 예외

    Returns:
        사용자 친화적인 에러 메시지
    """
    friendly_messages = {
        ErrorKind.AUTH: "권한이 없거나 자격 증명이 만료되었습니다. 프로파일/IAM 정책을 확인하세요.",
        ErrorKind.THROTTLING: "요청이 너무 많습니다. 잠시 후 다시 시도하세요.",
    }

    if isinstance(error, BrowserError):
        # 커스텀 예외는 이미 포맷팅됨
        kind = classify_error(error)
        if kind in friendly_messages:
            return f"{error} ({friendly_messages[kind]})"
        return str(error)

    response = getattr(error, "response", None)
    if isinstance(response, dict):
        code = get_error_code(error) or "UnknownError"
        message = get_error_message(error) or str(error)
        kind = classify_error(error)
        if kind in friendly_messages:
            return friendly_messages[kind]
        return f"{code}: {message}"

    return str(error)
