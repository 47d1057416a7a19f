"""
tests/core/test_core_exceptions.py - core/exceptions.py 테스트
"""

import pytest
from botocore.exceptions import ClientError

from core.exceptions import (
    APICallError,
    BrowserError,
    EmptyOperationError,
    ErrorKind,
    FetchCancelledError,
    FetchError,
    ReadOnlyDeniedError,
    ResourceTypeNotFoundError,
    UnknownOperationError,
    UnsafeValueError,
    classify_error,
    format_error_for_user,
    get_error_code,
    is_access_denied,
    is_not_found,
    is_resource_in_use,
    is_throttling,
    is_validation_error,
)


def client_error(code: str, message: str = "boom") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, "TestOperation")


class TestBrowserError:
    """BrowserError 기본 동작"""

    def test_message_only(self):
        assert str(BrowserError("실패")) == "실패"

    def test_with_cause(self):
        err = BrowserError("실패", cause=ValueError("원인"))
        assert str(err) == "실패: 원인"

    def test_to_dict(self):
        err = ReadOnlyDeniedError("Terminate", "api")
        data = err.to_dict()
        assert data["error_type"] == "ReadOnlyDeniedError"
        assert data["details"]["action_name"] == "Terminate"

    @pytest.mark.parametrize(
        "error",
        [
            ResourceTypeNotFoundError("ec2", "nope"),
            FetchError("ec2", "instances", "x"),
            FetchCancelledError(),
            ReadOnlyDeniedError("Stop"),
            UnsafeValueError("${NAME}"),
            UnknownOperationError("Foo"),
            EmptyOperationError("Bar"),
        ],
    )
    def test_all_errors_are_browser_errors(self, error):
        assert isinstance(error, BrowserError)

    def test_hierarchy_branches(self):
        """BrowserError 직속 하위 클래스 목록"""
        assert {cls.__name__ for cls in BrowserError.__subclasses__()} == {
            "ResourceTypeNotFoundError",
            "FetchError",
            "APICallError",
            "ActionExecutionError",
            "ConfigurationError",
            "ReadOnlyDeniedError",
            "UnsafeValueError",
            "InvalidResourceTypeError",
        }


class TestFetchError:
    """FetchError 테스트"""

    def test_from_client_error(self):
        err = FetchError.from_client_error("ec2", "instances", "DescribeInstances", client_error("AccessDenied", "no"))
        assert err.error_code == "AccessDenied"
        assert "DescribeInstances (AccessDenied): no" in str(err)
        assert isinstance(err.cause, ClientError)

    def test_cancelled_is_fetch_error(self):
        assert isinstance(FetchCancelledError("ec2", "instances"), FetchError)

    def test_resource_type_not_found_details(self):
        err = ResourceTypeNotFoundError("ec2", "widgets")
        assert err.domain == "ec2"
        assert "ec2/widgets" in str(err)


class TestAPICallError:
    """APICallError 테스트"""

    def test_from_client_error(self):
        err = APICallError.from_client_error("sqs", "PurgeQueue", client_error("PurgeQueueInProgress", "wait"))
        assert err.error_code == "PurgeQueueInProgress"
        assert str(err) == "sqs.PurgeQueue 실패 (PurgeQueueInProgress): wait"


class TestClassification:
    """에러 분류 헬퍼 테스트"""

    def test_get_error_code_from_client_error(self):
        assert get_error_code(client_error("Throttling")) == "Throttling"

    def test_get_error_code_from_fetch_error(self):
        assert get_error_code(FetchError("a", "b", "c", error_code="NoSuchEntity")) == "NoSuchEntity"

    def test_get_error_code_plain_exception(self):
        assert get_error_code(ValueError("x")) == ""

    def test_access_denied(self):
        assert is_access_denied(client_error("UnauthorizedOperation"))
        assert not is_access_denied(client_error("Throttling"))

    def test_throttling(self):
        assert is_throttling(client_error("RequestLimitExceeded"))

    def test_not_found_suffix(self):
        """.NotFound 로 끝나는 코드도 not found"""
        assert is_not_found(client_error("InvalidGroup.NotFound"))
        assert is_not_found(client_error("NoSuchEntity"))

    def test_in_use(self):
        assert is_resource_in_use(client_error("DependencyViolation"))

    def test_validation(self):
        assert is_validation_error(client_error("ValidationError"))

    @pytest.mark.parametrize(
        ("code", "kind"),
        [
            ("AccessDenied", ErrorKind.AUTH),
            ("ThrottlingException", ErrorKind.THROTTLING),
            ("ResourceNotFoundException", ErrorKind.NOT_FOUND),
            ("ResourceInUseException", ErrorKind.IN_USE),
            ("InvalidParameterValue", ErrorKind.VALIDATION),
            ("SomethingElse", ErrorKind.UNKNOWN),
        ],
    )
    def test_classify_error(self, code, kind):
        assert classify_error(client_error(code)) == kind


class TestFormatErrorForUser:
    """format_error_for_user 테스트"""

    def test_client_error_unknown(self):
        assert format_error_for_user(client_error("Weird", "details")) == "Weird: details"

    def test_client_error_access_denied_is_friendly(self):
        text = format_error_for_user(client_error("AccessDenied"))
        assert "권한" in text

    def test_browser_error_keeps_message(self):
        err = UnsafeValueError("${NAME}")
        assert format_error_for_user(err) == str(err)

    def test_fetch_error_with_auth_code_adds_hint(self):
        err = FetchError("ec2", "instances", "DescribeInstances", error_code="ExpiredToken")
        text = format_error_for_user(err)
        assert text.startswith(str(err))
        assert "권한" in text

    def test_plain_exception(self):
        assert format_error_for_user(RuntimeError("oops")) == "oops"
