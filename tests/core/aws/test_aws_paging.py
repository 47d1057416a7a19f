"""
tests/core/aws/test_aws_paging.py - 페이지 파라미터 / API 호출 헬퍼 테스트
"""

import pytest
from botocore.exceptions import EndpointConnectionError

from core.aws.paging import call_api, clamp, page_params
from core.exceptions import FetchError


class TestPageParams:
    """page_params 테스트"""

    def test_first_page_has_no_token(self):
        assert page_params("", 100) == {"MaxResults": 100}

    def test_token_included(self):
        assert page_params("abc", 50) == {"MaxResults": 50, "NextToken": "abc"}

    def test_clamped_to_api_bounds(self):
        """API별 최소/최대 페이지 크기로 보정"""
        assert page_params("", 1000, high=100)["MaxResults"] == 100
        assert page_params("", 1, low=5)["MaxResults"] == 5

    def test_custom_keys(self):
        params = page_params("m", 20, token_key="Marker", size_key="MaxItems")
        assert params == {"MaxItems": 20, "Marker": "m"}

    @pytest.mark.parametrize(("value", "expected"), [(0, 1), (5, 5), (200, 100)])
    def test_clamp(self, value, expected):
        assert clamp(value, 1, 100) == expected


class TestCallApi:
    """call_api 테스트"""

    def test_returns_response(self):
        assert call_api("ec2", "instances", "DescribeInstances", lambda **kw: kw, MaxResults=5) == {"MaxResults": 5}

    def test_client_error_becomes_fetch_error(self, client_error):
        def fail(**kwargs):
            raise client_error("AccessDenied", "nope", "DescribeInstances")

        with pytest.raises(FetchError) as exc_info:
            call_api("ec2", "instances", "DescribeInstances", fail)

        assert exc_info.value.error_code == "AccessDenied"
        assert exc_info.value.domain == "ec2"

    def test_botocore_error_becomes_fetch_error(self):
        def fail(**kwargs):
            raise EndpointConnectionError(endpoint_url="https://ec2.example")

        with pytest.raises(FetchError) as exc_info:
            call_api("ec2", "instances", "DescribeInstances", fail)

        assert "DescribeInstances" in str(exc_info.value)
