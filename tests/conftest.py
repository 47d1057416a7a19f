"""
tests/conftest.py - pytest 공통 픽스처

AWS API 모킹, 테스트용 리소스/fetcher/formatter, 레지스트리 구성을 제공합니다.

Usage:
    def test_something(fake_registry, app_config):
        # fake_registry: test/items, test/others 가 등록된 Registry
        # app_config: 단일 리전 AppConfig
        pass
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from core.action.registry import ActionRegistry  # noqa: E402
from core.config import AppConfig  # noqa: E402
from core.context import FetchContext  # noqa: E402
from core.registry import Registry  # noqa: E402
from core.resource.capabilities import BaseFormatter, Column, Navigation  # noqa: E402
from core.resource.types import BaseResource  # noqa: E402

# =============================================================================
# 환경 설정
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """테스트 환경 설정 (실제 자격 증명/설정 파일 차단, 언어 초기화)"""
    monkeypatch.setenv("AWS_DEFAULT_REGION", "ap-northeast-2")
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_CONFIG_FILE", os.devnull)
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", os.devnull)
    monkeypatch.delenv("AWS_PROFILE", raising=False)
    monkeypatch.delenv("AWS_REGION", raising=False)
    monkeypatch.delenv("AB_READ_ONLY", raising=False)

    from cli.i18n import set_lang

    set_lang("ko")
    yield
    set_lang("ko")


# =============================================================================
# 테스트용 리소스 / fetcher / formatter
# =============================================================================


def make_resource(
    id: str,
    name: str = "",
    tags: Optional[Dict[str, str]] = None,
    raw: Any = None,
    arn: str = "",
) -> BaseResource:
    """테스트용 리소스 생성"""
    return BaseResource(id=id, name=name, arn=arn, tags=tags, raw=raw)


class FakeFetcher:
    """토큰 -> (리소스, 다음 토큰) 페이지를 반환하는 fetcher

    Attributes:
        calls: list_page 호출 기록 (page_size, token)
    """

    def __init__(self, pages: Dict[str, Tuple[List[Any], str]], error: Optional[BaseException] = None):
        self.pages = pages
        self.error = error
        self.calls: List[Tuple[int, str]] = []

    def list_page(self, ctx: FetchContext, page_size: int, token: str) -> Tuple[List[Any], str]:
        self.calls.append((page_size, token))
        if self.error is not None:
            raise self.error
        return self.pages.get(token, ([], ""))

    def list_resources(self, ctx: FetchContext) -> List[Any]:
        resources, _ = self.list_page(ctx, 100, "")
        return resources


class SimpleFetcher:
    """페이지네이션 없는 fetcher"""

    def __init__(self, resources: List[Any]):
        self.resources = resources

    def list_resources(self, ctx: FetchContext) -> List[Any]:
        return list(self.resources)


class ItemFormatter(BaseFormatter):
    """NAME / SIZE / AGE 컬럼, 'o' 키로 test/others 이동"""

    def __init__(self) -> None:
        super().__init__(
            [
                Column("NAME", 20, lambda r: r.name),
                Column("SIZE", 10, lambda r: (r.raw or {}).get("size", "-")),
                Column("AGE", 6, lambda r: (r.raw or {}).get("age", "-")),
            ]
        )

    def navigations(self, resource: Any) -> List[Navigation]:
        return [
            Navigation("o", "Others", "test", "others", "OwnerId", resource.id),
            Navigation("x", "Missing", "missing", "things", "OwnerId", resource.id),
        ]


def item_resources() -> List[BaseResource]:
    """기본 테스트 리소스 3개 (조회 순서 고정)"""
    return [
        make_resource("id-1", "dev-api", {"env": "dev", "team": "core"}, {"size": "900 MiB", "age": "3d"}),
        make_resource("id-2", "prod-api", {"env": "prod"}, {"size": "1.5 GiB", "age": "5h"}),
        make_resource("id-3", "batch", None, {"size": "900 MiB", "age": "2mo"}),
    ]


@pytest.fixture
def resources():
    return item_resources()


@pytest.fixture
def app_config():
    """단일 리전 AppConfig"""
    return AppConfig(regions=["ap-northeast-2"])


@pytest.fixture
def fetch_ctx(app_config):
    return FetchContext(config=app_config)


@pytest.fixture
def fake_fetcher(resources):
    """첫 페이지 2개 + 다음 페이지 1개"""
    return FakeFetcher({"": (resources[:2], "page-2"), "page-2": (resources[2:], "")})


@pytest.fixture
def fake_registry(fake_fetcher, resources):
    """test/items (페이지네이션), test/others (단일 페이지) 등록"""
    registry = Registry()
    registry.register("test", "items", lambda ctx: fake_fetcher, ItemFormatter)
    registry.register("test", "others", lambda ctx: SimpleFetcher(resources), ItemFormatter)
    registry.register_alias("it", "test", "items")
    registry.set_display_name("test", "Test")
    return registry


@pytest.fixture
def action_registry():
    return ActionRegistry()


# =============================================================================
# 유틸리티 함수
# =============================================================================


def create_mock_client_error(
    error_code: str,
    error_message: str = "Test error",
    operation: str = "TestOperation",
) -> Exception:
    """ClientError 생성 헬퍼"""
    from botocore.exceptions import ClientError

    return ClientError(
        {
            "Error": {
                "Code": error_code,
                "Message": error_message,
            }
        },
        operation,
    )


@pytest.fixture
def client_error():
    """ClientError 팩토리 픽스처"""
    return create_mock_client_error


def run_tasks(browser: Any, result: Any) -> List[Any]:
    """UpdateResult의 작업을 현재 스레드에서 모두 실행하고 효과 목록 반환"""
    effects = list(result.effects)
    pending = list(result.tasks)
    while pending:
        msg = pending.pop(0)()
        step = browser.update(msg)
        pending.extend(step.tasks)
        effects.extend(step.effects)
    return effects


@pytest.fixture
def drain():
    """run_tasks 픽스처 (tests/ 하위 모듈에서 conftest를 import하지 않도록)"""
    return run_tasks


@pytest.fixture
def resource_factory():
    return make_resource


# =============================================================================
# moto 통합
# =============================================================================


@pytest.fixture
def moto_ec2():
    """moto를 사용한 EC2 모킹 (VPC + 서브넷)"""
    import boto3
    from moto import mock_aws

    with mock_aws():
        ec2 = boto3.client("ec2", region_name="ap-northeast-2")

        vpc = ec2.create_vpc(CidrBlock="10.0.0.0/16")
        vpc_id = vpc["Vpc"]["VpcId"]

        subnet = ec2.create_subnet(VpcId=vpc_id, CidrBlock="10.0.1.0/24")
        subnet_id = subnet["Subnet"]["SubnetId"]

        yield ec2, vpc_id, subnet_id


@pytest.fixture
def moto_sqs():
    import boto3
    from moto import mock_aws

    with mock_aws():
        yield boto3.client("sqs", region_name="ap-northeast-2")


@pytest.fixture
def moto_iam():
    """moto를 사용한 IAM 모킹"""
    import boto3
    from moto import mock_aws

    with mock_aws():
        yield boto3.client("iam", region_name="ap-northeast-2")
