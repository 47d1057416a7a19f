"""
tests/plugins/test_plugin_iam.py - IAM 역할 플러그인 테스트
"""

import json

import pytest

from core.exceptions import FetchError
from plugins.iam.roles import Role, RoleFetcher, RoleFormatter

ASSUME_ROLE_POLICY = json.dumps(
    {
        "Version": "2012-10-17",
        "Statement": [
            {"Effect": "Allow", "Principal": {"Service": "ec2.amazonaws.com"}, "Action": "sts:AssumeRole"}
        ],
    }
)


def create_role(iam, name, path="/", tags=None):
    params = {"RoleName": name, "Path": path, "AssumeRolePolicyDocument": ASSUME_ROLE_POLICY}
    if tags:
        params["Tags"] = tags
    iam.create_role(**params)


class TestRoleModel:
    """Role.from_api 테스트"""

    def test_list_item_has_no_tags(self):
        """목록 항목은 태그 미조회 (None)"""
        role = Role.from_api({"RoleName": "web", "Arn": "arn:aws:iam::123456789012:role/web"})
        assert role.id == role.name == "web"
        assert role.tags is None

    def test_with_tags(self):
        role = Role.from_api({"RoleName": "web", "Tags": [{"Key": "team", "Value": "core"}]}, with_tags=True)
        assert role.tags == {"team": "core"}

    def test_service_linked(self):
        role = Role.from_api({"RoleName": "AWSServiceRoleForECS", "Path": "/aws-service-role/ecs.amazonaws.com/"})
        assert role.is_service_linked is True
        assert Role.from_api({"RoleName": "web"}).path == "/"

    def test_formatter_columns(self):
        assert [c.name for c in RoleFormatter().columns()] == ["NAME", "PATH", "LAST USED", "DESCRIPTION", "AGE"]


class TestRoleFetcherMoto:
    """moto 기반 조회 테스트"""

    def test_list_page(self, fetch_ctx, moto_iam):
        create_role(moto_iam, "web", tags=[{"Key": "team", "Value": "core"}])
        create_role(moto_iam, "batch")

        roles, token = RoleFetcher(fetch_ctx).list_page(fetch_ctx, 100, "")

        assert {r.name for r in roles} == {"web", "batch"}
        assert all(r.tags is None for r in roles)
        assert token == ""

    def test_paging_with_marker(self, fetch_ctx, moto_iam):
        for i in range(3):
            create_role(moto_iam, f"role-{i}")
        fetcher = RoleFetcher(fetch_ctx)

        first, token = fetcher.list_page(fetch_ctx, 2, "")
        rest, last_token = fetcher.list_page(fetch_ctx, 2, token)

        assert len(first) == 2
        assert token
        assert len(rest) == 1
        assert last_token == ""
        assert {r.name for r in first + rest} == {"role-0", "role-1", "role-2"}

    def test_get_includes_tags(self, fetch_ctx, moto_iam):
        create_role(moto_iam, "web", tags=[{"Key": "team", "Value": "core"}])
        role = RoleFetcher(fetch_ctx).get(fetch_ctx, "web")
        assert role.tags == {"team": "core"}

    def test_get_missing(self, fetch_ctx, moto_iam):
        with pytest.raises(FetchError) as exc_info:
            RoleFetcher(fetch_ctx).get(fetch_ctx, "nope")
        assert exc_info.value.error_code == "NoSuchEntity"
