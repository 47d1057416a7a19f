"""
tests/core/action/test_action_env.py - exec 하위 프로세스 환경변수 테스트
"""

import os

from core.action.env import build_subprocess_env
from core.config import AppConfig, ProfileSelection
from core.context import FetchContext

BASE = {"PATH": "/usr/bin", "AWS_PROFILE": "old", "AWS_DEFAULT_PROFILE": "older"}


class TestBuildSubprocessEnv:
    """build_subprocess_env 테스트"""

    def test_named_profile(self):
        ctx = FetchContext(config=AppConfig(regions=["us-east-1"], selections=[ProfileSelection.named("dev")]))
        env = build_subprocess_env(ctx, BASE)

        assert env["AWS_PROFILE"] == "dev"
        assert "AWS_DEFAULT_PROFILE" not in env
        assert env["AWS_REGION"] == "us-east-1"
        assert env["AWS_DEFAULT_REGION"] == "us-east-1"
        assert env["PATH"] == "/usr/bin"

    def test_env_only(self):
        ctx = FetchContext(config=AppConfig(selections=[ProfileSelection.env_only()]))
        env = build_subprocess_env(ctx, BASE)

        assert "AWS_PROFILE" not in env
        assert "AWS_DEFAULT_PROFILE" not in env
        assert env["AWS_CONFIG_FILE"] == os.devnull
        assert env["AWS_SHARED_CREDENTIALS_FILE"] == os.devnull

    def test_sdk_default_keeps_profile(self):
        env = build_subprocess_env(FetchContext(config=AppConfig()), BASE)
        assert env["AWS_PROFILE"] == "old"
        assert "AWS_REGION" not in env

    def test_region_override(self):
        ctx = FetchContext(config=AppConfig(regions=["us-east-1"])).with_region("eu-west-1")
        assert build_subprocess_env(ctx, {})["AWS_REGION"] == "eu-west-1"

    def test_base_not_mutated(self):
        base = dict(BASE)
        ctx = FetchContext(config=AppConfig(selections=[ProfileSelection.named("dev")]))
        build_subprocess_env(ctx, base)
        assert base == BASE
