"""
tests/core/action/test_action_executor.py - 액션 실행 테스트

exec는 runner 주입, api는 MagicMock 실행기로 검증합니다.
"""

import subprocess
from unittest.mock import MagicMock

import pytest

from core.action.executor import ExecRequest, execute_action, prepare_exec, run_exec
from core.action.types import Action, ActionResult, ActionType
from core.config import AppConfig
from core.context import FetchContext
from core.exceptions import (
    ActionExecutionError,
    APICallError,
    EmptyCommandError,
    EmptyOperationError,
    ExecutorNotFoundError,
    ReadOnlyDeniedError,
    UnsafeValueError,
)
from core.resource.types import BaseResource, wrap_with_region

RESOURCE = BaseResource(id="i-1", name="web")
STOP = Action("Stop", "S", operation="StopInstances")
DRIFT = Action("Detect Drift", "d", operation="DetectStackDrift")
ECHO = Action("Echo", "e", type=ActionType.EXEC, command="echo ${ID}")


def completed(returncode=0):
    return subprocess.CompletedProcess(args=[], returncode=returncode)


@pytest.fixture
def config():
    return AppConfig(regions=["ap-northeast-2"])


@pytest.fixture
def ctx(config):
    return FetchContext(config=config)


@pytest.fixture
def executor(action_registry):
    mock = MagicMock(return_value=ActionResult.ok("done"))
    action_registry.register_executor("ec2", "instances", mock)
    return mock


def run(ctx, action, config, actions, resource=RESOURCE, runner=None):
    return execute_action(ctx, action, resource, "ec2", "instances", config=config, actions=actions, runner=runner)


class TestReadOnly:
    """읽기 전용 모드"""

    def test_denied_api_never_calls_provider(self, ctx, config, action_registry, executor):
        config.set_read_only(True)
        result = run(ctx, STOP, config, action_registry)

        assert result.success is False
        assert isinstance(result.error, ReadOnlyDeniedError)
        executor.assert_not_called()

    def test_allowlisted_api_runs(self, ctx, config, action_registry, executor):
        config.set_read_only(True)
        result = run(ctx, DRIFT, config, action_registry)

        assert result.success is True
        executor.assert_called_once_with(ctx, DRIFT, RESOURCE)

    def test_denied_exec_never_runs(self, ctx, config, action_registry):
        config.set_read_only(True)
        runner = MagicMock(return_value=completed())

        result = run(ctx, ECHO, config, action_registry, runner=runner)

        assert isinstance(result.error, ReadOnlyDeniedError)
        runner.assert_not_called()


class TestApiAction:
    """api 액션"""

    def test_calls_executor(self, ctx, config, action_registry, executor):
        result = run(ctx, STOP, config, action_registry)
        assert result.message == "done"
        executor.assert_called_once_with(ctx, STOP, RESOURCE)

    def test_executor_gets_unwrapped_resource(self, ctx, config, action_registry, executor):
        run(ctx, STOP, config, action_registry, resource=wrap_with_region(RESOURCE, "us-east-1"))
        assert executor.call_args.args[2] is RESOURCE

    def test_missing_executor(self, ctx, config, action_registry):
        result = run(ctx, STOP, config, action_registry)
        assert isinstance(result.error, ExecutorNotFoundError)

    def test_client_error_wrapped(self, ctx, config, action_registry, client_error):
        action_registry.register_executor(
            "ec2", "instances", MagicMock(side_effect=client_error("IncorrectInstanceState", "bad state"))
        )
        result = run(ctx, STOP, config, action_registry)

        assert isinstance(result.error, APICallError)
        assert result.error.error_code == "IncorrectInstanceState"
        assert "ec2.StopInstances" in result.message

    def test_empty_operation(self, ctx, config, action_registry, executor):
        result = run(ctx, Action("Broken"), config, action_registry)
        assert isinstance(result.error, EmptyOperationError)
        executor.assert_not_called()


class TestExecAction:
    """exec 액션"""

    def test_runs_shell_with_env(self, ctx, config, action_registry):
        runner = MagicMock(return_value=completed())

        result = run(ctx, ECHO, config, action_registry, runner=runner)

        assert result.success is True
        assert result.message == "Echo 완료"
        args, kwargs = runner.call_args
        assert args[0] == ["/bin/sh", "-c", "echo i-1"]
        assert kwargs["env"]["AWS_REGION"] == "ap-northeast-2"
        assert kwargs["check"] is False

    def test_unsafe_value_never_runs(self, ctx, config, action_registry):
        """메타문자가 포함된 값은 실행하지 않음"""
        runner = MagicMock(return_value=completed())
        action = Action("Echo", type=ActionType.EXEC, command="echo ${NAME}")

        result = run(ctx, action, config, action_registry, resource=BaseResource(id="i-1", name="evil; rm -rf /"), runner=runner)

        assert isinstance(result.error, UnsafeValueError)
        runner.assert_not_called()

    def test_non_zero_exit(self, ctx, config, action_registry):
        result = run(ctx, ECHO, config, action_registry, runner=MagicMock(return_value=completed(2)))
        assert isinstance(result.error, ActionExecutionError)
        assert result.error.returncode == 2

    def test_os_error(self, ctx, config, action_registry):
        result = run(ctx, ECHO, config, action_registry, runner=MagicMock(side_effect=FileNotFoundError("sh")))
        assert result.success is False
        assert isinstance(result.error, FileNotFoundError)

    def test_post_exec_follow_up(self, ctx, config, action_registry):
        action = Action("Login", type=ActionType.EXEC, command="aws sso login", post_exec_follow_up=lambda r: "refresh")
        result = run(ctx, action, config, action_registry, runner=MagicMock(return_value=completed()))
        assert result.follow_up == "refresh"

    def test_empty_command(self, ctx, config):
        with pytest.raises(EmptyCommandError):
            prepare_exec(ctx, Action("Nothing", type=ActionType.EXEC, command="  "), RESOURCE, config=config)

    def test_skip_aws_env(self, ctx, config):
        action = Action("Local", type=ActionType.EXEC, command="echo ${ID}", skip_aws_env=True)
        request = prepare_exec(ctx, action, RESOURCE, config=config)
        assert request.env is None
        assert request.argv == ["/bin/sh", "-c", "echo i-1"]

    def test_run_exec_direct(self):
        request = ExecRequest(action=ECHO, resource=RESOURCE, command="true")
        runner = MagicMock(return_value=completed())
        assert run_exec(request, runner).success is True
        runner.assert_called_once_with(["/bin/sh", "-c", "true"], env=None, check=False)


class TestViewAction:
    def test_view_returns_target(self, ctx, config, action_registry):
        action = Action("Subnets", "s", type=ActionType.VIEW, target="vpc/subnets")
        result = run(ctx, action, config, action_registry)
        assert result.success is True
        assert result.follow_up == "vpc/subnets"

    def test_view_allowed_in_read_only(self, ctx, config, action_registry):
        config.set_read_only(True)
        action = Action("Subnets", "s", type=ActionType.VIEW, target="vpc/subnets")
        assert run(ctx, action, config, action_registry).success is True
