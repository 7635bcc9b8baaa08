"""
Run real operations on the local machine, without sudo, to check how a
failing command ends the deploy.
"""

from unittest.mock import MagicMock, patch

import pytest
from pyinfra.api import Config
from pyinfra.api.exceptions import PyinfraError
from pyinfra.operations import server

from kata_k8s import runner
from kata_k8s.errors import DeployFailedError


def fail_then_touch(marker, distro):
    server.shell(name="Fail", commands=["false"])
    server.shell(name="Touch", commands=[f"touch {marker}"])


def tolerate_then_touch(marker, distro):
    server.shell(name="Fail", commands=["false"], _ignore_errors=True)
    server.shell(name="Touch", commands=[f"touch {marker}"])


@pytest.fixture
def state(no_proxy_settings):
    with patch.object(runner, "Config", return_value=Config()):
        yield runner.connect(no_proxy_settings)


@pytest.fixture
def disconnect_all():
    with patch.object(runner, "disconnect_all", wraps=runner.disconnect_all) as disconnect_all:
        yield disconnect_all


def test_first_failing_command_stops_the_deploy(state, disconnect_all, tmp_path):
    marker = tmp_path / "touched"

    with pytest.raises(DeployFailedError, match="fail_then_touch failed"):
        runner.run(state, fail_then_touch, marker, None)

    assert not marker.exists()
    disconnect_all.assert_called_once_with(state)


def test_ignored_failure_lets_the_next_operation_run(state, disconnect_all, tmp_path):
    marker = tmp_path / "touched"

    runner.run(state, tolerate_then_touch, marker, None)

    assert marker.exists()
    disconnect_all.assert_called_once_with(state)


def test_unreadable_os_release():
    with patch.object(runner, "get_facts", side_effect=PyinfraError("No hosts remaining!")):
        with pytest.raises(DeployFailedError, match="No hosts remaining!"):
            runner.detect(MagicMock())
