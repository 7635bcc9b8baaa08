"""
Shared fixtures.

pyinfra operations are never executed here: each test patches the operation
modules where a component imported them and asserts what would be queued.
"""

from contextlib import ExitStack
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from kata_k8s.operations.distro import Distro
from kata_k8s.settings import ProxySettings, Settings

PROXY = ProxySettings(
    https_proxy="http://proxy.example.com:912",
    http_proxy="http://proxy.example.com:911",
    no_proxy="localhost,127.0.0.1,10.244.0.0/16",
)


@pytest.fixture
def settings():
    return Settings(proxy=PROXY, home="/home/ci", uid=1001, gid=1002)


@pytest.fixture
def no_proxy_settings():
    return Settings(home="/home/ci", uid=1001, gid=1002)


@pytest.fixture
def distro():
    fake = MagicMock(spec=Distro)
    fake.name = "Ubuntu"
    return fake


def patch_ops(module, *names):
    """
    Patch ``names`` on ``module`` with mocks attached to a single parent, so
    ``ops.manager.mock_calls`` keeps the order operations were queued in.
    """
    stack = ExitStack()
    manager = MagicMock()
    mocks = {}
    for name in names:
        mock = stack.enter_context(patch.object(module, name))
        manager.attach_mock(mock, name)
        mocks[name] = mock
    return stack, SimpleNamespace(manager=manager, **mocks)


def called_names(ops):
    """Top level ``name=`` of every queued call, in order"""
    return [c.kwargs.get("name") for c in ops.manager.mock_calls if "name" in c.kwargs]
