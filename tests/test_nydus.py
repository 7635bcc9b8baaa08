from dataclasses import replace

import pytest

from conftest import patch_ops
from kata_k8s.components import nydus
from kata_k8s.operations import kata


@pytest.fixture
def ops():
    stack, ops = patch_ops(nydus, "server", "kata")
    with stack:
        yield ops


def test_gha_run_checks_the_sub_command_first():
    check, run = kata.gha_run._inner(command="cleanup-snapshotter")

    assert check.startswith("grep -Eq '(^|[[:space:]|])\"?cleanup-snapshotter\"?\\)' ./gha-run.sh")
    assert "ERROR: ./gha-run.sh does not support cleanup-snapshotter" in check
    assert check.endswith("exit 1; }")
    assert run == "./gha-run.sh cleanup-snapshotter"


def test_deploy(ops, settings):
    nydus.deploy(settings)

    ops.server.shell.assert_called_once_with(
        name="Clone kata-containers",
        commands=[
            "rm -rf /tmp/kata-containers",
            "git clone https://github.com/kata-containers/kata-containers /tmp/kata-containers",
        ],
        _sudo=False,
    )
    ops.kata.gha_run.assert_called_once_with(
        name="Deploy the nydus snapshotter",
        command="deploy-snapshotter",
        _chdir="/tmp/kata-containers/tests/integration/kubernetes",
        _env={
            "K8S": "vanilla",
            "KATA_RUNTIME": "qemu",
            "CONTAINER_RUNTIME": "containerd",
            "SNAPSHOTTER": "nydus",
            "PULL_TYPE": "guest-pull",
        },
        _sudo=False,
    )
    # Clone first, then run the script from it
    assert [c[0] for c in ops.manager.mock_calls] == ["server.shell", "kata.gha_run"]


@pytest.mark.parametrize("command", ["cleanup-snapshotter", "delete-snapshotter"])
def test_undeploy_uses_the_configured_command(ops, settings, command):
    nydus.undeploy(replace(settings, nydus_cleanup_command=command))

    ops.server.shell.assert_called_once()
    gha_run = ops.kata.gha_run.call_args.kwargs
    assert gha_run["command"] == command
    assert gha_run["_env"] == nydus.SNAPSHOTTER_ENV
