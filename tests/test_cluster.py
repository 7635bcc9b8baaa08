import pytest

from conftest import called_names, patch_ops
from kata_k8s.components import cluster


@pytest.fixture
def ops():
    stack, ops = patch_ops(cluster, "files", "server", "systemd")
    with stack:
        yield ops


def test_setup(ops, settings):
    cluster.setup(settings)

    assert called_names(ops) == [
        "Enable kubelet",
        "Pull the control-plane images",
        "Initialize the control plane",
        "Create /home/ci/.kube",
        "Install the admin kubeconfig",
        "Install the flannel pod network",
        "Allow workloads on the control plane",
    ]
    ops.systemd.service.assert_called_once_with(
        name="Enable kubelet", service="kubelet", running=True, enabled=True
    )

    pull, init, kubeconfig, flannel, taint = ops.server.shell.call_args_list
    assert init.kwargs["commands"] == ["kubeadm init --pod-network-cidr=10.244.0.0/16"]
    assert pull.kwargs["_preserve_sudo_env"] and init.kwargs["_preserve_sudo_env"]
    assert kubeconfig.kwargs["commands"] == [
        "cp -f /etc/kubernetes/admin.conf /home/ci/.kube/config",
        "chown 1001:1002 /home/ci/.kube/config",
    ]
    assert flannel.kwargs["commands"] == [f"kubectl apply -f {cluster.FLANNEL_MANIFEST}"]
    assert taint.kwargs["commands"] == [
        "kubectl taint nodes --all node-role.kubernetes.io/control-plane-"
    ]
    for kubectl in (flannel, taint):
        assert kubectl.kwargs["_sudo"] is False
        assert kubectl.kwargs["_env"] == {"KUBECONFIG": "/home/ci/.kube/config"}


def test_reset(ops, settings):
    cluster.reset(settings)

    ops.server.shell.assert_called_once_with(name="Reset the cluster", commands=["kubeadm reset -f"])
    ops.files.directory.assert_called_once_with(
        name="Remove /home/ci/.kube",
        path="/home/ci/.kube",
        present=False,
        _sudo=False,
    )
