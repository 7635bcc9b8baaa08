from pyinfra.operations import files, server, systemd

POD_NETWORK_CIDR = "10.244.0.0/16"
ADMIN_KUBECONFIG = "/etc/kubernetes/admin.conf"
FLANNEL_MANIFEST = "https://github.com/flannel-io/flannel/releases/latest/download/kube-flannel.yml"
CONTROL_PLANE_TAINT = "node-role.kubernetes.io/control-plane"


def setup(settings):
    systemd.service(name="Enable kubelet", service="kubelet", running=True, enabled=True)
    server.shell(
        name="Pull the control-plane images",
        commands=["kubeadm config images pull"],
        _preserve_sudo_env=True,
    )
    server.shell(
        name="Initialize the control plane",
        commands=[f"kubeadm init --pod-network-cidr={POD_NETWORK_CIDR}"],
        _preserve_sudo_env=True,
    )

    files.directory(name=f"Create {settings.kube_dir}", path=settings.kube_dir, _sudo=False)
    server.shell(
        name="Install the admin kubeconfig",
        commands=[
            f"cp -f {ADMIN_KUBECONFIG} {settings.kubeconfig}",
            f"chown {settings.uid}:{settings.gid} {settings.kubeconfig}",
        ],
    )

    # Both as the invoking user, through the kubeconfig written above
    kubectl = dict(_sudo=False, _env={"KUBECONFIG": settings.kubeconfig})
    server.shell(
        name="Install the flannel pod network",
        commands=[f"kubectl apply -f {FLANNEL_MANIFEST}"],
        **kubectl,
    )
    server.shell(
        name="Allow workloads on the control plane",
        commands=[f"kubectl taint nodes --all {CONTROL_PLANE_TAINT}-"],
        **kubectl,
    )


def reset(settings):
    server.shell(name="Reset the cluster", commands=["kubeadm reset -f"])
    files.directory(
        name=f"Remove {settings.kube_dir}",
        path=settings.kube_dir,
        present=False,
        _sudo=False,
    )
