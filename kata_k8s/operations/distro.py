from typing import List

KUBERNETES_PACKAGES = ["kubeadm", "kubelet", "kubectl"]
RUNTIME_PACKAGE = "runc"


def kubernetes_repo_url(channel: str, kind: str) -> str:
    """
    URL of the pkgs.k8s.io repository for a release channel

    + channel: the minor release, ie ``v1.31``
    + kind: ``deb`` or ``rpm``
    """
    return f"https://pkgs.k8s.io/core:/stable:/{channel}/{kind}/"


class Distro:
    """
    What a distribution family needs to provide to the provisioners.

    Subclasses wrap the package manager of the family; the provisioners only
    ever call these methods, never branch on the distribution themselves.
    """

    containerd_package = ""

    def __init__(self, name: str):
        self.name = name

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r})"

    def install_packages(self, name: str, packages: List[str], **kwargs):
        raise NotImplementedError

    def remove_packages(self, name: str, packages: List[str], **kwargs):
        raise NotImplementedError

    def prepare_host(self, settings):
        pass

    def install_runtime_package(self):
        self.install_packages(f"Install {RUNTIME_PACKAGE}", [RUNTIME_PACKAGE])

    def remove_runtime_package(self):
        self.remove_packages(f"Remove {RUNTIME_PACKAGE}", [RUNTIME_PACKAGE])

    def install_containerd_package(self):
        self.install_packages("Install containerd", [self.containerd_package])

    def remove_containerd_package(self):
        self.remove_packages("Remove containerd", [self.containerd_package])

    def register_kubernetes_repository(self, channel: str):
        raise NotImplementedError

    def install_kubernetes_packages(self, channel: str):
        raise NotImplementedError

    def remove_kubernetes_packages(self):
        raise NotImplementedError

    def disable_firewall(self):
        pass
