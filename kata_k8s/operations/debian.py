from typing import List

from pyinfra.api.operation import operation
from pyinfra.operations import apt

from kata_k8s.operations.distro import KUBERNETES_PACKAGES, Distro, kubernetes_repo_url

KEYRING_DIR = "/etc/apt/keyrings"
KUBERNETES_KEYRING = f"{KEYRING_DIR}/kubernetes-apt-keyring.gpg"


@operation()
def add_apt_keyring(url: str, keyring: str):
    """
    Fetch an armored key and store it dearmored for ``signed-by=``

    + url: the URL of the key
    + keyring: where to write the keyring
    """
    yield f"install -d -m 0755 {KEYRING_DIR}"
    yield f"curl -fsSL {url} | gpg --yes --dearmor -o {keyring}"


@operation()
def hold_packages(packages: List[str]):
    """
    Pin packages against upgrades

    + packages: the packages to hold
    """
    yield f"apt-mark hold {' '.join(packages)}"


class Debian(Distro):
    containerd_package = "containerd"

    def install_packages(self, name, packages, **kwargs):
        return apt.packages(name=name, packages=packages, update=True, **kwargs)

    def remove_packages(self, name, packages, **kwargs):
        return apt.packages(name=name, packages=packages, present=False, **kwargs)

    def register_kubernetes_repository(self, channel):
        repo = kubernetes_repo_url(channel, "deb")
        add_apt_keyring(
            name="Add the Kubernetes apt keyring",
            url=f"{repo}Release.key",
            keyring=KUBERNETES_KEYRING,
        )
        apt.repo(
            name="Add the Kubernetes apt repository",
            src=f"deb [signed-by={KUBERNETES_KEYRING}] {repo} /",
            filename="kubernetes",
        )

    def install_kubernetes_packages(self, channel):
        self.register_kubernetes_repository(channel)
        self.install_packages("Install kubeadm, kubelet and kubectl", KUBERNETES_PACKAGES)
        hold_packages(name="Hold kubeadm, kubelet and kubectl", packages=KUBERNETES_PACKAGES)

    def remove_kubernetes_packages(self):
        self.remove_packages(
            "Remove kubeadm, kubelet and kubectl",
            KUBERNETES_PACKAGES,
            extra_uninstall_args="--allow-change-held-packages",
        )
