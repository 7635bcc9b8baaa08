from io import StringIO

from pyinfra.api.operation import operation
from pyinfra.operations import dnf, files, server, systemd

from kata_k8s.operations.distro import KUBERNETES_PACKAGES, Distro, kubernetes_repo_url

DOCKER_CE_REPO = "https://download.docker.com/linux/centos/docker-ce.repo"
KUBERNETES_REPO_FILE = "/etc/yum.repos.d/kubernetes.repo"
PREREQUISITES = ["wget", "git", "fuse"]


def render_kubernetes_repo(channel: str) -> str:
    repo = kubernetes_repo_url(channel, "rpm")
    return f"""[kubernetes]
name=Kubernetes
baseurl={repo}
enabled=1
gpgcheck=1
gpgkey={repo}repodata/repomd.xml.key
exclude=kubelet kubeadm kubectl cri-tools kubernetes-cni
"""


@operation()
def set_selinux_permissive(config: str = "/etc/selinux/config"):
    """
    Switch SELinux to permissive, now and across reboots

    + config: the SELinux configuration file
    """
    yield "setenforce 0"
    yield f"sed -i -e 's/SELINUX=enforcing/SELINUX=permissive/' {config}"


class RedHat(Distro):
    containerd_package = "containerd.io"

    def install_packages(self, name, packages, **kwargs):
        return dnf.packages(name=name, packages=packages, **kwargs)

    def remove_packages(self, name, packages, **kwargs):
        return dnf.packages(name=name, packages=packages, present=False, **kwargs)

    def prepare_host(self, settings):
        if settings.selinux_permissive:
            set_selinux_permissive(name="Set SELinux to permissive")
        self.install_packages("Install host prerequisites", PREREQUISITES)

    def install_containerd_package(self):
        # containerd.io is only shipped by the docker-ce repository
        dnf.repo(name="Add the docker-ce repository", src=DOCKER_CE_REPO)
        super().install_containerd_package()

    def register_kubernetes_repository(self, channel):
        files.put(
            name="Add the Kubernetes dnf repository",
            src=StringIO(render_kubernetes_repo(channel)),
            dest=KUBERNETES_REPO_FILE,
        )
        server.shell(name="Refresh the dnf cache", commands=["dnf makecache"])

    def install_kubernetes_packages(self, channel):
        self.register_kubernetes_repository(channel)
        self.install_packages(
            "Install kubeadm, kubelet and kubectl",
            KUBERNETES_PACKAGES,
            extra_install_args="--disableexcludes=kubernetes",
        )

    def remove_kubernetes_packages(self):
        self.remove_packages("Remove kubeadm, kubelet and kubectl", KUBERNETES_PACKAGES)

    def disable_firewall(self):
        systemd.service(
            name="Disable firewalld",
            service="firewalld",
            running=False,
            enabled=False,
            _ignore_errors=True,
        )
