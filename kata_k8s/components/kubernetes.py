import re
from io import StringIO

import requests
from pyinfra import logger
from pyinfra.operations import files, server

from kata_k8s.errors import ResolutionError
from kata_k8s.operations import proxy

STABLE_RELEASE = "https://dl.k8s.io/release/stable.txt"
CHANNEL_PATTERN = re.compile(r"^(v\d+\.\d+)\.\d+")

SYSCTL_FILE = "/etc/sysctl.d/k8s.conf"
SYSCTL_SETTINGS = {
    "net.bridge.bridge-nf-call-ip6tables": 1,
    "net.bridge.bridge-nf-call-iptables": 1,
    "net.ipv4.ip_forward": 1,
}
KUBELET_DROP_IN_DIR = "/etc/systemd/system/kubelet.service.d"


def stable_channel(timeout: int = 30) -> str:
    """
    Minor release of the current stable Kubernetes, ie ``v1.31``
    """
    try:
        response = requests.get(STABLE_RELEASE, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        raise ResolutionError(
            f"Could not fetch the stable Kubernetes release ({e}), "
            f"try it by hand with: curl -Ls {STABLE_RELEASE}"
        ) from e

    release = response.text.strip()
    match = CHANNEL_PATTERN.match(release)
    if not match:
        raise ResolutionError(
            f'Unexpected stable Kubernetes release "{release}", '
            f"try it by hand with: curl -Ls {STABLE_RELEASE}"
        )
    return match.group(1)


def render_sysctl() -> str:
    return "".join(f"{key} = {value}\n" for key, value in SYSCTL_SETTINGS.items())


def install(settings, distro):
    files.put(
        name="Kubernetes sysctl settings",
        src=StringIO(render_sysctl()),
        dest=SYSCTL_FILE,
    )
    server.shell(name="Apply sysctl settings", commands=["sysctl --system"])

    distro.disable_firewall()
    channel = stable_channel()
    logger.info(f"install | kubeadm, kubelet and kubectl from the {channel} channel")
    distro.install_kubernetes_packages(channel)

    proxy.drop_in_snippet(KUBELET_DROP_IN_DIR, settings.proxy)
    # Packages started kubelet before proxy.conf existed
    server.shell(name="Restart kubelet", commands=["systemctl restart kubelet"])


def uninstall(settings, distro):
    proxy.remove_snippet(KUBELET_DROP_IN_DIR)
    distro.remove_kubernetes_packages()
    files.file(name="Remove Kubernetes sysctl settings", path=SYSCTL_FILE, present=False)
    server.shell(name="Reapply sysctl settings", commands=["sysctl --system"])
