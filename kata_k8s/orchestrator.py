"""
The install and uninstall sequences.

Both are plain functions queueing pyinfra operations; they are run either by
``kata_k8s.runner`` (the ``kata-k8s`` command) or straight from the root
``deploy.py`` with the pyinfra CLI.
"""

from pyinfra import logger
from pyinfra.operations import python, systemd

from kata_k8s.components import cluster, containerd, kubernetes, nydus

SERVICES = ["nydus-snapshotter", "kubelet", "containerd"]


def ask_user_to_reboot():
    logger.info("Please, reboot your machine now")


def stop_all_services():
    # Best effort: any of them may be missing on a half provisioned host
    for service in SERVICES:
        systemd.service(
            name=f"Stop {service}",
            service=service,
            running=False,
            _ignore_errors=True,
        )
        systemd.service(
            name=f"Disable {service}",
            service=service,
            running=False,
            enabled=False,
            _ignore_errors=True,
        )


def install(settings, distro):
    logger.info(f"install | Kubernetes for the Kata Containers CI on {distro.name}")
    distro.prepare_host(settings)
    containerd.install(settings, distro)
    kubernetes.install(settings, distro)
    cluster.setup(settings)
    nydus.deploy(settings)


def uninstall(settings, distro):
    logger.info(f"uninstall | Kubernetes for the Kata Containers CI on {distro.name}")
    distro.prepare_host(settings)
    stop_all_services()
    nydus.undeploy(settings)
    cluster.reset(settings)
    kubernetes.uninstall(settings, distro)
    containerd.uninstall(settings, distro)
    python.call(name="Ask for a reboot", function=ask_user_to_reboot)


ACTIONS = {
    "install": install,
    "uninstall": uninstall,
}
