from pyinfra import logger
from pyinfra.operations import server

from kata_k8s.operations import kata

KATA_CONTAINERS_REPO = "https://github.com/kata-containers/kata-containers"
CLONE_PATH = "/tmp/kata-containers"
SCRIPT_DIR = f"{CLONE_PATH}/tests/integration/kubernetes"
DEPLOY_COMMAND = "deploy-snapshotter"

SNAPSHOTTER_ENV = {
    "K8S": "vanilla",
    "KATA_RUNTIME": "qemu",
    "CONTAINER_RUNTIME": "containerd",
    "SNAPSHOTTER": "nydus",
    "PULL_TYPE": "guest-pull",
}


def _fresh_clone():
    server.shell(
        name="Clone kata-containers",
        commands=[
            f"rm -rf {CLONE_PATH}",
            f"git clone {KATA_CONTAINERS_REPO} {CLONE_PATH}",
        ],
        _sudo=False,
    )


def _gha_run(name: str, command: str):
    kata.gha_run(
        name=name,
        command=command,
        _chdir=SCRIPT_DIR,
        _env=SNAPSHOTTER_ENV,
        _sudo=False,
    )


def deploy(settings):
    _fresh_clone()
    _gha_run("Deploy the nydus snapshotter", DEPLOY_COMMAND)


def undeploy(settings):
    logger.info(f"undeploy | removing the nydus snapshotter with {settings.nydus_cleanup_command}")
    _fresh_clone()
    _gha_run("Remove the nydus snapshotter", settings.nydus_cleanup_command)
