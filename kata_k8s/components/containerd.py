import re
from io import StringIO

import requests
from pyinfra import logger
from pyinfra.operations import files, server, systemd

from kata_k8s.errors import ResolutionError
from kata_k8s.operations import proxy

RELEASES_API = "https://api.github.com/repos/containerd/containerd/releases"
RELEASE_DOWNLOAD = "https://github.com/containerd/containerd/releases/download"
RAW_SOURCE = "https://raw.githubusercontent.com/containerd/containerd"
VERSION_PATTERN = re.compile(r"^v(\d+)\.(\d+)\.(\d+)$")

# Printed when the version cannot be resolved, so it can be checked by hand
MANUAL_QUERY = (
    f'curl -fsSL "{RELEASES_API}?per_page=100" '
    "| jq -r '.[].tag_name' "
    "| grep -E '^v[0-9]+\\.[0-9]+\\.[0-9]+$' "
    "| sort -V | tail -1"
)

INSTALL_PREFIX = "/usr/local"
CONFIG_DIR = "/etc/containerd"
CONFIG_FILE = f"{CONFIG_DIR}/config.toml"
SERVICE_FILE = "/etc/systemd/system/containerd.service"
DROP_IN_DIR = "/etc/systemd/system/containerd.service.d"
MODULES_FILE = "/etc/modules-load.d/containerd.conf"
KERNEL_MODULES = ["overlay", "br_netfilter"]
STATE_DIRS = "/var/lib/containerd*"


def _version_key(tag: str):
    return tuple(int(part) for part in VERSION_PATTERN.fullmatch(tag).groups())


def latest_version(timeout: int = 30) -> str:
    """
    Ask GitHub for the highest vX.Y.Z containerd release.

    Returns:
        str: the tag, ie ``v1.7.20``
    """
    try:
        response = requests.get(
            RELEASES_API, params={"per_page": 100}, timeout=timeout
        )
        response.raise_for_status()
        releases = response.json()
    except (requests.exceptions.RequestException, ValueError) as e:
        raise ResolutionError(
            f"Could not list the containerd releases ({e}), "
            f"try it by hand with: {MANUAL_QUERY}"
        ) from e

    tags = [
        release.get("tag_name", "")
        for release in releases
        if isinstance(release, dict)
    ]
    stable = [tag for tag in tags if VERSION_PATTERN.fullmatch(tag)]
    if not stable:
        raise ResolutionError(
            f"No vX.Y.Z tag found in the containerd releases, "
            f"try it by hand with: {MANUAL_QUERY}"
        )
    return max(stable, key=_version_key)


def resolve_version(requested: str) -> str:
    """
    Turn ``latest`` or an explicit tag into a validated vX.Y.Z tag.

    Args:
        requested (str): ``latest`` or a tag such as ``v1.7.20``

    Returns:
        str: the tag to install
    """
    version = latest_version() if requested == "latest" else requested
    if not VERSION_PATTERN.fullmatch(version or ""):
        raise ResolutionError(
            f'containerd version "{version}" does not match vX.Y.Z, '
            f"check the available releases with: {MANUAL_QUERY}"
        )
    return version


def release_url(version: str, arch: str) -> str:
    return f"{RELEASE_DOWNLOAD}/{version}/containerd-{version[1:]}-linux-{arch}.tar.gz"


def _load_kernel_modules():
    files.put(
        name="Load containerd kernel modules at boot",
        src=StringIO("\n".join(KERNEL_MODULES) + "\n"),
        dest=MODULES_FILE,
    )
    for module in KERNEL_MODULES:
        server.modprobe(name=f"Load {module}", module=module)


def _start():
    systemd.service(
        name="Enable containerd",
        service="containerd",
        running=True,
        enabled=True,
        daemon_reload=True,
    )


def _install_release(settings, distro):
    # Resolve before queueing anything
    version = resolve_version(settings.containerd_version)
    if settings.install_runc:
        distro.install_runtime_package()
    logger.info(f"install | containerd {version} from the upstream release")

    target = f"/tmp/containerd-{version[1:]}-linux-{settings.arch}.tar.gz"
    files.download(
        name=f"Downloading containerd {version}",
        src=release_url(version, settings.arch),
        dest=target,
        _env=settings.proxy.environ,
    )
    server.shell(
        name="Extract containerd",
        commands=[
            f"tar -C {INSTALL_PREFIX} -xzf {target}",
            f"rm -f {target}",
        ],
    )
    server.shell(
        name="Write the default containerd configuration",
        commands=[
            f"mkdir -p {CONFIG_DIR}",
            f"{INSTALL_PREFIX}/bin/containerd config default > {CONFIG_FILE}",
        ],
    )
    files.download(
        name="Install the containerd service unit",
        src=f"{RAW_SOURCE}/{version}/containerd.service",
        dest=SERVICE_FILE,
        force=True,
        _env=settings.proxy.environ,
    )


def _install_distro(distro):
    logger.info(f"install | containerd from {distro.name}")
    distro.install_containerd_package()
    server.shell(
        name="Write the containerd configuration with the systemd cgroup driver",
        commands=[
            f"mkdir -p {CONFIG_DIR}",
            "containerd config default "
            '| sed "s/SystemdCgroup = false/SystemdCgroup = true/" '
            f"> {CONFIG_FILE}",
        ],
    )


def install(settings, distro):
    if settings.containerd_source == "release":
        _install_release(settings, distro)
    else:
        _install_distro(distro)

    proxy.drop_in_snippet(DROP_IN_DIR, settings.proxy)
    _load_kernel_modules()
    _start()


def uninstall(settings, distro):
    if settings.containerd_source == "release":
        systemd.service(
            name="Stop containerd",
            service="containerd",
            running=False,
            enabled=False,
            _ignore_errors=True,
        )
        server.shell(
            name="Remove the containerd binaries",
            commands=[
                f"rm -f {INSTALL_PREFIX}/bin/containerd* {INSTALL_PREFIX}/bin/ctr",
            ],
        )
        files.file(name="Remove the containerd service unit", path=SERVICE_FILE, present=False)
        if settings.install_runc:
            distro.remove_runtime_package()
    else:
        distro.remove_containerd_package()

    files.file(name="Remove the containerd configuration", path=CONFIG_FILE, present=False)
    files.file(name="Remove the containerd kernel modules file", path=MODULES_FILE, present=False)
    proxy.remove_snippet(DROP_IN_DIR)
    server.shell(name="Remove the containerd state", commands=[f"rm -rf {STATE_DIRS}"])
