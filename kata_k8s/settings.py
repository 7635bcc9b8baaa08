import os
import platform
import re
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from kata_k8s.errors import ConfigurationError

CONTAINERD_SOURCES = ("release", "distro")
DEFAULT_NYDUS_CLEANUP_COMMAND = "cleanup-snapshotter"
SUBCOMMAND_PATTERN = re.compile(r"^[a-z0-9][a-z0-9-]*$")

# platform.machine() -> architecture suffix used by upstream release assets
GO_ARCH = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
}


def _get_bool(value: Optional[str], fallback: bool) -> bool:
    if value is None or not value.strip():
        return fallback
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _first_set(environ: Mapping[str, str], *names: str) -> str:
    for name in names:
        value = environ.get(name)
        if value:
            return value
    return ""


@dataclass(frozen=True)
class ProxySettings:
    https_proxy: str = ""
    http_proxy: str = ""
    no_proxy: str = ""

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> "ProxySettings":
        return cls(
            https_proxy=_first_set(environ, "HTTPS_PROXY", "https_proxy"),
            http_proxy=_first_set(environ, "HTTP_PROXY", "http_proxy"),
            no_proxy=_first_set(environ, "NO_PROXY", "no_proxy"),
        )

    @property
    def required(self) -> bool:
        return bool(self.https_proxy or self.http_proxy or self.no_proxy)

    @property
    def environ(self) -> Dict[str, str]:
        """
        The proxy variables set for this run, for commands that pick their
        proxy themselves (curl, wget)
        """
        variables = {
            "https_proxy": self.https_proxy,
            "http_proxy": self.http_proxy,
            "no_proxy": self.no_proxy,
        }
        return {name: value for name, value in variables.items() if value}


@dataclass(frozen=True)
class Settings:
    """
    Everything the deploy reads from the environment, computed once at start.
    """

    proxy: ProxySettings = field(default_factory=ProxySettings)
    containerd_version: str = "latest"
    containerd_source: str = "release"
    install_runc: bool = True
    nydus_cleanup_command: str = DEFAULT_NYDUS_CLEANUP_COMMAND
    debug: bool = False
    home: str = "/root"
    uid: int = 0
    gid: int = 0
    arch: str = "amd64"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        if environ is None:
            environ = os.environ

        source = environ.get("CONTAINERD_SOURCE", "release").strip().lower()
        if source not in CONTAINERD_SOURCES:
            raise ConfigurationError(
                f'CONTAINERD_SOURCE="{source}" is not valid, '
                f"use one of: {', '.join(CONTAINERD_SOURCES)}"
            )

        cleanup_command = environ.get(
            "NYDUS_CLEANUP_COMMAND", DEFAULT_NYDUS_CLEANUP_COMMAND
        ).strip()
        if not SUBCOMMAND_PATTERN.match(cleanup_command):
            raise ConfigurationError(
                f'NYDUS_CLEANUP_COMMAND="{cleanup_command}" is not a gha-run.sh sub-command'
            )

        machine = platform.machine().lower()
        return cls(
            proxy=ProxySettings.from_env(environ),
            # An empty CONTAINERD_VERSION is kept so that it fails validation
            containerd_version=environ.get("CONTAINERD_VERSION", "latest"),
            containerd_source=source,
            install_runc=_get_bool(environ.get("INSTALL_RUNC"), True),
            nydus_cleanup_command=cleanup_command,
            debug=bool(environ.get("DEBUG")),
            home=environ.get("HOME") or os.path.expanduser("~"),
            uid=os.getuid(),
            gid=os.getgid(),
            arch=GO_ARCH.get(machine, machine),
        )

    @property
    def selinux_permissive(self) -> bool:
        return self.containerd_source == "distro"

    @property
    def kube_dir(self) -> str:
        return f"{self.home}/.kube"

    @property
    def kubeconfig(self) -> str:
        return f"{self.kube_dir}/config"
