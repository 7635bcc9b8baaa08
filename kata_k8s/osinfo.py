from dataclasses import dataclass
from typing import Any, Mapping, Optional

from kata_k8s.errors import UnsupportedDistroError
from kata_k8s.operations.debian import Debian
from kata_k8s.operations.distro import Distro
from kata_k8s.operations.redhat import RedHat

DEBIAN_IDS = ("ubuntu", "debian")
REDHAT_IDS = ("centos", "rhel", "rocky", "almalinux")


@dataclass(frozen=True)
class OsIdentity:
    id: str
    name: str

    @classmethod
    def from_release_meta(cls, meta: Optional[Mapping[str, Any]]) -> "OsIdentity":
        """
        Build the identity from the ``release_meta`` of pyinfra's
        ``LinuxDistribution`` fact, i.e. the /etc/os-release key/values.
        """
        meta = meta or {}
        os_id = str(meta.get("ID", "")).strip().lower()
        return cls(
            id=os_id,
            name=str(meta.get("NAME") or os_id or "unknown"),
        )

    @classmethod
    def from_fact(cls, fact: Optional[Mapping[str, Any]]) -> "OsIdentity":
        return cls.from_release_meta((fact or {}).get("release_meta"))


def detect_distro(identity: OsIdentity) -> Distro:
    if identity.id in DEBIAN_IDS:
        return Debian(identity.name)
    if identity.id in REDHAT_IDS:
        return RedHat(identity.name)
    raise UnsupportedDistroError(f"{identity.name} is not supported by this script")
