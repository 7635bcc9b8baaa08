import pytest

from kata_k8s.errors import UnsupportedDistroError
from kata_k8s.operations.debian import Debian
from kata_k8s.operations.redhat import RedHat
from kata_k8s.osinfo import OsIdentity, detect_distro

UBUNTU = {
    "name": "Ubuntu",
    "major": 22,
    "minor": 4,
    "release_meta": {"ID": "ubuntu", "NAME": "Ubuntu", "ID_LIKE": "debian"},
}
CENTOS = {
    "name": "CentOS Stream",
    "major": 9,
    "minor": None,
    "release_meta": {"ID": "centos", "NAME": "CentOS Stream", "ID_LIKE": "rhel fedora"},
}


def test_identity_from_fact():
    identity = OsIdentity.from_fact(CENTOS)

    assert identity.id == "centos"
    assert identity.name == "CentOS Stream"


def test_identity_without_fact():
    identity = OsIdentity.from_fact(None)

    assert identity.id == ""
    assert identity.name == "unknown"


def test_debian_family():
    distro = detect_distro(OsIdentity.from_fact(UBUNTU))

    assert isinstance(distro, Debian)
    assert distro.name == "Ubuntu"


def test_redhat_family():
    distro = detect_distro(OsIdentity.from_fact(CENTOS))

    assert isinstance(distro, RedHat)
    assert distro.containerd_package == "containerd.io"


@pytest.mark.parametrize(
    "meta",
    [
        {"ID": "fedora", "NAME": "Fedora Linux"},
        {"ID": "arch", "NAME": "Arch Linux"},
        {"ID": "opensuse-leap", "NAME": "openSUSE Leap", "ID_LIKE": "suse"},
        {"ID": "linuxmint", "NAME": "Linux Mint", "ID_LIKE": "ubuntu debian"},
    ],
)
def test_unsupported(meta):
    with pytest.raises(UnsupportedDistroError, match=f"{meta['NAME']} is not supported"):
        detect_distro(OsIdentity.from_release_meta(meta))


def test_unsupported_without_fact():
    with pytest.raises(UnsupportedDistroError, match="unknown is not supported"):
        detect_distro(OsIdentity.from_fact({}))
