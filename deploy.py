"""
Install or remove Kubernetes for the Kata Containers CI with the pyinfra CLI

pyinfra @local deploy.py --sudo --data action=install
pyinfra @local deploy.py --sudo --data action=uninstall
"""

from pyinfra.context import host
from pyinfra.facts.server import LinuxDistribution

from kata_k8s import orchestrator
from kata_k8s.osinfo import OsIdentity, detect_distro
from kata_k8s.settings import Settings

action = host.data.get("action", "")
if action not in orchestrator.ACTIONS:
    raise ValueError(f'option "{action}" is not valid, use --data action=install|uninstall')

settings = Settings.from_env()
distro = detect_distro(OsIdentity.from_fact(host.get_fact(LinuxDistribution)))

orchestrator.ACTIONS[action](settings, distro)
