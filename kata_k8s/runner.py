"""
Drive pyinfra through its Python API against the local machine.
"""

from pyinfra import logger
from pyinfra.api import Config, Inventory, State
from pyinfra.api.connect import connect_all, disconnect_all
from pyinfra.api.deploy import add_deploy
from pyinfra.api.exceptions import PyinfraError
from pyinfra.api.facts import get_facts
from pyinfra.api.operations import run_ops
from pyinfra.api.state import StateStage
from pyinfra.facts.server import LinuxDistribution

from kata_k8s.errors import DeployFailedError
from kata_k8s.osinfo import OsIdentity, detect_distro

LOCAL_HOST = "@local"


def connect(settings) -> State:
    inventory = Inventory(([LOCAL_HOST], {}))
    state = State(inventory, Config(SUDO=True))
    if settings.debug:
        # Trace every command and its output, like `set -o xtrace`
        state.print_input = True
        state.print_output = True
        state.print_fact_info = True

    state.set_stage(StateStage.Connect)
    try:
        connect_all(state)
    except PyinfraError as e:
        raise DeployFailedError(f"Could not connect to {LOCAL_HOST}: {e}") from e
    return state


def detect(state: State):
    try:
        facts = get_facts(state, LinuxDistribution)
    except PyinfraError as e:
        raise DeployFailedError(f"Could not read /etc/os-release: {e}") from e
    fact = next(iter(facts.values()), None)
    identity = OsIdentity.from_fact(fact)
    logger.debug(f"detected {identity}")
    return detect_distro(identity)


def run(state: State, action, settings, distro):
    """
    Queue ``action`` for the local host and execute it.

    pyinfra stops the host at the first failing operation, which is the
    fail-fast behaviour both sequences rely on.
    """
    try:
        state.set_stage(StateStage.Prepare)
        add_deploy(state, action, settings, distro)

        state.set_stage(StateStage.Execute)
        run_ops(state)
    except PyinfraError as e:
        raise DeployFailedError(f"{action.__name__} failed: {e}") from e
    finally:
        disconnect_all(state)

    if state.failed_hosts:
        raise DeployFailedError(f"{action.__name__} failed, see the output above")
