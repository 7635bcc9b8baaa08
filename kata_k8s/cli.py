import argparse
import os
import sys
from typing import List, Optional

from pyinfra import logger

from kata_k8s import orchestrator, runner
from kata_k8s.errors import KataK8sError
from kata_k8s.logs import setup_logging
from kata_k8s.settings import Settings

PROG = "kata-k8s"

DESCRIPTION = """\
Description:
  This script is made to install / uninstall kubernetes for the Kata Containers CI
  and is totally tailored for that (and other general use cases are not supported).
"""

EPILOG = f"""\
When and how to use:
  If we happen to notice that a CI is failing due to nydus snapshotter issues, simply do:
  \"\"\"
    {PROG} uninstall
    sudo systemctl reboot
    {PROG} install
  \"\"\"
"""


class UsageParser(argparse.ArgumentParser):
    """Print the whole usage on any argument error and exit with 1"""

    def error(self, message):
        self.print_help(sys.stderr)
        self.exit(1, f"WARNING: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = UsageParser(
        prog=PROG,
        usage=f"{PROG} install|uninstall",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("action", choices=sorted(orchestrator.ACTIONS))
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(bool(os.environ.get("DEBUG")))
    try:
        settings = Settings.from_env()
        state = runner.connect(settings)
        distro = runner.detect(state)
        runner.run(state, orchestrator.ACTIONS[args.action], settings, distro)
    except KataK8sError as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
