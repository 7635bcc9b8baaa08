from pyinfra.api.operation import operation

GHA_RUN = "./gha-run.sh"


@operation()
def gha_run(command: str, script: str = GHA_RUN):
    """
    Run a sub-command of the kata-containers CI helper script

    The script dispatches on a ``case`` statement; a sub-command it does not
    list would silently fall through to its usage, so refuse it up front.

    + command: the sub-command, ie ``deploy-snapshotter``
    + script: path of the helper, relative to the operation's ``_chdir``
    """
    yield (
        f"grep -Eq '(^|[[:space:]|])\"?{command}\"?\\)' {script} "
        f"|| {{ echo 'ERROR: {script} does not support {command}' >&2; exit 1; }}"
    )
    yield f"{script} {command}"
