from io import StringIO

from pyinfra import logger
from pyinfra.operations import files, systemd

from kata_k8s.errors import ISSUES_URL, InternalError
from kata_k8s.settings import ProxySettings

SNIPPET_NAME = "proxy.conf"


def render_snippet(proxy: ProxySettings) -> str:
    return f"""[Service]
Environment="no_proxy={proxy.no_proxy}"
Environment="https_proxy={proxy.https_proxy}"
Environment="http_proxy={proxy.http_proxy}"
Environment="NO_PROXY={proxy.no_proxy}"
Environment="HTTPS_PROXY={proxy.https_proxy}"
Environment="HTTP_PROXY={proxy.http_proxy}"
"""


def _require_path(caller: str, path: str):
    if not path:
        logger.warning(
            f"{caller} | An error in the script itself was found, "
            f'please consider reporting it back to "{ISSUES_URL}"'
        )
        raise InternalError(f"{caller} | The snippet_path is required, but was not passed")


def drop_in_snippet(path: str, proxy: ProxySettings):
    """
    Pass the proxy environment to a systemd service through a drop-in

    + path: the drop-in directory, ie ``/etc/systemd/system/kubelet.service.d``
    + proxy: the proxy settings to write
    """
    if not proxy.required:
        logger.info("drop_in_snippet | proxy is not required for the system, skip setting it up ...")
        return
    _require_path("drop_in_snippet", path)

    logger.info(f"drop_in_snippet | dropping the {SNIPPET_NAME} snippet to {path}")
    files.directory(name=f"Create {path}", path=path, present=True)
    files.put(
        name=f"Drop {SNIPPET_NAME} into {path}",
        src=StringIO(render_snippet(proxy)),
        dest=f"{path}/{SNIPPET_NAME}",
    )
    systemd.daemon_reload(name="Reload systemd")


def remove_snippet(path: str):
    _require_path("remove_snippet", path)

    files.file(
        name=f"Remove {SNIPPET_NAME} from {path}",
        path=f"{path}/{SNIPPET_NAME}",
        present=False,
    )
    systemd.daemon_reload(name="Reload systemd")
