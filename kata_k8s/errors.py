ISSUES_URL = "https://github.com/fidencio/runners-helpers/issues"


class KataK8sError(Exception):
    """Base class for every error reported to the operator"""


class ConfigurationError(KataK8sError):
    pass


class UnsupportedDistroError(KataK8sError):
    pass


class ResolutionError(KataK8sError):
    """A version or release channel could not be resolved upstream"""


class InternalError(KataK8sError):
    """A bug in this tool rather than in its input"""


class DeployFailedError(KataK8sError):
    pass
