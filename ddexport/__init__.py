from ._logger import configure_ddexport_logger


# configure ddexport logger before other modules log
configure_ddexport_logger()  # noqa: E402

from .api import Endpoint  # noqa: E402
from .api import ExportClient  # noqa: E402
from .api import Response  # noqa: E402
from .encoding import JSONEncoder  # noqa: E402
from .encoding import JSONEncoderV2  # noqa: E402
from .encoding import MsgpackEncoder  # noqa: E402
from .errors import SerializationError  # noqa: E402
from .settings import config  # noqa: E402
from .version import __version__  # noqa: E402


__all__ = [
    "Endpoint",
    "ExportClient",
    "JSONEncoder",
    "JSONEncoderV2",
    "MsgpackEncoder",
    "Response",
    "SerializationError",
    "config",
    "__version__",
]
