import socket
from typing import Optional
from typing import TypeVar
from typing import Union

from ddexport.encoding import ENCODERS
from ddexport.settings._core import DDConfig


DEFAULT_HOSTNAME = "localhost"
DEFAULT_TRACE_PORT = 8126
DEFAULT_ENCODER = "json"

T = TypeVar("T")


# This method returns if a hostname is an IPv6 address
def is_ipv6_hostname(hostname: Union[T, str]) -> bool:
    if not isinstance(hostname, str):
        return False
    try:
        socket.inet_pton(socket.AF_INET6, hostname)
        return True
    except socket.error:  # not a valid address
        return False


def _check_port(port: int) -> None:
    if not 0 < port < 65536:
        raise ValueError("Invalid trace agent port: %d" % port)


def _check_encoder(name: str) -> None:
    if name not in ENCODERS:
        raise ValueError("Unsupported encoder: %r. The supported encoders are: %s" % (name, ", ".join(sorted(ENCODERS))))


class AgentConfig(DDConfig):
    __prefix__ = "dd"

    hostname = DDConfig.v(
        str,
        "agent_host",
        default=DEFAULT_HOSTNAME,
        help_type="String",
        help="Hostname of the agent receiving traces",
    )

    port = DDConfig.v(
        int,
        "trace_agent_port",
        default=DEFAULT_TRACE_PORT,
        validator=_check_port,
        help_type="Int",
        help="Port of the agent receiving traces",
    )

    timeout = DDConfig.v(
        Optional[float],
        "trace_agent_timeout_seconds",
        default=None,
        help_type="Float",
        help="Socket timeout in seconds for the PUT exchange. Unset means the platform default",
    )

    encoder = DDConfig.v(
        str,
        "trace_encoder",
        default=DEFAULT_ENCODER,
        validator=_check_encoder,
        help_type="String",
        help="Name of the encoder used for trace payloads (json, json-v2 or msgpack)",
    )


config = AgentConfig()
