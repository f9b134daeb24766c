import http.client as httplib
import logging
import time
from typing import Any
from typing import Dict
from typing import List
from typing import Optional

import attr

from . import errors
from .encoding import JSONEncoder
from .encoding import Payload
from .encoding import _EncoderBase
from .encoding import get_encoder
from .internal import compat
from .internal.logger import get_logger
from .internal.utils.formats import human_size
from .settings import AgentConfig
from .settings import config as agent_config
from .settings._agent import is_ipv6_hostname
from .version import __version__


log = get_logger(__name__)

TRACES_ENDPOINT = "/v0.3/traces"
SERVICES_ENDPOINT = "/v0.3/services"

# Status of an exchange that could not be completed at all
STATUS_FAILED = -1


@attr.s(frozen=True, slots=True)
class Endpoint(object):
    """Location of one agent API, built once and shared by every request."""

    scheme = attr.ib(type=str)
    host = attr.ib(type=str)
    port = attr.ib(type=int)
    path = attr.ib(type=str)

    @property
    def url(self):
        # type: () -> str
        host = "[%s]" % self.host if is_ipv6_hostname(self.host) else self.host
        return "%s://%s:%s%s" % (self.scheme, host, self.port, self.path)

    def __str__(self):
        return self.url


class Response(object):
    """
    Custom API Response object to represent the outcome of one PUT exchange.

    When the exchange could not be completed ``status`` is ``STATUS_FAILED`` and
    ``error`` holds the :class:`ddexport.errors.TransportError` describing why.
    The body is read once into the instance before the connection is closed.
    """

    __slots__ = ["status", "body", "reason", "error"]

    def __init__(self, status=None, body=None, reason=None, error=None):
        # type: (Optional[int], Optional[bytes], Optional[str], Optional[errors.TransportError]) -> None
        self.status = status
        self.body = body
        self.reason = reason
        self.error = error

    @classmethod
    def from_http_response(cls, resp):
        """
        Build a ``Response`` from the provided ``HTTPResponse`` object.

        This function will call `.read()` to consume the body of the ``HTTPResponse`` object.

        :param resp: ``HTTPResponse`` object to build the ``Response`` from
        :type resp: ``HTTPResponse``
        :rtype: ``Response``
        :returns: A new ``Response``
        """
        return cls(
            status=resp.status,
            body=resp.read(),
            reason=getattr(resp, "reason", None),
        )

    @classmethod
    def failed(cls, error):
        # type: (errors.TransportError) -> Response
        return cls(status=STATUS_FAILED, error=error)

    def __repr__(self):
        return "{0}(status={1!r}, body={2!r}, reason={3!r}, error={4!r})".format(
            self.__class__.__name__,
            self.status,
            self.body,
            self.reason,
            self.error,
        )


def get_connection(endpoint, timeout=None):
    # type: (Endpoint, Optional[float]) -> httplib.HTTPConnection
    """Create a new, not yet connected, connection to ``endpoint``.

    Without a ``timeout`` the platform default socket timeout applies.
    """
    if endpoint.scheme != "http":
        raise ValueError("Unsupported scheme: %s" % endpoint.scheme)
    if not compat.is_integer(endpoint.port) or not 0 < endpoint.port < 65536:
        raise ValueError("Invalid port: %r" % (endpoint.port,))

    kwargs = {}  # type: Dict[str, Any]
    if timeout is not None:
        kwargs["timeout"] = timeout
    return httplib.HTTPConnection(endpoint.host, endpoint.port, **kwargs)


class ExportClient(object):
    """Client sending trace payloads to the agent.

    Each call to :meth:`send_traces` encodes the batch, performs a single
    blocking PUT on its own connection and reports the outcome as a boolean.
    Failures are logged and never raised, exporting traces must not break
    the instrumented application.
    """

    def __init__(
        self,
        hostname=None,  # type: Optional[str]
        port=None,  # type: Optional[int]
        encoder=None,  # type: Optional[_EncoderBase]
        logger=None,  # type: Optional[logging.Logger]
        headers=None,  # type: Optional[Dict[str, str]]
        timeout=None,  # type: Optional[float]
    ):
        # type: (...) -> None
        self.hostname = agent_config.hostname if hostname is None else hostname
        self.port = agent_config.port if port is None else port
        if not compat.is_integer(self.port) or not 0 < self.port < 65536:
            raise ValueError("Invalid trace agent port: %r" % (self.port,))
        self._timeout = agent_config.timeout if timeout is None else timeout
        self._encoder = JSONEncoder() if encoder is None else encoder
        self.log = log if logger is None else logger

        self.traces_endpoint = Endpoint("http", self.hostname, self.port, TRACES_ENDPOINT)
        # Reserved for service metadata, nothing is sent to it yet.
        self.services_endpoint = Endpoint("http", self.hostname, self.port, SERVICES_ENDPOINT)

        self._headers = {
            "Content-Type": getattr(self._encoder, "content_type", None) or JSONEncoder.content_type,
            "Datadog-Meta-Lang": "python",
            "Datadog-Meta-Lang-Version": compat.PYTHON_VERSION,
            "Datadog-Meta-Lang-Interpreter": compat.PYTHON_INTERPRETER,
            "Datadog-Meta-Tracer-Version": __version__,
        }
        if headers:
            self._headers.update(headers)

    @classmethod
    def from_config(cls, config=None, **kwargs):
        # type: (Optional[AgentConfig], Any) -> ExportClient
        """Build a client from ``config``, the ``DD_*`` environment configuration by default."""
        config = agent_config if config is None else config
        kwargs.setdefault("encoder", get_encoder(config.encoder))
        return cls(hostname=config.hostname, port=config.port, timeout=config.timeout, **kwargs)

    @property
    def encoder(self):
        # type: () -> _EncoderBase
        return self._encoder

    def send_traces(self, traces):
        # type: (List[List[Any]]) -> bool
        """Send traces to the agent.

        :param traces: the list of traces to send, each one a list of spans
        :returns: ``True`` if the agent answered with a 200 status
        """
        try:
            n_traces = len(traces)
        except TypeError:
            self.log.error("expected a list of traces, got %s", type(traces).__name__)
            return False

        try:
            payload = self._encoder.encode_traces(traces)
        except errors.SerializationError as e:
            self.log.error("error during serialization of %d traces: %s", n_traces, e)
            return False
        except Exception:
            self.log.error("error during serialization of %d traces with %r", n_traces, self._encoder, exc_info=True)
            return False

        if not isinstance(payload, (str, bytes)):
            self.log.error(
                "error during serialization of %d traces: %r returned %s", n_traces, self._encoder, type(payload)
            )
            return False

        if isinstance(payload, str):
            try:
                payload = payload.encode("utf-8")
            except UnicodeEncodeError as e:
                self.log.error("error during serialization of %d traces: payload is not valid UTF-8: %s", n_traces, e)
                return False

        response = self.put_payload(self.traces_endpoint, payload, {"X-Datadog-Trace-Count": str(n_traces)})
        if response.error is not None:
            self.log.warning(
                "error while sending %d traces to the agent. Status: %d, %s", n_traces, response.status, response.error
            )
            return False
        if response.status != 200:
            error = errors.ProtocolError(response.status, response.reason)
            self.log.warning("error while sending %d traces to the agent. Status: %d, %s", n_traces, error.status, error)
            return False

        self.log.debug("successfully sent %d traces to the agent", n_traces)
        return True

    def put_payload(self, endpoint, content, headers=None):
        # type: (Endpoint, Payload, Optional[Dict[str, str]]) -> Response
        """PUT ``content`` to ``endpoint``.

        Never raises: an exchange that cannot be completed gives a response with a
        ``STATUS_FAILED`` status and the transport error. Any status read from the
        agent is returned as is.
        """
        if isinstance(content, str):
            try:
                body = content.encode("utf-8")
            except UnicodeEncodeError as e:
                self.log.warning("could not send the payload to the agent at %s: %s", endpoint, e)
                return Response.failed(errors.TransmissionError(endpoint.url, e))
        else:
            body = content
        request_headers = self._headers.copy()
        if headers:
            request_headers.update(headers)

        conn = None
        try:
            try:
                conn = get_connection(endpoint, self._timeout)
                conn.connect()
            except (httplib.HTTPException, OSError, ValueError) as e:
                self.log.warning("error thrown before PUT call to the agent at %s: %s", endpoint, e)
                return Response.failed(errors.ConnectionError(endpoint.url, e))

            start = time.monotonic()
            try:
                conn.request("PUT", endpoint.path, body, request_headers)
                response = Response.from_http_response(conn.getresponse())
            except (httplib.HTTPException, OSError, ValueError) as e:
                self.log.warning("could not send the payload to the agent at %s: %s", endpoint, e)
                return Response.failed(errors.TransmissionError(endpoint.url, e))
        finally:
            if conn is not None:
                conn.close()

        if response.status == 200:
            self.log.debug("sent %s in %.5fs to %s", human_size(len(body)), time.monotonic() - start, endpoint)
        else:
            self.log.warning(
                "could not send the payload to the agent at %s. Status: %s, reason: %s",
                endpoint,
                response.status,
                response.reason,
            )
        return response

    def __repr__(self):
        return "%s(traces_endpoint=%r, encoder=%r)" % (
            self.__class__.__name__,
            self.traces_endpoint.url,
            self._encoder,
        )
