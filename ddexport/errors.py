"""Failure kinds of a trace export.

None of these are raised out of :meth:`ddexport.api.ExportClient.send_traces`:
encoders raise :class:`SerializationError`, the transport hands back
:class:`TransportError` values on :class:`ddexport.api.Response`, and the client
turns every kind into a ``False`` result and a log record.
"""
from typing import Optional


class ExportError(Exception):
    """Base class for trace export failures."""


class SerializationError(ExportError):
    """A trace batch could not be encoded."""


class TransportError(ExportError):
    """The PUT exchange with the agent could not be completed."""

    def __init__(self, url, cause=None):
        # type: (str, Optional[BaseException]) -> None
        super(TransportError, self).__init__(url, cause)
        self.url = url
        self.cause = cause

    def __str__(self):
        return "%s: %r" % (self.url, self.cause)


class ConnectionError(TransportError):  # noqa: A001
    """The connection to the agent could not be set up."""


class TransmissionError(TransportError):
    """Writing the payload or reading the response failed."""


class ProtocolError(ExportError):
    """The agent answered with a status other than 200."""

    def __init__(self, status, reason=None):
        # type: (int, Optional[str]) -> None
        super(ProtocolError, self).__init__(status, reason)
        self.status = status
        self.reason = reason

    def __str__(self):
        return "HTTP error status %s, reason %s" % (self.status, self.reason)
