import json
from typing import Any
from typing import Dict
from typing import List
from typing import Mapping
from typing import Optional
from typing import Type
from typing import Union

import msgpack

from .errors import SerializationError
from .internal.compat import ensure_text
from .internal.logger import get_logger


__all__ = [
    "ENCODERS",
    "JSONEncoder",
    "JSONEncoderV2",
    "MsgpackEncoder",
    "SerializationError",
    "get_encoder",
]


log = get_logger(__name__)

Payload = Union[str, bytes]


class _EncoderBase(object):
    """
    Encoder interface that provides the logic to encode traces.

    Spans are opaque to the export client, encoders accept either a mapping or an
    object providing a ``to_dict()`` method.
    """

    content_type = None  # type: Optional[str]

    def encode_traces(self, traces):
        # type: (List[List[Any]]) -> Payload
        """
        Encodes a list of traces, expecting a list of items where each items
        is a list of spans. Before dumping the string in a serialized format all
        traces are normalized according to the encoding format. The trace
        nesting and the order of the spans are not changed.

        :param traces: A list of traces that should be serialized
        :raises SerializationError: when any span cannot be encoded
        """
        try:
            return self.encode(self._normalize_traces(traces))
        except SerializationError:
            raise
        except (TypeError, ValueError, OverflowError) as e:
            raise SerializationError("unable to encode %d traces with %r: %s" % (len(traces), self, e)) from e

    def encode(self, obj):
        # type: (Any) -> Payload
        """
        Defines the underlying format used during traces encoding.
        This method must be implemented and should only be used by the internal
        functions.
        """
        raise NotImplementedError()

    def _normalize_traces(self, traces):
        # type: (List[List[Any]]) -> Any
        return [[self._convert_span(span) for span in trace] for trace in traces]

    @classmethod
    def _convert_span(cls, span):
        # type: (Any) -> Dict[str, Any]
        return cls._normalize_span(cls._span_to_dict(span))

    @staticmethod
    def _span_to_dict(span):
        # type: (Any) -> Dict[str, Any]
        if isinstance(span, Mapping):
            d = dict(span)
        elif callable(getattr(span, "to_dict", None)):
            d = span.to_dict()
            if not isinstance(d, Mapping):
                raise SerializationError("%s.to_dict() returned %s" % (type(span).__name__, type(d).__name__))
            d = dict(d)
        else:
            raise SerializationError("unsupported span type: %s" % type(span).__name__)

        # a common mistake is to set the error field to a boolean instead of an
        # int. let's special case that here, because it's sure to happen in
        # customer code.
        err = d.get("error")
        if type(err) == bool:
            d["error"] = int(err)

        return d

    @staticmethod
    def _normalize_span(span):
        # type: (Dict[str, Any]) -> Dict[str, Any]
        # Ensure all string attributes are actually strings and not bytes
        # DEV: meta/metrics are left untouched and may still fail to encode.
        for key in ("resource", "name", "service"):
            if key in span:
                span[key] = _EncoderBase._normalize_str(span[key])
        return span

    @staticmethod
    def _normalize_str(obj):
        if obj is None:
            return obj
        return ensure_text(obj, errors="backslashreplace")

    def __repr__(self):
        return "%s(content_type=%r)" % (self.__class__.__name__, self.content_type)


class JSONEncoder(json.JSONEncoder, _EncoderBase):
    content_type = "application/json"

    def __init__(self, **kwargs):
        # NaN and Infinity are not valid JSON
        kwargs.setdefault("allow_nan", False)
        super(JSONEncoder, self).__init__(**kwargs)


class JSONEncoderV2(JSONEncoder):
    """
    JSONEncoderV2 encodes traces to the new intake API format.
    """

    content_type = "application/json"

    def _normalize_traces(self, traces):
        return {"traces": super(JSONEncoderV2, self)._normalize_traces(traces)}

    @classmethod
    def _convert_span(cls, span):
        # type: (Any) -> Dict[str, Any]
        sp = super(JSONEncoderV2, cls)._convert_span(span)
        sp["trace_id"] = JSONEncoderV2._encode_id_to_hex(sp.get("trace_id"))
        sp["parent_id"] = JSONEncoderV2._encode_id_to_hex(sp.get("parent_id"))
        sp["span_id"] = JSONEncoderV2._encode_id_to_hex(sp.get("span_id"))
        return sp

    @staticmethod
    def _encode_id_to_hex(dd_id):
        # type: (Optional[int]) -> str
        if not dd_id:
            return "0000000000000000"
        return "%0.16X" % int(dd_id)


class MsgpackEncoder(_EncoderBase):
    content_type = "application/msgpack"

    def encode(self, obj):
        return msgpack.packb(obj, use_bin_type=True)


ENCODERS = {
    "json": JSONEncoder,
    "json-v2": JSONEncoderV2,
    "msgpack": MsgpackEncoder,
}  # type: Dict[str, Type[_EncoderBase]]


def get_encoder(name):
    # type: (str) -> _EncoderBase
    """Instantiate the encoder registered under ``name``."""
    try:
        Encoder = ENCODERS[name]
    except KeyError:
        raise ValueError(
            "Unsupported encoder: '%s'. The supported encoders are: %s" % (name, ", ".join(sorted(ENCODERS)))
        )
    log.debug("using %s encoder for trace payloads", Encoder.__name__)
    return Encoder()
