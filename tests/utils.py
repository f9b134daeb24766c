import contextlib
import os


@contextlib.contextmanager
def override_env(env, replace_os_env=False):
    """
    Temporarily override ``os.environ`` with provided values::

        >>> with override_env(dict(DD_AGENT_HOST="agent")):
            # Your test
    """
    # Copy the full original environment
    original = dict(os.environ)

    # We allow callers to clear out the environment to prevent leaking variables into the test
    if replace_os_env:
        os.environ.clear()

    # Update based on the passed in arguments
    os.environ.update(env)
    try:
        yield
    finally:
        # Full clear the environment out and reset back to the original
        os.environ.clear()
        os.environ.update(original)


class DummySpan(object):
    """Minimal span exposing ``to_dict()``, the shape encoders accept besides plain mappings."""

    def __init__(self, name, service="test-service", resource=None, trace_id=1, span_id=1, parent_id=None, **kwargs):
        self.name = name
        self.service = service
        self.resource = resource or name
        self.trace_id = trace_id
        self.span_id = span_id
        self.parent_id = parent_id
        self.extra = kwargs

    def to_dict(self):
        d = {
            "trace_id": self.trace_id,
            "span_id": self.span_id,
            "parent_id": self.parent_id,
            "name": self.name,
            "service": self.service,
            "resource": self.resource,
        }
        d.update(self.extra)
        return d


def gen_trace(nspans=3, trace_id=1):
    """Build a trace of ``nspans`` spans, each one the child of the previous."""
    return [
        DummySpan("span.%d" % i, trace_id=trace_id, span_id=i + 1, parent_id=i or None, start=1000 + i, duration=10)
        for i in range(nspans)
    ]
