"""Exception types.

Decoder and reconciler errors are raised to the caller; they indicate a
contract violation (a frame routed to the wrong decoder, a patch applied to
the wrong baseline). The :class:`deltastream.consumer.StreamConsumer` never
raises these for stream anomalies, it counts them instead.
"""


class DeltaStreamError(Exception):
    """Base class for all deltastream errors."""


class SchemaError(DeltaStreamError, ValueError):
    """A schema or configuration block is not valid."""


class StreamMismatch(DeltaStreamError):
    """A frame was produced by a different encoder than the baseline."""


class StaleFrame(DeltaStreamError):
    """A frame is older than the baseline it was offered to."""


class ConsistencyViolation(DeltaStreamError):
    """A keyed collection delta references a key the baseline does not have,
    or a keyed list contains the same key twice.
    """


class WireError(DeltaStreamError):
    """A plain structure could not be interpreted as a frame."""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
