""" A subscriber's view of one stream. The :class:`StreamConsumer` sits between
    an unreliable delivery channel and a :class:`deltastream.protocol.Decoder`:
    duplicates, stale frames, gaps and frames from a foreign producer are
    absorbed into counters and a recovery flag instead of being raised, so
    that a read loop can keep running no matter what the transport does.
"""

import enum
import logging

from .errors import DeltaStreamError
from .protocol import wire
from .protocol.decoder import Decoder
from .protocol.frame import FrameType

logger = logging.getLogger(__name__)


class ConsumerState(enum.Enum):
    UNINITIALIZED = 'uninitialized'
    SYNCED = 'synced'


class StreamConsumer:
    """ Apply frames for one record *schema*, tracking which producer the
        stream belongs to and which version was applied last.

        The first frame must be a key frame. After that, a delta frame is
        only applied if it is exactly one version ahead; anything else is
        rejected. A rejected delta that skipped ahead sets
        :attr:`needs_recovery`, meaning the caller should obtain a fresh key
        frame from the producer; any accepted frame clears the flag.

        Rejections never raise. Every frame offered to :func:`apply` is
        counted exactly once, as either applied or rejected.
    """

    def __init__(self, schema):

        self.schema = schema

        self._decoder = None
        self._expected_stream_id = None
        self._current_value = None
        self._current_version = 0
        self._frames_applied = 0
        self._frames_rejected = 0
        self._needs_recovery = False


    @property
    def current_value(self):
        """ The most recently decoded value, or None before the first key
            frame. The value is shared with the decoder's baseline and must
            not be modified.
        """

        return self._current_value


    @property
    def current_version(self):
        return self._current_version


    @property
    def expected_stream_id(self):
        return self._expected_stream_id


    @property
    def frames_applied(self):
        return self._frames_applied


    @property
    def frames_rejected(self):
        return self._frames_rejected


    @property
    def needs_recovery(self):
        return self._needs_recovery


    @property
    def state(self):
        if self._decoder is None:
            return ConsumerState.UNINITIALIZED
        return ConsumerState.SYNCED


    def apply(self, frame):
        """ Offer one *frame* to the consumer. Returns True if the frame was
            applied, False if it was rejected.
        """

        if self._decoder is None:
            return self._bootstrap(frame)

        if frame.stream_id != self._expected_stream_id:
            logger.warning("Ignoring frame v%d from foreign stream %s (expected %s)",
                           frame.version, frame.stream_id, self._expected_stream_id)
            return self._reject()

        if frame.version <= self._current_version:
            logger.debug("Rejecting stale or duplicate frame v%d (current v%d)",
                         frame.version, self._current_version)
            return self._reject()

        if frame.type == FrameType.DELTA and frame.version != self._current_version + 1:
            logger.warning("Gap in stream %s: got v%d after v%d, recovery required",
                           self._expected_stream_id, frame.version, self._current_version)
            return self._reject(recover=True)

        try:
            value = self._decoder.decode(frame)
        except DeltaStreamError as e:
            logger.warning("Failed to apply frame v%d of stream %s: %s",
                           frame.version, self._expected_stream_id, e)
            return self._reject(recover=True)

        if frame.type == FrameType.KEY and self._needs_recovery:
            logger.info("Stream %s resynchronized at v%d", self._expected_stream_id, frame.version)

        self._current_value = value
        self._current_version = frame.version
        self._frames_applied += 1
        self._needs_recovery = False

        return True


    def _bootstrap(self, frame):
        """ Handle a frame arriving while uninitialized: only a key frame
            can start the stream.
        """

        if frame.type != FrameType.KEY:
            logger.debug("Rejecting %s frame v%d before any key frame", frame.type.name, frame.version)
            return self._reject(recover=True)

        self._decoder = Decoder(self.schema, frame)
        self._expected_stream_id = frame.stream_id
        self._current_value = frame.value
        self._current_version = frame.version
        self._frames_applied += 1
        self._needs_recovery = False

        logger.info("Synced to stream %s at v%d", frame.stream_id, frame.version)
        return True


    def _reject(self, recover=False):

        self._frames_rejected += 1

        if recover:
            self._needs_recovery = True

        return False


    def receive(self, raw):
        """ Decode the bytes *raw* with :func:`deltastream.protocol.wire.unpack_frame`
            and :func:`apply` the result. Bytes that do not decode to a frame
            are counted as a rejection and request recovery.
        """

        try:
            frame = wire.unpack_frame(raw, self.schema)
        except DeltaStreamError as e:
            logger.warning("Discarding undecodable frame: %s", e)
            return self._reject(recover=True)

        return self.apply(frame)


    def reset(self):
        """ Forget the current stream: the decoder, the expected producer, the
            current value and version, and the recovery flag. The next frame
            must be a key frame. The applied/rejected counters are cumulative
            and are not reset.
        """

        self._decoder = None
        self._expected_stream_id = None
        self._current_value = None
        self._current_version = 0
        self._needs_recovery = False

        logger.info("Consumer reset, waiting for a key frame")


# end of class StreamConsumer


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
