""" The producer side of a stream. One :class:`Encoder` owns one stream id;
    it is not safe to share an instance between threads without external
    locking, as :func:`Encoder.encode` is a read-modify-write of the last
    value and version.
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import Any, Optional

from .. import patch
from .. import snapshot
from ..schema import Schema
from .fields import VERSION_MAX
from .frame import DeltaFrame, KeyFrame

logger = logging.getLogger(__name__)


class Encoder:
    """ Turn successive full values of one record into versioned frames. The
        *initial* value is version 0; each call to :func:`encode` produces the
        next version. A new, random *stream_id* is generated unless one is
        provided.
    """

    def __init__(self, schema: Schema, initial: Any, stream_id: Optional[str] = None):

        if stream_id is None:
            stream_id = str(uuid.uuid4())

        self.schema = schema
        self.stream_id = stream_id

        self._last_value = snapshot.copy(schema, initial)
        self._last_version = 0
        self._last_timestamp = time.time()


    @property
    def main_frame(self) -> KeyFrame:
        """ The current state of the stream as a :class:`KeyFrame`. This is
            what a new subscriber, or one that needs to recover, should be
            sent.
        """

        value = snapshot.copy(self.schema, self._last_value)
        return KeyFrame(self.stream_id, self._last_version, self._last_timestamp, value)


    @property
    def version(self) -> int:
        return self._last_version


    def encode(self, value: Any) -> DeltaFrame:
        """ Return the :class:`DeltaFrame` describing the changes between the
            last value and this new *value*. A frame is always produced, even
            when nothing changed; the version advances regardless.
        """

        version = self._last_version + 1

        if version > VERSION_MAX:
            raise OverflowError('stream %s exhausted its version counter' % (self.stream_id))

        current = snapshot.copy(self.schema, value)
        change = patch.diff(self.schema, self._last_value, current)
        timestamp = time.time()

        frame = DeltaFrame(self.stream_id, version, timestamp, change)

        self._last_value = current
        self._last_version = version
        self._last_timestamp = timestamp

        logger.debug("Encoded %s v%d (%d changed fields)", self.stream_id, version, len(change))
        return frame


# end of class Encoder


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
