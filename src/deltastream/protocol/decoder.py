""" The receiving side of a stream, without any sequencing policy of its
    own; see :class:`deltastream.consumer.StreamConsumer` for the layer that
    filters duplicates and detects gaps.
"""

from __future__ import annotations

import dataclasses
from typing import Any

from .. import patch
from ..errors import StaleFrame, StreamMismatch
from ..schema import Schema
from .frame import FrameType, KeyFrame


class Decoder:
    """ Rebuild the record from a bootstrap :class:`KeyFrame` plus the frames
        that follow it. The decoder refuses frames from another stream and
        frames older than its baseline; it does not check that delta frames
        arrive without gaps. Applying a delta that skips ahead merges a
        partial patch onto a stale baseline, which is why callers reading
        from a real transport should go through the consumer.
    """

    def __init__(self, schema: Schema, key_frame: KeyFrame):

        if key_frame.type != FrameType.KEY:
            raise TypeError('a Decoder must be bootstrapped with a KeyFrame')

        self.schema = schema
        self.key_frame = key_frame


    @property
    def value(self) -> Any:
        return self.key_frame.value


    @property
    def version(self) -> int:
        return self.key_frame.version


    def decode(self, frame) -> Any:
        """ Apply *frame* and return the resulting value. A key frame replaces
            the baseline outright and may jump forward any distance; a delta
            frame is applied on top of the baseline.

            :class:`deltastream.errors.StreamMismatch` is raised for a frame
            from another stream. :class:`deltastream.errors.StaleFrame` is
            raised for a key frame older than the baseline, or a delta frame
            that is not newer than the baseline.
        """

        baseline = self.key_frame

        if frame.stream_id != baseline.stream_id:
            raise StreamMismatch('frame stream %s does not match baseline stream %s' % (frame.stream_id, baseline.stream_id))

        if frame.version < baseline.version:
            raise StaleFrame('frame version %d is older than baseline version %d' % (frame.version, baseline.version))

        if frame.type == FrameType.KEY:
            self.key_frame = frame

        elif frame.type == FrameType.DELTA:
            # Re-applying a delta at the baseline version would apply it twice.
            if frame.version == baseline.version:
                raise StaleFrame('delta frame version %d was already applied' % (frame.version))

            value = patch.apply(frame.patch, baseline.value)
            self.key_frame = dataclasses.replace(baseline, version=frame.version, timestamp=frame.timestamp, value=value)

        else:
            raise TypeError('unknown frame type: ' + repr(frame.type))

        return self.key_frame.value


# end of class Decoder


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
