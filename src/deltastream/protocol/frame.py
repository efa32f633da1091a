""" Frame envelopes. A frame is either a :class:`KeyFrame`, carrying the full
    value of the record, or a :class:`DeltaFrame`, carrying a patch against
    the previous version. The set is closed; code dispatching on frames
    should branch on :attr:`Frame.type` and treat anything else as an error.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, ClassVar

from ..patch import Patch
from .fields import VERSION_MAX


class FrameType(enum.IntEnum):
    KEY = 0
    DELTA = 1


@dataclass(frozen=True)
class Frame:
    """ Fields common to every frame.

        :ivar stream_id: Opaque identity of the producing encoder.
        :ivar version: Position of this frame in the stream, starting at 0.
        :ivar timestamp: A UNIX epoch timestamp for the encode time.
    """

    type: ClassVar[FrameType]

    stream_id: str
    version: int
    timestamp: float

    def __post_init__(self):

        if isinstance(self.version, bool) or not isinstance(self.version, int):
            raise TypeError('frame version must be an integer: ' + repr(self.version))

        if self.version < 0 or self.version > VERSION_MAX:
            raise ValueError('frame version out of range: ' + repr(self.version))


@dataclass(frozen=True)
class KeyFrame(Frame):
    """ The full value of the record at :attr:`version`. A key frame bootstraps
        a decoder, and resynchronizes one after a gap.
    """

    type: ClassVar[FrameType] = FrameType.KEY

    value: Any


@dataclass(frozen=True)
class DeltaFrame(Frame):
    """ The changes between :attr:`version` - 1 and :attr:`version`. An empty
        patch is legal; it acts as a versioned heartbeat.
    """

    type: ClassVar[FrameType] = FrameType.DELTA

    patch: Patch


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
