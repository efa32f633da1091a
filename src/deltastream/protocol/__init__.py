from . import fields
from . import frame
from . import encoder
from . import decoder
from . import wire

from .frame import FrameType, KeyFrame, DeltaFrame
from .encoder import Encoder
from .decoder import Decoder


"""
deltastream Protocol Layer
==========================

This package defines the versioned frame protocol: how successive full
states of one record are turned into a stream of key frames and delta
frames, and how a receiver rebuilds the state from that stream.

The protocol layer MUST NOT depend on any transport. Frames are handed to
and received from the caller; moving bytes is somebody else's job.

---------------------------------------------------------------------

Layer Architecture Overview
---------------------------

Producer Code
    │
    ▼
Encoder (encoder.py)
    Single writer per stream
    - main_frame
    - encode()
    Owns stream identity and the version counter

    │
    ▼
Frame Model (frame.py)
    Immutable envelopes
    - KeyFrame   (full value)
    - DeltaFrame (patch)
    - FrameType
    Defines semantic meaning only

    │
    ▼
Wire Mapping (wire.py)
    Frame <-> plain structures <-> bytes
    - Field codes from the schema
    - Envelope codes from fields.py

    │
    ▼
Decoder (decoder.py)
    Baseline plus patches
    - decode()
    Never moves backward, never checks for gaps

---------------------------------------------------------------------

Above the Protocol Layer (for context)
--------------------------------------

Stream Consumer (deltastream.consumer)
    Duplicate, gap, and producer-switch handling
    Never raises; counts and flags instead

Transport
    Moves bytes
    - not provided here

---------------------------------------------------------------------

Design Principles
-----------------

1. Transport Agnostic
   The protocol behaves identically over any delivery channel.

2. One Writer
   Exactly one Encoder produces a given stream id.

3. Layer Isolation
   The Decoder enforces "never go backward", the Consumer enforces
   "never silently skip forward".

---------------------------------------------------------------------
"""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
