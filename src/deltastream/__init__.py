""" Schema-driven delta streaming. A record schema yields a full snapshot
    form and a sparse patch form for each record type; on top of that, an
    encoder turns successive values into a versioned stream of key and delta
    frames, and a consumer rebuilds the value while detecting duplicates,
    gaps, and producer switches.
"""

# Utility components.

from . import errors
from . import json
from . import names

# Submodules used by multiple other components.

from . import schema
from . import snapshot
from . import patch
from . import collection
from . import protocol
from . import config

# Primary public-facing interfaces.

from .schema import Field, FieldKind, Schema
from .patch import Patch, diff, apply
from .collection import KeyedCollectionDelta
from .protocol import Encoder, Decoder, KeyFrame, DeltaFrame, FrameType
from .consumer import StreamConsumer, ConsumerState
from .errors import (
    DeltaStreamError,
    SchemaError,
    StreamMismatch,
    StaleFrame,
    ConsistencyViolation,
    WireError,
)

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
