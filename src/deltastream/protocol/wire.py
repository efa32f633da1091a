from __future__ import annotations

from typing import Any, Dict, Optional

from .. import json
from ..collection import KeyedCollectionDelta
from ..errors import WireError
from ..patch import Patch
from ..schema import FieldKind, Schema
from . import fields
from .frame import DeltaFrame, FrameType, KeyFrame


def pack_frame(frame, schema: Schema) -> bytes:
    """
    Serialize Frame -> bytes

    Layout:
        compact JSON of to_dict(frame, schema)
    """

    return json.dumps(to_dict(frame, schema))


def unpack_frame(raw: bytes, schema: Schema):
    """
    Deserialize bytes -> Frame
    """

    try:
        data = json.loads(raw)
    except json.DecodeError as e:
        raise WireError('frame is not valid JSON: ' + str(e))

    return from_dict(data, schema)


def to_dict(frame, schema: Schema) -> Dict[str, Any]:
    """
    Map a frame to plain dictionaries and lists.

    Record fields are keyed by their schema code; absent patch slots are
    omitted entirely. Patch metadata (has_changes, reordered) is never
    included.
    """

    data = {
        fields.TYPE:    int(frame.type),
        fields.STREAM:  frame.stream_id,
        fields.VERSION: frame.version,
        fields.TIME:    frame.timestamp,
    }

    if frame.type == FrameType.KEY:
        data[fields.VALUE] = encode_value(schema, frame.value)
    elif frame.type == FrameType.DELTA:
        data[fields.PATCH] = encode_patch(frame.patch)
    else:
        raise TypeError('unknown frame type: ' + repr(frame.type))

    return data


def from_dict(data: Any, schema: Schema):
    """
    Rebuild a KeyFrame or DeltaFrame from the output of to_dict().
    """

    if not isinstance(data, dict):
        raise WireError('frame must be a mapping, not ' + type(data).__name__)

    try:
        frame_type = FrameType(data[fields.TYPE])
        stream_id = data[fields.STREAM]
        version = data[fields.VERSION]
        timestamp = data[fields.TIME]
    except KeyError as e:
        raise WireError('frame envelope is missing ' + repr(e.args[0]))
    except ValueError:
        raise WireError('unknown frame type: ' + repr(data[fields.TYPE]))

    if not isinstance(stream_id, str):
        raise WireError('stream id must be a string')

    try:
        if frame_type == FrameType.KEY:
            value = decode_value(schema, _require(data, fields.VALUE))
            return KeyFrame(stream_id, version, timestamp, value)

        change = decode_patch(schema, _require(data, fields.PATCH))
        return DeltaFrame(stream_id, version, timestamp, change)

    except (TypeError, ValueError) as e:
        raise WireError('malformed frame: ' + str(e))


def _require(data: Dict[str, Any], code: str) -> Any:

    try:
        return data[code]
    except KeyError:
        raise WireError('frame is missing ' + repr(code))


def _key(schema: Schema, key: Any) -> Any:

    # Collection keys index a dictionary on apply; only JSON scalars qualify.
    if key is not None and not isinstance(key, (str, int, float, bool)):
        raise WireError('%s: collection key must be a scalar, not %s' % (schema.name, type(key).__name__))

    return key


def _field(schema: Schema, code: str):

    try:
        name = schema.names_by_code[code]
    except KeyError:
        raise WireError('%s has no field with code %r' % (schema.name, code))

    return schema.field(name)


# Snapshots


def encode_value(schema: Schema, instance: Any) -> Optional[Dict[str, Any]]:

    if instance is None:
        return None

    codes = schema.codes
    encoded = dict()

    for field in schema.fields:
        value = schema.get(instance, field.name)

        if field.kind == FieldKind.NESTED:
            value = encode_value(field.schema, value)
        elif field.kind == FieldKind.COLLECTION and value is not None:
            value = [encode_value(field.schema, element) for element in value]

        encoded[codes[field.name]] = value

    return encoded


def decode_value(schema: Schema, data: Any) -> Any:

    if data is None:
        return None

    if not isinstance(data, dict):
        raise WireError('%s value must be a mapping' % (schema.name))

    values = dict()

    for code, value in data.items():
        field = _field(schema, code)

        if field.kind == FieldKind.NESTED:
            value = decode_value(field.schema, value)
        elif field.kind == FieldKind.COLLECTION and value is not None:
            if not isinstance(value, list):
                raise WireError('%s.%s must be a list' % (schema.name, field.name))
            value = [_element(field.schema, element) for element in value]

        values[field.name] = value

    return schema.build(values)


# Patches


def encode_patch(change: Patch) -> Dict[str, Any]:

    schema = change.schema
    codes = schema.codes
    encoded = dict()

    for name in change:
        field = schema.field(name)
        slot = change[name]

        # Scalars are wrapped so a change to null differs from no change.

        if field.kind == FieldKind.SCALAR:
            slot = {fields.SLOT_VALUE: slot}
        elif slot is None:
            pass
        elif field.kind == FieldKind.NESTED:
            slot = encode_patch(slot)
        else:
            slot = encode_delta(slot)

        encoded[codes[name]] = slot

    return encoded


def decode_patch(schema: Schema, data: Any) -> Patch:

    if not isinstance(data, dict):
        raise WireError('%s patch must be a mapping' % (schema.name))

    slots = dict()

    for code, slot in data.items():
        field = _field(schema, code)

        if field.kind == FieldKind.SCALAR:
            if not isinstance(slot, dict) or fields.SLOT_VALUE not in slot:
                raise WireError('%s.%s: scalar slot must be wrapped' % (schema.name, field.name))
            slot = slot[fields.SLOT_VALUE]
        elif slot is None:
            pass
        elif field.kind == FieldKind.NESTED:
            slot = decode_patch(field.schema, slot)
        else:
            slot = decode_delta(field.schema, slot)

        slots[field.name] = slot

    return Patch(schema, slots)


# Keyed collections


def encode_delta(delta: KeyedCollectionDelta) -> Dict[str, Any]:

    schema = delta.schema
    encoded = dict()

    if delta.modifications:
        encoded[fields.MODIFICATIONS] = [
            {fields.ENTRY_KEY: key, fields.ENTRY_PATCH: encode_patch(change)}
            for key, change in delta.modifications
        ]

    if delta.additions:
        encoded[fields.ADDITIONS] = [encode_value(schema, element) for element in delta.additions]

    if delta.deletions:
        encoded[fields.DELETIONS] = list(delta.deletions)

    encoded[fields.ORDER] = list(delta.order)

    return encoded


def decode_delta(schema: Schema, data: Any) -> KeyedCollectionDelta:

    if not isinstance(data, dict):
        raise WireError('%s collection delta must be a mapping' % (schema.name))

    modifications = list()

    for entry in _list(schema, data, fields.MODIFICATIONS):
        try:
            key = entry[fields.ENTRY_KEY]
            change = entry[fields.ENTRY_PATCH]
        except (KeyError, TypeError):
            raise WireError('%s: malformed modification entry' % (schema.name))

        modifications.append((_key(schema, key), decode_patch(schema, change)))

    additions = [_element(schema, element) for element in _list(schema, data, fields.ADDITIONS)]
    deletions = [_key(schema, key) for key in _list(schema, data, fields.DELETIONS)]

    if fields.ORDER not in data:
        raise WireError('%s: collection delta is missing %r' % (schema.name, fields.ORDER))

    order = [_key(schema, key) for key in _list(schema, data, fields.ORDER)]

    return KeyedCollectionDelta(schema, modifications, additions, deletions, order)


def _list(schema: Schema, data: Dict[str, Any], code: str) -> list:

    value = data.get(code, [])

    if not isinstance(value, list):
        raise WireError('%s: %r must be a list' % (schema.name, code))

    return value


def _element(schema: Schema, data: Any) -> Any:
    """
    Decode one keyed collection element, requiring a usable key.
    """

    if not isinstance(data, dict):
        raise WireError('%s collection element must be a mapping' % (schema.name))

    element = decode_value(schema, data)
    _key(schema, schema.key_of(element))

    return element


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
