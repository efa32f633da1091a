""" Full-state copies of record instances. A snapshot mirrors every field of
    its record; nested records and keyed collections are copied structurally
    so that later mutation of the source instance cannot reach the copy.
    Scalar values are deep-copied as well: a scalar may itself be a list or
    a dictionary, compared only as a whole, and an in-place edit to it must
    still show up as a change.
"""

import copy as _copy

from .schema import FieldKind


def copy(schema, instance):
    """ Return a structural copy of *instance* as described by *schema*.
        None is returned unchanged.
    """

    if instance is None:
        return None

    values = dict()

    for field in schema.fields:
        value = schema.get(instance, field.name)

        if field.kind == FieldKind.SCALAR:
            value = _copy.deepcopy(value)

        elif field.kind == FieldKind.NESTED:
            value = copy(field.schema, value)

        elif field.kind == FieldKind.COLLECTION:
            if value is not None:
                value = [copy(field.schema, element) for element in value]

        values[field.name] = value

    return schema.build(values)



def to_dict(schema, instance):
    """ Return the contents of *instance* as plain dictionaries and lists
        keyed by field name, recursively. This is the representation used
        for equality checks and debugging; the wire mapping in
        :mod:`deltastream.protocol.wire` uses field codes instead.
    """

    if instance is None:
        return None

    values = dict()

    for field in schema.fields:
        value = schema.get(instance, field.name)

        if field.kind == FieldKind.NESTED:
            value = to_dict(field.schema, value)

        elif field.kind == FieldKind.COLLECTION:
            if value is not None:
                value = [to_dict(field.schema, element) for element in value]

        values[field.name] = value

    return values


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
