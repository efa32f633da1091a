""" Schema-driven patches: the sparse, changed-fields-only counterpart of a
    full snapshot. :func:`diff` compiles a :class:`Patch` from two instances
    of the same schema, :func:`apply` merges a patch onto a baseline
    instance; for every pair of instances *a* and *b*::

        apply(diff(schema, a, b), a) == b
"""

from . import collection
from .schema import FieldKind


class Patch:
    """ One optional slot per field of the *schema*. A field absent from
        *slots* is unchanged. A present slot holds the new value for a
        scalar field, a sub-:class:`Patch` for a nested field, or a
        :class:`deltastream.collection.KeyedCollectionDelta` for a keyed
        collection; for the two structured kinds a present slot holding None
        means the field was cleared.

        :ivar schema: The :class:`deltastream.schema.Schema` being patched.
        :ivar slots: Dictionary of field name to slot value, present slots only.
    """

    def __init__(self, schema, slots=None):

        self.schema = schema
        self.slots = dict()

        if slots:
            for name, value in slots.items():
                field = schema.field(name)
                _check_slot(field, value)
                self.slots[name] = value


    @property
    def has_changes(self):
        """ True if any slot is present. This is metadata for the producer,
            it is never put on the wire.
        """

        return len(self.slots) > 0


    def __bool__(self):
        return self.has_changes


    def __contains__(self, name):
        return name in self.slots


    def __getitem__(self, name):
        return self.slots[name]


    def __iter__(self):
        """ Iterate over the names of present slots, in schema order.
        """

        for field in self.schema.fields:
            if field.name in self.slots:
                yield field.name


    def __len__(self):
        return len(self.slots)


    def __eq__(self, other):
        if not isinstance(other, Patch):
            return NotImplemented

        return self.schema is other.schema and self.slots == other.slots


    def __repr__(self):
        present = list()
        for name in self:
            present.append('%s=%r' % (name, self.slots[name]))

        return '%s.Patch(%s)' % (self.schema.name, ', '.join(present))


    def apply(self, baseline):
        return apply(self, baseline)


    def get(self, name, default=None):
        return self.slots.get(name, default)


# end of class Patch



def _check_slot(field, value):
    """ Reject slot values that do not match the kind of *field*.
    """

    if field.kind == FieldKind.SCALAR or value is None:
        return

    if field.kind == FieldKind.NESTED:
        expected = Patch
    else:
        expected = collection.KeyedCollectionDelta

    if not isinstance(value, expected):
        raise TypeError('slot %r expects %s, got %s' % (field.name, expected.__name__, type(value).__name__))

    if value.schema is not field.schema:
        raise TypeError('slot %r expects schema %s, got %s' % (field.name, field.schema.name, value.schema.name))



def diff(schema, previous, current):
    """ Return the :class:`Patch` that turns *previous* into *current*.
        Scalars are compared by value equality; nested records are diffed
        recursively, keyed collections are reconciled element by element.
        A *previous* of None is treated as a record with every field unset.
    """

    slots = dict()

    for field in schema.fields:
        name = field.name

        if previous is None:
            old = None
        else:
            old = schema.get(previous, name)

        new = schema.get(current, name)

        if field.kind == FieldKind.SCALAR:
            if old != new:
                slots[name] = new
            continue

        # Structured fields: clearing a value is carried as an explicit None,
        # and a freshly populated value is always carried, even when it is
        # indistinguishable from an empty one.

        if new is None:
            if old is not None:
                slots[name] = None
            continue

        if field.kind == FieldKind.NESTED:
            change = diff(field.schema, old, new)
        else:
            change = collection.create(field.schema, old, new)

        if old is None or change.has_changes:
            slots[name] = change

    return Patch(schema, slots)



def apply(patch, baseline):
    """ Return a new instance: *baseline* with the present slots of *patch*
        merged in. The *baseline* is not modified; unchanged fields are
        carried over by reference.
    """

    schema = patch.schema
    slots = patch.slots
    values = dict()

    for field in schema.fields:
        name = field.name

        if baseline is None:
            old = None
        else:
            old = schema.get(baseline, name)

        try:
            slot = slots[name]
        except KeyError:
            values[name] = old
            continue

        if field.kind == FieldKind.SCALAR or slot is None:
            values[name] = slot
        elif field.kind == FieldKind.NESTED:
            values[name] = apply(slot, old)
        else:
            values[name] = slot.apply(old)

    return schema.build(values)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
