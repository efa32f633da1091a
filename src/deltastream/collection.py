""" Reconciliation of keyed collections: ordered lists of records whose
    schema designates one scalar field as the key. Rather than resending the
    whole list, a :class:`KeyedCollectionDelta` carries per-element
    additions, deletions and field-level modifications, plus the complete
    key order of the new list so that reordering survives independently of
    the element bookkeeping.
"""

from . import patch
from . import snapshot
from .errors import ConsistencyViolation


class KeyedCollectionDelta:
    """ The difference between two keyed lists of the same element *schema*.

        :ivar modifications: List of (key, :class:`deltastream.patch.Patch`)
            tuples for elements present in both lists whose fields changed.
        :ivar additions: List of full element values for new keys.
        :ivar deletions: List of keys no longer present.
        :ivar order: The complete key sequence of the new list.
        :ivar reordered: True if the key sequence changed. Like
            :attr:`has_changes` this is known to the producer only, it is
            not part of the wire representation.
    """

    def __init__(self, schema, modifications=(), additions=(), deletions=(), order=(), reordered=False):

        self.schema = schema
        self.modifications = list(modifications)
        self.additions = list(additions)
        self.deletions = list(deletions)
        self.order = list(order)
        self.reordered = reordered


    @property
    def has_changes(self):

        if self.modifications or self.additions or self.deletions:
            return True

        # Without this a reorder-only update would never leave the producer.
        return self.reordered


    def __eq__(self, other):
        if not isinstance(other, KeyedCollectionDelta):
            return NotImplemented

        return self.schema is other.schema and \
               self.modifications == other.modifications and \
               self.additions == other.additions and \
               self.deletions == other.deletions and \
               self.order == other.order


    def __repr__(self):
        modified = [key for key, change in self.modifications]
        added = [self.schema.key_of(element) for element in self.additions]

        return '%s.KeyedCollectionDelta(modified=%r, added=%r, deleted=%r, order=%r)' % (
                self.schema.name, modified, added, self.deletions, self.order)


    def apply(self, previous):
        """ Return a new list: *previous* (None is treated as empty) with this
            delta applied. Elements that were not modified are carried over by
            reference. A :class:`deltastream.errors.ConsistencyViolation` is
            raised if a modification or the order references a key that is
            not available; that only happens when a delta is applied to a list
            other than the one it was created from.
        """

        schema = self.schema
        working = index(schema, previous)

        for key in self.deletions:
            working.pop(key, None)

        for key, change in self.modifications:
            try:
                element = working[key]
            except KeyError:
                raise ConsistencyViolation('%s: modification for missing key %r' % (schema.name, key))

            working[key] = patch.apply(change, element)

        for element in self.additions:
            key = schema.key_of(element)
            working[key] = snapshot.copy(schema, element)

        result = list()

        for key in self.order:
            try:
                element = working[key]
            except KeyError:
                raise ConsistencyViolation('%s: ordered key %r is missing' % (schema.name, key))

            result.append(element)

        return result


# end of class KeyedCollectionDelta



def index(schema, elements):
    """ Return a dictionary of key to element for the provided list of
        *elements*, preserving list order. None is treated as an empty list.
        Duplicate keys are rejected with a
        :class:`deltastream.errors.ConsistencyViolation`: a keyed list with a
        repeated key has no well-defined delta.
    """

    indexed = dict()

    if elements is None:
        return indexed

    for element in elements:
        key = schema.key_of(element)

        if key in indexed:
            raise ConsistencyViolation('%s: duplicate key %r' % (schema.name, key))

        indexed[key] = element

    return indexed



def create(schema, previous, current):
    """ Return the :class:`KeyedCollectionDelta` that turns the *previous*
        list into the *current* list. Either may be None, which is treated as
        an empty list.
    """

    old = index(schema, previous)
    new = index(schema, current)

    deletions = list()
    for key in old:
        if key not in new:
            deletions.append(key)

    additions = list()
    modifications = list()

    for key, element in new.items():
        try:
            existing = old[key]
        except KeyError:
            additions.append(snapshot.copy(schema, element))
            continue

        change = patch.diff(schema, existing, element)

        if change.has_changes:
            modifications.append((key, change))

    order = list(new.keys())
    reordered = order != list(old.keys())

    return KeyedCollectionDelta(schema, modifications, additions, deletions, order, reordered)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
