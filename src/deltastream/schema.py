""" Static descriptions of record types. A :class:`Schema` is built once,
    offline, and is treated as immutable thereafter; every other component
    dispatches on the :class:`FieldKind` resolved here rather than on the
    runtime type of a value.
"""

import enum

from . import names
from .errors import SchemaError


class FieldKind(enum.Enum):
    """ How a field participates in diffing. A SCALAR is opaque and only ever
        compared by value equality; a NESTED field holds a record governed by
        its own :class:`Schema`; a COLLECTION field holds an ordered list of
        records whose schema designates a key field.
    """

    SCALAR = 'scalar'
    NESTED = 'nested'
    COLLECTION = 'collection'


# end of class FieldKind



class Field:
    """ A single named field of a :class:`Schema`. Use the :func:`nested` and
        :func:`collection` constructors for structured fields; the plain
        constructor describes a scalar. The optional *alias* is a rename
        directive, honored on the wire when the owning schema propagates
        renames and is not minified.
    """

    __slots__ = ('name', 'kind', 'schema', 'key', 'alias')

    def __init__(self, name, kind=FieldKind.SCALAR, schema=None, key=None, alias=None):

        if not isinstance(name, str) or name == '':
            raise SchemaError('field names must be non-empty strings: ' + repr(name))

        kind = FieldKind(kind)

        if kind == FieldKind.SCALAR:
            if schema is not None:
                raise SchemaError('scalar field %s cannot reference a schema' % (name))
        elif not isinstance(schema, Schema):
            raise SchemaError('%s field %s requires a Schema' % (kind.value, name))

        if kind == FieldKind.COLLECTION:
            if key is None:
                key = schema.key
            if key is None:
                raise SchemaError('collection field %s: element schema %s has no key field' % (name, schema.name))
            if key != schema.key:
                raise SchemaError('collection field %s: %s is not the key of %s' % (name, key, schema.name))
        elif key is not None:
            raise SchemaError('only collection fields have a key: ' + name)

        self.name = name
        self.kind = kind
        self.schema = schema
        self.key = key
        self.alias = alias


    @classmethod
    def nested(cls, name, schema, alias=None):
        return cls(name, FieldKind.NESTED, schema, alias=alias)


    @classmethod
    def collection(cls, name, schema, alias=None):
        return cls(name, FieldKind.COLLECTION, schema, alias=alias)


    def __eq__(self, other):
        if not isinstance(other, Field):
            return NotImplemented

        return (self.name, self.kind, self.schema, self.key, self.alias) == \
               (other.name, other.kind, other.schema, other.key, other.alias)


    def __hash__(self):
        return hash((self.name, self.kind))


    def __repr__(self):
        if self.kind == FieldKind.SCALAR:
            return 'Field(%r)' % (self.name)
        return 'Field(%r, %s, %s)' % (self.name, self.kind.value, self.schema.name)


# end of class Field



class Schema:
    """ The ordered field list of one record type. Fields are always held in
        the ordinal sort order of their names, regardless of the order they
        were provided in; the short-name allocation depends on that order
        being stable.

        *key* names the scalar field used to identify records of this type
        when they appear in a keyed collection. *minify* requests short wire
        codes for the field names; *propagate* honors per-field *alias*
        rename directives on the wire (ignored when *minify* is set, the
        short code wins). *record* is an optional factory, typically a
        dataclass, used to build instances; without it instances are plain
        dictionaries keyed by field name.
    """

    def __init__(self, name, fields, key=None, minify=False, propagate=False, record=None):

        self.name = name
        self.key = key
        self.minify = bool(minify)
        self.propagate = bool(propagate)
        self.record = record

        by_name = dict()

        for field in fields:
            if not isinstance(field, Field):
                raise SchemaError('%s: not a Field: %r' % (name, field))
            if field.name in by_name:
                raise SchemaError('%s: duplicate field name: %s' % (name, field.name))
            by_name[field.name] = field

        ordered = sorted(by_name)

        self._by_name = by_name
        self._fields = tuple(by_name[field_name] for field_name in ordered)

        if key is not None:
            try:
                key_field = by_name[key]
            except KeyError:
                raise SchemaError('%s: key field %s is not defined' % (name, key))

            if key_field.kind != FieldKind.SCALAR:
                raise SchemaError('%s: key field %s must be a scalar' % (name, key))

        self.codes = self._allocate_codes(ordered)
        self.names_by_code = dict((code, field_name) for field_name, code in self.codes.items())
        self._fingerprint = None


    def _allocate_codes(self, ordered):
        """ Resolve the wire code for every field name, and verify the
            resulting mapping is injective.
        """

        if self.minify:
            codes = names.allocate(ordered)
        else:
            codes = dict()
            for field in self._fields:
                if self.propagate and field.alias:
                    codes[field.name] = field.alias
                else:
                    codes[field.name] = field.name

        # The minify fallback (full lowercase name) can collide for names
        # differing only in case. Report it rather than invent a suffix,
        # which would change the codes other implementations derive.

        collided = names.collisions(codes)

        if collided:
            description = list()
            for code, members in sorted(collided.items()):
                description.append('%s <- %s' % (code, ', '.join(members)))
            raise SchemaError('%s: conflicting wire codes: %s' % (self.name, '; '.join(description)))

        return codes


    @property
    def fields(self):
        return self._fields


    @property
    def fingerprint(self):
        """ A hash of the declarative description of this schema; two
            parties with the same fingerprint agree on field names, kinds,
            and wire codes.
        """

        if self._fingerprint is None:
            from . import config
            self._fingerprint = config.generate_hash(self.to_block())

        return self._fingerprint


    def __contains__(self, name):
        return name in self._by_name


    def __iter__(self):
        return iter(self._fields)


    def __len__(self):
        return len(self._fields)


    def __repr__(self):
        return 'Schema(%r, %r)' % (self.name, self.names())


    def field(self, name):
        """ Return the :class:`Field` for the requested *name*. A KeyError
            is raised if there is no such field.
        """

        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError('%s has no field %r' % (self.name, name))


    def names(self):
        return tuple(field.name for field in self._fields)


    def get(self, instance, name):
        """ Return the value of the field *name* from *instance*, which is
            either a mapping or a record object.
        """

        if isinstance(instance, dict):
            return instance.get(name)

        return getattr(instance, name)


    def build(self, values):
        """ Construct an instance from a dictionary of field name to value.
            Fields missing from *values* are set to None.
        """

        complete = dict()
        for field in self._fields:
            complete[field.name] = values.get(field.name)

        if self.record is None:
            return complete

        return self.record(**complete)


    def key_of(self, instance):
        """ Return the collection key value of the provided *instance*.
        """

        if self.key is None:
            raise SchemaError(self.name + ' does not designate a key field')

        return self.get(instance, self.key)


    def to_block(self):
        """ Return the declarative description of this schema as a plain
            dictionary; see :mod:`deltastream.config` for the format.
        """

        fields = dict()

        for field in self._fields:
            description = dict()
            description['kind'] = field.kind.value

            if field.schema is not None:
                description['schema'] = field.schema.name
            if field.alias:
                description['alias'] = field.alias

            fields[field.name] = description

        block = dict()
        block['name'] = self.name
        block['key'] = self.key
        block['minify'] = self.minify
        block['propagate'] = self.propagate
        block['fields'] = fields

        return block


    def dependencies(self):
        """ Return the schemas referenced by nested and collection fields,
            including indirect references, in first-seen order.
        """

        found = list()
        pending = list(self._fields)

        while pending:
            field = pending.pop(0)
            schema = field.schema

            if schema is None or schema is self or schema in found:
                continue

            found.append(schema)
            pending.extend(schema.fields)

        return found


# end of class Schema


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
