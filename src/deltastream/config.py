""" Declarative schema configuration. A schema can be described as a JSON
    "block", one block per file in the configuration directory, so that a
    producer and its consumers can share the same definition without
    sharing code. A block looks like::

        {"name": "Item",
         "key": "sku",
         "minify": true,
         "propagate": false,
         "fields": {"sku": {"kind": "scalar"},
                    "price": {"kind": "scalar", "alias": "unit_price"},
                    "stock": {"kind": "nested", "schema": "Stock"}}}

    A ``collection`` field names its element schema the same way a
    ``nested`` field does; the element schema must designate a key.
"""

import hashlib
import logging
import os
import threading

from . import json
from .errors import SchemaError
from .schema import Field, FieldKind, Schema

logger = logging.getLogger(__name__)

_cache = None
_cache_lock = threading.Lock()


class Registry:
    """ A collection of schema blocks, keyed by schema name, and the
        :class:`deltastream.schema.Schema` instances built from them. Blocks
        may reference each other in any order; references are resolved when
        a schema is first requested via :func:`schema`.
    """

    def __init__(self, base_dir=None):

        self.base_dir = base_dir
        self._blocks = dict()
        self._schemas = dict()


    def __contains__(self, name):
        return name in self._blocks


    def __len__(self):
        return len(self._blocks)


    def block(self, name):
        """ Return the configuration block for the schema *name*. A KeyError
            is raised if there is no such block.
        """

        try:
            return self._blocks[name]
        except KeyError:
            raise KeyError('no schema block for ' + repr(name))


    def hashes(self):
        """ Return the hash of every known block, keyed by schema name.
        """

        hashes = dict()
        for name, block in self._blocks.items():
            hashes[name] = block['hash']

        return hashes


    def names(self):
        return tuple(self._blocks.keys())


    def update(self, block, save=False):
        """ Add or replace the configuration *block*. The block is validated
            for structure, but references to other schemas are not checked
            until the schema is built. Replacing a block discards any schemas
            already built from this registry, since they may depend on it.
        """

        if isinstance(block, dict):
            block = dict(block)

        validate(block)

        block['hash'] = generate_hash(_hashable(block))

        name = block['name']

        try:
            existing = self._blocks[name]
        except KeyError:
            existing = None

        if existing is not None and existing['hash'] != block['hash']:
            logger.info("Schema %s redefined, hash %x -> %x", name, existing['hash'], block['hash'])
            self._schemas.clear()

        self._blocks[name] = block

        if save == True:
            self._save(block)


    def remove(self, name):
        """ Forget the block for *name*, and remove its file from the
            configuration directory if there is one.
        """

        try:
            del self._blocks[name]
        except KeyError:
            return

        self._schemas.clear()

        target_filename = self._filename(name)

        try:
            os.remove(target_filename)
        except FileNotFoundError:
            pass


    def load(self):
        """ Load every ``*.json`` file in the configuration directory. Each
            file holds either a single block or a list of blocks.
        """

        base_dir = self._directory()

        try:
            filenames = sorted(os.listdir(base_dir))
        except FileNotFoundError:
            logger.info("No schema directory at %s", base_dir)
            return

        loaded = 0

        for filename in filenames:
            if not filename.endswith('.json'):
                continue

            filename = os.path.join(base_dir, filename)

            with open(filename, 'rb') as reader:
                raw_json = reader.read()

            try:
                contents = json.loads(raw_json)
            except json.DecodeError as e:
                raise SchemaError('%s is not valid JSON: %s' % (filename, e))

            if isinstance(contents, dict):
                contents = (contents,)
            elif not isinstance(contents, list):
                raise SchemaError(filename + ' must hold a schema block or a list of blocks')

            for block in contents:
                self.update(block)
                loaded += 1

        logger.info("Loaded %d schema blocks from %s", loaded, base_dir)


    def save(self):
        """ Save every known block to the configuration directory.
        """

        for block in self._blocks.values():
            self._save(block)


    def _directory(self):

        if self.base_dir is None:
            return directory()

        return self.base_dir


    def _filename(self, name):
        return os.path.join(self._directory(), name + '.json')


    def _save(self, block):
        """ Save a single configuration block to the configuration directory.
        """

        base_dir = self._directory()

        if os.path.exists(base_dir):
            pass
        else:
            os.makedirs(base_dir, mode=0o775)

        if os.access(base_dir, os.W_OK) != True:
            raise OSError('cannot write to schema directory: ' + str(base_dir))

        raw_json = json.dumps(_hashable(block))

        with open(self._filename(block['name']), 'wb') as writer:
            writer.write(raw_json)


    def schema(self, name, record=None):
        """ Return the :class:`deltastream.schema.Schema` built from the block
            for *name*, building any schemas it references first. Repeated
            calls return the same instance. The optional *record* factory is
            attached to the top-level schema only, and only the first time it
            is built.
        """

        try:
            return self._schemas[name]
        except KeyError:
            pass

        return self._build(name, record, building=())


    def _build(self, name, record, building):

        try:
            return self._schemas[name]
        except KeyError:
            pass

        if name in building:
            cycle = ' -> '.join(building + (name,))
            raise SchemaError('schema references form a cycle: ' + cycle)

        try:
            block = self._blocks[name]
        except KeyError:
            if building:
                raise SchemaError('%s references unknown schema %r' % (building[-1], name))
            raise SchemaError('unknown schema ' + repr(name))

        building = building + (name,)
        fields = list()

        for field_name, description in block['fields'].items():
            kind = FieldKind(description.get('kind', 'scalar'))
            alias = description.get('alias')

            if kind == FieldKind.SCALAR:
                fields.append(Field(field_name, alias=alias))
                continue

            referenced = self._build(description['schema'], None, building)
            fields.append(Field(field_name, kind, referenced, alias=alias))

        schema = Schema(name, fields,
                        key=block.get('key'),
                        minify=block.get('minify', False),
                        propagate=block.get('propagate', False),
                        record=record)

        self._schemas[name] = schema
        return schema


# end of class Registry



def _hashable(block):
    """ Return a copy of *block* without its computed fields.
    """

    copied = dict(block)
    copied.pop('hash', None)
    return copied



def validate(block):
    """ Check the structure of a configuration *block*, raising a
        :class:`deltastream.errors.SchemaError` describing the first problem
        found.
    """

    if not isinstance(block, dict):
        raise SchemaError('a schema block must be a dictionary')

    try:
        name = block['name']
        fields = block['fields']
    except KeyError as e:
        raise SchemaError('schema block is missing ' + repr(e.args[0]))

    if not isinstance(name, str) or name == '':
        raise SchemaError('schema name must be a non-empty string')

    if not isinstance(fields, dict):
        raise SchemaError(name + ': fields must be a dictionary')

    marked = list()

    for field_name, description in fields.items():
        if not isinstance(description, dict):
            raise SchemaError('%s.%s: field description must be a dictionary' % (name, field_name))

        try:
            kind = FieldKind(description.get('kind', 'scalar'))
        except ValueError:
            raise SchemaError('%s.%s: unknown field kind %r' % (name, field_name, description.get('kind')))

        if kind != FieldKind.SCALAR and not isinstance(description.get('schema'), str):
            raise SchemaError('%s.%s: %s fields must name a schema' % (name, field_name, kind.value))

        # Fields can also be marked individually, as in {"key": true}.
        if description.get('key') == True:
            marked.append(field_name)

    if len(marked) > 1:
        raise SchemaError('%s: more than one key field: %s' % (name, ', '.join(marked)))

    if marked:
        key = block.get('key')
        if key is not None and key != marked[0]:
            raise SchemaError('%s: key %r conflicts with marked key field %r' % (name, key, marked[0]))
        block['key'] = marked[0]



def to_block(schema):
    """ Generate a block dictionary describing the provided *schema*,
        including its computed hash.
    """

    block = schema.to_block()
    block['hash'] = generate_hash(block)

    return block



def export(schema):
    """ Return the blocks for *schema* and every schema it references,
        suitable for :func:`Registry.update` on the receiving side.
    """

    blocks = [to_block(schema)]

    for dependency in schema.dependencies():
        blocks.append(to_block(dependency))

    return blocks



def directory():
    """ Return the directory schema blocks are loaded from and saved to:
        ``$DELTASTREAM_HOME`` if it is set, otherwise ``~/.deltastream``.
        A :class:`Registry` given an explicit *base_dir* ignores this.
    """

    try:
        return os.environ['DELTASTREAM_HOME']
    except KeyError:
        return os.path.join(os.path.expanduser('~'), '.deltastream')



def generate_hash(dumpable):
    """ Convert the supplied Python list or dictionary to JSON, hash the
        results, and return the hash as an integer of at most 32 hexadecimal
        digits. Dictionary keys are sorted first so that the hash does not
        depend on insertion order.
    """

    raw_json = json.dumps(_sorted(dumpable))

    hash = hashlib.shake_256(raw_json)
    hash = int(hash.hexdigest(16), 16)
    return hash



def _sorted(dumpable):

    if isinstance(dumpable, dict):
        ordered = dict()
        for key in sorted(dumpable):
            ordered[key] = _sorted(dumpable[key])
        return ordered

    if isinstance(dumpable, (list, tuple)):
        return [_sorted(value) for value in dumpable]

    return dumpable



def get():
    """ Retrieve the process-wide :class:`Registry`, loading it from the
        configuration directory on first use.
    """

    global _cache

    registry = _cache

    if registry is None:
        _cache_lock.acquire()

        try:
            registry = _cache
            if registry is None:
                registry = Registry()
                registry.load()
                _cache = registry
        finally:
            _cache_lock.release()

    return registry



def schema(name, record=None):
    """ Convenience wrapper: return the named schema from the process-wide
        :class:`Registry`.
    """

    return get().schema(name, record)



def _clear():
    """ Discard the process-wide :class:`Registry`, if any. The next call to
        :func:`get` loads it anew.
    """

    global _cache

    existing = _cache
    _cache = None

    return existing


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
