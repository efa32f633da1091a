''' Wrapper module to select the most performant available library to handle
    the equivalent of :func:`json.loads` and :func:`json.dumps`. The
    ``DELTASTREAM_JSON`` environment variable can be set to ``orjson`` to
    prefer that backend over msgspec.
'''

import os

msgspec = None
orjson = None

backend = os.environ.get('DELTASTREAM_JSON', 'msgspec').lower()

if backend not in ('msgspec', 'orjson'):
    raise ImportError('unknown DELTASTREAM_JSON backend: ' + repr(backend))

if backend == 'msgspec':
    import msgspec
    import msgspec.json
else:
    import orjson


# The msgspec 'encode' operation returns bytes, as does orjson.dumps. Both
# 'loads' methods accept either bytes or str.

if msgspec is not None:
    encoder = msgspec.json.Encoder()
    decoder = msgspec.json.Decoder()
    dumps = encoder.encode
    loads = decoder.decode
    DecodeError = msgspec.DecodeError
else:
    dumps = orjson.dumps
    loads = orjson.loads
    DecodeError = orjson.JSONDecodeError

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
