import pytest

import deltastream
from deltastream import Decoder, Encoder

import records


def test_follow(player):

    encoder = Encoder(player, {'Name': 'Alice', 'Score': 100})
    decoder = Decoder(player, encoder.main_frame)

    assert decoder.value == {'Name': 'Alice', 'Score': 100}
    assert decoder.version == 0

    for score in (200, 300, 300, 50):
        frame = encoder.encode({'Name': 'Alice', 'Score': score})
        value = decoder.decode(frame)

        assert value == {'Name': 'Alice', 'Score': score}
        assert decoder.version == frame.version
        assert decoder.key_frame.timestamp == frame.timestamp


def test_follow_records(event):

    values = [
        records.make_event(('win', (('Comet', 2.5), ('Dasher', 4.0)))),
        records.make_event(('win', (('Comet', 2.5), ('Dasher', 3.0)))),
        records.make_event(('win', (('Dasher', 3.0), ('Comet', 2.5)))),
        records.make_event(('win', (('Dasher', 3.0),)), ('place', (('Dasher', 1.5),))),
        records.make_event(),
    ]

    encoder = Encoder(event, values[0])
    decoder = Decoder(event, encoder.main_frame)

    for value in values[1:]:
        assert decoder.decode(encoder.encode(value)) == value


def test_requires_key_frame(player):

    encoder = Encoder(player, {'Name': 'Alice', 'Score': 100})
    frame = encoder.encode({'Name': 'Alice', 'Score': 200})

    with pytest.raises(TypeError):
        Decoder(player, frame)


def test_stream_mismatch(player):

    value = {'Name': 'Alice', 'Score': 100}

    one = Encoder(player, value)
    two = Encoder(player, value)

    decoder = Decoder(player, one.main_frame)

    with pytest.raises(deltastream.StreamMismatch):
        decoder.decode(two.encode(value))

    with pytest.raises(deltastream.StreamMismatch):
        decoder.decode(two.main_frame)


def test_stale(player):

    encoder = Encoder(player, {'Name': 'Alice', 'Score': 100})
    decoder = Decoder(player, encoder.main_frame)

    first = encoder.encode({'Name': 'Alice', 'Score': 200})
    old_key = encoder.main_frame
    second = encoder.encode({'Name': 'Alice', 'Score': 300})

    decoder.decode(first)
    decoder.decode(second)

    with pytest.raises(deltastream.StaleFrame):
        decoder.decode(first)

    with pytest.raises(deltastream.StaleFrame):
        decoder.decode(old_key)

    # The same delta twice would apply it twice.
    with pytest.raises(deltastream.StaleFrame):
        decoder.decode(second)

    assert decoder.value == {'Name': 'Alice', 'Score': 300}
    assert decoder.version == 2


def test_key_frame_jump(player):

    encoder = Encoder(player, {'Name': 'Alice', 'Score': 100})
    decoder = Decoder(player, encoder.main_frame)

    for score in range(5):
        encoder.encode({'Name': 'Bob', 'Score': score})

    value = decoder.decode(encoder.main_frame)

    assert value == {'Name': 'Bob', 'Score': 4}
    assert decoder.version == 5

    # A key frame at the baseline version is accepted again.
    assert decoder.decode(encoder.main_frame) == value


def test_gap_is_not_detected(player):
    """ The decoder applies a delta that skips ahead; only the changed
        fields of that one delta reach the value.
    """

    encoder = Encoder(player, {'Name': 'Alice', 'Score': 100})
    decoder = Decoder(player, encoder.main_frame)

    encoder.encode({'Name': 'Bob', 'Score': 100})
    skipped = encoder.encode({'Name': 'Bob', 'Score': 300})

    value = decoder.decode(skipped)

    assert decoder.version == 2
    assert value == {'Name': 'Alice', 'Score': 300}


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
