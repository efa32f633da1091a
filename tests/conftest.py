import pytest

import deltastream
from deltastream import Field, Schema

import records


@pytest.fixture(scope="session")
def player():
    return Schema('Player', [Field('Name'), Field('Score')])


@pytest.fixture(scope="session")
def market_item():
    return Schema('MarketItem', [Field('id'), Field('price'), Field('volume')], key='id')


@pytest.fixture(scope="session")
def market_board(market_item):
    return Schema('MarketBoard', [Field('name'), Field.collection('items', market_item)])


@pytest.fixture(scope="session")
def parent():

    child = Schema('Nested', [Field('tag'), Field('value')])
    return Schema('Parent', [Field('label'), Field.nested('child', child)])


@pytest.fixture(scope="session")
def user():
    """ Three levels of nesting, all minified.
    """

    geo = Schema('Geo', [Field('Latitude'), Field('Longitude')], minify=True)
    address = Schema('Address', [Field('City'), Field.nested('Coords', geo)], minify=True)
    return Schema('User', [Field('Name'), Field('Age'), Field.nested('Address', address)], minify=True)


@pytest.fixture(scope="session")
def event():
    """ Dataclass records: an event with keyed markets, each with keyed
        runners.
    """

    runner = Schema('Runner', [Field('name'), Field('price')], key='name', record=records.Runner)
    market = Schema('Market', [Field('kind'), Field.collection('runners', runner)], key='kind', record=records.Market)

    fields = list()
    fields.append(Field('league'))
    fields.append(Field('competitor1'))
    fields.append(Field('competitor2'))
    fields.append(Field.collection('markets', market))

    return Schema('Event', fields, record=records.Event)


@pytest.fixture
def schema_home(tmp_path, monkeypatch):
    """ Point the configuration directory at a scratch location for the
        duration of one test.
    """

    home = tmp_path / 'deltastream'
    monkeypatch.setenv('DELTASTREAM_HOME', str(home))

    deltastream.config._clear()
    yield home
    deltastream.config._clear()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
