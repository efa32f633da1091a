import pytest

import deltastream
from deltastream import Field, FieldKind, Schema


def test_field_order():

    schema = Schema('Item', [Field('volume'), Field('id'), Field('price')])

    assert schema.names() == ('id', 'price', 'volume')
    assert [field.name for field in schema] == ['id', 'price', 'volume']
    assert len(schema) == 3
    assert 'price' in schema
    assert 'missing' not in schema


def test_ordinal_order():

    # Upper case sorts before lower case.
    schema = Schema('Mixed', [Field('beta'), Field('Alpha'), Field('alpha')])
    assert schema.names() == ('Alpha', 'alpha', 'beta')


def test_field_kinds(market_board, parent):

    assert market_board.field('name').kind == FieldKind.SCALAR
    assert market_board.field('items').kind == FieldKind.COLLECTION
    assert market_board.field('items').key == 'id'
    assert parent.field('child').kind == FieldKind.NESTED
    assert parent.field('child').key is None


def test_unknown_field(player):

    with pytest.raises(KeyError):
        player.field('Rank')


def test_duplicate_field():

    with pytest.raises(deltastream.SchemaError):
        Schema('Twice', [Field('a'), Field('a')])


def test_bad_field_name():

    with pytest.raises(deltastream.SchemaError):
        Field('')

    with pytest.raises(deltastream.SchemaError):
        Field(None)


def test_bad_key():

    with pytest.raises(deltastream.SchemaError):
        Schema('NoSuchKey', [Field('a')], key='b')

    nested = Schema('Inner', [Field('x')])

    with pytest.raises(deltastream.SchemaError):
        Schema('StructuredKey', [Field.nested('inner', nested)], key='inner')


def test_collection_requires_key(player, market_item):

    with pytest.raises(deltastream.SchemaError):
        Field.collection('players', player)

    with pytest.raises(deltastream.SchemaError):
        Field('items', FieldKind.COLLECTION, market_item, key='price')

    field = Field('items', FieldKind.COLLECTION, market_item, key='id')
    assert field.key == 'id'


def test_structured_field_requires_schema():

    with pytest.raises(deltastream.SchemaError):
        Field('child', FieldKind.NESTED)

    with pytest.raises(deltastream.SchemaError):
        Field('child', FieldKind.NESTED, 'Child')

    with pytest.raises(deltastream.SchemaError):
        Field('value', FieldKind.SCALAR, Schema('Other', []))

    with pytest.raises(deltastream.SchemaError):
        Field('value', key='id')


def test_not_a_field():

    with pytest.raises(deltastream.SchemaError):
        Schema('Loose', ['name'])


def test_codes_without_minify(player):

    assert player.codes == {'Name': 'Name', 'Score': 'Score'}
    assert player.names_by_code == {'Name': 'Name', 'Score': 'Score'}


def test_alias():

    fields = [Field('price', alias='unit_price'), Field('sku')]

    plain = Schema('Item', fields)
    assert plain.codes['price'] == 'price'

    propagated = Schema('Item', fields, propagate=True)
    assert propagated.codes['price'] == 'unit_price'
    assert propagated.codes['sku'] == 'sku'
    assert propagated.names_by_code['unit_price'] == 'price'

    # Minification wins over a propagated alias.
    minified = Schema('Item', fields, minify=True, propagate=True)
    assert minified.codes == {'price': 'p', 'sku': 's'}


def test_alias_collision():

    fields = [Field('price', alias='cost'), Field('cost')]

    with pytest.raises(deltastream.SchemaError):
        Schema('Item', fields, propagate=True)


def test_get_and_build(player, event):

    built = player.build({'Name': 'Alice'})
    assert built == {'Name': 'Alice', 'Score': None}
    assert player.get(built, 'Name') == 'Alice'

    runner = event.field('markets').schema.field('runners').schema
    built = runner.build({'name': 'Comet', 'price': 2.5})

    assert built.name == 'Comet'
    assert runner.get(built, 'price') == 2.5
    assert runner.key_of(built) == 'Comet'


def test_key_of(player, market_item):

    assert market_item.key_of({'id': 'A', 'price': 1.0, 'volume': 5}) == 'A'

    with pytest.raises(deltastream.SchemaError):
        player.key_of({'Name': 'Alice', 'Score': 1})


def test_to_block(market_board):

    block = market_board.to_block()

    assert block['name'] == 'MarketBoard'
    assert block['key'] is None
    assert block['minify'] == False
    assert block['propagate'] == False
    assert block['fields'] == {
        'items': {'kind': 'collection', 'schema': 'MarketItem'},
        'name': {'kind': 'scalar'},
    }


def test_dependencies(user, market_board, player):

    dependencies = user.dependencies()
    assert [schema.name for schema in dependencies] == ['Address', 'Geo']

    dependencies = market_board.dependencies()
    assert [schema.name for schema in dependencies] == ['MarketItem']

    assert player.dependencies() == list()


def test_fingerprint(player):

    same = Schema('Player', [Field('Score'), Field('Name')])
    different = Schema('Player', [Field('Name'), Field('Score'), Field('Rank')])
    minified = Schema('Player', [Field('Name'), Field('Score')], minify=True)

    assert isinstance(player.fingerprint, int)
    assert player.fingerprint == same.fingerprint
    assert player.fingerprint != different.fingerprint
    assert player.fingerprint != minified.fingerprint


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
