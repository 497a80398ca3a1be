import pytest

from simpledata import exceptions
from simpledata.adapters.memory import Memory
from simpledata.components import Model
from simpledata.components import Registry


class User(Model):
    pass


class Address(Model):
    pass


def test_insert():
    adapter = Memory()
    assert adapter.insert({'name': 'a'}) == {'id': 1, 'name': 'a'}
    assert adapter.insert({'id': 2, 'name': 'b'}) == {'id': 2, 'name': 'b'}
    assert adapter.insert({'name': 'c'}) == {'id': 3, 'name': 'c'}


def test_insert_copies_record():
    record = {'id': 1, 'tags': ['a']}
    adapter = Memory([record])
    record['tags'].append('b')
    assert adapter.data[1] == {'id': 1, 'tags': ['a']}


@pytest.mark.asyncio
async def test_find_record():
    adapter = Memory([{'id': 1, 'kind': 'a'}, {'id': 2, 'kind': 'b'}])
    assert await adapter.find_record(2) == {'id': 2, 'kind': 'b'}
    assert await adapter.find_record() == [
        {'id': 1, 'kind': 'a'},
        {'id': 2, 'kind': 'b'},
    ]
    assert await adapter.find_record(kind='a') == [{'id': 1, 'kind': 'a'}]


@pytest.mark.asyncio
async def test_find_record_missing():
    adapter = Memory()
    with pytest.raises(exceptions.ItemDoesNotExist) as e:
        await adapter.find_record(1)
    assert e.value.context == {'id': 1}


@pytest.mark.asyncio
async def test_create_dumps_instance(registry: Registry):
    adapter = Memory()
    registry.register(User, adapter)
    registry[User].map('address', Address)
    user = registry[User].apply_mapping({'name': 'a', 'address': {'city': 'X'}})
    record = await adapter.create(user)
    assert record == {
        'id': 1,
        'name': 'a',
        'address': {'_type': 'Address', 'city': 'X'},
    }


@pytest.mark.asyncio
async def test_remove():
    adapter = Memory([{'id': 1}])
    await adapter.remove(User(id=1))
    assert adapter.data == {}
    with pytest.raises(exceptions.ItemDoesNotExist):
        await adapter.remove(User(id=1))
