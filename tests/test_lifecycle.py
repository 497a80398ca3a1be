import pytest

from simpledata import exceptions
from simpledata.adapters import Adapter
from simpledata.adapters.memory import Memory
from simpledata.components import Collection
from simpledata.components import Model
from simpledata.components import Registry


class User(Model):
    pass


class Address(Model):
    pass


class Team(Model):
    pass


class AuditedUser(Model):
    removed = False

    def after_remove(self):
        super().after_remove()
        self.removed = True


@pytest.fixture
def adapter(registry: Registry) -> Memory:
    adapter = Memory([
        {'id': 1, 'name': 'one', 'address': {'city': 'X'}},
        {'id': 2, 'name': 'two'},
    ])
    registry.register(User, adapter)
    registry[User].map('address', Address)
    return adapter


@pytest.mark.asyncio
async def test_reload(registry: Registry, adapter: Memory):
    user = registry[User].apply_mapping({'id': 1, 'name': 'stale', 'extra': True})
    adapter.data[1]['name'] = 'fresh'
    result = await user.reload()
    assert result is user
    assert user.name == 'fresh'
    assert user.extra is True
    assert isinstance(user.address, Address)
    assert user.address.city == 'X'
    assert adapter.calls == [('reload', user)]


@pytest.mark.asyncio
async def test_reload_failure(registry: Registry, adapter: Memory):
    user = registry[User].apply_mapping({'id': 42, 'name': 'stale'})
    with pytest.raises(exceptions.ItemDoesNotExist):
        await user.reload()
    assert user.name == 'stale'


@pytest.mark.asyncio
async def test_reload_array_member(registry: Registry, adapter: Memory):
    registry[Team].map('members', User)
    team = registry[Team].apply_mapping({'members': [{'id': 2, 'name': 'stale'}]})
    member = team.members[0]
    await member.reload()
    assert member.name == 'two'
    assert team.members[0] is member
    member.remove_from_array()
    assert len(team.members) == 0


@pytest.mark.asyncio
async def test_remove(registry: Registry, adapter: Memory):
    user = registry[User].apply_mapping({'id': 1})
    result = await user.remove()
    assert result is user
    assert 1 not in adapter.data


@pytest.mark.asyncio
async def test_remove_array_member(registry: Registry, adapter: Memory):
    registry[Team].map('members', User)
    team = registry[Team].apply_mapping({
        'members': [{'id': 1}, {'id': 2}],
    })
    first = team.members[0]
    await first.remove()
    assert len(team.members) == 1
    assert team.members[0].id == 2
    assert 1 not in adapter.data


@pytest.mark.asyncio
async def test_remove_top_level_member(registry: Registry, adapter: Memory):
    users = registry[User].apply_mapping([{'id': 1}, {'id': 2}])
    assert isinstance(users, Collection)
    await users[1].remove()
    assert [u.id for u in users] == [1]


@pytest.mark.asyncio
async def test_remove_failure(registry: Registry, adapter: Memory):
    registry[Team].map('members', User)
    team = registry[Team].apply_mapping({'members': [{'id': 42}]})
    with pytest.raises(exceptions.ItemDoesNotExist):
        await team.members[0].remove()
    assert len(team.members) == 1


@pytest.mark.asyncio
async def test_remove_not_supported(registry: Registry):
    registry.register(User, Adapter())
    user = registry[User].apply_mapping({'id': 1})
    with pytest.raises(exceptions.AdapterOperationNotSupported) as e:
        await user.remove()
    assert e.value.context == {
        'adapter': 'Adapter',
        'operation': 'remove',
    }


@pytest.mark.asyncio
async def test_after_remove_hook(registry: Registry):
    registry.register(AuditedUser, Memory([{'id': 1}, {'id': 2}]))
    registry[Team].map('members', AuditedUser)
    team = registry[Team].apply_mapping({'members': [{'id': 1}, {'id': 2}]})
    user = team.members[0]
    await user.remove()
    assert user.removed is True
    assert [m.id for m in team.members] == [2]

    single = registry[AuditedUser].apply_mapping({'id': 2})
    await single.remove()
    assert single.removed is True


@pytest.mark.asyncio
async def test_reload_keeps_collection(registry: Registry):
    registry.register(Team, Memory([{'id': 1, 'name': 'fresh'}]))
    registry[Team].map('members', User)
    team = registry[Team].apply_mapping({'id': 1, 'members': [{'id': 2}]})
    members = team.members
    await team.reload()
    assert team.name == 'fresh'
    assert team.members is members
    assert members[0].get_array_ref() is members
