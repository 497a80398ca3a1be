import json

from simpledata.components import Model
from simpledata.components import Registry
from simpledata.testing.cli import SimpleDataCliRunner


class User(Model):
    pass


class Address(Model):
    pass


def configure(registry: Registry):
    registry[User].map('address', Address).map('friends', User)


def test_map(registry: Registry, cli: SimpleDataCliRunner, tmp_path):
    payload = tmp_path / 'payload.json'
    payload.write_text(json.dumps({
        'id': 1,
        'address': {'city': 'X'},
        'friends': [{'id': 2}],
    }))
    result = cli.invoke(registry, [
        'map', 'test_cli:User', payload,
        '--schema', 'test_cli:configure',
    ])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        '_type': 'User',
        'id': 1,
        'address': {'_type': 'Address', 'city': 'X'},
        'friends': [{'_type': 'User', 'id': 2}],
    }


def test_map_stdin(registry: Registry, cli: SimpleDataCliRunner):
    result = cli.invoke(registry, ['map', 'test_cli:User'], input='[{"id": 1}]')
    assert result.exit_code == 0
    assert json.loads(result.stdout) == [{'_type': 'User', 'id': 1}]


def test_map_cycle(registry: Registry, cli: SimpleDataCliRunner):
    registry.max_depth = 2
    registry[User].map('friend', User)
    result = cli.invoke(registry, ['map', 'test_cli:User'], input=json.dumps({
        'friend': {'friend': {'friend': {}}},
    }))
    assert result.exit_code == 1


def test_config(registry: Registry, cli: SimpleDataCliRunner):
    result = cli.invoke(registry, ['config', 'adapter'])
    assert result.exit_code == 0
    assert 'pytest  adapter  memory' in result.stdout


def test_version(registry: Registry, cli: SimpleDataCliRunner):
    result = cli.invoke(registry, ['--version'])
    assert result.exit_code == 0
