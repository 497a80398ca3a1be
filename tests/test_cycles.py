import pytest

from simpledata import exceptions
from simpledata.components import Model
from simpledata.components import Registry
from simpledata.core.context import create_registry


class Node(Model):
    pass


def test_tree(registry: Registry):
    registry[Node].map('children', Node).map('parent', Node)
    root = registry[Node].apply_mapping({
        'name': 'root',
        'parent': {'name': 'none'},
        'children': [
            {'name': 'a', 'children': [{'name': 'aa'}]},
            {'name': 'b'},
        ],
    })
    assert isinstance(root.parent, Node)
    assert [c.name for c in root.children] == ['a', 'b']
    assert isinstance(root.children[0].children[0], Node)
    assert root.children[0].children[0]._parent is root.children[0]


def test_same_record_twice_is_not_a_cycle(registry: Registry):
    registry[Node].map('left', Node).map('right', Node)
    leaf = {'name': 'leaf'}
    node = registry[Node].apply_mapping({'left': leaf, 'right': leaf})
    assert node.left.name == 'leaf'
    assert node.right.name == 'leaf'


def test_recursive_record(registry: Registry):
    registry[Node].map('again', Node)
    data = {'name': 'loop'}
    data['again'] = data
    with pytest.raises(exceptions.SchemaCycle) as e:
        registry[Node].apply_mapping(data)
    assert e.value.context['model'] == 'Node'


def test_recursive_record_in_array(registry: Registry):
    registry[Node].map('children', Node)
    data = {'name': 'loop', 'children': []}
    data['children'].append(data)
    with pytest.raises(exceptions.SchemaCycle):
        registry[Node].apply_mapping(data)


def test_max_depth(rc):
    registry = create_registry(rc.fork({'max_depth': 3}))
    registry[Node].map('child', Node)
    data = {'child': {'child': {'child': {'child': {}}}}}
    with pytest.raises(exceptions.MappingTooDeep) as e:
        registry[Node].apply_mapping(data)
    assert e.value.context['max_depth'] == 3
    assert e.value.context['path'] == 'child.child.child'


def test_max_depth_not_reached(rc):
    registry = create_registry(rc.fork({'max_depth': 3}))
    registry[Node].map('child', Node)
    node = registry[Node].apply_mapping({'child': {'child': {}}})
    assert isinstance(node.child.child, Node)
