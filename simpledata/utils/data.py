from typing import Any
from typing import Dict


def copy_record(value: Any, memo: Dict[int, Any] = None) -> Any:
    """Copy dicts and lists of a raw record, leaving all other values as is

    Unlike `copy.deepcopy`, model instances and other objects found inside a
    record are shared with the copy. Recursive references are preserved.
    """
    if memo is None:
        memo = {}
    key = id(value)
    if key in memo:
        return memo[key]
    if isinstance(value, dict):
        result = memo[key] = {}
        for k, v in value.items():
            result[k] = copy_record(v, memo)
        return result
    if isinstance(value, list):
        result = memo[key] = []
        result.extend(copy_record(v, memo) for v in value)
        return result
    return value


def public_fields(obj: Any) -> Dict[str, Any]:
    """Return record fields of an object, skipping reserved `_` names"""
    return {
        k: v
        for k, v in vars(obj).items()
        if not k.startswith('_')
    }


def take(data: Dict[str, Any]) -> Dict[str, Any]:
    """Strip reserved `_` keys from a dumped record

        >>> take({'_type': 'User', 'id': 1})
        {'id': 1}

    """
    return {k: v for k, v in data.items() if not k.startswith('_')}
