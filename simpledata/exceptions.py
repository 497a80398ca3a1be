from typing import Optional, Any, Dict, Tuple

import logging
import re

from simpledata.utils.imports import full_class_name


log = logging.getLogger(__name__)


class UnknownValue:

    def __str__(self):
        return '[UNKNOWN]'

    __repr__ = __str__


UNKNOWN_VALUE = UnknownValue()


def resolve_context_vars(schema: Dict[str, str], this: Optional[Any], kwargs: dict):
    """Resolve value from given kwargs and schema."""
    if this is not None:
        kwargs = {**kwargs, 'this': this}

    added = set()
    context = {}
    if this is not None:
        context['component'] = full_class_name(this)
    for k, path in schema.items():
        path = path or k
        name, *names = path.split('.')
        if name not in kwargs:
            continue
        added.add(name)
        value = kwargs
        for name in [name] + names:
            if isinstance(value, dict):
                value = value.get(name)
            elif hasattr(value, name):
                value = getattr(value, name)
            else:
                value = UNKNOWN_VALUE
                break
        if value is not UNKNOWN_VALUE:
            context[k] = value

    for k in set(kwargs) - added - {'this'}:
        v = kwargs[k]
        if not isinstance(v, (int, float, str)):
            v = str(v)
        context[k] = v

    # Return sorted context.
    names = [
        'component',
        'model',
        'adapter',
        'path',
        'segment',
    ]
    names += [x for x in schema if x not in names]
    names += [x for x in kwargs if x not in names]

    def sort_key(item: Tuple[str, Any]) -> Tuple[int, str]:
        key = item[0]
        try:
            return names.index(key), key
        except ValueError:
            return len(names), key

    return {k: v for k, v in sorted(context.items(), key=sort_key)}


class BaseError(Exception):
    template: str = None
    context: Dict[str, Any] = {}

    def __init__(self, *args, **kwargs):
        if len(args) == 0:
            this = None
        elif len(args) == 1:
            this = args[0]
        else:
            this = None
            log.error("Only one positional argument is alowed, but %d was given.", len(args), stack_info=True)

        self.context = resolve_context_vars(self.context, this, kwargs)
        super().__init__(self.message)

    def __str__(self):
        return (
            self.message + '\n' +
            ('  Context:\n' if self.context else '') +
            ''.join(
                f'    {k}: {v}\n'
                for k, v in self.context.items()
            )
        )

    @property
    def message(self):
        try:
            return _render_template(self)
        except KeyError:
            log.exception("Can't render error message for %s.", self.__class__.__name__)
            return self.template


def _render_template(error: BaseError):
    context = error.context
    try:
        return error.template.format(**context)
    except KeyError:
        context = context.copy()
        template_vars_re = re.compile(r'\{(\w+)')
        for match in template_vars_re.finditer(error.template):
            name = match.group(1)
            if name not in context:
                context[name] = UNKNOWN_VALUE
        return error.template.format(**context)


class UserError(BaseError):
    pass


class InvalidPath(UserError):
    template = "Invalid path {path!r}, path must be a non-empty dotted string."


class PathNotFound(UserError):
    template = "Can't assign {path!r}, segment {segment!r} does not exist."


class SchemaCycle(BaseError):
    template = "Mapping cycle detected for {model!r} at {path!r}."


class MappingTooDeep(SchemaCycle):
    template = (
        "Mapping of {model!r} at {path!r} exceeds maximum depth of "
        "{max_depth}."
    )


class NotInCollection(UserError):
    template = "Object {object!r} is not in collection at {path!r}."


class NotArrayMember(UserError):
    template = "Object {object!r} is not a member of any collection."


class AdapterOperationNotSupported(BaseError):
    template = "Adapter {adapter!r} does not support {operation!r} operation."


class UnknownAdapter(UserError):
    template = "Unknown adapter {name!r}."


class ItemDoesNotExist(UserError):
    template = "Resource {id!r} not found."


class RemoteServerError(BaseError):
    template = "Remote server {url!r} responded with status {status}."


class InvalidRecord(UserError):
    template = "Can't map {value!r} as {model!r}, a dict or a model instance is expected."


class ConfigLocked(BaseError):
    template = "Configuration is locked, use `rc.fork()` to change it."


class MissingConfigOption(UserError):
    template = "{name!r} is a required configuration option."
