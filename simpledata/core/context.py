import importlib
import pathlib

from simpledata.components import Registry
from simpledata.core.config import RawConfig
from simpledata.core.config import read_config


def create_registry(rc: RawConfig = None, args=None, envfile=None) -> Registry:
    if rc is None:
        rc = read_config(args, envfile)

    load_commands(rc.get('commands', 'modules', cast=list, default=[]))

    return Registry(
        rc,
        max_depth=rc.get('max_depth', cast=int, default=100),
        cache_fetched=rc.get('cache_fetched', cast=bool, default=False),
    )


def load_commands(modules):
    for module_path in modules:
        module = importlib.import_module(module_path)
        path = pathlib.Path(module.__file__).resolve()
        if path.name != '__init__.py':
            continue
        path = path.parent
        base = path.parents[module_path.count('.')]
        for path in path.glob('**/*.py'):
            if path.name == '__init__.py':
                module_path = path.parent.relative_to(base)
            else:
                module_path = path.relative_to(base).with_suffix('')
            module_path = '.'.join(module_path.parts)
            importlib.import_module(module_path)
