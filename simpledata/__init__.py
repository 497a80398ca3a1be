import importlib.metadata

from simpledata.core.context import load_commands

__version__ = importlib.metadata.version(__name__)


# Register command implementations, path resolution and mapping depend on them.
load_commands(['simpledata.commands'])
