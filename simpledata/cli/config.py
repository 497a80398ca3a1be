import sys
from typing import List
from typing import Optional

from typer import Argument
from typer import Context as TyperContext

from simpledata.components import Registry
from simpledata.core.config import KeyFormat


def config(
    ctx: TyperContext,
    name: Optional[List[str]] = Argument(None),
    fmt: KeyFormat = KeyFormat.cfg,
):
    """Show current configuration values"""
    registry: Registry = ctx.obj
    registry.rc.dump(*(name or []), fmt=fmt, file=sys.stdout)
