import json
import pathlib
import sys
from typing import Optional

from typer import Argument
from typer import Context as TyperContext
from typer import Exit
from typer import Option
from typer import echo

from simpledata import commands
from simpledata import exceptions
from simpledata.components import Registry
from simpledata.utils.imports import importstr


def map_(
    ctx: TyperContext,
    model: str = Argument(..., help=(
        "Model class to map payload as (dotted.path:Name)"
    )),
    payload: str = Argument('-', help=(
        "Path to a JSON payload file, reads STDIN if `-` or not given"
    )),
    schema: Optional[str] = Option(None, '-s', '--schema', help=(
        "Callable declaring mappings (dotted.path:name), it is called with "
        "the model registry"
    )),
    indent: int = Option(2, '-i', '--indent', help="JSON output indentation"),
):
    """Map a JSON payload into typed models and print the mapped graph"""
    registry: Registry = ctx.obj
    if schema:
        importstr(schema)(registry)

    if payload == '-':
        data = json.load(sys.stdin)
    else:
        data = json.loads(pathlib.Path(payload).read_text())

    try:
        result = registry[importstr(model)].apply_mapping(data)
    except exceptions.BaseError as e:
        echo(str(e), err=True)
        raise Exit(code=1)

    echo(json.dumps(commands.dump(result), indent=indent, ensure_ascii=False, default=str))
