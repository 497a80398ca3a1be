from __future__ import annotations

import logging
import pathlib
from typing import List
from typing import Optional

from typer import Context as TyperContext
from typer import Option
from typer import Typer
from typer import echo

import simpledata
from simpledata.cli import config
from simpledata.cli import mapping
from simpledata.cli.helpers import add
from simpledata.core.context import create_registry
from simpledata.logging_config import setup_logging

log = logging.getLogger(__name__)

app = Typer()

add(app, 'config', config.config, short_help="Show current configuration values")
add(app, 'map', mapping.map_, short_help="Map a JSON payload into typed models")


@app.callback(invoke_without_command=True)
def main(
    ctx: TyperContext,
    option: Optional[List[str]] = Option(None, '-o', '--option', help=(
        "Set configuration option, example: `-o option.name=value`."
    )),
    env_file: Optional[pathlib.Path] = Option(None, '--env-file', help=(
        "Load configuration from a given .env file."
    )),
    version: bool = Option(False, help="Show version number."),
    log_file: Optional[pathlib.Path] = Option(None, '--log-file', help=(
        "Write log messages to a specified file, if not given, writes logs to "
        "STDERR."
    )),
    log_level: Optional[str] = Option('warning', '--log-level', help=(
        "Log level. Possible levels: fatal, error, warning, info, debug. "
        "Default: warning."
    )),
):
    setup_logging(log_file, log_level)

    log.debug("log file set to: %s", log_file or 'STDERR')
    log.debug("log level set to: %s", log_level)

    ctx.obj = ctx.obj or create_registry(args=option, envfile=env_file)
    if version:
        echo(simpledata.__version__)
