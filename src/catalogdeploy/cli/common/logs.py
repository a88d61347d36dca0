"""Logging setup for the CLI."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

from catalogdeploy.cli.common.output import console

_LEVELS = {0: logging.WARNING, 1: logging.INFO}


def configure_logging(verbosity: int = 0) -> None:
    """
    Route log records of the `catalogdeploy` package through Rich.

    verbosity 0 shows warnings and errors, 1 adds progress messages,
    2 or more adds debug output (including catalog operation ids).
    """
    level = _LEVELS.get(verbosity, logging.DEBUG)
    handler = RichHandler(
        console=console,
        show_path=False,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    root = logging.getLogger("catalogdeploy")
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False
