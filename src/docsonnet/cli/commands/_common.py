"""Helpers shared by the pipeline commands."""

from __future__ import annotations

from typing import List, Optional

import typer

from docsonnet.core.errors import DocsonnetError
from docsonnet.pipeline import Opts

JPATH_HELP = "Library search directory; repeatable, first match wins. $JSONNET_PATH entries are appended."


def make_opts(jpath: Optional[List[str]]) -> Opts:
    return Opts.from_env(jpath or [])


def fail(e: DocsonnetError) -> typer.Exit:
    """Report a pipeline error on stderr; return the Exit to raise."""
    typer.echo(f"error: {e}", err=True)
    return typer.Exit(code=1)
