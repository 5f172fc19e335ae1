"""`docsonnet extract` command: print the raw metadata tree, as evaluated."""

from __future__ import annotations

from typing import List, Optional

import typer

from docsonnet.cli.commands._common import JPATH_HELP, fail, make_opts
from docsonnet.core.errors import DocsonnetError
from docsonnet.pipeline import extract


def register(app: typer.Typer) -> None:
    @app.command("extract")
    def extract_cmd(
        filename: str = typer.Argument(..., help="Jsonnet file to document."),
        jpath: Optional[List[str]] = typer.Option(None, "--jpath", "-J", help=JPATH_HELP),
    ) -> None:
        """Print the raw docsonnet tree of a Jsonnet library."""
        try:
            data = extract(filename, make_opts(jpath))
        except DocsonnetError as e:
            raise fail(e) from e

        typer.echo(data, nl=not data.endswith("\n"))
