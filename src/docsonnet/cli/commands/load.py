"""`docsonnet load` command: print the object model as JSON."""

from __future__ import annotations

import json
from typing import List, Optional

import typer

from docsonnet.cli.commands._common import JPATH_HELP, fail, make_opts
from docsonnet.core.errors import DocsonnetError
from docsonnet.core.transform import package_to_dict
from docsonnet.pipeline import load


def register(app: typer.Typer) -> None:
    @app.command("load")
    def load_cmd(
        filename: str = typer.Argument(..., help="Jsonnet file to document."),
        jpath: Optional[List[str]] = typer.Option(None, "--jpath", "-J", help=JPATH_HELP),
    ) -> None:
        """Extract the docs of a Jsonnet library and print the docsonnet model as JSON."""
        try:
            pkg = load(filename, make_opts(jpath))
        except DocsonnetError as e:
            raise fail(e) from e

        typer.echo(json.dumps(package_to_dict(pkg), indent=2))
