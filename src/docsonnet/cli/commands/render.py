"""`docsonnet render` command.

Renders Markdown with the bundled Jsonnet renderer and writes one file per
package below `--output`.
"""

from __future__ import annotations

from typing import List, Optional

import typer

from docsonnet.cli.commands._common import JPATH_HELP, fail, make_opts
from docsonnet.core.errors import DocsonnetError
from docsonnet.pipeline import render_with_jsonnet, write_rendered


def register(app: typer.Typer) -> None:
    @app.command("render")
    def render(
        filename: str = typer.Argument(..., help="Jsonnet file to document."),
        jpath: Optional[List[str]] = typer.Option(None, "--jpath", "-J", help=JPATH_HELP),
        output: str = typer.Option("docs", "--output", "-o", help="Output directory for the Markdown files."),
    ) -> None:
        """Render Markdown docs for a Jsonnet library."""
        try:
            files = render_with_jsonnet(filename, make_opts(jpath))
        except DocsonnetError as e:
            raise fail(e) from e

        try:
            written = write_rendered(output, files)
        except ValueError as e:
            raise typer.BadParameter(str(e)) from e

        for path in written:
            typer.echo(str(path))
