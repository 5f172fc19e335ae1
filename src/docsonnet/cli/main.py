"""docsonnet CLI entrypoint."""

from __future__ import annotations

import logging

import typer

app = typer.Typer(
    name="docsonnet",
    add_completion=False,
    no_args_is_help=True,
    help="Extract and render documentation of Jsonnet libraries.",
)


@app.callback()
def _callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log import resolution and evaluation steps."),
) -> None:
    """docsonnet CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command("version")
def version() -> None:
    """Print the installed docsonnet version."""
    from docsonnet import __version__

    typer.echo(__version__)


def _register_commands() -> None:
    """Register CLI subcommands.

    Importing these modules must remain lightweight so `docsonnet --help` is fast.
    """
    from docsonnet.cli.commands import extract as extract_cmd
    from docsonnet.cli.commands import load as load_cmd
    from docsonnet.cli.commands import render as render_cmd

    render_cmd.register(app)
    load_cmd.register(app)
    extract_cmd.register(app)


_register_commands()
