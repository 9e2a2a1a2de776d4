# embedline/cli/cli.py
"""
Main embedline CLI.

Commands:
    embedline apply CONFIG              Apply a declarative configuration
    embedline ingest CONFIG FILE -i X   Enrich and store a JSON Lines file
    embedline check-url URL             Check a URL against the trust rules
    embedline serve                     Start the admin API
"""

from __future__ import annotations

import typer

from embedline import __version__
from embedline.cli.commands import apply, check_url, ingest, serve

app = typer.Typer(
    help="embedline - embedding ingestion orchestrator",
    no_args_is_help=True,
)

app.command("apply")(apply.command)
app.command("ingest")(ingest.command)
app.command("check-url")(check_url.command)
app.command("serve")(serve.command)


@app.command("version")
def version() -> None:
    """Show the installed version."""
    typer.echo(f"embedline {__version__}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
