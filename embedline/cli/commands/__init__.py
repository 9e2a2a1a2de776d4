"""CLI commands."""

from embedline.cli.commands import apply, check_url, ingest, serve

__all__ = ["apply", "check_url", "ingest", "serve"]
