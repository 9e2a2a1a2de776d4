# embedline/cli/commands/check_url.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from embedline.cli.ui import ui
from embedline.config.loader import load_config
from embedline.trust.registry import EndpointTrustRegistry


def command(
    url: str = typer.Argument(..., help="Outbound URL to check."),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", exists=True, dir_okay=False, help="Configuration file."
    ),
) -> None:
    """Check whether a URL is covered by the trusted endpoint rules."""
    cfg = load_config(config)
    trust = EndpointTrustRegistry(cfg.trusted_endpoints)

    if trust.is_trusted(url):
        ui.success(f"Trusted: {url}")
        return

    ui.error(f"Not trusted: {url}")
    ui.info("Rules: " + ", ".join(trust.patterns))
    raise typer.Exit(1)
