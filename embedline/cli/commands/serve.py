# embedline/cli/commands/serve.py
"""
Admin API server command.

Usage:
    embedline serve                       # Start on default port 9200
    embedline serve -c embedline.yaml     # Pre-apply a configuration
    embedline serve --host 0.0.0.0        # Listen on all interfaces
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
import uvicorn

from embedline.api import create_app
from embedline.cli.ui import ui
from embedline.cluster import Cluster
from embedline.config.loader import load_config
from embedline.exceptions import EmbedlineError
from embedline.logging.logger import configure_logging


def command(
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", exists=True, dir_okay=False, help="Configuration file."
    ),
    host: str = typer.Option("127.0.0.1", "--host", "-h", help="Host to bind to."),
    port: int = typer.Option(9200, "--port", "-p", help="Port to listen on."),
) -> None:
    """
    Start the admin API server.

    Once running, visit http://localhost:9200/docs for interactive docs.
    """
    try:
        cfg = load_config(config)
        configure_logging(cfg.logging.level)
        cluster = Cluster.from_config(cfg)
    except EmbedlineError as exc:
        ui.error(str(exc))
        raise typer.Exit(1)

    ui.header("embedline admin API", f"http://{host}:{port}")
    ui.info(f"API docs: http://{host}:{port}/docs")
    ui.info("Press Ctrl+C to stop")

    with cluster:
        uvicorn.run(create_app(cluster), host=host, port=port, log_level="info")
