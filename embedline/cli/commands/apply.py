# embedline/cli/commands/apply.py
"""
Apply a declarative configuration.

Usage:
    embedline apply embedline.yaml
"""

from __future__ import annotations

from pathlib import Path

import typer

from embedline.cli.ui import ui
from embedline.cluster import Cluster
from embedline.config.loader import load_config
from embedline.exceptions import EmbedlineError
from embedline.logging.logger import configure_logging, get_logger
from embedline.logging.tags import CLI

logger = get_logger(__name__)


def command(
    config: Path = typer.Argument(..., exists=True, dir_okay=False, help="Configuration file."),
) -> None:
    """
    Validate and apply trusted endpoints, connectors, models, pipelines and indexes.

    Prints the id assigned to every definition. Applying the same file again
    yields the same ids.
    """
    try:
        cfg = load_config(config)
        configure_logging(cfg.logging.level)
        cluster = Cluster.from_config(cfg)
    except EmbedlineError as exc:
        ui.error(str(exc))
        raise typer.Exit(1)
    cluster.close()

    logger.debug(f"{CLI} Applied {config}")
    ui.header("embedline apply", str(config))

    ui.table(
        "Connectors",
        ["Reference", "Connector ID", "Name"],
        [[ref, cid, cluster.connectors.get(cid).name] for ref, cid in cluster.applied.connectors.items()],
    )
    ui.table(
        "Models",
        ["Name", "Model ID", "State"],
        [[m.name, m.id, m.state.value] for m in cluster.models.list()],
    )
    ui.table(
        "Pipelines",
        ["Pipeline", "Steps"],
        [
            [p.id, ", ".join(f"{s.source_field} -> {s.target_field}" for s in p.steps)]
            for p in cluster.pipelines.list()
        ],
    )
    ui.table(
        "Indexes",
        ["Index", "Default pipeline"],
        [[i.name, i.default_pipeline or "-"] for i in cluster.indexes.list()],
    )

    for connector_id in cluster.untrusted_connectors():
        ui.warning(
            f"Connector {connector_id} targets an untrusted endpoint",
            "add a matching trusted_endpoints rule",
        )
    ui.success("Configuration applied")

