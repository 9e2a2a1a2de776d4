# embedline/cli/commands/ingest.py
"""
Ingest a JSON Lines file into an index.

Usage:
    embedline ingest embedline.yaml documents.jsonl --index docs
    embedline ingest embedline.yaml documents.jsonl --index docs --id-field id -w 16
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer

from embedline.cli.ui import ui
from embedline.cluster import Cluster
from embedline.config.loader import load_config
from embedline.exceptions import EmbedlineError
from embedline.logging.logger import configure_logging


def _read_jsonl(path: Path) -> list[dict[str, Any]]:
    documents = []
    with path.open("r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                doc = json.loads(line)
            except json.JSONDecodeError as exc:
                raise typer.BadParameter(f"{path}:{lineno}: invalid JSON ({exc})") from exc
            if not isinstance(doc, dict):
                raise typer.BadParameter(f"{path}:{lineno}: expected a JSON object")
            documents.append(doc)
    return documents


def command(
    config: Path = typer.Argument(..., exists=True, dir_okay=False, help="Configuration file."),
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON Lines file."),
    index: str = typer.Option(..., "--index", "-i", help="Target index."),
    id_field: Optional[str] = typer.Option(
        None, "--id-field", help="Take document ids from this field."
    ),
    pipeline: Optional[str] = typer.Option(
        None, "--pipeline", "-p", help="Pipeline override ('_none' disables the default)."
    ),
    workers: int = typer.Option(8, "--workers", "-w", min=1, help="Concurrent writes."),
) -> None:
    """Enrich and store every document of a JSON Lines file."""
    documents = _read_jsonl(source)
    ids = [str(d[id_field]) if id_field and id_field in d else None for d in documents]

    try:
        cfg = load_config(config)
        configure_logging(cfg.logging.level)
        cluster = Cluster.from_config(cfg)
    except EmbedlineError as exc:
        ui.error(str(exc))
        raise typer.Exit(1)

    ui.header("embedline ingest", f"{source} -> {index}")
    with cluster:
        try:
            items = cluster.writer.write_many(
                index, documents, ids=ids, pipeline=pipeline, max_workers=workers
            )
        except EmbedlineError as exc:
            ui.error(str(exc))
            raise typer.Exit(1)

    failed = [item for item in items if not item.ok]
    for item in failed:
        ui.error(
            f"line {item.position + 1}: {item.error.stage.value} stage: "
            f"{type(item.error.cause).__name__}: {item.error.cause}"
        )

    stored = len(items) - len(failed)
    if failed:
        ui.warning(f"{stored} stored, {len(failed)} rejected")
        raise typer.Exit(1)
    ui.success(f"{stored} documents stored in {index!r}")
