"""
embedline - embedding ingestion orchestrator.

Wires trusted endpoints, remote connectors, deployable models and ingest
pipelines into an index writer that enriches documents with embeddings
before they are persisted.

Usage:
    from embedline import Cluster

    cluster = Cluster()
    cluster.apply_config(load_config(Path("embedline.yaml")))
    cluster.writer.write("documents", {"content": "hello"})
"""

from __future__ import annotations

__version__ = "0.1.0"

from embedline.cluster import Cluster

__all__ = ["Cluster", "__version__"]
