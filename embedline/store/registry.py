# embedline/store/registry.py
"""
Document store plugin registry.

Design principle: NO SILENT FALLBACK
- If the config says "qdrant", you get qdrant or an error
"""

from __future__ import annotations

from typing import Any, Dict, Type

from embedline.store.memory import InMemoryDocumentStore
from embedline.store.qdrant import QdrantDocumentStore

REGISTRY: Dict[str, Type[Any]] = {
    InMemoryDocumentStore.plugin_name: InMemoryDocumentStore,
    QdrantDocumentStore.plugin_name: QdrantDocumentStore,
}


def available_store_plugins() -> list[str]:
    return sorted(REGISTRY)


def get_store_plugin(name: str) -> Type[Any]:
    try:
        return REGISTRY[name]
    except KeyError as exc:
        raise ValueError(
            f"Unknown store plugin: {name!r}. Available: {', '.join(available_store_plugins())}"
        ) from exc
