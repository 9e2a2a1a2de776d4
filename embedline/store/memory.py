# embedline/store/memory.py
from __future__ import annotations

import copy
import threading
from typing import Any

from embedline.logging.logger import get_logger
from embedline.logging.tags import STORE

logger = get_logger(__name__)


class InMemoryDocumentStore:
    """Thread-safe dict-backed store. Documents are copied in and out."""

    plugin_name = "memory"

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._data: dict[str, dict[str, dict[str, Any]]] = {}

    def ensure_index(self, index: str, vector_fields: dict[str, int]) -> None:
        with self._lock:
            self._data.setdefault(index, {})

    def put(self, index: str, doc_id: str, document: dict[str, Any]) -> bool:
        stored = copy.deepcopy(document)
        with self._lock:
            docs = self._data.setdefault(index, {})
            replaced = doc_id in docs
            docs[doc_id] = stored
        logger.debug(f"{STORE} put {index}/{doc_id}")
        return replaced

    def get(self, index: str, doc_id: str) -> dict[str, Any] | None:
        with self._lock:
            doc = self._data.get(index, {}).get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    def delete(self, index: str, doc_id: str) -> bool:
        with self._lock:
            return self._data.get(index, {}).pop(doc_id, None) is not None

    def count(self, index: str) -> int:
        with self._lock:
            return len(self._data.get(index, {}))
