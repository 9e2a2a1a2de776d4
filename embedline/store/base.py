# embedline/store/base.py
"""
Document store contract.

The store is a black box that durably persists whatever document it is
handed. It never sees a partially enriched document: the writer calls put()
exactly once per successful write.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class DocumentStore(Protocol):
    def ensure_index(self, index: str, vector_fields: dict[str, int]) -> None:
        """Prepare storage for an index. vector_fields maps field name to dimension."""
        ...

    def put(self, index: str, doc_id: str, document: dict[str, Any]) -> bool:
        """Persist a document. Returns True when it replaced an existing one."""
        ...

    def get(self, index: str, doc_id: str) -> dict[str, Any] | None:
        ...

    def delete(self, index: str, doc_id: str) -> bool:
        ...

    def count(self, index: str) -> int:
        ...
