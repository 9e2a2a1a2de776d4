# embedline/store/qdrant.py
"""
Qdrant-backed document store.

Each index is a collection. knn_vector fields become named vectors; every
other field goes into the payload together with the original document id.
String ids are mapped to deterministic UUIDs.

Vectors use dot-product distance: Qdrant normalizes cosine vectors on write,
and the store must hand back exactly the vector it was given.
"""

from __future__ import annotations

import copy
import threading
import uuid
from typing import Any

from qdrant_client import QdrantClient
from qdrant_client.models import Distance, PointIdsList, PointStruct, VectorParams

from embedline.exceptions import ValidationError
from embedline.logging.logger import get_logger
from embedline.logging.tags import STORE
from embedline.pipeline.fields import delete_field, get_field, set_field

logger = get_logger(__name__)

DOC_ID_KEY = "_id"


def _string_to_uuid(s: str) -> str:
    """Convert any string to a deterministic UUID."""
    return str(uuid.uuid5(uuid.NAMESPACE_DNS, s))


class QdrantDocumentStore:
    plugin_name = "qdrant"

    def __init__(
        self,
        client: QdrantClient | None = None,
        *,
        url: str | None = None,
        location: str | None = None,
        api_key: str | None = None,
    ) -> None:
        if client is None:
            if url:
                client = QdrantClient(url=url, api_key=api_key)
            else:
                client = QdrantClient(location=location or ":memory:")
        self._client = client
        self._lock = threading.Lock()
        self._vector_fields: dict[str, dict[str, int]] = {}

    def _existing_vectors(self, index: str) -> dict[str, int]:
        vectors = self._client.get_collection(index).config.params.vectors
        if not isinstance(vectors, dict):
            return {}
        return {name: params.size for name, params in vectors.items()}

    def _create(self, index: str, vector_fields: dict[str, int]) -> None:
        self._client.create_collection(
            collection_name=index,
            vectors_config={
                name: VectorParams(size=dim, distance=Distance.DOT)
                for name, dim in vector_fields.items()
            },
        )
        logger.info(f"{STORE} Created Qdrant collection {index!r} with vectors {sorted(vector_fields)}")

    def ensure_index(self, index: str, vector_fields: dict[str, int]) -> None:
        """
        Create the collection, or adapt it to a new set of vector fields.

        Named vectors cannot be added to a Qdrant collection in place. An
        empty collection is recreated; a populated one whose vectors differ
        is rejected.
        """
        with self._lock:
            if not self._client.collection_exists(index):
                self._create(index, vector_fields)
            else:
                existing = self._existing_vectors(index)
                missing = {n: d for n, d in vector_fields.items() if existing.get(n) != d}
                if missing:
                    if self._client.count(index, exact=True).count:
                        raise ValidationError(
                            f"Index {index!r} already holds documents; cannot add or resize "
                            f"vector fields {sorted(missing)}"
                        )
                    self._client.delete_collection(index)
                    self._create(index, vector_fields)
            self._vector_fields[index] = dict(vector_fields)

    def _fields(self, index: str) -> dict[str, int]:
        if index not in self._vector_fields:
            self.ensure_index(index, {})
        return self._vector_fields[index]

    def put(self, index: str, doc_id: str, document: dict[str, Any]) -> bool:
        fields = self._fields(index)
        payload = copy.deepcopy(document)
        vectors = {}
        for name in fields:
            value = get_field(payload, name, None)
            if value is not None:
                vectors[name] = value
                delete_field(payload, name)
        payload[DOC_ID_KEY] = doc_id

        point_id = _string_to_uuid(doc_id)
        with self._lock:
            replaced = bool(self._client.retrieve(index, ids=[point_id], with_payload=False))
            self._client.upsert(
                collection_name=index,
                points=[PointStruct(id=point_id, vector=vectors, payload=payload)],
                wait=True,
            )
        return replaced

    def get(self, index: str, doc_id: str) -> dict[str, Any] | None:
        if not self._client.collection_exists(index):
            return None
        records = self._client.retrieve(
            index, ids=[_string_to_uuid(doc_id)], with_payload=True, with_vectors=True
        )
        if not records:
            return None
        record = records[0]
        document = dict(record.payload or {})
        document.pop(DOC_ID_KEY, None)
        if isinstance(record.vector, dict):
            for name, vector in record.vector.items():
                set_field(document, name, list(vector))
        return document

    def delete(self, index: str, doc_id: str) -> bool:
        point_id = _string_to_uuid(doc_id)
        with self._lock:
            if not self._client.collection_exists(index):
                return False
            if not self._client.retrieve(index, ids=[point_id], with_payload=False):
                return False
            self._client.delete(index, points_selector=PointIdsList(points=[point_id]), wait=True)
        return True

    def count(self, index: str) -> int:
        if not self._client.collection_exists(index):
            return 0
        return self._client.count(index, exact=True).count
