# embedline/indexes/registry.py
from __future__ import annotations

import math
import re
import threading
from dataclasses import dataclass
from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from embedline.exceptions import FieldMappingError, NotFoundError, ValidationError
from embedline.indexes.schema import KNN_VECTOR, TEXT_TYPES, IndexDefinition
from embedline.logging.logger import get_logger
from embedline.logging.tags import WRITER
from embedline.pipeline.fields import get_field
from embedline.pipeline.registry import PipelineRegistry
from embedline.store.base import DocumentStore

logger = get_logger(__name__)

_INDEX_NAME = re.compile(r"^[a-z0-9][a-z0-9._-]*$")


@dataclass(frozen=True)
class Index:
    name: str
    definition: IndexDefinition

    @property
    def default_pipeline(self) -> str | None:
        return self.definition.settings.default_pipeline

    def describe(self) -> dict[str, Any]:
        return self.definition.model_dump(mode="json", exclude_none=True)


class IndexRegistry:
    """Index definitions and the default-pipeline binding per index."""

    def __init__(self, pipelines: PipelineRegistry, store: DocumentStore) -> None:
        self._pipelines = pipelines
        self._store = store
        self._lock = threading.Lock()
        self._indexes: dict[str, Index] = {}

        pipelines.set_reference_check(self.indexes_using_pipeline)

    def put_index(self, name: str, definition: IndexDefinition | Mapping[str, Any] | None = None) -> str:
        if not _INDEX_NAME.match(name):
            raise ValidationError(
                f"Invalid index name {name!r}: use lowercase letters, digits, '.', '_' or '-'"
            )
        if definition is None:
            definition = IndexDefinition()
        elif not isinstance(definition, IndexDefinition):
            try:
                definition = IndexDefinition.model_validate(definition)
            except PydanticValidationError as exc:
                raise ValidationError(f"Invalid index definition {name!r}: {exc}") from exc

        pipeline_id = definition.settings.default_pipeline
        if pipeline_id is not None and not self._pipelines.exists(pipeline_id):
            raise ValidationError(f"Index {name!r} uses unknown default_pipeline {pipeline_id!r}")

        index = Index(name=name, definition=definition)
        with self._lock:
            if self._indexes.get(name) == index:
                return name
            self._store.ensure_index(name, definition.vector_fields())
            self._indexes = {**self._indexes, name: index}

        logger.info(f"{WRITER} Index {name!r} defined (default_pipeline={pipeline_id})")
        return name

    def ensure(self, name: str) -> Index:
        """Return the index, creating an empty definition on first use."""
        index = self._indexes.get(name)
        if index is None:
            self.put_index(name)
            index = self._indexes[name]
        return index

    def get(self, name: str) -> Index:
        try:
            return self._indexes[name]
        except KeyError:
            raise NotFoundError("index", name) from None

    def list(self) -> list[Index]:
        return list(self._indexes.values())

    def indexes_using_pipeline(self, pipeline_id: str) -> list[str]:
        return [i.name for i in self._indexes.values() if i.default_pipeline == pipeline_id]

    def validate_document(self, index: Index, document: Mapping[str, Any]) -> None:
        """Check mapped fields of an enriched document against the index mapping."""
        for field, mapping in index.definition.mappings.properties.items():
            value = get_field(document, field, None)
            if value is None:
                continue
            if mapping.type == KNN_VECTOR:
                _check_vector(field, value, mapping.dimension)
            elif mapping.type in TEXT_TYPES and not isinstance(value, str):
                raise FieldMappingError(
                    f"Field {field!r} is mapped as {mapping.type} but got {type(value).__name__}"
                )


def _check_vector(field: str, value: Any, dimension: int) -> None:
    if not isinstance(value, list) or any(
        isinstance(x, bool) or not isinstance(x, (int, float)) or not math.isfinite(x) for x in value
    ):
        raise FieldMappingError(f"Field {field!r} is mapped as knn_vector but is not a numeric array")
    if len(value) != dimension:
        raise FieldMappingError(
            f"Field {field!r} has dimension {len(value)}, mapping expects {dimension}"
        )
