# embedline/writer.py
"""
Index writer.

Resolves the pipeline for an index, enriches the document, validates it
against the index mapping and persists it with a single store call.

Failures are raised as WriteRejectedError carrying the failing stage and
the underlying cause. Nothing is persisted for a rejected write.
"""

from __future__ import annotations

import copy
import threading
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from embedline.exceptions import (
    EmbedlineError,
    Stage,
    WriteCancelledError,
    WriteRejectedError,
    stage_for,
)
from embedline.indexes.registry import IndexRegistry
from embedline.logging.logger import get_logger
from embedline.logging.tags import WRITER
from embedline.pipeline.engine import PipelineEngine
from embedline.pipeline.pipeline import Pipeline
from embedline.pipeline.registry import PipelineRegistry
from embedline.store.base import DocumentStore

logger = get_logger(__name__)

NO_PIPELINE = "_none"


@dataclass(frozen=True)
class WriteResult:
    index: str
    id: str
    result: str  # "created" | "updated"
    pipeline: str | None
    document: dict[str, Any]


@dataclass(frozen=True)
class BulkItem:
    """Outcome of one document in write_many(); exactly one of result/error is set."""

    position: int
    result: WriteResult | None = None
    error: WriteRejectedError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class IndexWriter:
    def __init__(
        self,
        indexes: IndexRegistry,
        pipelines: PipelineRegistry,
        engine: PipelineEngine,
        store: DocumentStore,
    ) -> None:
        self._indexes = indexes
        self._pipelines = pipelines
        self._engine = engine
        self._store = store

    def _resolve_pipeline(self, default: str | None, override: str | None) -> Pipeline | None:
        pipeline_id = default if override is None else override
        if pipeline_id is None or pipeline_id == NO_PIPELINE:
            return None
        return self._pipelines.get(pipeline_id)

    def write(
        self,
        index: str,
        document: Mapping[str, Any],
        doc_id: str | None = None,
        *,
        pipeline: str | None = None,
        cancel: threading.Event | None = None,
    ) -> WriteResult:
        """
        Enrich and persist one document.

        Args:
            index: Target index; created without a pipeline if undefined
            document: Field mapping; never mutated
            doc_id: Document id, generated when omitted
            pipeline: Pipeline override; "_none" skips the default pipeline
            cancel: Event checked between steps and right before persisting

        Raises:
            WriteRejectedError: any enrichment, mapping or persistence failure
            NotFoundError: the pipeline override does not exist
            ValidationError: the index is undefined and its name is not a valid index name
        """
        target = self._indexes.ensure(index)
        resolved = self._resolve_pipeline(target.default_pipeline, pipeline)
        doc_id = doc_id or uuid.uuid4().hex

        try:
            if resolved is not None:
                enriched = self._engine.apply(resolved, document, cancel=cancel)
            else:
                enriched = copy.deepcopy(dict(document))
            self._indexes.validate_document(target, enriched)
            if cancel is not None and cancel.is_set():
                raise WriteCancelledError(f"Cancelled before persisting {index}/{doc_id}")
        except EmbedlineError as exc:
            stage = stage_for(exc)
            logger.warning(f"{WRITER} Rejected {index}/{doc_id} at {stage.value}: {exc}")
            raise WriteRejectedError(index, doc_id, stage, exc) from exc

        try:
            replaced = self._store.put(index, doc_id, enriched)
        except Exception as exc:
            logger.error(f"{WRITER} Store failed for {index}/{doc_id}: {exc}")
            raise WriteRejectedError(index, doc_id, Stage.PERSISTENCE, exc) from exc

        logger.debug(f"{WRITER} Stored {index}/{doc_id}")
        return WriteResult(
            index=index,
            id=doc_id,
            result="updated" if replaced else "created",
            pipeline=resolved.id if resolved else None,
            document=enriched,
        )

    def write_many(
        self,
        index: str,
        documents: Iterable[Mapping[str, Any]],
        *,
        ids: Iterable[str | None] | None = None,
        pipeline: str | None = None,
        max_workers: int = 8,
        cancel: threading.Event | None = None,
    ) -> list[BulkItem]:
        """
        Write independent documents concurrently.

        A rejected document is reported in its BulkItem and never aborts
        the others. Results keep input order.
        """
        docs = list(documents)
        doc_ids = list(ids) if ids is not None else [None] * len(docs)
        if len(doc_ids) != len(docs):
            raise ValueError("ids and documents must have the same length")

        def _one(position: int) -> BulkItem:
            try:
                result = self.write(
                    index, docs[position], doc_ids[position], pipeline=pipeline, cancel=cancel
                )
            except WriteRejectedError as exc:
                return BulkItem(position=position, error=exc)
            return BulkItem(position=position, result=result)

        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            items = list(pool.map(_one, range(len(docs))))

        failed = sum(1 for i in items if not i.ok)
        logger.info(f"{WRITER} Bulk write to {index!r}: {len(items) - failed} stored, {failed} rejected")
        return items

    def get(self, index: str, doc_id: str) -> dict[str, Any] | None:
        return self._store.get(index, doc_id)

    def delete(self, index: str, doc_id: str) -> bool:
        return self._store.delete(index, doc_id)
