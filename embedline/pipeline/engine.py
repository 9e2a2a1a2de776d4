# embedline/pipeline/engine.py
"""
Ingest pipeline engine.

Applies a pipeline's steps, in order, to a staged copy of the document.
Either every step succeeds and the enriched copy is returned, or the first
failing step's error propagates and the caller's document is untouched.
"""

from __future__ import annotations

import copy
import threading
from typing import Any, Mapping

from embedline.exceptions import FieldMappingError, MissingFieldError, WriteCancelledError
from embedline.logging.logger import get_logger
from embedline.logging.tags import PIPELINE
from embedline.models.registry import ModelRegistry
from embedline.pipeline.fields import get_field, set_field
from embedline.pipeline.pipeline import Pipeline

logger = get_logger(__name__)


class PipelineEngine:
    def __init__(self, models: ModelRegistry) -> None:
        self._models = models

    def apply(
        self,
        pipeline: Pipeline,
        document: Mapping[str, Any],
        cancel: threading.Event | None = None,
    ) -> dict[str, Any]:
        """
        Enrich a document.

        Raises:
            MissingFieldError: a required source field is absent
            FieldMappingError: a source value is not text
            WriteCancelledError: cancel was set between steps
            InvocationError: any model/connector failure
        """
        staged = copy.deepcopy(dict(document))

        for index, step in enumerate(pipeline.steps):
            if cancel is not None and cancel.is_set():
                raise WriteCancelledError(f"Cancelled before step {index} of pipeline {pipeline.id!r}")

            value = get_field(staged, step.source_field, None)
            if value is None:
                if step.required:
                    raise MissingFieldError(step.source_field)
                logger.debug(
                    f"{PIPELINE} {pipeline.id}: skipping optional step "
                    f"{step.source_field} -> {step.target_field}"
                )
                continue

            if not isinstance(value, str):
                raise FieldMappingError(
                    f"Field {step.source_field!r} must be text, got {type(value).__name__}"
                )

            vector = self._models.invoke(step.model_id, value)
            try:
                set_field(staged, step.target_field, vector)
            except ValueError as exc:
                raise FieldMappingError(str(exc)) from exc

        return staged
