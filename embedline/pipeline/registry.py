# embedline/pipeline/registry.py
from __future__ import annotations

import threading
from typing import Any, Callable, Mapping

from pydantic import ValidationError as PydanticValidationError

from embedline.exceptions import NotFoundError, ReferentialIntegrityError, ValidationError
from embedline.logging.logger import get_logger
from embedline.logging.tags import PIPELINE
from embedline.models.registry import ModelRegistry
from embedline.pipeline.pipeline import Pipeline, PipelineStep
from embedline.pipeline.schema import PipelineSpec

logger = get_logger(__name__)


class PipelineRegistry:
    """
    Named pipeline definitions.

    put_pipeline is a declarative upsert: an identical definition is a no-op,
    a different one replaces the stored pipeline for subsequent writes.
    """

    def __init__(self, models: ModelRegistry) -> None:
        self._models = models
        self._lock = threading.Lock()
        self._pipelines: dict[str, Pipeline] = {}
        self._in_use: Callable[[str], list[str]] = lambda pipeline_id: []

        models.set_reference_check(self.pipelines_using_model)

    def set_reference_check(self, fn: Callable[[str], list[str]]) -> None:
        """Install the callback that lists indexes using a pipeline as default."""
        self._in_use = fn

    def _build(self, pipeline_id: str, definition: PipelineSpec | Mapping[str, Any]) -> Pipeline:
        if not pipeline_id:
            raise ValidationError("pipeline id must not be empty")
        if isinstance(definition, PipelineSpec):
            spec = definition
        else:
            try:
                spec = PipelineSpec.model_validate(definition)
            except PydanticValidationError as exc:
                raise ValidationError(f"Invalid pipeline definition {pipeline_id!r}: {exc}") from exc

        steps = tuple(
            PipelineStep(
                source_field=s.source_field,
                target_field=s.target_field,
                model_id=s.model_id,
                required=s.required,
            )
            for s in spec.to_steps()
        )
        for step in steps:
            if not self._models.exists(step.model_id):
                raise ValidationError(
                    f"Pipeline {pipeline_id!r} references unknown model {step.model_id!r}"
                )
        targets = [s.target_field for s in steps]
        if len(set(targets)) != len(targets):
            raise ValidationError(f"Pipeline {pipeline_id!r} writes the same target field twice")

        return Pipeline(id=pipeline_id, steps=steps, description=spec.description)

    def put_pipeline(self, pipeline_id: str, definition: PipelineSpec | Mapping[str, Any]) -> str:
        pipeline = self._build(pipeline_id, definition)
        with self._lock:
            if self._pipelines.get(pipeline_id) == pipeline:
                return pipeline_id
            replaced = pipeline_id in self._pipelines
            self._pipelines = {**self._pipelines, pipeline_id: pipeline}

        action = "Replaced" if replaced else "Created"
        logger.info(f"{PIPELINE} {action} pipeline {pipeline_id!r} with {len(pipeline.steps)} steps")
        return pipeline_id

    def get(self, pipeline_id: str) -> Pipeline:
        try:
            return self._pipelines[pipeline_id]
        except KeyError:
            raise NotFoundError("pipeline", pipeline_id) from None

    def exists(self, pipeline_id: str) -> bool:
        return pipeline_id in self._pipelines

    def list(self) -> list[Pipeline]:
        return list(self._pipelines.values())

    def pipelines_using_model(self, model_id: str) -> list[str]:
        return [p.id for p in self._pipelines.values() if model_id in p.model_ids]

    def delete_pipeline(self, pipeline_id: str) -> None:
        with self._lock:
            self.get(pipeline_id)
            users = self._in_use(pipeline_id)
            if users:
                raise ReferentialIntegrityError("pipeline", pipeline_id, users)
            self._pipelines = {k: v for k, v in self._pipelines.items() if k != pipeline_id}
        logger.info(f"{PIPELINE} Deleted pipeline {pipeline_id!r}")
