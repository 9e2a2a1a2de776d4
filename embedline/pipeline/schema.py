# embedline/pipeline/schema.py
"""
Pydantic schema for ingest pipeline definitions.

Two equivalent forms are accepted.

Processor form:

    {
      "description": "Pipeline for automatic embedding generation",
      "processors": [
        {"text_embedding": {"model_id": "...", "field_map": {"content": "content_embedding"}}}
      ]
    }

Step form:

    {
      "description": "...",
      "steps": [
        {"source_field": "content", "target_field": "content_embedding", "model_id": "..."}
      ]
    }
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TextEmbeddingProcessor(BaseModel):
    model_id: str = Field(..., min_length=1)
    field_map: dict[str, str] = Field(..., min_length=1)
    ignore_missing: bool = False

    model_config = ConfigDict(extra="forbid")


class ProcessorSpec(BaseModel):
    text_embedding: TextEmbeddingProcessor

    model_config = ConfigDict(extra="forbid")


class StepSpec(BaseModel):
    source_field: str = Field(..., min_length=1)
    target_field: str = Field(..., min_length=1)
    model_id: str = Field(..., min_length=1)
    required: bool = True

    model_config = ConfigDict(extra="forbid")


class PipelineSpec(BaseModel):
    description: str = ""
    processors: list[ProcessorSpec] = Field(default_factory=list)
    steps: list[StepSpec] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def one_form(self) -> "PipelineSpec":
        if self.processors and self.steps:
            raise ValueError("define either 'processors' or 'steps', not both")
        if not self.processors and not self.steps:
            raise ValueError("pipeline must define at least one step")
        return self

    def to_steps(self) -> list[StepSpec]:
        if self.steps:
            return list(self.steps)
        return [
            StepSpec(
                source_field=src,
                target_field=dst,
                model_id=proc.text_embedding.model_id,
                required=not proc.text_embedding.ignore_missing,
            )
            for proc in self.processors
            for src, dst in proc.text_embedding.field_map.items()
        ]
