# embedline/pipeline/pipeline.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class PipelineStep:
    """Embed source_field into target_field using model_id."""

    source_field: str
    target_field: str
    model_id: str
    required: bool = True


@dataclass(frozen=True)
class Pipeline:
    """An ordered, read-only sequence of enrichment steps."""

    id: str
    steps: tuple[PipelineStep, ...]
    description: str = ""

    @property
    def model_ids(self) -> set[str]:
        return {s.model_id for s in self.steps}

    def describe(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "steps": [
                {
                    "source_field": s.source_field,
                    "target_field": s.target_field,
                    "model_id": s.model_id,
                    "required": s.required,
                }
                for s in self.steps
            ],
        }
