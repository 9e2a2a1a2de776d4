# embedline/indexes/schema.py
"""
Pydantic schema for index definitions.

    {
      "settings": {"index.knn": true, "default_pipeline": "docling-ingest-pipeline"},
      "mappings": {
        "properties": {
          "content_embedding": {"type": "knn_vector", "dimension": 1536},
          "content": {"type": "text"}
        }
      }
    }

Setting keys may carry the "index." prefix; it is stripped on load.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

KNN_VECTOR = "knn_vector"
TEXT_TYPES = frozenset({"text", "keyword"})


class FieldMapping(BaseModel):
    type: str = Field(..., min_length=1)
    dimension: int | None = Field(default=None, gt=0)

    model_config = ConfigDict(extra="allow", frozen=True)

    @model_validator(mode="after")
    def vector_needs_dimension(self) -> "FieldMapping":
        if self.type == KNN_VECTOR and self.dimension is None:
            raise ValueError("knn_vector fields require a dimension")
        return self


class IndexMappings(BaseModel):
    properties: dict[str, FieldMapping] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid", frozen=True)


class IndexSettings(BaseModel):
    knn: bool = False
    default_pipeline: str | None = None
    number_of_shards: int | None = None
    number_of_replicas: int | None = None

    model_config = ConfigDict(extra="forbid", frozen=True)

    @model_validator(mode="before")
    @classmethod
    def strip_index_prefix(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        return {k.removeprefix("index."): v for k, v in data.items()}

    @field_validator("default_pipeline")
    @classmethod
    def none_pipeline(cls, v: str | None) -> str | None:
        # "_none" explicitly disables the default pipeline
        return None if v in ("", "_none") else v


class IndexDefinition(BaseModel):
    settings: IndexSettings = Field(default_factory=IndexSettings)
    mappings: IndexMappings = Field(default_factory=IndexMappings)

    model_config = ConfigDict(extra="forbid", frozen=True)

    def vector_fields(self) -> dict[str, int]:
        return {
            name: mapping.dimension
            for name, mapping in self.mappings.properties.items()
            if mapping.type == KNN_VECTOR
        }
