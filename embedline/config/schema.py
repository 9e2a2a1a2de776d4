# embedline/config/schema.py
"""
Pydantic schema for embedline configuration.

Rules:
- Strict validation
- No unknown keys
- Sections are keyed by a reference name; models point at connectors and
  pipelines point at models through these names (or through real ids)
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from embedline.connectors.schema import ConnectorSpec
from embedline.indexes.schema import IndexDefinition
from embedline.pipeline.schema import PipelineSpec
from embedline.trust.registry import DEFAULT_TRUSTED_ENDPOINTS


class ModelConfig(BaseModel):
    name: str = Field(..., min_length=1)
    connector: str = Field(..., description="Connector reference name or connector id")
    function_name: str = "remote"
    description: str = ""
    dimension: int | None = Field(default=None, gt=0)
    deploy: bool = Field(default=True, description="Deploy right after registration")

    model_config = ConfigDict(extra="forbid")


class RetryConfig(BaseModel):
    max_attempts: int = Field(default=3, ge=1)
    backoff_seconds: float = Field(default=0.5, ge=0)
    max_backoff_seconds: float = Field(default=8.0, ge=0)

    model_config = ConfigDict(extra="forbid")


class HttpConfig(BaseModel):
    timeout: float = Field(default=30.0, gt=0, description="Per-request timeout in seconds")
    transport: Literal["http", "local"] = Field(
        default="http",
        description="'local' answers requests with deterministic hash embeddings",
    )
    local_dimension: int = Field(default=1536, gt=0)

    model_config = ConfigDict(extra="forbid")


class StoreConfig(BaseModel):
    plugin_name: str = Field(default="memory", description="Store plugin name")
    kwargs: dict[str, Any] = Field(default_factory=dict, description="Store init kwargs")

    model_config = ConfigDict(extra="forbid")


class LoggingConfig(BaseModel):
    level: str = "INFO"

    model_config = ConfigDict(extra="forbid")


class EmbedlineConfig(BaseModel):
    trusted_endpoints: list[str] = Field(default_factory=lambda: list(DEFAULT_TRUSTED_ENDPOINTS))
    connectors: dict[str, ConnectorSpec] = Field(default_factory=dict)
    models: dict[str, ModelConfig] = Field(default_factory=dict)
    pipelines: dict[str, PipelineSpec] = Field(default_factory=dict)
    indexes: dict[str, IndexDefinition] = Field(default_factory=dict)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")
