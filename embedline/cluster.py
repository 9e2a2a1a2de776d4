# embedline/cluster.py
"""
Cluster: one explicit set of registries wired together.

There is no module-level state; every component receives the registries it
depends on. Tests and applications create as many clusters as they need.

apply_config() is declarative: applying the same configuration twice leaves
the cluster in the same state and returns the same ids.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from embedline.config.schema import EmbedlineConfig
from embedline.connectors.local import LocalEmbedderConfig, LocalHashTransport
from embedline.connectors.registry import ConnectorRegistry
from embedline.connectors.retry import RetryPolicy
from embedline.connectors.transport import HttpTransport, Transport
from embedline.indexes.registry import IndexRegistry
from embedline.logging.logger import get_logger
from embedline.logging.tags import CONFIG
from embedline.models.registry import ModelRegistry
from embedline.pipeline.engine import PipelineEngine
from embedline.pipeline.registry import PipelineRegistry
from embedline.pipeline.schema import PipelineSpec
from embedline.store.base import DocumentStore
from embedline.store.memory import InMemoryDocumentStore
from embedline.store.registry import get_store_plugin
from embedline.trust.registry import DEFAULT_TRUSTED_ENDPOINTS, EndpointTrustRegistry
from embedline.writer import IndexWriter

logger = get_logger(__name__)


@dataclass
class AppliedConfig:
    """Ids produced by apply_config, keyed by configuration reference name."""

    connectors: dict[str, str] = field(default_factory=dict)
    models: dict[str, str] = field(default_factory=dict)
    pipelines: list[str] = field(default_factory=list)
    indexes: list[str] = field(default_factory=list)


class Cluster:
    def __init__(
        self,
        *,
        trusted_endpoints: Iterable[str] = DEFAULT_TRUSTED_ENDPOINTS,
        transport: Transport | None = None,
        retry: RetryPolicy | None = None,
        timeout: float = 30.0,
        store: DocumentStore | None = None,
    ) -> None:
        self._owned_transport: HttpTransport | None = None
        if transport is None:
            transport = self._owned_transport = HttpTransport()
        self.transport = transport

        self.trust = EndpointTrustRegistry(trusted_endpoints)
        self.connectors = ConnectorRegistry(
            self.trust, transport=transport, retry=retry, timeout=timeout
        )
        self.models = ModelRegistry(self.connectors)
        self.pipelines = PipelineRegistry(self.models)
        self.engine = PipelineEngine(self.models)
        self.store = store if store is not None else InMemoryDocumentStore()
        self.indexes = IndexRegistry(self.pipelines, self.store)
        self.writer = IndexWriter(self.indexes, self.pipelines, self.engine, self.store)
        self.applied = AppliedConfig()

    def close(self) -> None:
        """Release the HTTP client of a transport this cluster created itself."""
        if self._owned_transport is not None:
            self._owned_transport.close()

    def __enter__(self) -> "Cluster":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @classmethod
    def from_config(
        cls,
        config: EmbedlineConfig,
        *,
        transport: Transport | None = None,
        store: DocumentStore | None = None,
    ) -> "Cluster":
        """Build a cluster from configuration and apply its definitions."""
        if transport is None and config.http.transport == "local":
            transport = LocalHashTransport(LocalEmbedderConfig(dim=config.http.local_dimension))
        if store is None:
            store = get_store_plugin(config.store.plugin_name)(**config.store.kwargs)

        cluster = cls(
            trusted_endpoints=config.trusted_endpoints,
            transport=transport,
            retry=RetryPolicy(
                max_attempts=config.retry.max_attempts,
                backoff_seconds=config.retry.backoff_seconds,
                max_backoff_seconds=config.retry.max_backoff_seconds,
            ),
            timeout=config.http.timeout,
            store=store,
        )
        try:
            cluster.apply_config(config)
        except Exception:
            cluster.close()
            raise
        return cluster

    def apply_config(self, config: EmbedlineConfig) -> AppliedConfig:
        applied = AppliedConfig()

        self.trust.set_rules(config.trusted_endpoints)

        for ref, spec in config.connectors.items():
            applied.connectors[ref] = self.connectors.create_connector(spec)

        for ref, model_cfg in config.models.items():
            connector_id = applied.connectors.get(model_cfg.connector, model_cfg.connector)
            applied.models[ref] = self.models.register(
                model_cfg.name,
                connector_id,
                description=model_cfg.description,
                function_name=model_cfg.function_name,
                dimension=model_cfg.dimension,
                deploy=model_cfg.deploy,
            )

        for pipeline_id, spec in config.pipelines.items():
            self.pipelines.put_pipeline(pipeline_id, _resolve_models(spec, applied.models))
            applied.pipelines.append(pipeline_id)

        for name, definition in config.indexes.items():
            self.indexes.put_index(name, definition)
            applied.indexes.append(name)

        logger.info(
            f"{CONFIG} Applied config: {len(applied.connectors)} connectors, "
            f"{len(applied.models)} models, {len(applied.pipelines)} pipelines, "
            f"{len(applied.indexes)} indexes"
        )
        self.applied = applied
        return applied

    def untrusted_connectors(self) -> list[str]:
        """Connectors whose destination is not covered by the current trust rules."""
        return [
            c.id for c in self.connectors.list() if not self.trust.is_trusted(c.template.resolved_url())
        ]


def _resolve_models(spec: PipelineSpec, model_refs: dict[str, str]) -> PipelineSpec:
    """Replace model reference names in a pipeline spec with registered model ids."""
    steps = []
    for step in spec.to_steps():
        model_id = model_refs.get(step.model_id, step.model_id)
        steps.append(step.model_copy(update={"model_id": model_id}))
    return PipelineSpec(description=spec.description, steps=steps)
