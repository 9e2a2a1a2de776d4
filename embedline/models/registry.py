# embedline/models/registry.py
"""
Model registry.

Lifecycle:
    REGISTERED --deploy--> DEPLOYED --undeploy--> UNDEPLOYED --deploy--> DEPLOYED
    REGISTERED / UNDEPLOYED --retire--> RETIRED (terminal)

Registration returns the model id immediately; readiness is polled through
status(). Transitions on one model are serialized by a per-model lock, so
concurrent deploy calls allocate a single Deployment.
"""

from __future__ import annotations

import threading
import uuid
from typing import Callable

from embedline.connectors.registry import ConnectorRegistry
from embedline.exceptions import (
    ExtractionError,
    InvalidStateTransitionError,
    ModelNotReadyError,
    NotFoundError,
    ReferentialIntegrityError,
    ValidationError,
)
from embedline.hashing import definition_id
from embedline.logging.logger import get_logger
from embedline.logging.tags import MODEL
from embedline.models.model import Deployment, Model, ModelState, utcnow

logger = get_logger(__name__)


class ModelRegistry:
    def __init__(self, connectors: ConnectorRegistry) -> None:
        self._connectors = connectors
        self._lock = threading.Lock()
        self._model_locks: dict[str, threading.Lock] = {}
        self._models: dict[str, Model] = {}
        self._in_use: Callable[[str], list[str]] = lambda model_id: []

        connectors.set_reference_check(self.models_using_connector)

    def set_reference_check(self, fn: Callable[[str], list[str]]) -> None:
        """Install the callback that lists pipelines referencing a model."""
        self._in_use = fn

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(
        self,
        name: str,
        connector_id: str,
        *,
        description: str = "",
        function_name: str = "remote",
        dimension: int | None = None,
        deploy: bool = False,
    ) -> str:
        """Register a remote model and return its id. Identical calls return the same id."""
        self._connectors.get(connector_id)
        if dimension is not None and dimension <= 0:
            raise ValidationError("dimension must be positive")

        model_id = definition_id(
            "model",
            {
                "name": name,
                "connector_id": connector_id,
                "function_name": function_name,
                "description": description,
                "dimension": dimension,
            },
        )
        with self._lock:
            if model_id not in self._models:
                model = Model(
                    id=model_id,
                    name=name,
                    connector_id=connector_id,
                    function_name=function_name,
                    description=description,
                    dimension=dimension,
                )
                self._models = {**self._models, model_id: model}
                self._model_locks[model_id] = threading.Lock()
                logger.info(f"{MODEL} Registered model {name!r} ({model_id}) on connector {connector_id}")

        if deploy:
            self.deploy(model_id)
        return model_id

    def get(self, model_id: str) -> Model:
        try:
            return self._models[model_id]
        except KeyError:
            raise NotFoundError("model", model_id) from None

    def exists(self, model_id: str) -> bool:
        return model_id in self._models

    def status(self, model_id: str) -> ModelState:
        return self.get(model_id).state

    def list(self) -> list[Model]:
        return list(self._models.values())

    def deployments(self) -> list[Deployment]:
        return [m.deployment for m in self._models.values() if m.deployment is not None]

    def models_using_connector(self, connector_id: str) -> list[str]:
        return [m.id for m in self._models.values() if m.connector_id == connector_id]

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def _transition(self, model_id: str, fn: Callable[[Model], Model]) -> Model:
        lock = self._model_locks.get(model_id)
        if lock is None:
            raise NotFoundError("model", model_id)
        with lock:
            current = self.get(model_id)
            updated = fn(current)
            if updated is not current:
                with self._lock:
                    self._models = {**self._models, model_id: updated}
            return updated

    def deploy(self, model_id: str) -> Model:
        def _deploy(model: Model) -> Model:
            if model.state is ModelState.DEPLOYED:
                return model
            if model.state is ModelState.RETIRED:
                raise InvalidStateTransitionError(model_id, model.state.value, "deploy")
            deployment = Deployment(id=uuid.uuid4().hex, model_id=model_id, deployed_at=utcnow())
            logger.info(f"{MODEL} Deployed model {model.name!r} ({model_id})")
            return model.with_state(ModelState.DEPLOYED, deployment)

        return self._transition(model_id, _deploy)

    def undeploy(self, model_id: str) -> Model:
        def _undeploy(model: Model) -> Model:
            if model.state is ModelState.UNDEPLOYED:
                return model
            if model.state is not ModelState.DEPLOYED:
                raise InvalidStateTransitionError(model_id, model.state.value, "undeploy")
            logger.info(f"{MODEL} Undeployed model {model.name!r} ({model_id})")
            return model.with_state(ModelState.UNDEPLOYED)

        return self._transition(model_id, _undeploy)

    def retire(self, model_id: str) -> Model:
        def _retire(model: Model) -> Model:
            if model.state is ModelState.RETIRED:
                return model
            if model.state is ModelState.DEPLOYED:
                raise InvalidStateTransitionError(model_id, model.state.value, "retire")
            logger.info(f"{MODEL} Retired model {model.name!r} ({model_id})")
            return model.with_state(ModelState.RETIRED)

        return self._transition(model_id, _retire)

    def delete(self, model_id: str) -> None:
        with self._model_locks.get(model_id, threading.Lock()):
            model = self.get(model_id)
            users = self._in_use(model_id)
            if users:
                raise ReferentialIntegrityError("model", model_id, users)
            if model.state is ModelState.DEPLOYED:
                raise InvalidStateTransitionError(model_id, model.state.value, "delete")
            with self._lock:
                self._models = {k: v for k, v in self._models.items() if k != model_id}
                self._model_locks.pop(model_id, None)
        logger.info(f"{MODEL} Deleted model {model_id}")

    # ------------------------------------------------------------------
    # Invocation
    # ------------------------------------------------------------------

    def invoke(self, model_id: str, text: str) -> list[float]:
        model = self.get(model_id)
        if model.state is not ModelState.DEPLOYED:
            raise ModelNotReadyError(model_id, model.state.value)

        vector = self._connectors.invoke(model.connector_id, text)
        if model.dimension is not None and len(vector) != model.dimension:
            raise ExtractionError(
                f"Model {model.name!r} returned {len(vector)} dimensions, expected {model.dimension}"
            )
        return vector
