# embedline/models/model.py
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ModelState(str, Enum):
    REGISTERED = "REGISTERED"
    DEPLOYED = "DEPLOYED"
    UNDEPLOYED = "UNDEPLOYED"
    RETIRED = "RETIRED"


@dataclass(frozen=True)
class Deployment:
    """The resource allocated when a model is deployed."""

    id: str
    model_id: str
    deployed_at: datetime


@dataclass(frozen=True)
class Model:
    """
    A deployable handle bound to a connector.

    Instances are immutable snapshots; state changes produce a new Model.
    The connector is referenced by id, not owned.
    """

    id: str
    name: str
    connector_id: str
    function_name: str = "remote"
    description: str = ""
    dimension: int | None = None
    state: ModelState = ModelState.REGISTERED
    deployment: Deployment | None = None

    def with_state(self, state: ModelState, deployment: Deployment | None = None) -> "Model":
        return replace(self, state=state, deployment=deployment)

    def describe(self) -> dict[str, Any]:
        return {
            "model_id": self.id,
            "name": self.name,
            "function_name": self.function_name,
            "description": self.description,
            "connector_id": self.connector_id,
            "dimension": self.dimension,
            "model_state": self.state.value,
        }


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
