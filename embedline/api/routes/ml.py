# embedline/api/routes/ml.py
"""Connector and model administration."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends

from embedline.api.dependencies import get_cluster
from embedline.cluster import Cluster
from embedline.exceptions import ValidationError

router = APIRouter(prefix="/_plugins/_ml", tags=["ml"])


@router.post("/connectors/_create")
def create_connector(
    body: dict[str, Any] = Body(...),
    cluster: Cluster = Depends(get_cluster),
) -> dict:
    return {"connector_id": cluster.connectors.create_connector(body)}


@router.get("/connectors/{connector_id}")
def get_connector(connector_id: str, cluster: Cluster = Depends(get_cluster)) -> dict:
    return cluster.connectors.get(connector_id).describe()


@router.delete("/connectors/{connector_id}")
def delete_connector(connector_id: str, cluster: Cluster = Depends(get_cluster)) -> dict:
    cluster.connectors.delete_connector(connector_id)
    return {"_id": connector_id, "result": "deleted"}


@router.post("/models/_register")
def register_model(
    body: dict[str, Any] = Body(...),
    deploy: bool = False,
    cluster: Cluster = Depends(get_cluster),
) -> dict:
    """
    Register a remote model.

    Returns immediately; poll GET /models/{model_id} for model_state.
    """
    name = body.get("name")
    connector_id = body.get("connector_id")
    if not isinstance(name, str) or not name:
        raise ValidationError("'name' is required")
    if not isinstance(connector_id, str) or not connector_id:
        raise ValidationError("'connector_id' is required")
    function_name = body.get("function_name", "remote")
    if function_name != "remote":
        raise ValidationError(f"Unsupported function_name {function_name!r}; only 'remote' models exist")
    dimension = body.get("dimension")
    if dimension is not None and (not isinstance(dimension, int) or dimension <= 0):
        raise ValidationError("'dimension' must be a positive integer")

    model_id = cluster.models.register(
        name,
        connector_id,
        description=body.get("description", ""),
        function_name=function_name,
        dimension=dimension,
        deploy=deploy,
    )
    return {"model_id": model_id, "status": "CREATED", "model_state": cluster.models.status(model_id).value}


@router.get("/models/{model_id}")
def get_model(model_id: str, cluster: Cluster = Depends(get_cluster)) -> dict:
    return cluster.models.get(model_id).describe()


@router.post("/models/{model_id}/_deploy")
def deploy_model(model_id: str, cluster: Cluster = Depends(get_cluster)) -> dict:
    model = cluster.models.deploy(model_id)
    return {"model_id": model_id, "status": "COMPLETED", "model_state": model.state.value}


@router.post("/models/{model_id}/_undeploy")
def undeploy_model(model_id: str, cluster: Cluster = Depends(get_cluster)) -> dict:
    model = cluster.models.undeploy(model_id)
    return {"model_id": model_id, "status": "COMPLETED", "model_state": model.state.value}


@router.delete("/models/{model_id}")
def delete_model(model_id: str, cluster: Cluster = Depends(get_cluster)) -> dict:
    cluster.models.delete(model_id)
    return {"_id": model_id, "result": "deleted"}
