# embedline/api/routes/pipelines.py
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends

from embedline.api.dependencies import get_cluster
from embedline.cluster import Cluster

router = APIRouter(prefix="/_ingest/pipeline", tags=["pipelines"])


@router.put("/{pipeline_id}")
def put_pipeline(
    pipeline_id: str,
    body: dict[str, Any] = Body(...),
    cluster: Cluster = Depends(get_cluster),
) -> dict:
    cluster.pipelines.put_pipeline(pipeline_id, body)
    return {"acknowledged": True}


@router.get("/{pipeline_id}")
def get_pipeline(pipeline_id: str, cluster: Cluster = Depends(get_cluster)) -> dict:
    return {pipeline_id: cluster.pipelines.get(pipeline_id).describe()}


@router.delete("/{pipeline_id}")
def delete_pipeline(pipeline_id: str, cluster: Cluster = Depends(get_cluster)) -> dict:
    cluster.pipelines.delete_pipeline(pipeline_id)
    return {"acknowledged": True}
