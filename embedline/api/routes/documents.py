# embedline/api/routes/documents.py
"""Index definitions and document writes. Registered last: /{index} is a catch-all."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from embedline.api.dependencies import get_cluster
from embedline.cluster import Cluster
from embedline.writer import WriteResult

router = APIRouter(tags=["documents"])


def _write_response(result: WriteResult) -> JSONResponse:
    status = 201 if result.result == "created" else 200
    return JSONResponse(
        status_code=status,
        content={"_index": result.index, "_id": result.id, "result": result.result},
    )


@router.put("/{index}")
def put_index(
    index: str,
    body: Optional[dict[str, Any]] = Body(default=None),
    cluster: Cluster = Depends(get_cluster),
) -> dict:
    cluster.indexes.put_index(index, body or {})
    return {"acknowledged": True, "index": index}


@router.get("/{index}")
def get_index(index: str, cluster: Cluster = Depends(get_cluster)) -> dict:
    return {index: cluster.indexes.get(index).describe()}


@router.put("/{index}/_doc/{doc_id}")
def put_document(
    index: str,
    doc_id: str,
    body: dict[str, Any] = Body(...),
    pipeline: Optional[str] = None,
    cluster: Cluster = Depends(get_cluster),
) -> JSONResponse:
    return _write_response(cluster.writer.write(index, body, doc_id, pipeline=pipeline))


@router.post("/{index}/_doc")
def post_document(
    index: str,
    body: dict[str, Any] = Body(...),
    pipeline: Optional[str] = None,
    cluster: Cluster = Depends(get_cluster),
) -> JSONResponse:
    return _write_response(cluster.writer.write(index, body, pipeline=pipeline))


@router.get("/{index}/_doc/{doc_id}")
def get_document(index: str, doc_id: str, cluster: Cluster = Depends(get_cluster)) -> JSONResponse:
    document = cluster.writer.get(index, doc_id)
    if document is None:
        return JSONResponse(status_code=404, content={"_index": index, "_id": doc_id, "found": False})
    return JSONResponse(content={"_index": index, "_id": doc_id, "found": True, "_source": document})
