# embedline/api/routes/cluster.py
"""Cluster settings: the trusted connector endpoint rules."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends

from embedline.api.dependencies import get_cluster
from embedline.cluster import Cluster
from embedline.exceptions import ValidationError

router = APIRouter(prefix="/_cluster", tags=["cluster"])

TRUSTED_ENDPOINTS_SETTING = "plugins.ml_commons.trusted_connector_endpoints_regex"


@router.get("/settings")
def get_settings(cluster: Cluster = Depends(get_cluster)) -> dict:
    return {"persistent": {TRUSTED_ENDPOINTS_SETTING: cluster.trust.patterns}, "transient": {}}


@router.put("/settings")
def put_settings(
    body: dict[str, Any] = Body(...),
    cluster: Cluster = Depends(get_cluster),
) -> dict:
    """Replace the trusted endpoint rules; other settings are rejected."""
    applied: dict[str, Any] = {"persistent": {}, "transient": {}}
    for scope in ("persistent", "transient"):
        settings = body.get(scope) or {}
        unknown = set(settings) - {TRUSTED_ENDPOINTS_SETTING}
        if unknown:
            raise ValidationError(f"Unsupported settings: {', '.join(sorted(unknown))}")
        if TRUSTED_ENDPOINTS_SETTING in settings:
            patterns = settings[TRUSTED_ENDPOINTS_SETTING]
            if not isinstance(patterns, list) or not all(isinstance(p, str) for p in patterns):
                raise ValidationError(f"{TRUSTED_ENDPOINTS_SETTING} must be a list of strings")
            cluster.trust.set_rules(patterns)
            applied[scope][TRUSTED_ENDPOINTS_SETTING] = patterns

    return {"acknowledged": True, **applied}
