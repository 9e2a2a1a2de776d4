# embedline/api/routes/health.py
"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from embedline import __version__

router = APIRouter(tags=["health"])


@router.get("/_health")
def health() -> dict:
    return {"status": "green", "version": __version__}
