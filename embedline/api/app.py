# embedline/api/app.py
"""FastAPI application for the embedline admin API."""

from __future__ import annotations

from fastapi import FastAPI

from embedline import __version__
from embedline.api.errors import install_error_handlers
from embedline.api.routes import (
    cluster_router,
    documents_router,
    health_router,
    ml_router,
    pipelines_router,
)
from embedline.cluster import Cluster


def create_app(cluster: Cluster | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        cluster: Cluster to administer; a fresh one is created when omitted.
    """
    app = FastAPI(
        title="embedline admin API",
        description=(
            "Configure trusted endpoints, connectors, models, ingest pipelines "
            "and indexes, and write documents through their pipelines."
        ),
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
    )
    app.state.cluster = cluster if cluster is not None else Cluster()

    install_error_handlers(app)

    app.include_router(health_router)
    app.include_router(cluster_router)
    app.include_router(ml_router)
    app.include_router(pipelines_router)
    # Must stay last: /{index} matches any single path segment.
    app.include_router(documents_router)

    return app
