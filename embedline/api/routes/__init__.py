"""API routes."""

from embedline.api.routes.cluster import router as cluster_router
from embedline.api.routes.documents import router as documents_router
from embedline.api.routes.health import router as health_router
from embedline.api.routes.ml import router as ml_router
from embedline.api.routes.pipelines import router as pipelines_router

__all__ = [
    "cluster_router",
    "documents_router",
    "health_router",
    "ml_router",
    "pipelines_router",
]
