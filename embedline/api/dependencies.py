# embedline/api/dependencies.py
from __future__ import annotations

from fastapi import Request

from embedline.cluster import Cluster


def get_cluster(request: Request) -> Cluster:
    return request.app.state.cluster
