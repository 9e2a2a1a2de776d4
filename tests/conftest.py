# tests/conftest.py
"""Shared fakes and fixtures for embedline tests."""

from __future__ import annotations

import threading
from typing import Any, Callable, List

import pytest

from embedline.cluster import Cluster
from embedline.connectors.retry import RetryPolicy
from embedline.connectors.template import PreparedRequest

DIM = 8

OPENAI_CONNECTOR = {
    "name": "OpenRouter Connector",
    "version": "1",
    "protocol": "http",
    "parameters": {"endpoint": "openrouter.ai", "model": "openai/text-embedding-3-small"},
    "credential": {"openRouter_key": "test-key"},
    "actions": [
        {
            "action_type": "PREDICT",
            "method": "POST",
            "url": "https://${parameters.endpoint}/api/v1/embeddings",
            "headers": {
                "Authorization": "Bearer ${credential.openRouter_key}",
                "Content-Type": "application/json",
            },
            "request_body": '{ "model": "${parameters.model}", "input": ${parameters.input} }',
            "post_process_function": "connector.post_process.openai.embedding",
        }
    ],
}


class MockTransport:
    """Records requests and answers in the OpenAI embeddings shape."""

    def __init__(self, dim: int = DIM) -> None:
        self.dim = dim
        self.requests: List[PreparedRequest] = []
        self._lock = threading.Lock()
        self.responder: Callable[[PreparedRequest], Any] | None = None

    def send(self, request: PreparedRequest, timeout: float) -> Any:
        with self._lock:
            self.requests.append(request)
        if self.responder is not None:
            return self.responder(request)
        text = request.body["input"][0]
        # Encodes the input length so tests can tell documents apart.
        vector = [float(len(text))] + [0.5] * (self.dim - 1)
        return {"data": [{"embedding": vector}]}


class NoSleepRetry(RetryPolicy):
    def __init__(self, max_attempts: int = 3) -> None:
        super().__init__(max_attempts=max_attempts, backoff_seconds=0.01, sleep=lambda s: None)


@pytest.fixture
def transport() -> MockTransport:
    return MockTransport()


@pytest.fixture
def cluster(transport: MockTransport) -> Cluster:
    return Cluster(transport=transport, retry=NoSleepRetry())


@pytest.fixture
def connector_id(cluster: Cluster) -> str:
    return cluster.connectors.create_connector(OPENAI_CONNECTOR)


@pytest.fixture
def model_id(cluster: Cluster, connector_id: str) -> str:
    return cluster.models.register("OpenAI Text Embedding 3 Small", connector_id, deploy=True)


@pytest.fixture
def pipeline_id(cluster: Cluster, model_id: str) -> str:
    return cluster.pipelines.put_pipeline(
        "docling-ingest-pipeline",
        {
            "description": "Pipeline for automatic embedding generation",
            "processors": [
                {"text_embedding": {"model_id": model_id, "field_map": {"content": "content_embedding"}}}
            ],
        },
    )


@pytest.fixture
def index_name(cluster: Cluster, pipeline_id: str) -> str:
    return cluster.indexes.put_index(
        "documents",
        {
            "settings": {"index.knn": True, "default_pipeline": pipeline_id},
            "mappings": {
                "properties": {
                    "content_embedding": {"type": "knn_vector", "dimension": DIM},
                    "content": {"type": "text"},
                }
            },
        },
    )
