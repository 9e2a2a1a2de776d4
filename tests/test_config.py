# tests/test_config.py
"""Tests for configuration loading and declarative apply."""

from pathlib import Path

import httpx
import pytest
import yaml

from embedline.cluster import Cluster
from embedline.config import load_config
from embedline.connectors.transport import HttpTransport
from embedline.exceptions import ValidationError
from embedline.models import ModelState
from embedline.store import InMemoryDocumentStore
from embedline.trust import DEFAULT_TRUSTED_ENDPOINTS

from conftest import DIM, OPENAI_CONNECTOR, MockTransport

EXAMPLE_CONFIG = Path(__file__).parent.parent / "configs" / "openrouter.yaml"


def _write_config(tmp_path: Path, data: dict) -> Path:
    path = tmp_path / "embedline.yaml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


def _config_dict(dim: int = DIM) -> dict:
    return {
        "connectors": {"openrouter": OPENAI_CONNECTOR},
        "models": {"small": {"name": "small", "connector": "openrouter", "dimension": dim}},
        "pipelines": {
            "ingest": {
                "processors": [
                    {"text_embedding": {"model_id": "small", "field_map": {"content": "content_embedding"}}}
                ]
            }
        },
        "indexes": {
            "docs": {
                "settings": {"index.knn": True, "default_pipeline": "ingest"},
                "mappings": {"properties": {"content_embedding": {"type": "knn_vector", "dimension": dim}}},
            }
        },
    }


class TestLoadConfig:
    def test_defaults(self):
        cfg = load_config()

        assert cfg.trusted_endpoints == list(DEFAULT_TRUSTED_ENDPOINTS)
        assert cfg.retry.max_attempts == 3
        assert cfg.store.plugin_name == "memory"
        assert cfg.connectors == {}

    def test_user_config_overrides_sections(self, tmp_path):
        path = _write_config(tmp_path, {"retry": {"max_attempts": 5}})

        cfg = load_config(path)

        assert cfg.retry.max_attempts == 5
        assert cfg.http.timeout == 30.0

    def test_env_expansion_keeps_template_placeholders(self, tmp_path, monkeypatch):
        monkeypatch.setenv("OPENROUTER_API_KEY", "secret")

        cfg = load_config(EXAMPLE_CONFIG)
        connector = cfg.connectors["openrouter"]

        assert connector.credential["openRouter_key"] == "secret"
        assert connector.predict_action.url == "https://${parameters.endpoint}/api/v1/embeddings"

    def test_unknown_key_rejected(self, tmp_path):
        path = _write_config(tmp_path, {"surprise": True})

        with pytest.raises(ValidationError):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_example_config_is_valid(self):
        cfg = load_config(EXAMPLE_CONFIG)

        assert cfg.indexes["open-ai-3-small-documents-6"].settings.default_pipeline == "docling-ingest-pipeline"
        assert cfg.indexes["open-ai-3-small-documents-6"].vector_fields() == {"content_embedding": 1536}


class TestApplyConfig:
    def test_resolves_references(self, tmp_path):
        cfg = load_config(_write_config(tmp_path, _config_dict()))
        cluster = Cluster.from_config(cfg, transport=MockTransport(), store=InMemoryDocumentStore())

        model_id = cluster.applied.models["small"]
        assert cluster.models.get(model_id).connector_id == cluster.applied.connectors["openrouter"]
        assert cluster.models.status(model_id) is ModelState.DEPLOYED
        assert cluster.pipelines.get("ingest").steps[0].model_id == model_id

    def test_apply_twice_is_idempotent(self, tmp_path):
        cfg = load_config(_write_config(tmp_path, _config_dict()))
        cluster = Cluster.from_config(cfg, transport=MockTransport())
        first = cluster.applied

        second = cluster.apply_config(cfg)

        assert second.connectors == first.connectors
        assert second.models == first.models
        assert len(cluster.connectors.list()) == 1
        assert len(cluster.models.list()) == 1
        assert len(cluster.models.deployments()) == 1

    def test_end_to_end_from_config(self, tmp_path):
        cfg = load_config(_write_config(tmp_path, _config_dict()))
        cluster = Cluster.from_config(cfg, transport=MockTransport())

        cluster.writer.write("docs", {"content": "hello"}, "1")

        assert len(cluster.writer.get("docs", "1")["content_embedding"]) == DIM

    def test_local_transport(self, tmp_path):
        data = _config_dict(dim=16)
        data["http"] = {"transport": "local", "local_dimension": 16}
        cluster = Cluster.from_config(load_config(_write_config(tmp_path, data)))

        cluster.writer.write("docs", {"content": "hello"}, "1")
        vector = cluster.writer.get("docs", "1")["content_embedding"]

        assert len(vector) == 16
        assert abs(sum(x * x for x in vector) - 1.0) < 1e-9

    def test_untrusted_connectors_reported(self, tmp_path):
        data = _config_dict()
        data["trusted_endpoints"] = [r"^https://api\.openai\.com/.*$"]
        cluster = Cluster.from_config(load_config(_write_config(tmp_path, data)), transport=MockTransport())

        assert cluster.untrusted_connectors() == [cluster.applied.connectors["openrouter"]]

    def test_unknown_store_plugin(self, tmp_path):
        data = {"store": {"plugin_name": "nope"}}

        with pytest.raises(ValueError, match="Available"):
            Cluster.from_config(load_config(_write_config(tmp_path, data)), transport=MockTransport())


class TestClusterLifecycle:
    def test_owned_http_client_closed_on_exit(self):
        with Cluster() as cluster:
            transport = cluster.transport
            assert isinstance(transport, HttpTransport)
            assert not transport.closed

        assert transport.closed

    def test_caller_transport_left_open(self):
        client = httpx.Client()
        cluster = Cluster(transport=HttpTransport(client))

        cluster.close()

        assert not client.is_closed
        client.close()

    def test_from_config_http_transport_is_owned(self, tmp_path):
        cluster = Cluster.from_config(load_config(_write_config(tmp_path, {})))

        cluster.close()

        assert cluster.transport.closed
