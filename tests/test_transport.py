# tests/test_transport.py
"""Tests for HttpTransport failure classification, using httpx.MockTransport."""

import httpx
import pytest

from embedline.connectors.template import PreparedRequest
from embedline.connectors.transport import HttpTransport, Transport
from embedline.exceptions import (
    ExtractionError,
    ProviderRequestError,
    ProviderTimeoutError,
    TransientProviderError,
)

REQUEST = PreparedRequest(
    method="POST",
    url="https://openrouter.ai/api/v1/embeddings",
    headers={"Authorization": "Bearer k"},
    body={"input": ["hello"]},
)


def _transport(handler) -> HttpTransport:
    return HttpTransport(client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_is_a_transport():
    assert isinstance(_transport(lambda r: httpx.Response(200, json={})), Transport)


def test_sends_json_body_and_headers():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = request.content
        return httpx.Response(200, json={"data": [{"embedding": [1.0]}]})

    payload = _transport(handler).send(REQUEST, timeout=5.0)

    assert payload == {"data": [{"embedding": [1.0]}]}
    assert seen["auth"] == "Bearer k"
    assert b'"input"' in seen["body"]


@pytest.mark.parametrize("status", [429, 500, 502, 503])
def test_retryable_status(status):
    with pytest.raises(TransientProviderError):
        _transport(lambda r: httpx.Response(status)).send(REQUEST, timeout=5.0)


@pytest.mark.parametrize("status", [400, 401, 403, 404])
def test_client_errors_are_final(status):
    with pytest.raises(ProviderRequestError) as exc_info:
        _transport(lambda r: httpx.Response(status, text="nope")).send(REQUEST, timeout=5.0)

    assert exc_info.value.status_code == status
    assert not exc_info.value.retryable


def test_timeout_is_classified():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(ProviderTimeoutError) as exc_info:
        _transport(handler).send(REQUEST, timeout=0.1)

    assert exc_info.value.retryable
    assert isinstance(exc_info.value, TimeoutError)


def test_connection_error_is_transient():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(TransientProviderError):
        _transport(handler).send(REQUEST, timeout=5.0)


def test_non_json_body():
    with pytest.raises(ExtractionError):
        _transport(lambda r: httpx.Response(200, text="<html>")).send(REQUEST, timeout=5.0)
