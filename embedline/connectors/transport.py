# embedline/connectors/transport.py
"""
Outbound transport for connector calls.

The transport only moves bytes and classifies failures. Trust checks and
response extraction happen in the connector registry.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import httpx

from embedline.connectors.template import PreparedRequest
from embedline.exceptions import (
    ExtractionError,
    ProviderRequestError,
    ProviderTimeoutError,
    TransientProviderError,
)
from embedline.logging.logger import get_logger
from embedline.logging.tags import CONNECTOR

logger = get_logger(__name__)

RETRYABLE_STATUS = frozenset({408, 425, 429})


@runtime_checkable
class Transport(Protocol):
    """Sends a prepared request and returns the decoded JSON response."""

    def send(self, request: PreparedRequest, timeout: float) -> Any:
        ...


class HttpTransport:
    """httpx-backed transport with failure classification."""

    def __init__(self, client: httpx.Client | None = None) -> None:
        self._client = client or httpx.Client()
        self._owns_client = client is None

    def send(self, request: PreparedRequest, timeout: float) -> Any:
        logger.debug(f"{CONNECTOR} {request.method} {request.url}")
        try:
            response = self._client.request(
                request.method,
                request.url,
                headers=request.headers,
                json=request.body,
                timeout=timeout,
            )
        except httpx.TimeoutException as exc:
            raise ProviderTimeoutError(f"Timed out after {timeout}s calling {request.url}") from exc
        except httpx.TransportError as exc:
            raise TransientProviderError(f"Connection to {request.url} failed: {exc}") from exc

        status = response.status_code
        if status >= 500 or status in RETRYABLE_STATUS:
            raise TransientProviderError(f"Provider returned HTTP {status}")
        if status >= 400:
            raise ProviderRequestError(status, response.text[:200])

        try:
            return response.json()
        except ValueError as exc:
            raise ExtractionError("Provider response is not valid JSON") from exc

    @property
    def closed(self) -> bool:
        return self._client.is_closed

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
