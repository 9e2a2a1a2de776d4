# embedline/exceptions/invocation.py
"""Errors raised while calling a remote embedding provider."""

from __future__ import annotations

from embedline.exceptions.base import EmbedlineError


class InvocationError(EmbedlineError):
    """Base for errors that happen while producing an embedding."""

    retryable: bool = False


class UntrustedEndpointError(InvocationError):
    """The resolved destination does not match any trusted endpoint rule."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Endpoint is not trusted: {url}")


class ModelNotReadyError(InvocationError):
    """The model exists but is not deployed."""

    def __init__(self, model_id: str, state: str) -> None:
        self.model_id = model_id
        self.state = state
        super().__init__(f"Model {model_id!r} is not deployed (state: {state})")


class ExtractionError(InvocationError):
    """The provider response did not contain a usable vector."""


class ProviderRequestError(InvocationError):
    """The provider rejected the request (non-retryable HTTP status)."""

    def __init__(self, status_code: int, detail: str = "") -> None:
        self.status_code = status_code
        self.detail = detail
        msg = f"Provider returned HTTP {status_code}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class TransientProviderError(InvocationError):
    """A failure worth retrying: 5xx, 429 or a broken connection."""

    retryable = True


class ProviderTimeoutError(TransientProviderError, TimeoutError):
    """The provider did not answer within the configured timeout."""
