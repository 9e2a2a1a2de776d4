# embedline/api/errors.py
"""
Map embedline errors to HTTP responses.

Body shape:
    {"error": {"type": "...", "reason": "...", "stage": "...", "caused_by": {...}}, "status": 400}
"""

from __future__ import annotations

import re
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from embedline.exceptions import (
    EmbedlineError,
    InvalidStateTransitionError,
    ModelNotReadyError,
    NotFoundError,
    ReferentialIntegrityError,
    Stage,
    TransientProviderError,
    ValidationError,
    WriteRejectedError,
)
from embedline.logging.logger import get_logger
from embedline.logging.tags import API

logger = get_logger(__name__)

_STAGE_STATUS = {
    Stage.TRUST: 403,
    Stage.INVOCATION: 502,
    Stage.EXTRACTION: 502,
    Stage.FIELD_MAPPING: 400,
    Stage.PERSISTENCE: 500,
    Stage.CANCELLED: 409,
}


def _snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def status_for(exc: EmbedlineError) -> int:
    if isinstance(exc, ValidationError):
        return 400
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, (ReferentialIntegrityError, InvalidStateTransitionError)):
        return 409
    if isinstance(exc, WriteRejectedError):
        if isinstance(exc.cause, ModelNotReadyError):
            return 409
        if isinstance(exc.cause, TransientProviderError):
            return 503
        return _STAGE_STATUS[exc.stage]
    return 500


def error_body(exc: BaseException) -> dict[str, Any]:
    body: dict[str, Any] = {"type": _snake(type(exc).__name__), "reason": str(exc)}
    if isinstance(exc, WriteRejectedError):
        body["stage"] = exc.stage.value
        body["caused_by"] = error_body(exc.cause)
    return body


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(EmbedlineError)
    async def _embedline_error(request: Request, exc: EmbedlineError) -> JSONResponse:
        status = status_for(exc)
        logger.info(f"{API} {request.method} {request.url.path} -> {status}: {exc}")
        return JSONResponse(status_code=status, content={"error": error_body(exc), "status": status})
