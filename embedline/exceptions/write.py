# embedline/exceptions/write.py
"""Errors raised while enriching and persisting documents."""

from __future__ import annotations

from enum import Enum

from embedline.exceptions.base import EmbedlineError
from embedline.exceptions.invocation import (
    ExtractionError,
    UntrustedEndpointError,
)


class Stage(str, Enum):
    """Phase of a document write."""

    TRUST = "trust"
    INVOCATION = "invocation"
    EXTRACTION = "extraction"
    FIELD_MAPPING = "field_mapping"
    PERSISTENCE = "persistence"
    CANCELLED = "cancelled"


class MissingFieldError(EmbedlineError):
    """A required source field is absent from the document."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Required field is missing: {field!r}")


class FieldMappingError(EmbedlineError):
    """A field value does not fit the step input or the index mapping."""


class WriteCancelledError(EmbedlineError):
    """The write was cancelled before the document was persisted."""


class WriteRejectedError(EmbedlineError):
    """
    A document write failed.

    Always carries the stage that failed and the underlying cause, so callers
    never see a generic failure.
    """

    def __init__(self, index: str, doc_id: str | None, stage: Stage, cause: BaseException) -> None:
        self.index = index
        self.doc_id = doc_id
        self.stage = stage
        self.cause = cause
        super().__init__(
            f"Write to {index!r} rejected at {stage.value} stage: "
            f"{type(cause).__name__}: {cause}"
        )


def stage_for(exc: BaseException) -> Stage:
    """Classify an enrichment or persistence error into the stage it belongs to."""
    if isinstance(exc, UntrustedEndpointError):
        return Stage.TRUST
    if isinstance(exc, ExtractionError):
        return Stage.EXTRACTION
    if isinstance(exc, (MissingFieldError, FieldMappingError)):
        return Stage.FIELD_MAPPING
    if isinstance(exc, WriteCancelledError):
        return Stage.CANCELLED
    return Stage.INVOCATION
