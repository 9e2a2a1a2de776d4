from .base import (
    EmbedlineError,
    InvalidStateTransitionError,
    NotFoundError,
    ReferentialIntegrityError,
    ValidationError,
)
from .invocation import (
    ExtractionError,
    InvocationError,
    ModelNotReadyError,
    ProviderRequestError,
    ProviderTimeoutError,
    TransientProviderError,
    UntrustedEndpointError,
)
from .write import (
    FieldMappingError,
    MissingFieldError,
    Stage,
    WriteCancelledError,
    WriteRejectedError,
    stage_for,
)

__all__ = [
    "EmbedlineError",
    "ValidationError",
    "NotFoundError",
    "ReferentialIntegrityError",
    "InvalidStateTransitionError",
    "InvocationError",
    "UntrustedEndpointError",
    "ModelNotReadyError",
    "ExtractionError",
    "ProviderRequestError",
    "TransientProviderError",
    "ProviderTimeoutError",
    "MissingFieldError",
    "FieldMappingError",
    "WriteCancelledError",
    "WriteRejectedError",
    "Stage",
    "stage_for",
]
