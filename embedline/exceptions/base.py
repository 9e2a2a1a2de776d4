# embedline/exceptions/base.py
from __future__ import annotations


class EmbedlineError(Exception):
    """Base class for all embedline errors."""


class ValidationError(EmbedlineError, ValueError):
    """A connector, model, pipeline or index definition is malformed."""


class NotFoundError(EmbedlineError, KeyError):
    """A referenced entity does not exist."""

    def __init__(self, kind: str, entity_id: str) -> None:
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} not found: {entity_id!r}")

    def __str__(self) -> str:
        return self.args[0]


class ReferentialIntegrityError(EmbedlineError):
    """An entity cannot be deleted while other entities reference it."""

    def __init__(self, kind: str, entity_id: str, referenced_by: list[str]) -> None:
        self.kind = kind
        self.entity_id = entity_id
        self.referenced_by = list(referenced_by)
        super().__init__(
            f"{kind} {entity_id!r} is still referenced by: {', '.join(self.referenced_by)}"
        )


class InvalidStateTransitionError(EmbedlineError):
    """A model lifecycle transition is not allowed from its current state."""

    def __init__(self, model_id: str, current: str, action: str) -> None:
        self.model_id = model_id
        self.current = current
        self.action = action
        super().__init__(f"Cannot {action} model {model_id!r} in state {current}")
