# embedline/connectors/retry.py
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, TypeVar

from embedline.exceptions import InvocationError
from embedline.logging.logger import get_logger
from embedline.logging.tags import CONNECTOR

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass
class RetryPolicy:
    """
    Bounded exponential backoff for transient provider failures.

    Only invocation errors flagged retryable (TransientProviderError:
    timeouts, 429, 5xx, connection errors) are retried. Everything else
    propagates on the first attempt.
    """

    max_attempts: int = 3
    backoff_seconds: float = 0.5
    max_backoff_seconds: float = 8.0
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")

    def delay(self, attempt: int) -> float:
        return min(self.backoff_seconds * (2 ** attempt), self.max_backoff_seconds)

    def run(self, fn: Callable[[], T], *, label: str = "call") -> T:
        for attempt in range(self.max_attempts):
            try:
                return fn()
            except InvocationError as exc:
                if not exc.retryable:
                    raise
                if attempt == self.max_attempts - 1:
                    logger.error(
                        f"{CONNECTOR} {label} failed after {self.max_attempts} attempts: {exc}"
                    )
                    raise
                backoff = self.delay(attempt)
                logger.warning(
                    f"{CONNECTOR} {label} attempt {attempt + 1} failed ({exc}); "
                    f"retrying in {backoff:.1f}s"
                )
                self.sleep(backoff)
        raise AssertionError("unreachable")
