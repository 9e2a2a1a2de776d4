# embedline/trust/registry.py
"""
Endpoint trust registry.

Holds the allow-list of outbound destinations a connector may call.
Every rule is a regular expression that must match the whole URL.

Design principle: NO IMPLICIT TRUST
- An empty rule set trusts nothing
- A URL is trusted iff at least one rule fully matches it
"""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass, field
from typing import Iterable

from embedline.exceptions import UntrustedEndpointError, ValidationError
from embedline.logging.logger import get_logger
from embedline.logging.tags import TRUST

logger = get_logger(__name__)

DEFAULT_TRUSTED_ENDPOINTS: tuple[str, ...] = (
    r"^https://openrouter\.ai/.*$",
    r"^https://api\.openai\.com/.*$",
    r"^https://router\.huggingface\.co/.*$",
)


@dataclass(frozen=True)
class TrustRule:
    """A single allow-list entry."""

    pattern: str
    _regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        try:
            compiled = re.compile(self.pattern)
        except re.error as exc:
            raise ValidationError(f"Invalid trusted endpoint pattern {self.pattern!r}: {exc}") from exc
        object.__setattr__(self, "_regex", compiled)

    def matches(self, url: str) -> bool:
        return self._regex.fullmatch(url) is not None


class EndpointTrustRegistry:
    """
    Allow-list of outbound URL patterns.

    The rule set is an immutable tuple swapped atomically on update, so
    readers never lock and an in-flight check sees either the old or the
    new rule set, never a mix.
    """

    def __init__(self, patterns: Iterable[str] = ()) -> None:
        self._lock = threading.Lock()
        self._rules: tuple[TrustRule, ...] = tuple(TrustRule(p) for p in patterns)

    @property
    def rules(self) -> tuple[TrustRule, ...]:
        return self._rules

    @property
    def patterns(self) -> list[str]:
        return [r.pattern for r in self._rules]

    def set_rules(self, patterns: Iterable[str]) -> None:
        """Replace the whole rule set. Invalid patterns leave the old set in place."""
        rules = tuple(TrustRule(p) for p in patterns)
        with self._lock:
            self._rules = rules
        logger.info(f"{TRUST} Trusted endpoint rules set ({len(rules)} rules)")

    def add_rule(self, pattern: str) -> None:
        rule = TrustRule(pattern)
        with self._lock:
            if rule in self._rules:
                return
            self._rules = self._rules + (rule,)
        logger.info(f"{TRUST} Added trusted endpoint rule {pattern!r}")

    def is_trusted(self, url: str) -> bool:
        rules = self._rules
        return any(rule.matches(url) for rule in rules)

    def check(self, url: str) -> None:
        """Raise UntrustedEndpointError unless the URL is trusted."""
        if not self.is_trusted(url):
            logger.warning(f"{TRUST} Rejected outbound call to untrusted endpoint {url}")
            raise UntrustedEndpointError(url)
