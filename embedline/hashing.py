# embedline/hashing.py
"""Deterministic ids for declarative definitions."""

from __future__ import annotations

import hashlib
import json
from typing import Any

ID_LENGTH = 20


def definition_id(kind: str, definition: Any) -> str:
    """
    Derive a stable id from a definition.

    Re-issuing an identical definition yields the same id, which is what makes
    every create/register call idempotent.
    """
    canonical = json.dumps(definition, sort_keys=True, separators=(",", ":"), default=str)
    digest = hashlib.sha256(f"{kind}\n{canonical}".encode("utf-8")).hexdigest()
    return digest[:ID_LENGTH]
