# embedline/connectors/extraction.py
"""
Response extraction rules.

A connector names one rule in its post_process_function. The rule pulls the
raw candidate out of the provider response; to_vector() then enforces the
shape every rule must produce: a non-empty, rank-1 list of numbers.
"""

from __future__ import annotations

import math
from typing import Any, Callable

from embedline.exceptions import ExtractionError, ValidationError

Extractor = Callable[[Any], Any]


def _openai_embedding(payload: Any) -> Any:
    return payload["data"][0]["embedding"]


def _cohere_embedding(payload: Any) -> Any:
    embeddings = payload["embeddings"]
    if isinstance(embeddings, dict):
        embeddings = embeddings["float"]
    return embeddings[0]


def _default_embedding(payload: Any) -> Any:
    if isinstance(payload, dict):
        return payload["embedding"]
    # Feature-extraction endpoints answer with one vector per input.
    if isinstance(payload, list) and payload and isinstance(payload[0], list):
        return payload[0]
    return payload


EXTRACTORS: dict[str, Extractor] = {
    "connector.post_process.openai.embedding": _openai_embedding,
    "connector.post_process.cohere.embedding": _cohere_embedding,
    "connector.post_process.default.embedding": _default_embedding,
}


def available_extractors() -> list[str]:
    return sorted(EXTRACTORS)


def get_extractor(name: str) -> Extractor:
    try:
        return EXTRACTORS[name]
    except KeyError:
        raise ValidationError(
            f"Unknown post_process_function {name!r}. "
            f"Available: {', '.join(available_extractors())}"
        ) from None


def to_vector(candidate: Any) -> list[float]:
    """Validate an extracted candidate and return it as a list of floats."""
    if not isinstance(candidate, list):
        raise ExtractionError(f"Expected a list of numbers, got {type(candidate).__name__}")
    if not candidate:
        raise ExtractionError("Extracted vector is empty")

    vector = []
    for i, value in enumerate(candidate):
        if isinstance(value, list):
            raise ExtractionError("Extracted value has the wrong rank (nested list)")
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ExtractionError(f"Non-numeric element at position {i}: {value!r}")
        if not math.isfinite(value):
            raise ExtractionError(f"Non-finite element at position {i}: {value!r}")
        vector.append(float(value))
    return vector


def extract(name: str, payload: Any) -> list[float]:
    extractor = get_extractor(name)
    try:
        candidate = extractor(payload)
    except (KeyError, IndexError, TypeError) as exc:
        raise ExtractionError(
            f"Response does not match {name}: missing {exc}"
        ) from exc
    return to_vector(candidate)
