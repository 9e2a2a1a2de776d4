# embedline/connectors/local.py
from __future__ import annotations

from dataclasses import dataclass
from hashlib import blake2b
from typing import Any

from embedline.connectors.template import PreparedRequest


@dataclass(frozen=True)
class LocalEmbedderConfig:
    """
    Deterministic hash embeddings.

    Not semantic. Stable across machines, which is enough to exercise
    connectors, pipelines and stores without a remote provider.
    """

    dim: int = 1536
    seed: int = 0


class LocalHashTransport:
    """
    Transport that answers every request locally in the OpenAI embeddings shape.

    Reads the "input" list from the rendered body and returns one hash
    embedding per text.
    """

    def __init__(self, cfg: LocalEmbedderConfig | None = None) -> None:
        self._cfg = cfg or LocalEmbedderConfig()

    @property
    def dim(self) -> int:
        return self._cfg.dim

    def send(self, request: PreparedRequest, timeout: float) -> Any:
        texts = request.body.get("input", []) if isinstance(request.body, dict) else []
        if isinstance(texts, str):
            texts = [texts]
        return {
            "object": "list",
            "data": [
                {"object": "embedding", "index": i, "embedding": hash_embed(t or "", dim=self.dim, seed=self._cfg.seed)}
                for i, t in enumerate(texts)
            ],
        }


def hash_embed(text: str, *, dim: int, seed: int = 0) -> list[float]:
    # blake2b over (seed + text) mapped to [-1, 1], then L2-normalized
    msg = f"{seed}\n{text}".encode("utf-8", errors="ignore")

    out = bytearray()
    ctr = 0
    while len(out) < dim * 2:
        h = blake2b(msg + ctr.to_bytes(4, "little"), digest_size=32)
        out.extend(h.digest())
        ctr += 1

    vec = [((out[2 * i] << 8) | out[2 * i + 1]) / 32767.5 - 1.0 for i in range(dim)]

    norm = sum(x * x for x in vec) ** 0.5
    if norm > 0:
        vec = [x / norm for x in vec]
    return vec
