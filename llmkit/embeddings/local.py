"""Offline embeddings built from hashed token directions."""
from __future__ import annotations

import asyncio
import hashlib
import math
import random
import re
from collections.abc import Sequence
from functools import partial

from ..exceptions import EmbeddingError
from .base import Embeddings
from .constants import DEFAULT_EMBEDDING_DIMENSION

_TOKEN_PATTERN = re.compile(r"\w+")


class DeterministicEmbeddings(Embeddings):
    """Embed text without a model server.

    Every lower-cased word maps to a fixed pseudo-random direction and a text
    is the normalised sum of its word directions, so texts sharing words
    score close together. Text without any word characters embeds to the
    zero vector.
    """

    def __init__(self, *, dimension: int = DEFAULT_EMBEDDING_DIMENSION) -> None:
        if dimension <= 0:
            raise EmbeddingError(f"Embedding dimension must be positive, got {dimension}")
        self.dimension = dimension
        self.model_name = "hashed-token-embedding"
        self._directions: dict[str, list[float]] = {}

    async def embed_documents(self, texts: Sequence[str]) -> list[list[float]]:
        if not texts:
            return []
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(self._embed_batch, list(texts)))

    async def embed_query(self, text: str) -> list[float]:
        # Queries are short; no executor round trip.
        return self._embed_text(text)

    def _embed_batch(self, texts: list[str]) -> list[list[float]]:
        return [self._embed_text(text) for text in texts]

    def _embed_text(self, text: str) -> list[float]:
        totals = [0.0] * self.dimension
        for token in _TOKEN_PATTERN.findall(text.lower()):
            for index, value in enumerate(self._direction(token)):
                totals[index] += value
        norm = math.sqrt(sum(value * value for value in totals))
        if norm == 0:
            return totals
        return [value / norm for value in totals]

    def _direction(self, token: str) -> list[float]:
        direction = self._directions.get(token)
        if direction is None:
            digest = hashlib.blake2b(token.encode("utf-8"), digest_size=8).digest()
            rng = random.Random(int.from_bytes(digest, "big"))
            direction = [rng.gauss(0.0, 1.0) for _ in range(self.dimension)]
            self._directions[token] = direction
        return direction


__all__ = ["DeterministicEmbeddings"]
