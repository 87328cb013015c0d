"""Embeddings served by Ollama through the ``ollama`` SDK."""
from __future__ import annotations

import logging
from collections.abc import Sequence
from time import perf_counter
from typing import Any

from ollama import AsyncClient, ResponseError

from ..exceptions import EmbeddingError
from .base import Embeddings
from .constants import DEFAULT_OLLAMA_EMBEDDING_MODEL

LOGGER = logging.getLogger(__name__)


class OllamaEmbeddings(Embeddings):
    """Call ``AsyncClient.embed`` in batches of ``batch_size`` texts.

    With ``dimension`` set, longer vectors are cut to that size and shorter
    ones are rejected.
    """

    def __init__(
        self,
        *,
        host: str = "http://localhost:11434",
        model_name: str = DEFAULT_OLLAMA_EMBEDDING_MODEL,
        request_timeout: float = 60.0,
        dimension: int | None = None,
        batch_size: int = 64,
        client: Any | None = None,
    ) -> None:
        if batch_size <= 0:
            raise EmbeddingError(f"batch_size must be positive, got {batch_size}")
        self.host = host.rstrip("/")
        self.model_name = model_name
        self.request_timeout = request_timeout
        self.dimension = dimension
        self.batch_size = batch_size
        self._client = client

    @property
    def client(self) -> "AsyncClient | Any":
        if self._client is None:
            self._client = AsyncClient(host=self.host, timeout=self.request_timeout)
        return self._client

    async def embed_documents(self, texts: Sequence[str]) -> list[list[float]]:
        pending = list(texts)
        if not pending:
            return []
        started = perf_counter()
        vectors: list[list[float]] = []
        batches = range(0, len(pending), self.batch_size)
        for offset in batches:
            vectors.extend(await self._embed_batch(pending[offset : offset + self.batch_size]))
        LOGGER.info(
            "Ollama embeddings finished | model=%s texts=%d batches=%d duration=%.3fs",
            self.model_name,
            len(pending),
            len(batches),
            perf_counter() - started,
        )
        return vectors

    async def _embed_batch(self, batch: list[str]) -> list[list[float]]:
        try:
            response = await self.client.embed(model=self.model_name, input=batch)
        except ResponseError as exc:
            if "context length" in str(exc).lower():
                raise EmbeddingError(
                    f"An input exceeds the context window of {self.model_name}; split long documents first"
                ) from exc
            raise EmbeddingError(f"Ollama rejected the embedding request for {self.model_name}: {exc}") from exc
        embeddings = response.get("embeddings")
        if not isinstance(embeddings, Sequence) or len(embeddings) != len(batch):
            raise EmbeddingError(
                f"Ollama returned {len(embeddings) if isinstance(embeddings, Sequence) else 'no'} "
                f"embeddings for {len(batch)} inputs"
            )
        return [self._fit(vector) for vector in embeddings]

    def _fit(self, vector: Sequence[float]) -> list[float]:
        values = [float(value) for value in vector]
        if self.dimension is None or len(values) == self.dimension:
            return values
        if len(values) < self.dimension:
            raise EmbeddingError(
                f"{self.model_name} produced {len(values)} dimensions, fewer than the configured {self.dimension}"
            )
        return values[: self.dimension]


__all__ = ["OllamaEmbeddings"]
