"""Embedding provider abstractions."""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence


class Embeddings(ABC):
    """Interface for text embedding providers."""

    @abstractmethod
    async def embed_documents(self, texts: Sequence[str]) -> list[list[float]]:
        """Return one embedding per text, in order."""

    async def embed_query(self, text: str) -> list[float]:
        """Return the embedding used to search for ``text``."""

        return (await self.embed_documents([text]))[0]


__all__ = ["Embeddings"]
