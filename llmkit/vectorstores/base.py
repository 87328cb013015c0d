"""Abstract interfaces for vector store access."""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

from ..embeddings.base import Embeddings
from ..schema.documents import Document

VST = TypeVar("VST", bound="VectorStore")


class VectorStore(ABC):
    """Store of embedded documents searchable by vector similarity."""

    def __init__(self, embeddings: Embeddings) -> None:
        self.embeddings = embeddings

    @abstractmethod
    async def add_vectors(self, vectors: Sequence[Sequence[float]], documents: Sequence[Document]) -> None:
        """Persist pre-computed vectors alongside their documents."""

    @abstractmethod
    async def add_documents(self, documents: Sequence[Document]) -> None:
        """Embed and persist documents."""

    @abstractmethod
    async def similarity_search_vector_with_score(
        self,
        query: Sequence[float],
        k: int,
        filter: Any | None = None,
    ) -> list[tuple[Document, float]]:
        """Return the ``k`` documents closest to ``query`` with their scores."""

    async def add_texts(
        self,
        texts: Sequence[str],
        metadatas: Sequence[Mapping[str, Any]] | Mapping[str, Any] | None = None,
    ) -> None:
        await self.add_documents(_build_documents(texts, metadatas))

    async def similarity_search_with_score(
        self, query: str, k: int = 4, filter: Any | None = None
    ) -> list[tuple[Document, float]]:
        vector = await self.embeddings.embed_query(query)
        return await self.similarity_search_vector_with_score(vector, k, filter)

    async def similarity_search(self, query: str, k: int = 4, filter: Any | None = None) -> list[Document]:
        results = await self.similarity_search_with_score(query, k, filter)
        return [document for document, _ in results]

    @classmethod
    async def from_texts(
        cls: type[VST],
        texts: Sequence[str],
        metadatas: Sequence[Mapping[str, Any]] | Mapping[str, Any] | None,
        embeddings: Embeddings,
        **kwargs: Any,
    ) -> VST:
        return await cls.from_documents(_build_documents(texts, metadatas), embeddings, **kwargs)

    @classmethod
    async def from_documents(
        cls: type[VST],
        documents: Sequence[Document],
        embeddings: Embeddings,
        **kwargs: Any,
    ) -> VST:
        instance = cls(embeddings, **kwargs)
        await instance.add_documents(documents)
        return instance


def _build_documents(
    texts: Sequence[str],
    metadatas: Sequence[Mapping[str, Any]] | Mapping[str, Any] | None,
) -> list[Document]:
    """Pair texts with metadata: one mapping for all texts or one per text."""

    documents: list[Document] = []
    for index, text in enumerate(texts):
        if metadatas is None:
            metadata: Mapping[str, Any] = {}
        elif isinstance(metadatas, Mapping):
            metadata = metadatas
        else:
            metadata = metadatas[index]
        documents.append(Document(page_content=text, metadata=dict(metadata)))
    return documents


__all__ = ["VectorStore"]
