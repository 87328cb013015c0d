"""Vector store backed by MongoDB Atlas Vector Search."""
from __future__ import annotations

import inspect
import logging
from collections.abc import Mapping, Sequence
from time import perf_counter
from typing import TYPE_CHECKING, Any

from ..embeddings.base import Embeddings
from ..exceptions import VectorCountMismatchError
from ..schema.documents import Document
from .base import VectorStore

if TYPE_CHECKING:  # pragma: no cover - for static analysis only
    from pymongo.asynchronous.collection import AsyncCollection

LOGGER = logging.getLogger(__name__)

_PRE_FILTER_KEYS = ("pre_filter", "preFilter")
_POST_FILTER_KEYS = ("post_filter_pipeline", "postFilterPipeline")


def _first_present(mapping: Mapping[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        if mapping.get(key):
            return mapping[key]
    return None


class MongoDBAtlasVectorSearch(VectorStore):
    """Store documents in a MongoDB collection and query them with ``$search``/``knnBeta``.

    ``collection`` is an async pymongo-compatible collection. Each record holds
    the page content under ``text_key``, the vector under ``embedding_key`` and
    the document metadata as top-level fields.
    """

    def __init__(
        self,
        embeddings: Embeddings,
        *,
        collection: "AsyncCollection | Any",
        index_name: str = "default",
        text_key: str = "text",
        embedding_key: str = "embedding",
    ) -> None:
        super().__init__(embeddings)
        self.collection = collection
        self.index_name = index_name
        self.text_key = text_key
        self.embedding_key = embedding_key

    async def add_vectors(self, vectors: Sequence[Sequence[float]], documents: Sequence[Document]) -> None:
        if len(vectors) != len(documents):
            raise VectorCountMismatchError(len(vectors), len(documents))
        if not documents:
            return
        records = [
            {
                self.text_key: document.page_content,
                self.embedding_key: list(vector),
                **document.metadata,
            }
            for vector, document in zip(vectors, documents)
        ]
        start_time = perf_counter()
        await self.collection.insert_many(records)
        LOGGER.info(
            "Atlas insert finished | index=%s records=%d duration=%.3fs",
            self.index_name,
            len(records),
            perf_counter() - start_time,
        )

    async def add_documents(self, documents: Sequence[Document]) -> None:
        texts = [document.page_content for document in documents]
        vectors = await self.embeddings.embed_documents(texts)
        await self.add_vectors(vectors, documents)

    def _build_pipeline(
        self,
        query: Sequence[float],
        k: int,
        filter: Mapping[str, Any] | None,
    ) -> list[dict[str, Any]]:
        knn_beta: dict[str, Any] = {
            "vector": list(query),
            "path": self.embedding_key,
            "k": k,
        }
        pre_filter = None
        post_filter_pipeline = None
        if filter:
            pre_filter = _first_present(filter, _PRE_FILTER_KEYS)
            post_filter_pipeline = _first_present(filter, _POST_FILTER_KEYS)
            if pre_filter is None and post_filter_pipeline is None:
                pre_filter = dict(filter)
        if pre_filter:
            knn_beta["filter"] = pre_filter

        pipeline: list[dict[str, Any]] = [
            {"$search": {"index": self.index_name, "knnBeta": knn_beta}},
            {"$project": {self.embedding_key: 0, "score": {"$meta": "searchScore"}}},
        ]
        if post_filter_pipeline:
            pipeline.extend(post_filter_pipeline)
        return pipeline

    async def similarity_search_vector_with_score(
        self,
        query: Sequence[float],
        k: int,
        filter: Mapping[str, Any] | None = None,
    ) -> list[tuple[Document, float]]:
        pipeline = self._build_pipeline(query, k, filter)
        start_time = perf_counter()
        cursor = self.collection.aggregate(pipeline)
        if inspect.isawaitable(cursor):
            cursor = await cursor

        results: list[tuple[Document, float]] = []
        async for record in cursor:
            metadata = dict(record)
            text = metadata.pop(self.text_key, "")
            score = metadata.pop("score", None)
            results.append(
                (
                    Document(page_content=str(text), metadata=metadata),
                    float(score) if score is not None else 0.0,
                )
            )
        LOGGER.info(
            "Atlas vector search | index=%s k=%d results=%d duration=%.3fs",
            self.index_name,
            k,
            len(results),
            perf_counter() - start_time,
        )
        return results


__all__ = ["MongoDBAtlasVectorSearch"]
