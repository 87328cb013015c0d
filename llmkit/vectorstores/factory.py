"""Factory helpers for vector stores."""
from __future__ import annotations

from typing import Any

from ..config import Settings, load_settings
from ..embeddings.base import Embeddings
from ..embeddings.factory import create_embeddings
from .mongodb_atlas import MongoDBAtlasVectorSearch


def create_vector_store(
    collection: Any,
    embeddings: Embeddings | None = None,
    settings: Settings | None = None,
) -> MongoDBAtlasVectorSearch:
    """Wrap ``collection`` with the configured index and field names."""

    settings = settings or load_settings()
    search = settings.vector_search
    return MongoDBAtlasVectorSearch(
        embeddings or create_embeddings(settings),
        collection=collection,
        index_name=search.index_name,
        text_key=search.text_key,
        embedding_key=search.embedding_key,
    )


__all__ = ["create_vector_store"]
