"""Factory helpers for embedding providers."""
from __future__ import annotations

import logging

from ..config import Settings, load_settings
from .base import Embeddings
from .constants import embedding_dimension_for_model
from .local import DeterministicEmbeddings
from .ollama import OllamaEmbeddings

LOGGER = logging.getLogger(__name__)


def create_embeddings(settings: Settings | None = None) -> Embeddings:
    """Create an embedding provider based on runtime configuration."""

    settings = settings or load_settings()
    llm = settings.llm
    dimension = llm.embedding_dimension or embedding_dimension_for_model(llm.embedding_model)
    if llm.embedding_provider == "ollama":
        LOGGER.debug("Using Ollama embeddings | model=%s dimension=%d", llm.embedding_model, dimension)
        return OllamaEmbeddings(
            host=llm.ollama_host,
            model_name=llm.embedding_model,
            request_timeout=llm.request_timeout,
            dimension=llm.embedding_dimension,
        )
    return DeterministicEmbeddings(dimension=dimension)


__all__ = ["create_embeddings"]
