"""Embedding provider exports."""

from .base import Embeddings
from .factory import create_embeddings
from .local import DeterministicEmbeddings
from .ollama import OllamaEmbeddings

__all__ = ["Embeddings", "DeterministicEmbeddings", "OllamaEmbeddings", "create_embeddings"]
