"""Shared exception hierarchy for llmkit."""
from __future__ import annotations

from typing import Optional


class LLMKitError(Exception):
    """Base exception for llmkit failures."""


class ConfigurationError(LLMKitError):
    """Raised when call options or settings have an invalid shape."""


class BatchConfigurationMismatchError(ConfigurationError, ValueError):
    """Raised when per-input batch options do not line up with the inputs."""

    def __init__(self, options_count: int, inputs_count: int) -> None:
        super().__init__(
            'Passed "options" must be a list with the same length as the inputs, '
            f"but got {options_count} options for {inputs_count} inputs"
        )
        self.options_count = options_count
        self.inputs_count = inputs_count


class GenerationError(LLMKitError):
    """Raised when a model backend fails to produce a generation."""

    def __init__(self, message: str, *, cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.cause = cause


class GenerationCancelledError(GenerationError):
    """Raised when a generation is aborted through its cancellation signal."""


class StreamingNotImplementedError(LLMKitError, NotImplementedError):
    """Raised when a model without a chunk producer is asked for chunks."""


class EmbeddingError(LLMKitError):
    """Raised when an embedding provider returns an unusable response."""


class VectorStoreError(LLMKitError):
    """Raised when a vector store operation fails."""


class VectorCountMismatchError(VectorStoreError, ValueError):
    """Raised when vectors and documents passed together differ in number."""

    def __init__(self, vectors_count: int, documents_count: int) -> None:
        super().__init__(
            f"Got {vectors_count} vectors for {documents_count} documents; "
            "each document needs exactly one vector"
        )
        self.vectors_count = vectors_count
        self.documents_count = documents_count


__all__ = [
    "LLMKitError",
    "ConfigurationError",
    "BatchConfigurationMismatchError",
    "GenerationError",
    "GenerationCancelledError",
    "StreamingNotImplementedError",
    "EmbeddingError",
    "VectorStoreError",
    "VectorCountMismatchError",
]
