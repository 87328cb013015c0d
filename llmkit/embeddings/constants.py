"""Embedding model defaults and known output sizes."""
from __future__ import annotations

DEFAULT_OLLAMA_EMBEDDING_MODEL = "qwen3-embedding:0.6b"
DEFAULT_EMBEDDING_DIMENSION = 1024

# (family, tag) -> output size. Untagged names mean ":latest".
KNOWN_DIMENSIONS: dict[tuple[str, str], int] = {
    ("qwen3-embedding", "0.6b"): 1024,
    ("qwen3-embedding", "4b"): 2560,
    ("qwen3-embedding", "8b"): 4096,
    ("qwen3-embedding", "latest"): 4096,
    ("nomic-embed-text", "latest"): 768,
    ("mxbai-embed-large", "latest"): 1024,
    ("all-minilm", "latest"): 384,
    ("embeddinggemma", "latest"): 768,
}


def split_model_name(model_name: str) -> tuple[str, str]:
    family, _, tag = model_name.strip().lower().partition(":")
    return family, tag or "latest"


def embedding_dimension_for_model(model_name: str | None) -> int:
    """Output size of ``model_name``.

    An unknown tag of a family whose tags all share one size resolves to that
    size. Anything else unknown falls back to ``DEFAULT_EMBEDDING_DIMENSION``.
    """

    family, tag = split_model_name(model_name or DEFAULT_OLLAMA_EMBEDDING_MODEL)
    dimension = KNOWN_DIMENSIONS.get((family, tag))
    if dimension is not None:
        return dimension
    family_sizes = {size for (known, _), size in KNOWN_DIMENSIONS.items() if known == family}
    if len(family_sizes) == 1:
        return family_sizes.pop()
    return DEFAULT_EMBEDDING_DIMENSION


__all__ = [
    "DEFAULT_OLLAMA_EMBEDDING_MODEL",
    "DEFAULT_EMBEDDING_DIMENSION",
    "KNOWN_DIMENSIONS",
    "embedding_dimension_for_model",
    "split_model_name",
]
