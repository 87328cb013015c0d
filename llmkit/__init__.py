"""llmkit: runnables, callback-aware chat models and vector search adapters."""

from . import callbacks, chat_models, embeddings, runnables, schema, vectorstores

__version__ = "0.1.0"

__all__ = ["callbacks", "chat_models", "embeddings", "runnables", "schema", "vectorstores", "__version__"]
