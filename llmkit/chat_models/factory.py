"""Factory helpers for chat models."""
from __future__ import annotations

from ..config import Settings, load_settings
from .base import BaseChatModel
from .ollama import ChatOllama


def create_chat_model(settings: Settings | None = None, **kwargs) -> BaseChatModel:
    """Create a chat model based on runtime configuration."""

    settings = settings or load_settings()
    llm = settings.llm
    return ChatOllama(
        model=llm.chat_model,
        host=llm.ollama_host,
        temperature=llm.temperature,
        top_p=llm.top_p,
        request_timeout=llm.request_timeout,
        verbose=kwargs.pop("verbose", llm.verbose),
        **kwargs,
    )


__all__ = ["create_chat_model"]
