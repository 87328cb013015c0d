"""Callback handler that reports run lifecycle events through ``logging``."""
from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any
from uuid import UUID

from ..schema.messages import BaseMessage
from ..schema.outputs import LLMResult
from .base import BaseCallbackHandler

LOGGER = logging.getLogger("llmkit.callbacks")


class LoggingCallbackHandler(BaseCallbackHandler):
    """Log chat model runs; installed automatically for ``verbose`` models."""

    def __init__(self, logger: logging.Logger | None = None, *, log_tokens: bool = False) -> None:
        self.logger = logger or LOGGER
        self.log_tokens = log_tokens

    def on_chat_model_start(
        self,
        serialized: dict[str, Any],
        messages: Sequence[Sequence[BaseMessage]],
        *,
        run_id: UUID,
        tags: Sequence[str] | None = None,
        **kwargs: Any,
    ) -> None:
        self.logger.info(
            "Chat model run started | run_id=%s model=%s messages=%d tags=%s",
            run_id,
            serialized.get("type"),
            sum(len(message_list) for message_list in messages),
            list(tags or []),
            extra={"run_id": str(run_id)},
        )

    def on_llm_new_token(self, token: str, *, run_id: UUID, **kwargs: Any) -> None:
        if self.log_tokens:
            self.logger.debug("Chat model token | run_id=%s length=%d", run_id, len(token))

    def on_llm_end(self, response: LLMResult, *, run_id: UUID, **kwargs: Any) -> None:
        characters = sum(len(generation.text) for generations in response.generations for generation in generations)
        self.logger.info(
            "Chat model run finished | run_id=%s generations=%d characters=%d",
            run_id,
            sum(len(generations) for generations in response.generations),
            characters,
            extra={"run_id": str(run_id)},
        )

    def on_llm_error(self, error: BaseException, *, run_id: UUID, **kwargs: Any) -> None:
        self.logger.error(
            "Chat model run failed | run_id=%s error=%s", run_id, error, extra={"run_id": str(run_id)}
        )


__all__ = ["LoggingCallbackHandler"]
