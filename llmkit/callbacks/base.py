"""Callback handler interface for model lifecycle events."""
from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any
from uuid import UUID

if TYPE_CHECKING:  # pragma: no cover - for static analysis only
    from ..schema.messages import BaseMessage
    from ..schema.outputs import LLMResult


class BaseCallbackHandler:
    """Listener notified about chat model runs.

    Every hook is optional and may be a plain method or a coroutine
    function. Failures inside a hook are logged and ignored unless
    ``raise_error`` is set.
    """

    raise_error: bool = False
    ignore_llm: bool = False

    def on_chat_model_start(
        self,
        serialized: dict[str, Any],
        messages: Sequence[Sequence["BaseMessage"]],
        *,
        run_id: UUID,
        parent_run_id: UUID | None = None,
        tags: Sequence[str] | None = None,
        metadata: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> Any:
        """Called when a chat model starts working on a message list."""

    def on_llm_new_token(
        self,
        token: str,
        *,
        run_id: UUID,
        parent_run_id: UUID | None = None,
        **kwargs: Any,
    ) -> Any:
        """Called for every streamed token."""

    def on_llm_end(
        self,
        response: "LLMResult",
        *,
        run_id: UUID,
        parent_run_id: UUID | None = None,
        **kwargs: Any,
    ) -> Any:
        """Called when a run finishes successfully."""

    def on_llm_error(
        self,
        error: BaseException,
        *,
        run_id: UUID,
        parent_run_id: UUID | None = None,
        **kwargs: Any,
    ) -> Any:
        """Called when a run fails."""


__all__ = ["BaseCallbackHandler"]
