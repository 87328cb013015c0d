"""Callback manager that fans lifecycle events out to handlers."""
from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Mapping, Sequence
from typing import Any
from uuid import UUID, uuid4

from ..runnables.config import Callbacks
from ..schema.messages import BaseMessage
from ..schema.outputs import LLMResult
from .base import BaseCallbackHandler
from .logging_handler import LoggingCallbackHandler

LOGGER = logging.getLogger(__name__)


async def _dispatch(
    handler: BaseCallbackHandler,
    event_name: str,
    *args: Any,
    **kwargs: Any,
) -> None:
    if handler.ignore_llm:
        return
    try:
        result = getattr(handler, event_name)(*args, **kwargs)
        if inspect.isawaitable(result):
            await result
    except Exception as exc:
        if handler.raise_error:
            raise
        LOGGER.warning(
            "Callback handler failed | handler=%s event=%s error=%s",
            type(handler).__name__,
            event_name,
            exc,
        )


async def _handle_event(
    handlers: Sequence[BaseCallbackHandler],
    event_name: str,
    *args: Any,
    **kwargs: Any,
) -> None:
    await asyncio.gather(*(_dispatch(handler, event_name, *args, **kwargs) for handler in handlers))


class BaseRunManager:
    """State shared by the managers bound to a single run."""

    def __init__(
        self,
        *,
        run_id: UUID,
        handlers: Sequence[BaseCallbackHandler],
        tags: Sequence[str] | None = None,
        metadata: Mapping[str, Any] | None = None,
        parent_run_id: UUID | None = None,
    ) -> None:
        self.run_id = run_id
        self.handlers = list(handlers)
        self.tags = list(tags or [])
        self.metadata = dict(metadata or {})
        self.parent_run_id = parent_run_id


class CallbackManagerForLLMRun(BaseRunManager):
    """Handle returned for one chat model run; reports tokens, success or failure."""

    async def handle_llm_new_token(self, token: str, **kwargs: Any) -> None:
        await _handle_event(
            self.handlers,
            "on_llm_new_token",
            token,
            run_id=self.run_id,
            parent_run_id=self.parent_run_id,
            **kwargs,
        )

    async def handle_llm_end(self, response: LLMResult, **kwargs: Any) -> None:
        await _handle_event(
            self.handlers,
            "on_llm_end",
            response,
            run_id=self.run_id,
            parent_run_id=self.parent_run_id,
            **kwargs,
        )

    async def handle_llm_error(self, error: BaseException, **kwargs: Any) -> None:
        await _handle_event(
            self.handlers,
            "on_llm_error",
            error,
            run_id=self.run_id,
            parent_run_id=self.parent_run_id,
            **kwargs,
        )


class CallbackManager:
    """Collection of handlers plus the tags and metadata attached to their runs."""

    def __init__(
        self,
        handlers: Sequence[BaseCallbackHandler] | None = None,
        *,
        tags: Sequence[str] | None = None,
        metadata: Mapping[str, Any] | None = None,
        parent_run_id: UUID | None = None,
    ) -> None:
        self.handlers: list[BaseCallbackHandler] = list(handlers or [])
        self.tags: list[str] = list(tags or [])
        self.metadata: dict[str, Any] = dict(metadata or {})
        self.parent_run_id = parent_run_id

    def add_handler(self, handler: BaseCallbackHandler) -> None:
        if handler not in self.handlers:
            self.handlers.append(handler)

    def add_tags(self, tags: Sequence[str]) -> None:
        for tag in tags:
            if tag not in self.tags:
                self.tags.append(tag)

    def copy(self) -> "CallbackManager":
        return CallbackManager(
            self.handlers,
            tags=self.tags,
            metadata=self.metadata,
            parent_run_id=self.parent_run_id,
        )

    @classmethod
    def configure(
        cls,
        inheritable_callbacks: Callbacks = None,
        local_callbacks: Callbacks = None,
        inheritable_tags: Sequence[str] | None = None,
        local_tags: Sequence[str] | None = None,
        inheritable_metadata: Mapping[str, Any] | None = None,
        local_metadata: Mapping[str, Any] | None = None,
        *,
        verbose: bool = False,
    ) -> "CallbackManager":
        """Merge call-level (inheritable) and instance-level (local) settings.

        Either callbacks argument may be a list of handlers or an existing
        manager. Tags keep first-seen order; inheritable metadata keys win
        over local ones.
        """

        if isinstance(inheritable_callbacks, CallbackManager):
            manager = inheritable_callbacks.copy()
        else:
            manager = cls(inheritable_callbacks or [])

        manager.add_tags(inheritable_tags or [])
        if isinstance(local_callbacks, CallbackManager):
            local_handlers: Sequence[BaseCallbackHandler] = local_callbacks.handlers
            manager.add_tags(local_callbacks.tags)
            manager.metadata = {**local_callbacks.metadata, **manager.metadata}
        else:
            local_handlers = local_callbacks or []
        for handler in local_handlers:
            manager.add_handler(handler)
        manager.add_tags(local_tags or [])
        manager.metadata = {**dict(local_metadata or {}), **manager.metadata, **dict(inheritable_metadata or {})}

        if verbose and not any(isinstance(handler, LoggingCallbackHandler) for handler in manager.handlers):
            manager.add_handler(LoggingCallbackHandler())
        return manager

    async def handle_chat_model_start(
        self,
        serialized: dict[str, Any],
        messages: Sequence[Sequence[BaseMessage]],
        *,
        run_id: UUID | None = None,
        parent_run_id: UUID | None = None,
        extra: Mapping[str, Any] | None = None,
    ) -> list[CallbackManagerForLLMRun]:
        """Start one run per message list and return its handle.

        ``run_id``, when given, is used for the first message list only.
        ``parent_run_id`` defaults to the manager's own parent.
        """

        parent_run_id = parent_run_id or self.parent_run_id

        run_managers: list[CallbackManagerForLLMRun] = []
        notifications = []
        for index, message_list in enumerate(messages):
            run_id_ = run_id if run_id is not None and index == 0 else uuid4()
            notifications.append(
                _handle_event(
                    self.handlers,
                    "on_chat_model_start",
                    serialized,
                    [message_list],
                    run_id=run_id_,
                    parent_run_id=parent_run_id,
                    tags=self.tags,
                    metadata=self.metadata,
                    **dict(extra or {}),
                )
            )
            run_managers.append(
                CallbackManagerForLLMRun(
                    run_id=run_id_,
                    handlers=self.handlers,
                    tags=self.tags,
                    metadata=self.metadata,
                    parent_run_id=parent_run_id,
                )
            )
        await asyncio.gather(*notifications)
        return run_managers


__all__ = ["BaseRunManager", "CallbackManager", "CallbackManagerForLLMRun"]
