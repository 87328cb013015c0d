"""Generation results returned by chat models."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from .messages import BaseMessage, BaseMessageChunk, merge_kwargs


@dataclass(slots=True)
class ChatGeneration:
    """A single model response for one message list."""

    message: BaseMessage
    text: str = ""
    generation_info: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        if not self.text:
            self.text = self.message.content


@dataclass(slots=True)
class ChatGenerationChunk(ChatGeneration):
    """Partial generation emitted while streaming.

    Chunks combine with ``+``; the operation is associative so a stream can
    be folded left to right.
    """

    def __add__(self, other: "ChatGenerationChunk") -> "ChatGenerationChunk":
        if not isinstance(other, ChatGenerationChunk):
            raise TypeError(f"Cannot concatenate ChatGenerationChunk with {type(other).__name__}")
        if not isinstance(self.message, BaseMessageChunk):
            raise TypeError("ChatGenerationChunk.message must be a message chunk")
        generation_info = None
        if self.generation_info is not None or other.generation_info is not None:
            generation_info = merge_kwargs(self.generation_info or {}, other.generation_info or {})
        return ChatGenerationChunk(
            message=self.message + other.message,
            text=self.text + other.text,
            generation_info=generation_info,
        )


@dataclass(slots=True)
class ChatResult:
    """Output of a generation primitive for one message list."""

    generations: list[ChatGeneration]
    llm_output: dict[str, Any] | None = None


@dataclass(slots=True)
class LLMResult:
    """Output of ``generate``: generations aligned with the input message lists."""

    generations: list[list[ChatGeneration]]
    llm_output: dict[str, Any] | None = None
    run_ids: list[UUID] | None = field(default=None, compare=False)


__all__ = ["ChatGeneration", "ChatGenerationChunk", "ChatResult", "LLMResult"]
