"""Prompt values accepted as chat model input."""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

from .messages import BaseMessage, HumanMessage


class PromptValue(ABC):
    """Prompt that can be rendered either as text or as chat messages."""

    @abstractmethod
    def to_string(self) -> str:
        """Return the prompt as a single string."""

    @abstractmethod
    def to_messages(self) -> list[BaseMessage]:
        """Return the prompt as a list of messages."""


@dataclass(frozen=True, slots=True)
class StringPromptValue(PromptValue):
    text: str

    def to_string(self) -> str:
        return self.text

    def to_messages(self) -> list[BaseMessage]:
        return [HumanMessage(self.text)]


@dataclass(frozen=True, slots=True)
class ChatPromptValue(PromptValue):
    messages: tuple[BaseMessage, ...]

    def to_string(self) -> str:
        return "\n".join(f"{message.role}: {message.content}" for message in self.messages)

    def to_messages(self) -> list[BaseMessage]:
        return list(self.messages)

    @classmethod
    def from_messages(cls, messages: Sequence[BaseMessage]) -> "ChatPromptValue":
        return cls(tuple(messages))


__all__ = ["PromptValue", "StringPromptValue", "ChatPromptValue"]
