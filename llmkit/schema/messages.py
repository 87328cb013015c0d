"""Role-tagged chat messages and their streaming chunks."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Mapping


def merge_kwargs(left: Mapping[str, Any], right: Mapping[str, Any]) -> dict[str, Any]:
    """Merge two partial payloads received while streaming.

    Strings are concatenated, mappings are merged recursively and lists are
    extended. Other values of the same type are replaced by the right-hand
    side. ``None`` never overwrites a value, and values of different types
    cannot be merged.
    """

    merged = dict(left)
    for key, value in right.items():
        current = merged.get(key)
        if current is None:
            merged[key] = value
        elif value is None:
            continue
        elif isinstance(current, str) and isinstance(value, str):
            merged[key] = current + value
        elif isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_kwargs(current, value)
        elif isinstance(current, list) and isinstance(value, list):
            merged[key] = current + value
        elif type(current) is type(value):
            merged[key] = value
        else:
            raise TypeError(
                f"Cannot merge key {key!r}: {type(current).__name__} and {type(value).__name__} values differ"
            )
    return merged


@dataclass(frozen=True, slots=True)
class BaseMessage:
    """Message exchanged with a chat model."""

    content: str
    additional_kwargs: dict[str, Any] = field(default_factory=dict)

    type: ClassVar[str] = "base"

    @property
    def role(self) -> str:
        return self.type

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"type": self.type, "content": self.content}
        if self.additional_kwargs:
            payload["additional_kwargs"] = dict(self.additional_kwargs)
        return payload


@dataclass(frozen=True, slots=True)
class HumanMessage(BaseMessage):
    """Message written by the end user."""

    type: ClassVar[str] = "human"


@dataclass(frozen=True, slots=True)
class AIMessage(BaseMessage):
    """Message produced by the model."""

    type: ClassVar[str] = "ai"


@dataclass(frozen=True, slots=True)
class SystemMessage(BaseMessage):
    """Instruction that primes the model's behaviour."""

    type: ClassVar[str] = "system"


@dataclass(frozen=True, slots=True)
class ChatMessage(BaseMessage):
    """Message with an arbitrary role."""

    chat_role: str = "user"

    type: ClassVar[str] = "generic"

    @property
    def role(self) -> str:
        return self.chat_role


class BaseMessageChunk:
    """Mixin that makes a message concatenable with chunks of the same kind."""

    def _merge(self, other: Any) -> dict[str, Any]:
        if type(other) is not type(self):
            raise TypeError(
                f"Cannot concatenate {type(self).__name__} with {type(other).__name__}"
            )
        return {
            "content": self.content + other.content,  # type: ignore[attr-defined]
            "additional_kwargs": merge_kwargs(
                self.additional_kwargs,  # type: ignore[attr-defined]
                other.additional_kwargs,
            ),
        }

    def __add__(self, other: Any) -> Any:
        return type(self)(**self._merge(other))


@dataclass(frozen=True, slots=True)
class HumanMessageChunk(BaseMessageChunk, HumanMessage):
    pass


@dataclass(frozen=True, slots=True)
class AIMessageChunk(BaseMessageChunk, AIMessage):
    pass


@dataclass(frozen=True, slots=True)
class SystemMessageChunk(BaseMessageChunk, SystemMessage):
    pass


@dataclass(frozen=True, slots=True)
class ChatMessageChunk(BaseMessageChunk, ChatMessage):
    def __add__(self, other: Any) -> "ChatMessageChunk":
        merged = self._merge(other)
        if other.chat_role != self.chat_role:
            raise ValueError("Cannot concatenate chat message chunks with different roles")
        return ChatMessageChunk(chat_role=self.chat_role, **merged)


def message_from_role(role: str, content: str) -> BaseMessage:
    """Build the message class matching a provider role name."""

    normalised = role.lower()
    if normalised in {"user", "human"}:
        return HumanMessage(content)
    if normalised in {"assistant", "ai"}:
        return AIMessage(content)
    if normalised == "system":
        return SystemMessage(content)
    return ChatMessage(content, chat_role=role)


__all__ = [
    "BaseMessage",
    "HumanMessage",
    "AIMessage",
    "SystemMessage",
    "ChatMessage",
    "BaseMessageChunk",
    "HumanMessageChunk",
    "AIMessageChunk",
    "SystemMessageChunk",
    "ChatMessageChunk",
    "merge_kwargs",
    "message_from_role",
]
