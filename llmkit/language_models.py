"""Behaviour shared by every language model wrapper."""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Union

from .runnables.base import Runnable
from .runnables.config import Callbacks
from .schema.messages import BaseMessage
from .schema.prompts import ChatPromptValue, PromptValue, StringPromptValue

LanguageModelInput = Union[PromptValue, str, Sequence[BaseMessage]]


class BaseLanguageModel(Runnable[LanguageModelInput, BaseMessage]):
    """Holds instance-level callbacks, tags and metadata for a model."""

    def __init__(
        self,
        *,
        callbacks: Callbacks = None,
        tags: Sequence[str] | None = None,
        metadata: Mapping[str, Any] | None = None,
        verbose: bool = False,
    ) -> None:
        self.callbacks = callbacks
        self.tags = list(tags or [])
        self.metadata = dict(metadata or {})
        self.verbose = verbose

    @staticmethod
    def _convert_input_to_prompt_value(input: LanguageModelInput) -> PromptValue:
        if isinstance(input, PromptValue):
            return input
        if isinstance(input, str):
            return StringPromptValue(input)
        if isinstance(input, Sequence) and all(isinstance(item, BaseMessage) for item in input):
            return ChatPromptValue.from_messages(input)
        raise TypeError(
            f"Invalid input type {type(input).__name__}; expected a string, a PromptValue or a list of messages"
        )


__all__ = ["BaseLanguageModel", "LanguageModelInput"]
