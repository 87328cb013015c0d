"""Core data types shared by models, callbacks and vector stores."""

from .documents import Document
from .messages import (
    AIMessage,
    AIMessageChunk,
    BaseMessage,
    BaseMessageChunk,
    ChatMessage,
    ChatMessageChunk,
    HumanMessage,
    HumanMessageChunk,
    SystemMessage,
    SystemMessageChunk,
    merge_kwargs,
    message_from_role,
)
from .outputs import ChatGeneration, ChatGenerationChunk, ChatResult, LLMResult
from .prompts import ChatPromptValue, PromptValue, StringPromptValue

__all__ = [
    "Document",
    "AIMessage",
    "AIMessageChunk",
    "BaseMessage",
    "BaseMessageChunk",
    "ChatMessage",
    "ChatMessageChunk",
    "HumanMessage",
    "HumanMessageChunk",
    "SystemMessage",
    "SystemMessageChunk",
    "merge_kwargs",
    "message_from_role",
    "ChatGeneration",
    "ChatGenerationChunk",
    "ChatResult",
    "LLMResult",
    "ChatPromptValue",
    "PromptValue",
    "StringPromptValue",
]
