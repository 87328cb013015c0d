"""Chat model exports."""

from .base import BaseChatModel, SimpleChatModel
from .factory import create_chat_model
from .ollama import ChatOllama

__all__ = ["BaseChatModel", "SimpleChatModel", "ChatOllama", "create_chat_model"]
