"""Callback exports."""

from .base import BaseCallbackHandler
from .logging_handler import LoggingCallbackHandler
from .manager import BaseRunManager, CallbackManager, CallbackManagerForLLMRun

__all__ = [
    "BaseCallbackHandler",
    "BaseRunManager",
    "CallbackManager",
    "CallbackManagerForLLMRun",
    "LoggingCallbackHandler",
]
