"""Runnable exports."""

from .base import Runnable
from .config import Callbacks, CancellationSignal, RunnableConfig

__all__ = ["Runnable", "RunnableConfig", "Callbacks", "CancellationSignal"]
