"""Run configuration and cancellation primitives shared by runnables."""
from __future__ import annotations

import time
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, TypedDict, Union

from ..exceptions import GenerationCancelledError

if TYPE_CHECKING:  # pragma: no cover - for static analysis only
    from ..callbacks.base import BaseCallbackHandler
    from ..callbacks.manager import CallbackManager

Callbacks = Union[Sequence["BaseCallbackHandler"], "CallbackManager", None]

RUNNABLE_CONFIG_KEYS = ("callbacks", "tags", "metadata")


class RunnableConfig(TypedDict, total=False):
    """Cross-cutting options that are not specific to any model."""

    callbacks: Callbacks
    tags: list[str]
    metadata: dict[str, Any]


class CancellationSignal:
    """Cooperative cancellation flag with an optional deadline.

    Backends poll the signal; nothing here interrupts a running coroutine.
    """

    def __init__(self, *, deadline: float | None = None) -> None:
        self._deadline = deadline
        self._aborted = False
        self.reason: str | None = None

    @classmethod
    def timeout(cls, seconds: float) -> "CancellationSignal":
        return cls(deadline=time.monotonic() + seconds)

    @property
    def aborted(self) -> bool:
        if self._aborted:
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self._aborted = True
            self.reason = self.reason or "timeout"
        return self._aborted

    def abort(self, reason: str = "aborted") -> None:
        self._aborted = True
        self.reason = reason

    def remaining(self) -> float | None:
        """Seconds left before the deadline, ``None`` when unbounded."""

        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def raise_if_aborted(self) -> None:
        if self.aborted:
            raise GenerationCancelledError(f"Generation cancelled: {self.reason}")


__all__ = ["Callbacks", "RunnableConfig", "CancellationSignal", "RUNNABLE_CONFIG_KEYS"]
