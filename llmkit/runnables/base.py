"""Runnable unit-of-work abstraction."""
from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Mapping, Sequence
from typing import Any, Generic, TypeVar

from ..exceptions import BatchConfigurationMismatchError
from .config import RUNNABLE_CONFIG_KEYS, RunnableConfig

LOGGER = logging.getLogger(__name__)

Input = TypeVar("Input")
Output = TypeVar("Output")


class Runnable(ABC, Generic[Input, Output]):
    """Unit of work that can be invoked, batched and streamed."""

    @abstractmethod
    async def invoke(self, input: Input, options: Mapping[str, Any] | None = None) -> Output:
        """Run a single input to completion."""

    def _get_options_list(
        self,
        options: Mapping[str, Any] | Sequence[Mapping[str, Any]],
        length: int = 0,
    ) -> list[Mapping[str, Any]]:
        if isinstance(options, Mapping):
            return [options] * length
        if len(options) != length:
            raise BatchConfigurationMismatchError(len(options), length)
        return list(options)

    async def batch(
        self,
        inputs: Sequence[Input],
        options: Mapping[str, Any] | Sequence[Mapping[str, Any]] | None = None,
        *,
        max_concurrency: int | None = None,
    ) -> list[Output]:
        """Invoke every input, ``max_concurrency`` at a time, keeping input order.

        The first failure aborts the whole batch.
        """

        config_list = self._get_options_list(options if options is not None else {}, len(inputs))
        if not inputs:
            return []
        batch_size = max_concurrency if max_concurrency and max_concurrency > 0 else len(inputs)
        LOGGER.debug(
            "Runnable batch started | runnable=%s inputs=%d window=%d",
            type(self).__name__,
            len(inputs),
            batch_size,
        )
        results: list[Output] = []
        for start in range(0, len(inputs), batch_size):
            window = inputs[start : start + batch_size]
            window_results = await asyncio.gather(
                *(
                    self.invoke(item, config_list[start + offset])
                    for offset, item in enumerate(window)
                )
            )
            results.extend(window_results)
        return results

    async def _stream_iterator(
        self, input: Input, options: Mapping[str, Any] | None = None
    ) -> AsyncIterator[Output]:
        yield await self.invoke(input, options)

    async def stream(
        self, input: Input, options: Mapping[str, Any] | None = None
    ) -> AsyncIterator[Output]:
        """Yield incremental outputs; a single final output unless overridden."""

        async for chunk in self._stream_iterator(input, options):
            yield chunk

    def _separate_runnable_config_from_call_options(
        self, options: Mapping[str, Any]
    ) -> tuple[RunnableConfig, dict[str, Any]]:
        runnable_config: RunnableConfig = {
            "callbacks": options.get("callbacks"),
            "tags": options.get("tags"),
            "metadata": options.get("metadata"),
        }
        call_options = {key: value for key, value in options.items() if key not in RUNNABLE_CONFIG_KEYS}
        return runnable_config, call_options


__all__ = ["Runnable", "Input", "Output"]
