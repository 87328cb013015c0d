"""Base classes for chat models."""
from __future__ import annotations

import asyncio
import logging
from abc import abstractmethod
from collections.abc import AsyncIterator, Mapping, Sequence
from time import perf_counter
from typing import Any

from ..callbacks.manager import CallbackManager, CallbackManagerForLLMRun
from ..exceptions import StreamingNotImplementedError
from ..language_models import BaseLanguageModel, LanguageModelInput
from ..runnables.config import Callbacks, CancellationSignal, RunnableConfig
from ..schema.messages import AIMessage, BaseMessage, HumanMessage
from ..schema.outputs import ChatGeneration, ChatGenerationChunk, ChatResult, LLMResult
from ..schema.prompts import PromptValue

LOGGER = logging.getLogger(__name__)

CallOptions = Mapping[str, Any]


class BaseChatModel(BaseLanguageModel):
    """Chat model that wraps a generation primitive in callback lifecycles.

    Subclasses implement :meth:`_generate` and :meth:`_llm_type`, and may
    implement :meth:`_stream_response_chunks` to support token streaming.
    """

    def _separate_runnable_config_from_call_options(
        self, options: Mapping[str, Any]
    ) -> tuple[RunnableConfig, dict[str, Any]]:
        runnable_config, call_options = super()._separate_runnable_config_from_call_options(options)
        timeout = call_options.get("timeout")
        if timeout and not call_options.get("signal"):
            call_options["signal"] = CancellationSignal.timeout(timeout)
        return runnable_config, call_options

    def _configure_callbacks(
        self, runnable_config: RunnableConfig, callbacks: Callbacks = None
    ) -> CallbackManager:
        return CallbackManager.configure(
            runnable_config.get("callbacks") or callbacks,
            self.callbacks,
            runnable_config.get("tags"),
            self.tags,
            runnable_config.get("metadata"),
            self.metadata,
            verbose=self.verbose,
        )

    async def invoke(self, input: LanguageModelInput, options: CallOptions | None = None) -> BaseMessage:
        prompt_value = self._convert_input_to_prompt_value(input)
        result = await self.generate_prompt(
            [prompt_value],
            options,
            (options or {}).get("callbacks"),
        )
        return result.generations[0][0].message

    async def _stream_response_chunks(
        self,
        messages: list[BaseMessage],
        options: dict[str, Any],
        run_manager: CallbackManagerForLLMRun | None = None,
    ) -> AsyncIterator[ChatGenerationChunk]:
        raise StreamingNotImplementedError(f"{type(self).__name__} does not implement chunk streaming")
        yield  # pragma: no cover

    def _supports_chunk_streaming(self) -> bool:
        return type(self)._stream_response_chunks is not BaseChatModel._stream_response_chunks

    async def _stream_iterator(
        self, input: LanguageModelInput, options: CallOptions | None = None
    ) -> AsyncIterator[BaseMessage]:
        # Without a chunk producer the run is reported by generate().
        if not self._supports_chunk_streaming():
            yield await self.invoke(input, options)
            return

        messages = self._convert_input_to_prompt_value(input).to_messages()
        runnable_config, call_options = self._separate_runnable_config_from_call_options(options or {})
        callback_manager = self._configure_callbacks(runnable_config)
        extra = {
            "options": call_options,
            "invocation_params": self.invocation_params(call_options),
        }
        run_managers = await callback_manager.handle_chat_model_start(self.serialize(), [messages], extra=extra)
        run_manager = run_managers[0]
        generation_chunk: ChatGenerationChunk | None = None
        chunk_count = 0
        try:
            async for chunk in self._stream_response_chunks(messages, call_options, run_manager):
                chunk_count += 1
                yield chunk.message
                generation_chunk = chunk if generation_chunk is None else generation_chunk + chunk
        except (Exception, asyncio.CancelledError) as exc:
            LOGGER.warning(
                "Chat model stream failed | model=%s run_id=%s chunks=%d error=%s",
                self._llm_type(),
                run_manager.run_id,
                chunk_count,
                exc,
            )
            await run_manager.handle_llm_error(exc)
            raise
        LOGGER.debug(
            "Chat model stream finished | model=%s run_id=%s chunks=%d",
            self._llm_type(),
            run_manager.run_id,
            chunk_count,
        )
        generations: list[ChatGeneration] = [generation_chunk] if generation_chunk is not None else []
        await run_manager.handle_llm_end(LLMResult(generations=[generations], run_ids=[run_manager.run_id]))

    async def generate(
        self,
        messages: Sequence[Sequence[BaseMessage]],
        options: Sequence[str] | CallOptions | None = None,
        callbacks: Callbacks = None,
    ) -> LLMResult:
        """Generate one response per message list.

        Every message list runs concurrently and every run receives its end
        or error notification before the first failure, if any, is raised.
        """

        if isinstance(options, (list, tuple)):
            parsed_options: dict[str, Any] = {"stop": list(options)}
        else:
            parsed_options = dict(options or {})

        runnable_config, call_options = self._separate_runnable_config_from_call_options(parsed_options)
        callback_manager = self._configure_callbacks(runnable_config, callbacks)
        extra = {
            "options": call_options,
            "invocation_params": self.invocation_params(call_options),
        }
        run_managers = await callback_manager.handle_chat_model_start(self.serialize(), messages, extra=extra)

        LOGGER.debug("Chat model generate started | model=%s prompts=%d", self._llm_type(), len(messages))
        start_time = perf_counter()
        try:
            outcomes = await asyncio.gather(
                *(
                    self._generate(list(message_list), {**call_options, "prompt_index": index}, run_managers[index])
                    for index, message_list in enumerate(messages)
                ),
                return_exceptions=True,
            )
        except asyncio.CancelledError as exc:
            LOGGER.warning(
                "Chat model generate cancelled | model=%s prompts=%d",
                self._llm_type(),
                len(messages),
            )
            await asyncio.gather(*(run_manager.handle_llm_error(exc) for run_manager in run_managers))
            raise

        generations: list[list[ChatGeneration]] = []
        llm_outputs: list[dict[str, Any] | None] = []
        failures: list[BaseException] = []
        notifications = []
        for outcome, run_manager in zip(outcomes, run_managers):
            if isinstance(outcome, BaseException):
                failures.append(outcome)
                notifications.append(run_manager.handle_llm_error(outcome))
                continue
            generations.append(outcome.generations)
            llm_outputs.append(outcome.llm_output)
            notifications.append(
                run_manager.handle_llm_end(
                    LLMResult(
                        generations=[outcome.generations],
                        llm_output=outcome.llm_output,
                        run_ids=[run_manager.run_id],
                    )
                )
            )
        await asyncio.gather(*notifications)

        duration = perf_counter() - start_time
        if failures:
            LOGGER.warning(
                "Chat model generate failed | model=%s prompts=%d failures=%d duration=%.2fs",
                self._llm_type(),
                len(messages),
                len(failures),
                duration,
            )
            raise failures[0]
        LOGGER.debug(
            "Chat model generate finished | model=%s prompts=%d duration=%.2fs",
            self._llm_type(),
            len(messages),
            duration,
        )
        return LLMResult(
            generations=generations,
            llm_output=self._combine_llm_output(*llm_outputs) if llm_outputs else None,
            run_ids=[run_manager.run_id for run_manager in run_managers],
        )

    async def generate_prompt(
        self,
        prompt_values: Sequence[PromptValue],
        options: Sequence[str] | CallOptions | None = None,
        callbacks: Callbacks = None,
    ) -> LLMResult:
        prompt_messages = [prompt_value.to_messages() for prompt_value in prompt_values]
        return await self.generate(prompt_messages, options, callbacks)

    @abstractmethod
    async def _generate(
        self,
        messages: list[BaseMessage],
        options: dict[str, Any],
        run_manager: CallbackManagerForLLMRun | None = None,
    ) -> ChatResult:
        """Produce the generations for a single message list."""

    def _combine_llm_output(self, *llm_outputs: dict[str, Any] | None) -> dict[str, Any] | None:
        """Merge per-prompt provider output; backends override this."""

        return None

    def invocation_params(self, options: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Parameters sent to the provider, reported to callbacks."""

        return {}

    @property
    def identifying_params(self) -> dict[str, Any]:
        return {}

    @abstractmethod
    def _llm_type(self) -> str:
        """Short identifier of the backend."""

    def serialize(self) -> dict[str, Any]:
        """Describe the model for callback handlers."""

        return {
            "type": self._llm_type(),
            "id": ["llmkit", "chat_models", self._llm_type()],
            "params": self.identifying_params,
        }

    async def call(
        self,
        messages: Sequence[BaseMessage],
        options: Sequence[str] | CallOptions | None = None,
        callbacks: Callbacks = None,
    ) -> BaseMessage:
        result = await self.generate([messages], options, callbacks)
        return result.generations[0][0].message

    async def call_prompt(
        self,
        prompt_value: PromptValue,
        options: Sequence[str] | CallOptions | None = None,
        callbacks: Callbacks = None,
    ) -> BaseMessage:
        return await self.call(prompt_value.to_messages(), options, callbacks)

    async def predict_messages(
        self,
        messages: Sequence[BaseMessage],
        options: Sequence[str] | CallOptions | None = None,
        callbacks: Callbacks = None,
    ) -> BaseMessage:
        return await self.call(messages, options, callbacks)

    async def predict(
        self,
        text: str,
        options: Sequence[str] | CallOptions | None = None,
        callbacks: Callbacks = None,
    ) -> str:
        message = await self.call([HumanMessage(text)], options, callbacks)
        return message.content


class SimpleChatModel(BaseChatModel):
    """Chat model whose backend only returns text."""

    @abstractmethod
    async def _call(
        self,
        messages: list[BaseMessage],
        options: dict[str, Any],
        run_manager: CallbackManagerForLLMRun | None = None,
    ) -> str:
        """Return the response text for a message list."""

    async def _generate(
        self,
        messages: list[BaseMessage],
        options: dict[str, Any],
        run_manager: CallbackManagerForLLMRun | None = None,
    ) -> ChatResult:
        text = await self._call(messages, options, run_manager)
        message = AIMessage(text)
        return ChatResult(generations=[ChatGeneration(message=message, text=text)])


__all__ = ["BaseChatModel", "SimpleChatModel", "CallOptions"]
