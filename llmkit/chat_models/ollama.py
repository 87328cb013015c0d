"""Ollama backed chat model with streaming responses."""
from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator, Mapping
from time import perf_counter
from typing import Any

import httpx

from ..callbacks.manager import CallbackManagerForLLMRun
from ..exceptions import GenerationError
from ..runnables.config import CancellationSignal
from ..schema.messages import AIMessageChunk, BaseMessage, message_from_role
from ..schema.outputs import ChatGeneration, ChatGenerationChunk, ChatResult
from .base import BaseChatModel

LOGGER = logging.getLogger(__name__)

_ROLE_BY_TYPE = {"human": "user", "ai": "assistant", "system": "system"}
_USAGE_KEYS = ("prompt_eval_count", "eval_count", "total_duration", "load_duration", "eval_duration")


class ChatOllama(BaseChatModel):
    """Chat completions from an Ollama server's ``/api/chat`` endpoint."""

    def __init__(
        self,
        *,
        model: str,
        host: str = "http://localhost:11434",
        temperature: float | None = None,
        top_p: float | None = None,
        request_timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.model = model
        self._host = host.rstrip("/")
        self.temperature = temperature
        self.top_p = top_p
        self._timeout = request_timeout
        self._transport = transport

    def _llm_type(self) -> str:
        return "ollama"

    @property
    def identifying_params(self) -> dict[str, Any]:
        return {"model": self.model, "host": self._host}

    def invocation_params(self, options: Mapping[str, Any] | None = None) -> dict[str, Any]:
        model_options: dict[str, Any] = {}
        if self.temperature is not None:
            model_options["temperature"] = self.temperature
        if self.top_p is not None:
            model_options["top_p"] = self.top_p
        stop = (options or {}).get("stop")
        if stop:
            model_options["stop"] = list(stop)
        return {"model": self.model, "options": model_options}

    def _build_payload(self, messages: list[BaseMessage], options: Mapping[str, Any], *, stream: bool) -> dict[str, Any]:
        return {
            **self.invocation_params(options),
            "messages": [self._convert_message(message) for message in messages],
            "stream": stream,
        }

    @staticmethod
    def _convert_message(message: BaseMessage) -> dict[str, str]:
        role = _ROLE_BY_TYPE.get(message.type, message.role)
        return {"role": role, "content": message.content}

    def _request_timeout(self, signal: CancellationSignal | None) -> httpx.Timeout:
        timeout = self._timeout
        if signal is not None:
            remaining = signal.remaining()
            if remaining is not None:
                timeout = min(timeout, remaining)
        return httpx.Timeout(timeout, connect=timeout, read=timeout, write=timeout)

    def _client(self, signal: CancellationSignal | None) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._request_timeout(signal), transport=self._transport)

    async def _generate(
        self,
        messages: list[BaseMessage],
        options: dict[str, Any],
        run_manager: CallbackManagerForLLMRun | None = None,
    ) -> ChatResult:
        signal: CancellationSignal | None = options.get("signal")
        if signal is not None:
            signal.raise_if_aborted()
        url = f"{self._host}/api/chat"
        payload = self._build_payload(messages, options, stream=False)
        LOGGER.info("Ollama request started | model=%s messages=%d", self.model, len(messages))
        start_time = perf_counter()
        try:
            async with self._client(signal) as client:
                response = await client.post(url, json=payload)
                response.raise_for_status()
                data: dict[str, Any] = response.json()
        except httpx.HTTPStatusError as exc:
            raise GenerationError(
                f"Ollama generation failed with status {exc.response.status_code}: {exc.response.text}",
                cause=exc,
            ) from exc
        except httpx.HTTPError as exc:
            raise GenerationError(f"Failed to reach Ollama server at {url}: {exc}", cause=exc) from exc
        finally:
            LOGGER.info(
                "Ollama request finished | model=%s duration=%.2fs",
                self.model,
                perf_counter() - start_time,
            )
        reply = data.get("message") or {}
        message = message_from_role(str(reply.get("role") or "assistant"), str(reply.get("content") or ""))
        usage = {key: data[key] for key in _USAGE_KEYS if key in data}
        generation = ChatGeneration(message=message, generation_info=usage or None)
        return ChatResult(generations=[generation], llm_output={"model": data.get("model", self.model), **usage})

    async def _stream_response_chunks(
        self,
        messages: list[BaseMessage],
        options: dict[str, Any],
        run_manager: CallbackManagerForLLMRun | None = None,
    ) -> AsyncIterator[ChatGenerationChunk]:
        signal: CancellationSignal | None = options.get("signal")
        if signal is not None:
            signal.raise_if_aborted()
        url = f"{self._host}/api/chat"
        payload = self._build_payload(messages, options, stream=True)
        LOGGER.info("Ollama stream started | model=%s messages=%d", self.model, len(messages))
        start_time = perf_counter()
        chunk_count = 0
        try:
            async with self._client(signal) as client:
                async with client.stream("POST", url, json=payload) as response:
                    if response.is_error:
                        await response.aread()
                    response.raise_for_status()
                    async for line in response.aiter_lines():
                        if signal is not None:
                            signal.raise_if_aborted()
                        if not line:
                            continue
                        chunk = self._parse_chunk(line)
                        if chunk is None:
                            continue
                        chunk_count += 1
                        if run_manager is not None and chunk.text:
                            await run_manager.handle_llm_new_token(chunk.text, chunk=chunk)
                        yield chunk
        except httpx.HTTPStatusError as exc:
            raise GenerationError(
                f"Ollama generation failed with status {exc.response.status_code}: {exc.response.text}",
                cause=exc,
            ) from exc
        except httpx.HTTPError as exc:
            raise GenerationError(f"Failed to reach Ollama server at {url}: {exc}", cause=exc) from exc
        finally:
            LOGGER.info(
                "Ollama stream finished | model=%s duration=%.2fs chunks=%d",
                self.model,
                perf_counter() - start_time,
                chunk_count,
            )

    @staticmethod
    def _parse_chunk(payload: str) -> ChatGenerationChunk | None:
        try:
            data: dict[str, Any] = json.loads(payload)
        except json.JSONDecodeError:
            LOGGER.debug("Ignoring malformed Ollama stream line | length=%d", len(payload))
            return None
        if data.get("error"):
            raise GenerationError(f"Ollama stream reported an error: {data['error']}")
        content = str((data.get("message") or {}).get("content") or "")
        generation_info = None
        if data.get("done"):
            generation_info = {key: data[key] for key in _USAGE_KEYS if key in data}
            generation_info["done_reason"] = data.get("done_reason")
        elif not content:
            return None
        return ChatGenerationChunk(message=AIMessageChunk(content), generation_info=generation_info)

    def _combine_llm_output(self, *llm_outputs: dict[str, Any] | None) -> dict[str, Any] | None:
        prompt_tokens = 0
        completion_tokens = 0
        for output in llm_outputs:
            if not output:
                continue
            prompt_tokens += int(output.get("prompt_eval_count") or 0)
            completion_tokens += int(output.get("eval_count") or 0)
        return {
            "model": self.model,
            "token_usage": {
                "prompt_tokens": prompt_tokens,
                "completion_tokens": completion_tokens,
                "total_tokens": prompt_tokens + completion_tokens,
            },
        }


__all__ = ["ChatOllama"]
