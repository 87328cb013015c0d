"""Tests for embedding providers."""
from __future__ import annotations

import asyncio
import math
from typing import Any

import pytest
from ollama import ResponseError

from llmkit.config import LLMSettings, Settings
from llmkit.embeddings import DeterministicEmbeddings, OllamaEmbeddings, create_embeddings
from llmkit.embeddings.constants import embedding_dimension_for_model
from llmkit.exceptions import EmbeddingError


class FakeOllamaClient:
    def __init__(self, response: dict[str, Any] | None = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def embed(self, **kwargs: Any) -> dict[str, Any]:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        assert self.response is not None
        return self.response


def test_deterministic_embeddings_are_stable_and_normalised() -> None:
    embeddings = DeterministicEmbeddings(dimension=8)

    first, second, other = asyncio.run(embeddings.embed_documents(["alpha", "alpha", "beta"]))
    query = asyncio.run(embeddings.embed_query("alpha"))

    assert len(first) == 8
    assert first == second == query
    assert first != other
    assert math.isclose(math.sqrt(sum(value * value for value in first)), 1.0)


def test_deterministic_embeddings_place_shared_words_closer() -> None:
    embeddings = DeterministicEmbeddings(dimension=256)

    base, related, unrelated, shouted, blank = asyncio.run(
        embeddings.embed_documents(
            ["red apple pie", "red apple tart", "blue ocean wave", "RED Apple PIE!", "?!"]
        )
    )

    def cosine(left: list[float], right: list[float]) -> float:
        return sum(a * b for a, b in zip(left, right))

    assert cosine(base, related) > cosine(base, unrelated) + 0.3
    assert shouted == base
    assert blank == [0.0] * 256


def test_deterministic_embeddings_reject_non_positive_dimension() -> None:
    with pytest.raises(EmbeddingError, match="positive"):
        DeterministicEmbeddings(dimension=0)
    assert asyncio.run(DeterministicEmbeddings(dimension=4).embed_documents([])) == []


def test_ollama_embeddings_call_embed_api() -> None:
    client = FakeOllamaClient({"embeddings": [[0.1, 0.2], [0.3, 0.4]]})
    embeddings = OllamaEmbeddings(model_name="nomic-embed-text", client=client)

    vectors = asyncio.run(embeddings.embed_documents(["one", "two"]))

    assert vectors == [[0.1, 0.2], [0.3, 0.4]]
    assert client.calls == [{"model": "nomic-embed-text", "input": ["one", "two"]}]


def test_ollama_embeddings_truncate_to_configured_dimension() -> None:
    client = FakeOllamaClient({"embeddings": [[1.0, 2.0, 3.0], [4, 5]]})
    embeddings = OllamaEmbeddings(client=client, dimension=2)

    vectors = asyncio.run(embeddings.embed_documents(["long", "exact"]))

    assert vectors == [[1.0, 2.0], [4.0, 5.0]]


def test_ollama_embeddings_reject_vectors_shorter_than_dimension() -> None:
    client = FakeOllamaClient({"embeddings": [[1.0]]})

    with pytest.raises(EmbeddingError, match="fewer than the configured 2"):
        asyncio.run(OllamaEmbeddings(client=client, dimension=2).embed_documents(["short"]))


def test_ollama_embeddings_send_inputs_in_batches() -> None:
    class LengthClient:
        def __init__(self) -> None:
            self.inputs: list[list[str]] = []

        async def embed(self, *, model: str, input: list[str]) -> dict[str, Any]:
            self.inputs.append(input)
            return {"embeddings": [[float(len(text))] for text in input]}

    client = LengthClient()
    embeddings = OllamaEmbeddings(client=client, batch_size=2)

    vectors = asyncio.run(embeddings.embed_documents(["a", "bb", "ccc"]))

    assert client.inputs == [["a", "bb"], ["ccc"]]
    assert vectors == [[1.0], [2.0], [3.0]]
    with pytest.raises(EmbeddingError):
        OllamaEmbeddings(client=client, batch_size=0)


def test_ollama_embeddings_skip_empty_input() -> None:
    client = FakeOllamaClient({"embeddings": []})

    assert asyncio.run(OllamaEmbeddings(client=client).embed_documents([])) == []
    assert client.calls == []


def test_ollama_embeddings_reject_malformed_response() -> None:
    client = FakeOllamaClient({"embeddings": [[0.1]]})

    with pytest.raises(EmbeddingError, match="1 embeddings for 2 inputs"):
        asyncio.run(OllamaEmbeddings(client=client).embed_documents(["one", "two"]))


def test_ollama_embeddings_wrap_server_errors() -> None:
    overflow = FakeOllamaClient(error=ResponseError("input exceeds maximum context length", 400))
    missing = FakeOllamaClient(error=ResponseError("model not found", 404))

    with pytest.raises(EmbeddingError, match="context window"):
        asyncio.run(OllamaEmbeddings(client=overflow).embed_documents(["huge"]))
    with pytest.raises(EmbeddingError, match="model not found"):
        asyncio.run(OllamaEmbeddings(client=missing).embed_documents(["text"]))


def test_ollama_embeddings_propagate_connection_errors() -> None:
    client = FakeOllamaClient(error=ConnectionError("refused"))

    with pytest.raises(ConnectionError):
        asyncio.run(OllamaEmbeddings(client=client).embed_documents(["text"]))


def test_dimension_lookup_resolves_family_and_tag() -> None:
    assert embedding_dimension_for_model("nomic-embed-text:latest") == 768
    assert embedding_dimension_for_model("Nomic-Embed-Text") == 768
    assert embedding_dimension_for_model("nomic-embed-text:v1.5") == 768
    assert embedding_dimension_for_model("qwen3-embedding:4b") == 2560
    assert embedding_dimension_for_model("qwen3-embedding:q8") == 1024
    assert embedding_dimension_for_model(None) == 1024
    assert embedding_dimension_for_model("unknown-model") == 1024


def test_create_embeddings_follows_settings() -> None:
    deterministic = create_embeddings(
        Settings(llm=LLMSettings(embedding_provider="deterministic", embedding_model="all-minilm"))
    )
    ollama = create_embeddings(Settings(llm=LLMSettings(embedding_model="nomic-embed-text")))

    assert isinstance(deterministic, DeterministicEmbeddings)
    assert deterministic.dimension == 384
    assert isinstance(ollama, OllamaEmbeddings)
    assert ollama.model_name == "nomic-embed-text"
