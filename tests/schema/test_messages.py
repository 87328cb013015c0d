"""Message and generation chunk combination tests."""
from __future__ import annotations

import pytest

from llmkit.schema import (
    AIMessage,
    AIMessageChunk,
    ChatGeneration,
    ChatGenerationChunk,
    ChatMessage,
    ChatMessageChunk,
    HumanMessage,
    HumanMessageChunk,
    SystemMessage,
    merge_kwargs,
    message_from_role,
)


def _chunk(text: str, **info) -> ChatGenerationChunk:
    return ChatGenerationChunk(message=AIMessageChunk(text), generation_info=info or None)


def test_message_chunks_concatenate_content_and_kwargs() -> None:
    left = AIMessageChunk("Hel", {"function_call": {"name": "lookup", "arguments": '{"q":'}})
    right = AIMessageChunk("lo", {"function_call": {"arguments": ' "x"}'}})

    combined = left + right

    assert combined == AIMessageChunk("Hello", {"function_call": {"name": "lookup", "arguments": '{"q": "x"}'}})
    assert left.content == "Hel"


def test_chunks_of_different_kinds_do_not_mix() -> None:
    with pytest.raises(TypeError):
        AIMessageChunk("a") + HumanMessageChunk("b")
    with pytest.raises(ValueError):
        ChatMessageChunk("a", chat_role="tool") + ChatMessageChunk("b", chat_role="critic")


def test_generation_chunk_combination_is_associative() -> None:
    c1 = _chunk("The ", model="m")
    c2 = _chunk("quick ")
    c3 = _chunk("fox", eval_count=3)

    sequential = (c1 + c2) + c3
    grouped = c1 + (c2 + c3)

    assert sequential.text == grouped.text == "The quick fox"
    assert sequential.message.content == grouped.message.content == "The quick fox"
    assert sequential.generation_info == grouped.generation_info == {"model": "m", "eval_count": 3}


def test_generation_chunk_keeps_empty_pieces() -> None:
    folded = _chunk("") + _chunk("a") + _chunk("") + _chunk("b")

    assert folded.text == "ab"
    assert folded.generation_info is None


def test_generation_chunk_rejects_plain_generation() -> None:
    with pytest.raises(TypeError):
        _chunk("a") + ChatGeneration(message=AIMessage("b"))  # type: ignore[operator]


def test_generation_text_defaults_to_message_content() -> None:
    assert ChatGeneration(message=AIMessage("hi")).text == "hi"
    assert ChatGeneration(message=AIMessage("hi"), text="override").text == "override"


def test_merge_kwargs_rules() -> None:
    merged = merge_kwargs(
        {"text": "a", "items": [1], "nested": {"x": "1"}, "count": 1, "missing": None},
        {"text": "b", "items": [2], "nested": {"x": "2", "y": 3}, "count": 4, "missing": "now", "none": None},
    )

    assert merged == {
        "text": "ab",
        "items": [1, 2],
        "nested": {"x": "12", "y": 3},
        "count": 4,
        "missing": "now",
        "none": None,
    }


def test_merge_kwargs_rejects_mixed_value_types() -> None:
    pieces = [{"k": "x"}, {"k": 1}, {"k": "y"}]

    with pytest.raises(TypeError, match="'k'"):
        merge_kwargs(merge_kwargs(pieces[0], pieces[1]), pieces[2])
    with pytest.raises(TypeError, match="'k'"):
        merge_kwargs(pieces[0], merge_kwargs(pieces[1], pieces[2]))
    with pytest.raises(TypeError):
        _chunk("a", done_reason="stop") + _chunk("b", done_reason=3)


def test_merge_kwargs_same_type_scalars_fold_either_way() -> None:
    pieces = [{"k": 1, "s": "a"}, {"k": None, "s": "b"}, {"k": 3, "s": "c"}]

    left = merge_kwargs(merge_kwargs(pieces[0], pieces[1]), pieces[2])
    right = merge_kwargs(pieces[0], merge_kwargs(pieces[1], pieces[2]))

    assert left == right == {"k": 3, "s": "abc"}


def test_messages_are_immutable_and_role_tagged() -> None:
    message = HumanMessage("hi")

    with pytest.raises(AttributeError):
        message.content = "changed"  # type: ignore[misc]
    assert message.role == "human"
    assert ChatMessage("x", chat_role="critic").role == "critic"
    assert message.as_dict() == {"type": "human", "content": "hi"}


def test_message_from_role() -> None:
    assert message_from_role("user", "a") == HumanMessage("a")
    assert message_from_role("assistant", "b") == AIMessage("b")
    assert message_from_role("system", "c") == SystemMessage("c")
    assert message_from_role("tool", "d") == ChatMessage("d", chat_role="tool")
