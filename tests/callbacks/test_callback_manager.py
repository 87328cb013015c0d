"""Callback manager configuration and dispatch tests."""
from __future__ import annotations

import asyncio
from uuid import uuid4

from llmkit.callbacks import BaseCallbackHandler, CallbackManager, LoggingCallbackHandler
from llmkit.schema import HumanMessage, LLMResult


class CountingHandler(BaseCallbackHandler):
    def __init__(self, name: str) -> None:
        self.name = name
        self.starts: list[dict] = []
        self.ends = 0

    def on_chat_model_start(self, serialized, messages, *, run_id, **kwargs) -> None:
        self.starts.append({"run_id": run_id, "messages": messages, **kwargs})

    def on_llm_end(self, response, *, run_id, **kwargs) -> None:
        self.ends += 1


def test_configure_merges_handlers_tags_and_metadata() -> None:
    call_handler = CountingHandler("call")
    model_handler = CountingHandler("model")

    manager = CallbackManager.configure(
        [call_handler],
        [model_handler, call_handler],
        ["call", "shared"],
        ["shared", "model"],
        {"env": "prod"},
        {"env": "dev", "team": "search"},
    )

    assert manager.handlers == [call_handler, model_handler]
    assert manager.tags == ["call", "shared", "model"]
    assert manager.metadata == {"env": "prod", "team": "search"}


def test_configure_accepts_existing_manager_without_mutating_it() -> None:
    parent_handler = CountingHandler("parent")
    parent = CallbackManager([parent_handler], tags=["parent"], metadata={"a": 1})

    manager = CallbackManager.configure(parent, [CountingHandler("local")], local_tags=["local"])

    assert len(manager.handlers) == 2
    assert manager.tags == ["parent", "local"]
    assert manager.metadata == {"a": 1}
    assert parent.handlers == [parent_handler]
    assert parent.tags == ["parent"]


def test_configure_puts_call_tags_before_instance_manager_tags() -> None:
    instance = CallbackManager([CountingHandler("instance")], tags=["instance", "call"])

    manager = CallbackManager.configure(None, instance, ["call"], ["local"])

    assert manager.tags == ["call", "instance", "local"]
    assert len(manager.handlers) == 1


def test_configure_verbose_adds_logging_handler() -> None:
    manager = CallbackManager.configure(verbose=True)

    assert len(manager.handlers) == 1
    assert isinstance(manager.handlers[0], LoggingCallbackHandler)


def test_chat_model_start_returns_one_run_manager_per_list() -> None:
    handler = CountingHandler("h")
    manager = CallbackManager([handler], tags=["t"], metadata={"m": 1})
    first_run = uuid4()
    messages = [[HumanMessage("a")], [HumanMessage("b")]]

    run_managers = asyncio.run(
        manager.handle_chat_model_start({"type": "test"}, messages, run_id=first_run, extra={"options": {}})
    )

    assert [run_manager.run_id for run_manager in run_managers][0] == first_run
    assert run_managers[0].run_id != run_managers[1].run_id
    assert [start["messages"] for start in handler.starts] == [[messages[0]], [messages[1]]]
    assert handler.starts[0]["tags"] == ["t"]
    assert handler.starts[0]["metadata"] == {"m": 1}
    assert handler.starts[0]["options"] == {}

    asyncio.run(run_managers[1].handle_llm_end(LLMResult(generations=[[]])))
    assert handler.ends == 1


def test_ignored_handlers_are_skipped() -> None:
    handler = CountingHandler("quiet")
    handler.ignore_llm = True
    manager = CallbackManager([handler])

    asyncio.run(manager.handle_chat_model_start({}, [[HumanMessage("a")]]))

    assert handler.starts == []


def test_chat_model_start_links_runs_to_a_parent() -> None:
    handler = CountingHandler("h")
    parent_run = uuid4()
    default_parent = uuid4()
    manager = CallbackManager([handler], parent_run_id=default_parent)

    run_managers = asyncio.run(
        manager.handle_chat_model_start({}, [[HumanMessage("a")], [HumanMessage("b")]], parent_run_id=parent_run)
    )
    asyncio.run(manager.handle_chat_model_start({}, [[HumanMessage("c")]]))

    assert [start["parent_run_id"] for start in handler.starts] == [parent_run, parent_run, default_parent]
    assert all(run_manager.parent_run_id == parent_run for run_manager in run_managers)
