"""Unit tests for the ChatCompletionService conversation loop."""

import json

import pytest

from docbot.application.services import ChatCompletionService, CompletionStreamDriver
from docbot.domain.entities import ChatMessage
from docbot.domain.exceptions import (
    ChatProviderError,
    FunctionArgumentsError,
    MaxTurnsExceededError,
    ToolExecutionError,
    ToolNotFoundError,
)
from tests.fakes import (
    FakeChatProvider,
    RecordingTool,
    content,
    finish,
    function_call_turn,
    registry_with,
)

ARTICLES = [{"id": "nft-api-overview", "title": "NFT API overview"}]


# ── Fixtures ──


def _make_service(
    provider: FakeChatProvider,
    *tools: RecordingTool,
    max_turns: int = 10,
) -> ChatCompletionService:
    registry = registry_with(*tools)
    driver = CompletionStreamDriver(provider, registry, model="test/model")
    return ChatCompletionService(driver, registry, max_turns=max_turns)


def _user(text: str = "Which articles cover NFTs?") -> list[ChatMessage]:
    return [ChatMessage(role="user", content=text)]


async def _collect(service: ChatCompletionService, messages: list[ChatMessage]) -> list[str]:
    return [fragment async for fragment in service.stream(messages)]


# ── Tests ──


@pytest.mark.asyncio
async def test_single_stop_chunk_relays_once_and_finishes():
    provider = FakeChatProvider([[content("Hello!", finish_reason="stop")]])
    tool = RecordingTool("get_moralis_articles_list", ARTICLES)
    service = _make_service(provider, tool)

    fragments = await _collect(service, _user())

    assert fragments == ["Hello!"]
    assert tool.invocations == []
    assert len(provider.calls) == 1


@pytest.mark.asyncio
async def test_function_call_dispatches_once_and_resumes():
    provider = FakeChatProvider([
        function_call_turn("get_moralis_articles_list", "{}"),
        [content("Here are the articles."), finish("stop")],
    ])
    tool = RecordingTool("get_moralis_articles_list", ARTICLES)
    service = _make_service(provider, tool)

    fragments = await _collect(service, _user())

    assert tool.invocations == [{}]
    assert fragments == ["Here are the articles."]
    assert len(provider.calls) == 2

    second_turn = provider.calls[1]["messages"]
    assert second_turn[:-1] == _user()
    assert second_turn[-1] == ChatMessage(
        role="function",
        name="get_moralis_articles_list",
        content=json.dumps(ARTICLES),
    )


@pytest.mark.asyncio
async def test_fragment_order_is_preserved_across_turns():
    provider = FakeChatProvider([
        [content("Let me "), content("check. ")] + function_call_turn(
            "get_moralis_articles_list", '{"subject": "nft"}'
        ),
        [content("Found "), content("one.")] + function_call_turn(
            "get_moralis_articles_by_id", '{"ids": ["nft-api-overview"]}'
        ),
        [content("It says "), content("NFTs."), finish("stop")],
    ])
    lister = RecordingTool("get_moralis_articles_list", ARTICLES)
    fetcher = RecordingTool("get_moralis_articles_by_id", [{"content": "NFTs"}])
    service = _make_service(provider, lister, fetcher)

    fragments = await _collect(service, _user())

    assert fragments == ["Let me ", "check. ", "Found ", "one.", "It says ", "NFTs."]
    assert lister.invocations == [{"subject": "nft"}]
    assert fetcher.invocations == [{"ids": ["nft-api-overview"]}]

    # Each function result sits between the turn that asked for it and the next.
    assert len(provider.calls[1]["messages"]) == 2
    assert provider.calls[1]["messages"][-1].name == "get_moralis_articles_list"
    assert len(provider.calls[2]["messages"]) == 3
    assert provider.calls[2]["messages"][-1].name == "get_moralis_articles_by_id"


@pytest.mark.asyncio
async def test_tool_runs_only_after_earlier_fragments_were_relayed():
    provider = FakeChatProvider([
        [content("Looking it up...")] + function_call_turn("get_moralis_articles_list"),
        [content("Done."), finish("stop")],
    ])
    tool = RecordingTool("get_moralis_articles_list", ARTICLES)
    service = _make_service(provider, tool)

    stream = service.stream(_user())
    first = await anext(stream)

    assert first == "Looking it up..."
    assert tool.invocations == []
    assert await anext(stream) == "Done."
    assert tool.invocations == [{}]
    await stream.aclose()


@pytest.mark.asyncio
async def test_conversation_is_deduplicated_before_first_turn():
    provider = FakeChatProvider([[finish("stop")]])
    service = _make_service(provider)
    messages = [
        ChatMessage(role="user", content="hi"),
        ChatMessage(role="assistant", content="hello"),
        ChatMessage(role="user", content="hi"),
    ]

    await _collect(service, messages)

    assert provider.calls[0]["messages"] == messages[:2]
    assert len(messages) == 3


@pytest.mark.asyncio
async def test_caller_messages_are_not_extended():
    provider = FakeChatProvider([
        function_call_turn("get_moralis_articles_list"),
        [finish("stop")],
    ])
    service = _make_service(provider, RecordingTool("get_moralis_articles_list", ARTICLES))
    messages = _user()

    await _collect(service, messages)

    assert messages == _user()


@pytest.mark.asyncio
async def test_empty_arguments_mean_no_arguments():
    provider = FakeChatProvider([
        function_call_turn("get_moralis_articles_list", ""),
        [finish("stop")],
    ])
    tool = RecordingTool("get_moralis_articles_list", ARTICLES)
    service = _make_service(provider, tool)

    await _collect(service, _user())

    assert tool.invocations == [{}]


@pytest.mark.asyncio
async def test_unknown_function_is_an_application_error():
    provider = FakeChatProvider([function_call_turn("get_weather")])
    service = _make_service(provider, RecordingTool("get_moralis_articles_list"))

    with pytest.raises(ToolNotFoundError) as exc_info:
        await _collect(service, _user())

    assert exc_info.value.data == {"function": "get_weather"}
    assert len(provider.calls) == 1


@pytest.mark.asyncio
async def test_malformed_arguments_are_an_application_error():
    provider = FakeChatProvider([
        function_call_turn("get_moralis_articles_list", '{"subject": '),
    ])
    tool = RecordingTool("get_moralis_articles_list")
    service = _make_service(provider, tool)

    with pytest.raises(FunctionArgumentsError) as exc_info:
        await _collect(service, _user())

    assert exc_info.value.data["arguments"] == '{"subject": '
    assert tool.invocations == []


@pytest.mark.asyncio
async def test_non_object_arguments_are_rejected():
    provider = FakeChatProvider([function_call_turn("get_moralis_articles_list", "[1, 2]")])
    service = _make_service(provider, RecordingTool("get_moralis_articles_list"))

    with pytest.raises(FunctionArgumentsError):
        await _collect(service, _user())


@pytest.mark.asyncio
async def test_failing_tool_aborts_the_loop():
    provider = FakeChatProvider([
        function_call_turn("get_moralis_articles_list"),
        [content("unreachable"), finish("stop")],
    ])
    tool = RecordingTool("get_moralis_articles_list", error=RuntimeError("corpus offline"))
    service = _make_service(provider, tool)

    with pytest.raises(ToolExecutionError) as exc_info:
        await _collect(service, _user())

    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert len(tool.invocations) == 1
    assert len(provider.calls) == 1


@pytest.mark.asyncio
async def test_turn_limit_stops_endless_function_calls():
    provider = FakeChatProvider([
        function_call_turn("get_moralis_articles_list") for _ in range(5)
    ])
    tool = RecordingTool("get_moralis_articles_list", ARTICLES)
    service = _make_service(provider, tool, max_turns=3)

    with pytest.raises(MaxTurnsExceededError) as exc_info:
        await _collect(service, _user())

    assert exc_info.value.data == {"max_turns": 3}
    assert len(provider.calls) == 3
    assert len(tool.invocations) == 2


def test_turn_limit_must_be_positive():
    provider = FakeChatProvider()
    registry = registry_with()
    driver = CompletionStreamDriver(provider, registry, model="test/model")

    with pytest.raises(ValueError):
        ChatCompletionService(driver, registry, max_turns=0)


@pytest.mark.asyncio
async def test_provider_error_propagates():
    error = ChatProviderError(provider="fake", status_code=429, message="Rate limited")
    provider = FakeChatProvider(error=error)
    service = _make_service(provider)

    with pytest.raises(ChatProviderError):
        await _collect(service, _user())


@pytest.mark.asyncio
async def test_closing_stream_stops_before_next_tool_call():
    """A consumer that goes away mid-turn closes upstream and runs no tool."""
    provider = FakeChatProvider([
        [content("Checking...")] + function_call_turn("get_moralis_articles_list"),
        [content("never"), finish("stop")],
    ])
    tool = RecordingTool("get_moralis_articles_list", ARTICLES)
    service = _make_service(provider, tool)

    stream = service.stream(_user())
    assert await anext(stream) == "Checking..."
    await stream.aclose()

    assert tool.invocations == []
    assert provider.closed_streams == 1
    assert len(provider.calls) == 1
