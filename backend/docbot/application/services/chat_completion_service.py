"""Chat completion use case — the streaming, function-calling conversation loop."""

import json
import logging
from collections.abc import AsyncIterator
from contextlib import aclosing
from typing import Any

from docbot.application.services.completion_stream_driver import CompletionStreamDriver
from docbot.application.services.message_filters import remove_duplicate_messages
from docbot.application.tools.registry import ToolRegistry
from docbot.domain.entities import (
    ChatMessage,
    ContentFragment,
    FunctionCall,
    LoopState,
)
from docbot.domain.exceptions import (
    FunctionArgumentsError,
    MaxTurnsExceededError,
    ToolExecutionError,
    ToolNotFoundError,
)
from docbot.infrastructure.logging.colored_logger import ChatStage, ConversationLogger

logger = logging.getLogger(__name__)
clog = ConversationLogger("ChatCompletionService")


class ChatCompletionService:
    """Application service — drives the stream / dispatch / resume loop.

    Each call to ``stream`` owns its own conversation: the incoming
    messages are deduplicated once, then every turn's content is relayed
    as it arrives. When a turn ends with a function call, the matching
    tool runs synchronously and its JSON result is appended as a
    ``function`` message before the next turn starts.
    """

    def __init__(
        self,
        driver: CompletionStreamDriver,
        registry: ToolRegistry,
        *,
        max_turns: int = 10,
    ):
        if max_turns < 1:
            raise ValueError("max_turns must be at least 1")
        self._driver = driver
        self._registry = registry
        self._max_turns = max_turns

    async def stream(self, messages: list[ChatMessage]) -> AsyncIterator[str]:
        """Run the conversation loop, yielding content fragments in order.

        Raises:
            FunctionArgumentsError: The model sent arguments that are not a JSON object.
            ToolNotFoundError: The model called a function that is not registered.
            ToolExecutionError: A tool raised while running.
            MaxTurnsExceededError: Function calls continued past ``max_turns`` turns.
            ChatProviderError: The completion service failed.
        """
        conversation = remove_duplicate_messages(messages)
        state = LoopState.STREAMING
        turn = 0

        while state is not LoopState.DONE:
            turn += 1
            clog.step_start(ChatStage.TURN, f"Streaming turn {turn}", messages=len(conversation))

            pending = FunctionCall()
            async with aclosing(self._driver.run_turn(conversation)) as events:
                async for event in events:
                    if isinstance(event, ContentFragment):
                        yield event.text
                    else:
                        pending = event.function_call

            if pending.is_empty:
                state = LoopState.DONE
                continue

            state = LoopState.DISPATCHING
            clog.step_start(ChatStage.FUNCTION_CALL, "Function call requested", name=pending.name)
            if turn >= self._max_turns:
                clog.step_error(ChatStage.FUNCTION_CALL, f"Turn limit of {self._max_turns} reached")
                raise MaxTurnsExceededError(self._max_turns)

            conversation.append(self._dispatch(pending))
            state = LoopState.STREAMING

        clog.step_complete(ChatStage.COMPLETE, "Conversation finished", turns=turn)

    def _dispatch(self, call: FunctionCall) -> ChatMessage:
        """Invoke the requested tool and wrap its result as a ``function`` message."""
        arguments = self._parse_arguments(call)

        tool = self._registry.resolve(call.name)
        if tool is None:
            clog.step_error(ChatStage.TOOL, f"Unknown function '{call.name}'")
            raise ToolNotFoundError(call.name)

        clog.detail("Function arguments", arguments=arguments)
        try:
            with clog.timed_step(ChatStage.TOOL, f"Invoking {call.name}"):
                result = tool.invoke(arguments)
        except Exception as e:
            raise ToolExecutionError(call.name, e) from e

        return ChatMessage(
            role="function",
            name=call.name,
            content=json.dumps(result, ensure_ascii=False),
        )

    @staticmethod
    def _parse_arguments(call: FunctionCall) -> dict[str, Any]:
        if not call.arguments.strip():
            return {}
        try:
            arguments = json.loads(call.arguments)
        except json.JSONDecodeError as e:
            raise FunctionArgumentsError(call.name, call.arguments, str(e)) from e
        if not isinstance(arguments, dict):
            raise FunctionArgumentsError(
                call.name, call.arguments, "expected a JSON object"
            )
        return arguments
