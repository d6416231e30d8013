"""Completion stream driver — runs one streaming turn against the chat provider."""

import logging
from collections.abc import AsyncIterator
from contextlib import aclosing

from docbot.application.interfaces.chat_provider import ChatProvider
from docbot.application.tools.registry import ToolRegistry
from docbot.domain.entities import (
    ChatMessage,
    ContentFragment,
    FunctionCall,
    TurnEnd,
)

logger = logging.getLogger(__name__)


class CompletionStreamDriver:
    """Turns a provider stream into content fragments and one end-of-turn event.

    Content is emitted as soon as a chunk carries it. Function-call
    fragments are concatenated until the provider reports a finish reason;
    the accumulated call is handed over as-is, without validation.
    """

    FUNCTION_CALL_MODE = "auto"

    def __init__(self, provider: ChatProvider, registry: ToolRegistry, model: str):
        self._provider = provider
        self._registry = registry
        self._model = model

    async def run_turn(
        self, conversation: list[ChatMessage]
    ) -> AsyncIterator[ContentFragment | TurnEnd]:
        """Stream one turn.

        Yields ``ContentFragment`` events in arrival order, then exactly one
        ``TurnEnd``. A ``"stop"`` finish reason ends the turn with an empty
        call; any other finish reason ends it with whatever was accumulated.
        """
        function_call = FunctionCall()
        finish_reason: str | None = None

        chunks = self._provider.stream(
            conversation,
            self._model,
            functions=self._registry.function_schemas(),
            function_call=self.FUNCTION_CALL_MODE,
        )
        async with aclosing(chunks):
            async for chunk in chunks:
                if chunk.content:
                    yield ContentFragment(chunk.content)

                if chunk.function_call is not None:
                    function_call = function_call.extend(chunk.function_call)

                if chunk.finish_reason == "stop":
                    finish_reason = chunk.finish_reason
                    function_call = FunctionCall()
                    break
                if chunk.finish_reason is not None:
                    finish_reason = chunk.finish_reason
                    break

        logger.debug(
            "Turn finished (reason=%s, function=%r)",
            finish_reason,
            function_call.name,
        )
        yield TurnEnd(function_call=function_call, finish_reason=finish_reason)
