"""Abstract chat provider interface — port for completion service adapters.

The conversation loop only needs one capability from a provider: open a
streaming, function-calling completion and hand back parsed chunks.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import Any

from docbot.domain.entities import ChatMessage, StreamChunk


class ChatProvider(ABC):
    """Port — defines what the application layer needs from any chat provider."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Unique name identifying this provider (e.g. 'openai')."""
        ...

    @abstractmethod
    def stream(
        self,
        messages: list[ChatMessage],
        model: str,
        *,
        functions: list[dict[str, Any]] | None = None,
        function_call: str | None = None,
    ) -> AsyncIterator[StreamChunk]:
        """Send a streaming chat completion request.

        Args:
            messages: The conversation history.
            model: The model identifier (e.g. 'gpt-3.5-turbo').
            functions: Function descriptors the model may call.
            function_call: Function-call mode, e.g. "auto".

        Yields:
            Parsed stream chunks in arrival order.

        Raises:
            ChatProviderError: If the provider returns an error.
        """
        ...
