"""OpenAI chat completions client — implements the ChatProvider interface.

Communicates with an OpenAI-compatible API (https://api.openai.com/v1)
using httpx SSE streaming. Requests carry the function descriptors and
the function-call mode; each streamed line is parsed into a StreamChunk.
"""

import json
import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx

from docbot.application.interfaces.chat_provider import ChatProvider
from docbot.domain.entities import ChatMessage, FunctionCallDelta, StreamChunk
from docbot.domain.exceptions import ChatProviderError

logger = logging.getLogger(__name__)

_DATA_PREFIX = "data: "
_DONE_MARKER = "data: [DONE]"


class OpenAIChatClient(ChatProvider):
    """Infrastructure adapter — connects to the OpenAI chat completions API.

    An injected ``httpx.AsyncClient`` is reused across requests; otherwise
    a client is created and closed per stream.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 120.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._http_client = http_client

    @property
    def provider_name(self) -> str:
        return "openai"

    def _get_headers(self) -> dict[str, str]:
        """Standard headers for chat completion requests."""
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    def _build_payload(
        self,
        messages: list[ChatMessage],
        model: str,
        *,
        functions: list[dict[str, Any]] | None = None,
        function_call: str | None = None,
    ) -> dict:
        """Build the streaming request payload."""
        payload: dict = {
            "model": model,
            "messages": [self._serialize_message(m) for m in messages],
            "stream": True,
        }
        if functions:
            payload["functions"] = functions
            if function_call is not None:
                payload["function_call"] = function_call
        return payload

    @staticmethod
    def _serialize_message(msg: ChatMessage) -> dict:
        """Convert a domain ChatMessage to an API-compatible dict."""
        result: dict = {"role": msg.role, "content": msg.content}
        if msg.name:
            result["name"] = msg.name
        return result

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def stream(
        self,
        messages: list[ChatMessage],
        model: str,
        *,
        functions: list[dict[str, Any]] | None = None,
        function_call: str | None = None,
    ) -> AsyncIterator[StreamChunk]:
        """Send a streaming chat completion and yield parsed chunks.

        Skips blank lines and keep-alive comments and stops at
        ``data: [DONE]``.
        """
        payload = self._build_payload(
            messages, model, functions=functions, function_call=function_call
        )
        url = f"{self._base_url}/chat/completions"

        client = await self._get_client()
        should_close = self._http_client is None

        try:
            async with client.stream(
                "POST", url, headers=self._get_headers(), json=payload
            ) as response:
                if response.status_code != 200:
                    body = await response.aread()
                    self._raise_provider_error_from_bytes(
                        response.status_code, body
                    )

                async for line in response.aiter_lines():
                    if not line or line.startswith(":"):
                        continue

                    if line.strip() == _DONE_MARKER:
                        break

                    if not line.startswith(_DATA_PREFIX):
                        continue

                    chunk = self._parse_chunk(line[len(_DATA_PREFIX):])
                    if chunk is not None:
                        yield chunk

        except httpx.TransportError as e:
            logger.error("Chat completion stream failed: %s", e)
            raise ChatProviderError(
                provider=self.provider_name,
                status_code=502,
                message=f"{type(e).__name__}: {e}",
            ) from e
        finally:
            if should_close:
                await client.aclose()

    def _parse_chunk(self, raw: str) -> StreamChunk | None:
        """Parse one SSE data payload into a StreamChunk.

        Returns None for payloads without choices or that are not valid JSON.
        """
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Skipping undecodable stream line: %.200s", raw)
            return None
        if not isinstance(data, dict):
            logger.warning("Skipping non-object stream line: %.200s", raw)
            return None

        if "error" in data:
            error = data["error"]
            if not isinstance(error, dict):
                error = {"message": str(error) if error else "Unknown error"}
            code = error.get("code")
            raise ChatProviderError(
                provider=self.provider_name,
                status_code=code if isinstance(code, int) else 500,
                message=error.get("message", "Unknown error"),
            )

        choices = data.get("choices") or []
        if not choices:
            return None

        choice = choices[0]
        delta = choice.get("delta") or {}

        function_call = None
        call_data = delta.get("function_call")
        if call_data:
            function_call = FunctionCallDelta(
                name=call_data.get("name"),
                arguments=call_data.get("arguments"),
            )

        return StreamChunk(
            content=delta.get("content"),
            function_call=function_call,
            finish_reason=choice.get("finish_reason"),
        )

    def _raise_provider_error_from_bytes(
        self, status_code: int, body: bytes
    ) -> None:
        """Raise ChatProviderError from raw response bytes."""
        try:
            data = json.loads(body)
            error = data.get("error", {})
            message = error.get("message", body.decode())
        except Exception:
            message = body.decode(errors="replace")

        logger.error("Chat completion request rejected (%d): %s", status_code, message)
        raise ChatProviderError(
            provider=self.provider_name,
            status_code=status_code,
            message=message,
        )
