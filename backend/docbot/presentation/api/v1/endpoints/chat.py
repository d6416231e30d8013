"""Chat proxy endpoint — streams model output and runs documentation lookups."""

import json
import logging
from collections.abc import AsyncIterator
from contextlib import aclosing

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response, StreamingResponse
from pydantic import ValidationError

from docbot.application.schemas import ChatRequest, ErrorResponse
from docbot.application.services import ChatCompletionService
from docbot.domain.entities import ChatMessage
from docbot.domain.exceptions import ApplicationError, UserError
from docbot.infrastructure.dependencies import get_chat_completion_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Chat"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}
STREAM_MEDIA_TYPE = "text/plain; charset=utf-8"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred."


@router.options("/gpt-moralis-bot")
async def chat_preflight() -> PlainTextResponse:
    """Answer cross-origin pre-flight requests before any chat processing.

    Every response of this route carries the same fixed CORS headers, so no
    CORS middleware is installed.
    """
    return PlainTextResponse("ok", headers=CORS_HEADERS)


@router.post("/gpt-moralis-bot")
async def chat(
    request: Request,
    service: ChatCompletionService = Depends(get_chat_completion_service),
) -> Response:
    """Stream the assistant's reply to a conversation as raw text.

    Body: ``{"messages": [{"role", "content", "name"?}, ...]}``.

    The first fragment is awaited before the response starts, so failures
    in the opening turn come back as a JSON error with status 400 (bad
    request data) or 500. Once text has been sent, a failure aborts the
    stream.
    """
    try:
        messages = await _read_messages(request)
        fragments = service.stream(messages)
        first = await _first_fragment(fragments)
    except Exception as e:
        return _error_response(e)

    return StreamingResponse(
        _relay(first, fragments),
        media_type=STREAM_MEDIA_TYPE,
        headers=CORS_HEADERS,
    )


async def _read_messages(request: Request) -> list[ChatMessage]:
    """Validate the request body and convert it to domain messages."""
    body = await request.body()
    if not body.strip():
        raise UserError("Missing request data")

    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise UserError("Invalid JSON in request data") from e

    if data is None:
        raise UserError("Missing request data")
    if not isinstance(data, dict):
        raise UserError("Invalid request data")
    if not data.get("messages"):
        raise UserError("Missing messages in request data")

    try:
        payload = ChatRequest.model_validate(data)
    except ValidationError as e:
        raise UserError(
            "Invalid messages in request data",
            data={"errors": json.loads(e.json(include_url=False))},
        ) from e
    return payload.to_domain_messages()


async def _first_fragment(fragments: AsyncIterator[str]) -> str | None:
    try:
        return await anext(fragments)
    except StopAsyncIteration:
        return None


async def _relay(first: str | None, fragments: AsyncIterator[str]) -> AsyncIterator[str]:
    """Send the primed fragment, then the rest as they arrive."""
    async with aclosing(fragments):
        if first is None:
            return
        yield first
        try:
            async for fragment in fragments:
                yield fragment
        except Exception:
            logger.exception("Chat stream aborted after partial output")
            raise


def _error_response(error: Exception) -> JSONResponse:
    """Map a failure to a JSON error body and status code."""
    if isinstance(error, UserError):
        logger.warning("Rejected chat request: %s", error.message)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(error=error.message, data=error.data).model_dump(),
            headers=CORS_HEADERS,
        )
    if isinstance(error, ApplicationError):
        logger.error("Chat request failed: %s", error)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error=error.message, data=error.data).model_dump(),
            headers=CORS_HEADERS,
        )
    logger.exception("Unexpected error in chat request", exc_info=error)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error=UNEXPECTED_ERROR_MESSAGE).model_dump(exclude_none=True),
        headers=CORS_HEADERS,
    )
