"""FastAPI dependency injection — wires infrastructure to application layer."""

from collections.abc import AsyncGenerator
from functools import lru_cache

from fastapi import Depends

from docbot.config import get_settings
from docbot.application.interfaces import ChatProvider, DocsRepository
from docbot.application.services import ChatCompletionService, CompletionStreamDriver
from docbot.application.tools import ToolRegistry, build_docs_tool_registry
from docbot.infrastructure.docs.json_docs_repository import JsonDocsRepository
from docbot.infrastructure.openai import OpenAIChatClient


@lru_cache
def get_docs_repository() -> DocsRepository:
    """Process-wide docs corpus — loaded once, read-only afterwards."""
    settings = get_settings()
    return JsonDocsRepository.from_directory(settings.docs_data_dir)


@lru_cache
def get_tool_registry() -> ToolRegistry:
    """Process-wide registry of chat functions."""
    return build_docs_tool_registry(get_docs_repository())


def get_chat_provider() -> ChatProvider:
    """Provides the OpenAI chat provider configured from settings."""
    settings = get_settings()
    return OpenAIChatClient(
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        timeout=settings.chat_timeout,
    )


async def get_chat_completion_service(
    provider: ChatProvider = Depends(get_chat_provider),
    registry: ToolRegistry = Depends(get_tool_registry),
) -> AsyncGenerator[ChatCompletionService, None]:
    """Provides a ChatCompletionService driving the given provider and registry."""
    settings = get_settings()
    driver = CompletionStreamDriver(provider, registry, model=settings.chat_model)
    yield ChatCompletionService(
        driver,
        registry,
        max_turns=settings.max_function_turns,
    )
