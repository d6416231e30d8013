"""Documentation lookup functions exposed to the chat model."""

from typing import Any

from docbot.application.interfaces import DocsRepository
from docbot.application.tools.base import BaseTool
from docbot.application.tools.registry import ToolRegistry

_IDS_PARAMETERS: dict[str, Any] = {
    "type": "object",
    "properties": {
        "ids": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Identifiers returned by the matching list function.",
        },
    },
    "required": ["ids"],
}


def _optional_str(arguments: dict[str, Any], key: str) -> str | None:
    value = arguments.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValueError(f"'{key}' must be a string")
    return value


def _ids(arguments: dict[str, Any]) -> list[str]:
    value = arguments.get("ids", [])
    # Models sometimes send a single id instead of a list.
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise ValueError("'ids' must be an array of strings")
    return [str(item) for item in value]


class _DocsTool(BaseTool):
    def __init__(self, repository: DocsRepository):
        self._repository = repository


class GetArticlesListTool(_DocsTool):
    name = "get_moralis_articles_list"
    description = (
        "List the Moralis documentation articles (id, title, subject, summary). "
        "Use it to find which articles answer a general question, then fetch "
        "them with get_moralis_articles_by_id."
    )
    parameters = {
        "type": "object",
        "properties": {
            "subject": {
                "type": "string",
                "description": "Optional subject to narrow the list, e.g. 'nft'.",
            },
        },
    }

    def invoke(self, arguments: dict[str, Any]) -> list[dict[str, Any]]:
        subject = _optional_str(arguments, "subject")
        return [a.to_summary() for a in self._repository.list_articles(subject)]


class GetArticlesByIdsTool(_DocsTool):
    name = "get_moralis_articles_by_id"
    description = "Fetch the full content of Moralis documentation articles by id."
    parameters = _IDS_PARAMETERS

    def invoke(self, arguments: dict[str, Any]) -> list[dict[str, Any]]:
        return [a.to_detail() for a in self._repository.get_articles(_ids(arguments))]


class GetApiEndpointsListTool(_DocsTool):
    name = "get_moralis_api_endpoints_list"
    description = (
        "List the Moralis API endpoints (id, api, method, path, summary). "
        "Use it to find the endpoint that serves some data, then fetch its "
        "parameters with get_moralis_api_endpoints_data."
    )
    parameters = {
        "type": "object",
        "properties": {
            "api": {
                "type": "string",
                "description": "Optional API to narrow the list, e.g. 'evm' or 'solana'.",
            },
        },
    }

    def invoke(self, arguments: dict[str, Any]) -> list[dict[str, Any]]:
        api = _optional_str(arguments, "api")
        return [e.to_summary() for e in self._repository.list_api_endpoints(api)]


class GetApiEndpointsDataTool(_DocsTool):
    name = "get_moralis_api_endpoints_data"
    description = (
        "Fetch the full description and parameters of Moralis API endpoints by id."
    )
    parameters = _IDS_PARAMETERS

    def invoke(self, arguments: dict[str, Any]) -> list[dict[str, Any]]:
        return [
            e.to_detail() for e in self._repository.get_api_endpoints(_ids(arguments))
        ]


class GetApiArticlesListTool(_DocsTool):
    name = "get_moralis_api_articles_list"
    description = (
        "List the guides written for a specific Moralis API (id, title, api, summary)."
    )
    parameters = {
        "type": "object",
        "properties": {
            "api": {
                "type": "string",
                "description": "Optional API the guides belong to, e.g. 'streams'.",
            },
        },
    }

    def invoke(self, arguments: dict[str, Any]) -> list[dict[str, Any]]:
        api = _optional_str(arguments, "api")
        return [a.to_summary() for a in self._repository.list_api_articles(api)]


class GetApiArticlesByIdsTool(_DocsTool):
    name = "get_moralis_api_articles_by_id"
    description = "Fetch the full content of Moralis API guides by id."
    parameters = _IDS_PARAMETERS

    def invoke(self, arguments: dict[str, Any]) -> list[dict[str, Any]]:
        return [
            a.to_detail() for a in self._repository.get_api_articles(_ids(arguments))
        ]


def build_docs_tool_registry(repository: DocsRepository) -> ToolRegistry:
    """Registry with every documentation lookup function, in advertising order."""
    return ToolRegistry(
        [
            GetArticlesListTool(repository),
            GetArticlesByIdsTool(repository),
            GetApiEndpointsListTool(repository),
            GetApiEndpointsDataTool(repository),
            GetApiArticlesListTool(repository),
            GetApiArticlesByIdsTool(repository),
        ]
    )
