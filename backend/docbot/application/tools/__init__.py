from .base import BaseTool
from .docs_tools import (
    GetApiArticlesByIdsTool,
    GetApiArticlesListTool,
    GetApiEndpointsDataTool,
    GetApiEndpointsListTool,
    GetArticlesByIdsTool,
    GetArticlesListTool,
    build_docs_tool_registry,
)
from .registry import ToolRegistry

__all__ = [
    "BaseTool",
    "ToolRegistry",
    "GetArticlesListTool",
    "GetArticlesByIdsTool",
    "GetApiEndpointsListTool",
    "GetApiEndpointsDataTool",
    "GetApiArticlesListTool",
    "GetApiArticlesByIdsTool",
    "build_docs_tool_registry",
]
