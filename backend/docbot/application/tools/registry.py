"""Tool registry — name-based dispatch over the fixed set of chat functions."""

import logging
from typing import Any

from docbot.application.tools.base import BaseTool

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Registry of chat functions, keyed by name."""

    def __init__(self, tools: list[BaseTool] | None = None):
        self._tools: dict[str, BaseTool] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: BaseTool) -> None:
        """
        Register a tool under its name.

        Raises:
            ValueError: If a tool with the same name is already registered
        """
        if tool.name in self._tools:
            raise ValueError(f"Tool already registered: {tool.name}")
        self._tools[tool.name] = tool
        logger.debug("Registered tool: %s", tool.name)

    def resolve(self, name: str) -> BaseTool | None:
        """Get a tool by name, or None if it is not registered."""
        return self._tools.get(name)

    def function_schemas(self) -> list[dict[str, Any]]:
        """All function descriptors, in registration order."""
        return [tool.to_function_schema() for tool in self._tools.values()]

    @property
    def tool_names(self) -> list[str]:
        return list(self._tools.keys())

    def __len__(self) -> int:
        return len(self._tools)
