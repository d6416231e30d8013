"""Base class for chat functions the model can call."""

from abc import ABC, abstractmethod
from typing import Any


class BaseTool(ABC):
    """
    Abstract base class for chat functions.

    Each tool defines:
    - name: Unique identifier the model calls it by
    - description: Tells the model when to use it
    - parameters: JSON Schema for the call arguments
    - invoke: Synchronous lookup returning a JSON-serializable result
    """

    name: str
    description: str
    parameters: dict[str, Any]

    @abstractmethod
    def invoke(self, arguments: dict[str, Any]) -> Any:
        """
        Run the tool with parsed call arguments.

        Args:
            arguments: Arguments decoded from the model's function call

        Returns:
            Tool result (will be serialized to JSON for the model)
        """
        pass

    def to_function_schema(self) -> dict[str, Any]:
        """
        Convert tool to an OpenAI function descriptor.

        Returns:
            Dict in OpenAI ``functions`` format
        """
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
        }

    def __repr__(self) -> str:
        return f"<Tool: {self.name}>"
