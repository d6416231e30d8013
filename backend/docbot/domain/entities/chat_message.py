"""Domain entities for streamed, function-calling chat conversations."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class ChatMessage:
    """A single message in a chat conversation.

    For function results, set role="function", name to the function that
    produced the result, and content to the JSON-encoded result.
    """

    role: str  # "system" | "user" | "assistant" | "function"
    content: str
    name: str | None = None  # Required when role == "function"


@dataclass(frozen=True)
class FunctionCallDelta:
    """A partial function call carried by one stream chunk."""

    name: str | None = None
    arguments: str | None = None


@dataclass(frozen=True)
class FunctionCall:
    """Function call accumulated across the chunks of one turn."""

    name: str = ""
    arguments: str = ""  # JSON-encoded arguments string

    @property
    def is_empty(self) -> bool:
        return not self.name

    def extend(self, delta: FunctionCallDelta) -> "FunctionCall":
        """Return a new call with the delta's fragments appended."""
        return FunctionCall(
            name=self.name + (delta.name or ""),
            arguments=self.arguments + (delta.arguments or ""),
        )


@dataclass(frozen=True)
class StreamChunk:
    """One parsed chunk of a streaming chat completion."""

    content: str | None = None
    function_call: FunctionCallDelta | None = None
    finish_reason: str | None = None  # "stop" | "function_call" | "length" | ...


@dataclass(frozen=True)
class ContentFragment:
    """Driver event — a piece of assistant text to relay immediately."""

    text: str


@dataclass(frozen=True)
class TurnEnd:
    """Driver event — the turn is over, possibly with a pending function call."""

    function_call: FunctionCall
    finish_reason: str | None = None


class LoopState(str, Enum):
    """States of the conversation loop."""

    STREAMING = "streaming"
    DISPATCHING = "dispatching"
    DONE = "done"
