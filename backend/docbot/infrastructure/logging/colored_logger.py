"""Colored conversation logger — ANSI-colored console logging for the chat loop.

Provides a ConversationLogger with color-coded output per loop stage,
making it easy to follow turns and function calls in the terminal.

Color scheme:
    🔵 Blue    — Streaming turn
    🟣 Magenta — Function call requested
    🟡 Yellow  — Tool invocation
    🟢 Green   — Conversation complete
    🔴 Red     — Errors
    ⚪ Gray    — Details / Stats
"""

import logging
import time
from contextlib import contextmanager
from typing import Any


# ── ANSI Color Codes ─────────────────────────────────────────────────

class _Colors:
    """ANSI escape codes for terminal colors."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    GRAY = "\033[90m"


# ── Conversation Stage Definitions ───────────────────────────────────

class ChatStage:
    """Predefined conversation loop stages with colors and icons."""

    TURN = ("TURN", _Colors.BLUE, "💬")
    FUNCTION_CALL = ("FUNCTION_CALL", _Colors.MAGENTA, "🤖")
    TOOL = ("TOOL", _Colors.YELLOW, "🔧")
    COMPLETE = ("COMPLETE", _Colors.GREEN, "✅")
    ERROR = ("ERROR", _Colors.RED, "❌")


def _format_kwargs(kwargs: dict[str, Any], color: str) -> str:
    details = " | ".join(f"{k}={v}" for k, v in kwargs.items())
    return f" {color}({details}){_Colors.RESET}"


# ── ConversationLogger ───────────────────────────────────────────────

class ConversationLogger:
    """Color-coded logger for the function-calling chat loop.

    Usage:
        log = ConversationLogger("ChatCompletionService")
        log.step_start(ChatStage.TURN, "Streaming turn 1", messages=3)
        log.detail("Function call accumulated", name="get_moralis_articles_list")
        with log.timed_step(ChatStage.TOOL, "Invoking get_moralis_articles_list"):
            result = tool.invoke(arguments)
    """

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(component_name)

    def step_start(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        """Log the start of a loop step with its stage color."""
        label, color, icon = stage
        formatted = (
            f"{color}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET} "
            f"{color}{message}{_Colors.RESET}"
        )
        if kwargs:
            formatted += _format_kwargs(kwargs, _Colors.GRAY)
        self._logger.info(formatted)

    def step_complete(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        """Log the successful completion of a loop step."""
        label, color, icon = stage
        formatted = (
            f"{color}{icon} [{label}]{_Colors.RESET} "
            f"{_Colors.GREEN}✓ {message}{_Colors.RESET}"
        )
        if kwargs:
            formatted += _format_kwargs(kwargs, _Colors.GRAY)
        self._logger.info(formatted)

    def step_error(self, stage: tuple[str, str, str], message: str, error: Exception | None = None) -> None:
        """Log a loop step error in red."""
        label, _, _ = stage
        formatted = (
            f"{_Colors.RED}{_Colors.BOLD}❌ [{label}]{_Colors.RESET} "
            f"{_Colors.RED}{message}{_Colors.RESET}"
        )
        if error:
            formatted += f" {_Colors.DIM}→ {type(error).__name__}: {error}{_Colors.RESET}"
        self._logger.error(formatted)

    def detail(self, message: str, **kwargs: Any) -> None:
        """Log additional detail (gray/dimmed)."""
        formatted = f"   {_Colors.GRAY}├─ {message}{_Colors.RESET}"
        if kwargs:
            formatted += _format_kwargs(kwargs, _Colors.DIM)
        self._logger.debug(formatted)

    @contextmanager
    def timed_step(self, stage: tuple[str, str, str], message: str, **kwargs: Any):
        """Context manager that logs start/end with elapsed time."""
        self.step_start(stage, message, **kwargs)
        start = time.perf_counter()
        try:
            yield
        except Exception as e:
            elapsed = time.perf_counter() - start
            self.step_error(stage, f"{message} — failed after {elapsed:.2f}s", error=e)
            raise
        else:
            elapsed = time.perf_counter() - start
            self.step_complete(stage, f"{message} — {elapsed:.3f}s")
