"""Conversation pre-processing filters applied before the chat loop starts."""

from docbot.domain.entities import ChatMessage


def remove_duplicate_messages(messages: list[ChatMessage]) -> list[ChatMessage]:
    """Drop every message whose content already appeared earlier.

    The key is ``content`` alone, so identical text sent under different
    roles collapses to its first occurrence. Order is preserved and the
    input list is left untouched.
    """
    seen: set[str] = set()
    unique: list[ChatMessage] = []
    for message in messages:
        if message.content in seen:
            continue
        seen.add(message.content)
        unique.append(message)
    return unique
