from .chat_completion_service import ChatCompletionService
from .completion_stream_driver import CompletionStreamDriver
from .message_filters import remove_duplicate_messages

__all__ = [
    "ChatCompletionService",
    "CompletionStreamDriver",
    "remove_duplicate_messages",
]
