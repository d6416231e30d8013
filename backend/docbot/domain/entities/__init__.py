from .article import ApiEndpoint, DocArticle
from .chat_message import (
    ChatMessage,
    ContentFragment,
    FunctionCall,
    FunctionCallDelta,
    LoopState,
    StreamChunk,
    TurnEnd,
)

__all__ = [
    "ApiEndpoint",
    "DocArticle",
    "ChatMessage",
    "ContentFragment",
    "FunctionCall",
    "FunctionCallDelta",
    "LoopState",
    "StreamChunk",
    "TurnEnd",
]
