from .chat_provider import ChatProvider
from .docs_repository import DocsRepository

__all__ = [
    "ChatProvider",
    "DocsRepository",
]
