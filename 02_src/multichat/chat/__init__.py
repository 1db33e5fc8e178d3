"""Chat module."""

from .service import ChatNotFoundError, ChatService, IChatService

__all__ = ["ChatNotFoundError", "ChatService", "IChatService"]
