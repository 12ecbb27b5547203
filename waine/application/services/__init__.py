"""Service orchestrators."""

from .chat_service import ChatService, PreparedChat
from .image_service import ImageService
from .retrieval_service import RetrievalService

__all__ = [
    "ChatService",
    "ImageService",
    "PreparedChat",
    "RetrievalService",
]
