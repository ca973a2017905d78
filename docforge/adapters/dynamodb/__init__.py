"""DynamoDB adapters for docforge persistence."""
from .base import DynamoDBClient
from .chat_store import DynamoDBChatStore, ChatStateItem

__all__ = [
    "DynamoDBClient",
    "DynamoDBChatStore",
    "ChatStateItem",
]
