"""DynamoDB chat store for per-chat agent state.

Table Design (Single-Table):
    PK: CHAT#{conversation_id}
    SK: META

    Attributes written here:
    - mode: current ChatMode value
    - is_complete: completion flag
    - updated_at: ISO8601 UTC
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from botocore.exceptions import BotoCoreError, ClientError

from ...core.exceptions import PersistenceError
from ...core.modes import ChatMode
from .base import DynamoDBClient

logger = logging.getLogger(__name__)

TABLE_NAME = "docforge_main"


def chat_key(conversation_id: str) -> Dict[str, str]:
    return {'PK': f"CHAT#{conversation_id}", 'SK': "META"}


@dataclass
class ChatStateItem:
    """Agent state stored on a chat."""
    conversation_id: str
    mode: ChatMode = ChatMode.DISCOVERY
    is_complete: bool = False
    updated_at: Optional[str] = None

    @classmethod
    def from_dynamo_item(cls, item: Dict[str, Any]) -> "ChatStateItem":
        """Create from DynamoDB item."""
        return cls(
            conversation_id=item['PK'].split("#", 1)[1],
            mode=ChatMode.parse(item.get('mode')) or ChatMode.DISCOVERY,
            is_complete=bool(item.get('is_complete', False)),
            updated_at=item.get('updated_at'),
        )


class DynamoDBChatStore:
    """
    Persists mode and completion state on existing chat records.

    Updates are conditional on the chat existing; a missing chat or any
    DynamoDB failure raises PersistenceError.

    Example:
        store = DynamoDBChatStore(DynamoDBClient())
        await store.update_chat_mode("chat-123", ChatMode.BUILD)
    """

    def __init__(self, client: DynamoDBClient, table_name: str = TABLE_NAME):
        self._client = client
        self._table_name = table_name

    async def update_chat_mode(self, conversation_id: str, mode: ChatMode) -> None:
        """Persist the chat's current mode."""
        await self._update(conversation_id, "mode", mode.value)
        logger.debug(f"Persisted mode {mode.value} for chat {conversation_id}")

    async def update_chat_completion(self, conversation_id: str, complete: bool) -> None:
        """Persist the chat's completion flag."""
        await self._update(conversation_id, "is_complete", complete)
        logger.debug(f"Persisted is_complete={complete} for chat {conversation_id}")

    async def get_chat_state(self, conversation_id: str) -> Optional[ChatStateItem]:
        """
        Load the stored agent state of a chat.

        Returns:
            ChatStateItem, or None if the chat does not exist.

        Raises:
            PersistenceError: If the read fails.
        """
        try:
            async with self._client.resource() as dynamodb:
                table = await dynamodb.Table(self._table_name)
                response = await table.get_item(Key=chat_key(conversation_id))
        except (ClientError, BotoCoreError) as e:
            raise PersistenceError(f"Failed to load chat {conversation_id}: {e}") from e

        item = response.get('Item')
        if not item:
            return None
        return ChatStateItem.from_dynamo_item(item)

    async def _update(self, conversation_id: str, attribute: str, value: Any) -> None:
        try:
            async with self._client.resource() as dynamodb:
                table = await dynamodb.Table(self._table_name)
                await table.update_item(
                    Key=chat_key(conversation_id),
                    UpdateExpression="SET #attr = :value, #updated_at = :updated_at",
                    ConditionExpression="attribute_exists(PK)",
                    ExpressionAttributeNames={
                        "#attr": attribute,
                        "#updated_at": "updated_at",
                    },
                    ExpressionAttributeValues={
                        ":value": value,
                        ":updated_at": datetime.now(timezone.utc).isoformat(),
                    },
                )
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                raise PersistenceError(f"Chat {conversation_id} not found") from e
            raise PersistenceError(
                f"Failed to update {attribute} for chat {conversation_id}: {e}"
            ) from e
        except BotoCoreError as e:
            raise PersistenceError(
                f"Failed to update {attribute} for chat {conversation_id}: {e}"
            ) from e
