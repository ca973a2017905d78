"""Tests for the DynamoDB chat store with a mocked aioboto3 resource."""
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from docforge.adapters.dynamodb import ChatStateItem, DynamoDBChatStore
from docforge.core.exceptions import PersistenceError
from docforge.core.modes import ChatMode


def client_error(code: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, "UpdateItem")


class FakeDynamoResource:
    def __init__(self, table):
        self._table = table
        self.table_names = []

    async def Table(self, name):
        self.table_names.append(name)
        return self._table


class FakeDynamoDBClient:
    def __init__(self, table):
        self.dynamodb = FakeDynamoResource(table)

    @asynccontextmanager
    async def resource(self):
        yield self.dynamodb


@pytest.fixture
def table():
    table = MagicMock()
    table.update_item = AsyncMock(return_value={})
    table.get_item = AsyncMock(return_value={})
    return table


@pytest.fixture
def client(table):
    return FakeDynamoDBClient(table)


@pytest.fixture
def store(client):
    return DynamoDBChatStore(client, table_name="test_table")


# =============================================================================
# Update Tests
# =============================================================================

async def test_update_chat_mode(store, client, table):
    await store.update_chat_mode("chat-123", ChatMode.BUILD)

    assert client.dynamodb.table_names == ["test_table"]
    kwargs = table.update_item.await_args.kwargs
    assert kwargs["Key"] == {"PK": "CHAT#chat-123", "SK": "META"}
    assert kwargs["ConditionExpression"] == "attribute_exists(PK)"
    assert kwargs["ExpressionAttributeNames"]["#attr"] == "mode"
    assert kwargs["ExpressionAttributeValues"][":value"] == "build"
    assert kwargs["ExpressionAttributeValues"][":updated_at"].endswith("+00:00")


async def test_update_chat_completion(store, table):
    await store.update_chat_completion("chat-123", True)

    kwargs = table.update_item.await_args.kwargs
    assert kwargs["ExpressionAttributeNames"]["#attr"] == "is_complete"
    assert kwargs["ExpressionAttributeValues"][":value"] is True


async def test_missing_chat_raises(store, table):
    table.update_item.side_effect = client_error("ConditionalCheckFailedException")

    with pytest.raises(PersistenceError, match="Chat chat-404 not found"):
        await store.update_chat_mode("chat-404", ChatMode.BUILD)


async def test_client_error_raises(store, table):
    table.update_item.side_effect = client_error("ProvisionedThroughputExceededException")

    with pytest.raises(PersistenceError) as exc_info:
        await store.update_chat_completion("chat-123", False)

    assert isinstance(exc_info.value.__cause__, ClientError)


async def test_connection_error_raises(store, table):
    table.update_item.side_effect = EndpointConnectionError(endpoint_url="http://localhost:8000")

    with pytest.raises(PersistenceError):
        await store.update_chat_mode("chat-123", ChatMode.DISCOVERY)


# =============================================================================
# Read Tests
# =============================================================================

async def test_get_chat_state(store, table):
    table.get_item.return_value = {"Item": {
        "PK": "CHAT#chat-123",
        "SK": "META",
        "mode": "build",
        "is_complete": True,
        "updated_at": "2025-03-01T12:00:00+00:00",
    }}

    state = await store.get_chat_state("chat-123")

    assert state == ChatStateItem(
        conversation_id="chat-123",
        mode=ChatMode.BUILD,
        is_complete=True,
        updated_at="2025-03-01T12:00:00+00:00",
    )


async def test_get_chat_state_defaults(store, table):
    table.get_item.return_value = {"Item": {"PK": "CHAT#chat-9", "SK": "META"}}

    state = await store.get_chat_state("chat-9")

    assert state.mode == ChatMode.DISCOVERY
    assert state.is_complete is False


async def test_get_missing_chat(store):
    assert await store.get_chat_state("chat-404") is None
