"""Async DynamoDB access for the docforge adapters."""
import os
import logging
from typing import Any, Dict, Optional
from contextlib import asynccontextmanager

import aioboto3
from botocore.config import Config

from ...core.config import ChatStoreConfig

logger = logging.getLogger(__name__)


class DynamoDBClient:
    """
    Opens aioboto3 DynamoDB resources for the chat store.

    Connection settings come from environment variables so a local
    DynamoDB works out of the box:
        DYNAMODB_ENDPOINT   (default: http://localhost:8000)
        DYNAMODB_REGION     (default: us-east-1)
        DYNAMODB_ACCESS_KEY / DYNAMODB_SECRET_KEY (default: test)

    Retry and timeout settings come from the chat_store config section.
    """

    def __init__(
        self,
        settings: Optional[ChatStoreConfig] = None,
        endpoint_url: Optional[str] = None,
        region_name: Optional[str] = None,
    ):
        settings = settings or ChatStoreConfig()
        self._endpoint_url = endpoint_url or os.getenv("DYNAMODB_ENDPOINT", "http://localhost:8000")
        self._region_name = region_name or os.getenv("DYNAMODB_REGION", "us-east-1")
        self._session = aioboto3.Session(
            aws_access_key_id=os.getenv("DYNAMODB_ACCESS_KEY", "test"),
            aws_secret_access_key=os.getenv("DYNAMODB_SECRET_KEY", "test"),
            region_name=self._region_name,
        )
        self._botocore_config = Config(
            retries={"max_attempts": settings.max_attempts, "mode": "adaptive"},
            connect_timeout=settings.connect_timeout,
            read_timeout=settings.read_timeout,
        )

        logger.debug(f"DynamoDB client configured for {self._endpoint_url}")

    @property
    def connection_kwargs(self) -> Dict[str, Any]:
        return {"endpoint_url": self._endpoint_url, "config": self._botocore_config}

    @asynccontextmanager
    async def resource(self):
        """Yield a DynamoDB service resource for table operations."""
        async with self._session.resource("dynamodb", **self.connection_kwargs) as dynamodb:
            yield dynamodb

    def __repr__(self) -> str:
        return f"DynamoDBClient(endpoint={self._endpoint_url}, region={self._region_name})"
