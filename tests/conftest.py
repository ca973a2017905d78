"""Shared test fixtures for docforge tests."""
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest

from docforge.core.container import Container
from docforge.core.context import (
    ArtifactType,
    Capability,
    ContextBundle,
    Domain,
    ExecutionContext,
    Objective,
    Workspace,
)
from docforge.core.interfaces.services import IChatStore, StreamEvent
from docforge.core.modes import ChatMode


# =============================================================================
# Mock WebSocket
# =============================================================================

class MockWebSocket:
    """Mock WebSocket for testing."""

    def __init__(self):
        self.sent_messages: List[Dict[str, Any]] = []

    async def send_json(self, data: Dict[str, Any]):
        self.sent_messages.append(data)


# =============================================================================
# Mock Stream Writer
# =============================================================================

class MockStreamWriter:
    """Records written events. Can be told to fail on given event types."""

    def __init__(self, fail_on: Optional[List[str]] = None):
        self.events: List[StreamEvent] = []
        self.attempts: List[str] = []
        self._fail_on = set(fail_on or [])

    async def write(self, event: StreamEvent) -> None:
        self.attempts.append(event.type)
        if event.type in self._fail_on:
            raise ConnectionError(f"stream closed while writing {event.type}")
        self.events.append(event)

    @property
    def types(self) -> List[str]:
        return [event.type for event in self.events]


# =============================================================================
# Mock Chat Store
# =============================================================================

class MockChatStore:
    """Records persistence calls. Raises ``error`` when set."""

    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.mode_updates: List[tuple] = []
        self.completion_updates: List[tuple] = []

    async def update_chat_mode(self, conversation_id: str, mode: ChatMode) -> None:
        if self.error:
            raise self.error
        self.mode_updates.append((conversation_id, mode))

    async def update_chat_completion(self, conversation_id: str, complete: bool) -> None:
        if self.error:
            raise self.error
        self.completion_updates.append((conversation_id, complete))


# =============================================================================
# Mock Capability Source
# =============================================================================

class MockCapabilitySource:
    """Capability source returning fixed capabilities, or raising."""

    def __init__(self, capabilities: Optional[List[Capability]] = None, error: Optional[Exception] = None):
        self._capabilities = capabilities or []
        self.error = error
        self.calls: List[str] = []

    def list_capabilities(self, domain_id: str) -> List[Capability]:
        self.calls.append(domain_id)
        if self.error:
            raise self.error
        return list(self._capabilities)


class FixedClock:
    """Deterministic clock advancing one second per call."""

    def __init__(self, start: Optional[datetime] = None):
        self._now = start or datetime(2025, 3, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        now = self._now
        self._now = now + timedelta(seconds=1)
        return now


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def mock_websocket():
    return MockWebSocket()


@pytest.fixture
def stream_writer():
    return MockStreamWriter()


@pytest.fixture
def chat_store():
    return MockChatStore()


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def container(chat_store):
    """Container with the mock chat store registered."""
    container = Container()
    container.register(IChatStore, chat_store)
    return container


@pytest.fixture
def execution_context(stream_writer):
    return ExecutionContext(
        conversation_id="chat-123",
        user_id="user-1",
        stream_writer=stream_writer,
    )


@pytest.fixture
def sales_domain():
    return Domain(
        id="sales",
        label="Sales",
        system_prompt="You are a sales strategy expert.",
    )


@pytest.fixture
def strategy_artifact():
    return ArtifactType(
        id="sales-strategy",
        name="Sales Strategy",
        category="objective",
        instruction_prompt="Write a sales strategy document.",
        template="# Strategy\n## Goals\n## Plan",
    )


@pytest.fixture
def capabilities():
    return [
        Capability(
            name="Sales Strategy",
            description="Strategic plan for a deal.",
            trigger_keywords=["strategy", "deal plan", "account plan", "win plan"],
            requires_source_documents=False,
            use_when="The user wants a deal plan.",
        ),
        Capability(
            name="Sales Call Summary",
            description="Summary of a call transcript.",
            trigger_keywords=["recap"],
            requires_source_documents=True,
        ),
    ]


@pytest.fixture
def bundle(sales_domain):
    """Minimal bundle: domain only, no artifact, workspace or objective."""
    return ContextBundle(current_date=date(2025, 3, 1), domain=sales_domain)


@pytest.fixture
def full_bundle(sales_domain, strategy_artifact, capabilities):
    return ContextBundle(
        current_date=date(2025, 3, 1),
        domain=sales_domain,
        artifact_type=strategy_artifact,
        workspace=Workspace(id="ws-1", name="Acme", context="Team prefers bullet points."),
        objective=Objective(
            id="obj-1",
            title="Close Q2 deal",
            context="Buyer is price sensitive.",
            goal="Win the Q2 renewal",
        ),
        user_name="Jordan",
        capability_source=MockCapabilitySource(capabilities),
    )
