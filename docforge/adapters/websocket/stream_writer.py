"""WebSocket stream writer for agent events."""
import logging
from collections import deque
from typing import Any, Deque, Dict, List, Optional, Protocol

from ...core.interfaces.services import StreamEvent

logger = logging.getLogger(__name__)


class JsonWebSocket(Protocol):
    """The part of a WebSocket connection the writer needs."""

    async def send_json(self, data: Any) -> None:
        ...


class WebSocketStreamWriter:
    """
    Writes StreamEvents to a client WebSocket.

    One writer serves one conversation run. Non-transient events (e.g.
    continuation-requested) are kept, up to history_limit, so they
    can be replayed to a client that reconnects mid-run. Transient events
    are UI signals and are not kept.

    Example:
        writer = WebSocketStreamWriter(websocket, conversation_id="chat-123")
        await writer.write(event)

        # after reconnect
        writer.attach(new_websocket)
        await writer.replay()
    """

    def __init__(
        self,
        websocket: Optional[JsonWebSocket] = None,
        conversation_id: Optional[str] = None,
        history_limit: int = 100,
    ):
        if history_limit < 1:
            raise ValueError("history_limit must be at least 1")
        self._websocket = websocket
        self._conversation_id = conversation_id
        # Oldest events drop first
        self._history: Deque[StreamEvent] = deque(maxlen=history_limit)

    @property
    def history(self) -> List[StreamEvent]:
        """Non-transient events written so far."""
        return list(self._history)

    def attach(self, websocket: JsonWebSocket) -> None:
        """Attach a (new) client connection."""
        self._websocket = websocket

    def detach(self) -> None:
        self._websocket = None

    def _build_message(self, event: StreamEvent) -> Dict[str, Any]:
        msg = event.to_dict()
        if self._conversation_id:
            msg["conversation_id"] = self._conversation_id
        return msg

    async def write(self, event: StreamEvent) -> None:
        """
        Send one event.

        Non-transient events are recorded before sending, so they are
        replayable even when no client is attached.
        """
        if not event.transient:
            self._history.append(event)

        if self._websocket is None:
            logger.debug(f"No client attached, '{event.type}' not sent")
            return

        await self._websocket.send_json(self._build_message(event))
        logger.debug(f"Sent '{event.type}' event")

    async def replay(self) -> int:
        """
        Resend recorded non-transient events to the attached client.

        Returns:
            Number of events sent.
        """
        if self._websocket is None:
            return 0

        for event in self._history:
            await self._websocket.send_json(self._build_message(event))

        logger.info(f"Replayed {len(self._history)} events")
        return len(self._history)
