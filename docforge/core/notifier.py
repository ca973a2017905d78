"""Mutate-then-notify for agent state changes.

Stream events announce a change only after the change is durable. The
pure builders produce the ordered events; TransitionNotifier awaits the
persistence write and then emits them.
"""
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional

from .interfaces.services import IStreamWriter, StreamEvent
from .modes import ChatMode

logger = logging.getLogger(__name__)

MODE_CHANGED = "mode-changed"
CONTINUATION_REQUESTED = "continuation-requested"
COMPLETION_CHANGED = "completion-changed"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(timestamp: datetime) -> str:
    """ISO-8601 UTC string, naive datetimes are taken as UTC."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def build_mode_change_events(
    mode: ChatMode,
    reason: str,
    next_message: Optional[str],
    timestamp: datetime,
) -> List[StreamEvent]:
    """
    Build the events announcing a mode switch, in emission order.

    Args:
        mode: The mode switched to.
        reason: Why the model switched.
        next_message: Optional continuation. Empty string means none.
        timestamp: When the switch was persisted.

    Returns:
        [mode-changed] or [mode-changed, continuation-requested].
    """
    events = [
        StreamEvent(
            type=MODE_CHANGED,
            data={
                "mode": mode.value,
                "reason": reason,
                "timestamp": format_timestamp(timestamp),
            },
            transient=True,
        )
    ]
    if next_message:
        events.append(
            StreamEvent(
                type=CONTINUATION_REQUESTED,
                data={"message": next_message},
                transient=False,
            )
        )
    return events


def build_completion_events(
    complete: bool,
    reason: Optional[str],
    timestamp: datetime,
) -> List[StreamEvent]:
    """Build the event announcing a completion flag change."""
    return [
        StreamEvent(
            type=COMPLETION_CHANGED,
            data={
                "complete": complete,
                "reason": reason,
                "timestamp": format_timestamp(timestamp),
            },
            transient=True,
        )
    ]


class TransitionNotifier:
    """
    Persists a state change, then announces it on the stream.

    Ordering guarantees:
    - Nothing is emitted unless persist() succeeded.
    - A persist() failure propagates unchanged with zero events.
    - After a successful write, a failing stream writer is logged and the
      remaining events are still attempted. The stored value is the
      source of truth.

    Example:
        notifier = TransitionNotifier(stream_writer)
        await notifier.commit(
            lambda: store.update_chat_mode(conversation_id, ChatMode.BUILD),
            ChatMode.BUILD,
            reason="Enough context gathered",
            next_message="Drafting the strategy now",
        )
    """

    def __init__(
        self,
        stream_writer: Optional[IStreamWriter],
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._stream_writer = stream_writer
        self._clock = clock

    async def commit(
        self,
        persist: Callable[[], Awaitable[None]],
        mode: ChatMode,
        reason: str,
        next_message: Optional[str] = None,
    ) -> List[StreamEvent]:
        """
        Persist a mode switch, then emit mode-changed and continuation events.

        Args:
            persist: Zero-argument coroutine function performing the write.
            mode: The new mode.
            reason: Why the switch happened.
            next_message: Optional continuation message.

        Returns:
            The events that were built for emission.

        Raises:
            Whatever persist() raises, with nothing emitted.
        """
        await persist()
        events = build_mode_change_events(mode, reason, next_message, self._clock())
        await self._emit(events)
        return events

    async def commit_completion(
        self,
        persist: Callable[[], Awaitable[None]],
        complete: bool,
        reason: Optional[str] = None,
    ) -> List[StreamEvent]:
        """Persist a completion flag change, then emit completion-changed."""
        await persist()
        events = build_completion_events(complete, reason, self._clock())
        await self._emit(events)
        return events

    async def _emit(self, events: List[StreamEvent]) -> None:
        if self._stream_writer is None:
            logger.debug(f"No stream writer attached, dropping {len(events)} events")
            return

        for event in events:
            try:
                await self._stream_writer.write(event)
            except Exception as e:
                logger.warning(f"Failed to emit '{event.type}' event after persistence: {e}")
