"""Toast-style notifications raised by the report controller."""

from __future__ import annotations

import asyncio
from collections import defaultdict, deque
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4


class NotificationVariant(str, Enum):
    """Visual treatment requested for a notification."""

    default = "default"
    destructive = "destructive"


@dataclass(frozen=True)
class Notification:
    """Non-blocking message shown to the user."""

    notification_id: str
    draft_id: str
    title: str
    description: str
    variant: NotificationVariant
    timestamp: datetime

    @classmethod
    def create(
        cls,
        *,
        draft_id: str,
        title: str,
        description: str,
        variant: NotificationVariant = NotificationVariant.default,
    ) -> Notification:
        return cls(
            notification_id=uuid4().hex,
            draft_id=draft_id,
            title=title,
            description=description,
            variant=variant,
            timestamp=datetime.now(UTC),
        )


HISTORY_LIMIT = 50


class NotificationBroker:
    """In-memory broker keeping recent per-draft history and live subscribers."""

    def __init__(self, *, history_limit: int = HISTORY_LIMIT) -> None:
        self._history: defaultdict[str, deque[Notification]] = defaultdict(
            lambda: deque(maxlen=history_limit)
        )
        self._subscribers: defaultdict[str, list[asyncio.Queue[Notification]]] = defaultdict(
            list
        )

    def publish(self, notification: Notification) -> None:
        """Publish a notification to subscribers and store in history."""
        self._history[notification.draft_id].append(notification)
        for queue in list(self._subscribers.get(notification.draft_id, [])):
            queue.put_nowait(notification)

    def history(self, draft_id: str) -> list[Notification]:
        """Return historical notifications for a draft."""
        return list(self._history.get(draft_id, []))

    def subscribe(self, draft_id: str) -> asyncio.Queue[Notification]:
        """Subscribe to future notifications for a draft."""
        queue: asyncio.Queue[Notification] = asyncio.Queue()
        self._subscribers[draft_id].append(queue)
        return queue

    def unsubscribe(self, draft_id: str, queue: asyncio.Queue[Notification]) -> None:
        """Remove a subscriber queue."""
        if queue in self._subscribers.get(draft_id, []):
            self._subscribers[draft_id].remove(queue)

    def discard(self, draft_id: str) -> None:
        """Forget history and subscribers of a closed draft."""
        self._history.pop(draft_id, None)
        self._subscribers.pop(draft_id, None)
