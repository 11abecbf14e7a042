"""Change Notifier - fire-and-forget fan-out of change events to observers.

Invariants:
    - notify() never raises: listener errors are logged and swallowed
    - Having no listener is not an error
    - Each subscription has a bounded queue; a full queue drops the event (logged)
    - Events carry the content URI of the address the write was issued against

Design Decisions:
    - asyncio.Queue per subscriber: SSE streams consume at their own pace
    - Callback listeners kept alongside queues for in-process observers and tests
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from simpledb.core.domain_types import Operation

logger = logging.getLogger(__name__)

Listener = Callable[["ChangeEvent"], None]


@dataclass(frozen=True)
class ChangeEvent:
    """An address whose underlying data changed."""
    uri: str
    operation: Operation
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "uri": self.uri,
            "operation": self.operation.value,
            "timestamp": self.timestamp.isoformat(),
        }


class Subscription:
    """Async iterator over the events published after it was opened."""

    def __init__(self, notifier: "ChangeNotifier", max_size: int):
        self._notifier = notifier
        self.queue: asyncio.Queue[ChangeEvent] = asyncio.Queue(maxsize=max_size)

    def __aiter__(self):
        return self

    async def __anext__(self) -> ChangeEvent:
        return await self.queue.get()

    def close(self) -> None:
        self._notifier.unsubscribe(self)


class ChangeNotifier:
    """Publishes ChangeEvents to callback listeners and queue subscriptions."""

    def __init__(self, queue_size: int = 100):
        self._queue_size = queue_size
        self._listeners: list[Listener] = []
        self._subscriptions: list[Subscription] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._listeners) + len(self._subscriptions)

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def subscribe(self) -> Subscription:
        subscription = Subscription(self, self._queue_size)
        self._subscriptions.append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    def notify(self, uri: str, operation: Operation) -> ChangeEvent:
        """Publish a change for uri. Never raises."""
        event = ChangeEvent(uri, operation)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.warning(
                    f"Change listener failed for {uri}: {e}",
                    extra={"address": uri, "operation": operation.value},
                )
        for subscription in list(self._subscriptions):
            try:
                subscription.queue.put_nowait(event)
            except asyncio.QueueFull:
                logger.warning(
                    f"Dropped change event for {uri}: subscriber queue full",
                    extra={"address": uri, "operation": operation.value},
                )
        return event
