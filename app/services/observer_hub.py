"""
In-process fan-out of relay events to live observers (dashboards, logs).

Publishing never fails: a subscriber that raises is logged and skipped.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Union

logger = logging.getLogger(__name__)

MESSAGE_RECEIVED = "message.received"
MESSAGE_SENT = "message.sent"

Subscriber = Callable[[str, Dict[str, Any]], Union[None, Awaitable[None]]]


class ObserverHub:
    def __init__(self) -> None:
        self._subscribers: List[Subscriber] = []

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Register a subscriber; returns a function that unregisters it."""
        self._subscribers.append(subscriber)

        def unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    async def publish(self, event: str, payload: Dict[str, Any]) -> None:
        for subscriber in list(self._subscribers):
            try:
                result = subscriber(event, payload)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Observer failed on %s", event)
