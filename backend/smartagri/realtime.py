"""In-process change feed for row inserts.

Services publish after a successful commit; the SSE route and any other
listener subscribe per (table, event). Delivery is at-least-once with no
ordering guarantee across rows.
"""

import asyncio
import inspect
import itertools
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

INSERT = "INSERT"

Handler = Callable[[dict[str, Any]], Awaitable[None] | None]


@dataclass(frozen=True)
class Subscription:
    """Handle returned by subscribe(), passed back to unsubscribe()."""

    id: int
    table: str
    event: str


class ChangeFeed:
    """Publish/subscribe channel keyed by table name and event kind."""

    def __init__(self) -> None:
        self._handlers: dict[Subscription, Handler] = {}
        self._ids = itertools.count(1)

    def subscribe(self, table: str, event: str, handler: Handler) -> Subscription:
        subscription = Subscription(id=next(self._ids), table=table, event=event.upper())
        self._handlers[subscription] = handler
        logger.debug(f"Subscribed #{subscription.id} to {table}:{subscription.event}")
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove a subscription. Unknown handles are ignored."""
        self._handlers.pop(subscription, None)

    def subscriber_count(self, table: str | None = None) -> int:
        if table is None:
            return len(self._handlers)
        return sum(1 for s in self._handlers if s.table == table)

    async def publish(self, table: str, event: str, record: dict[str, Any]) -> int:
        """Deliver record to every matching handler.

        A failing handler is logged and skipped. Returns the number of handlers reached.
        """
        event = event.upper()
        payload = {"table": table, "event": event, "record": record}
        delivered = 0

        # Copy so handlers may unsubscribe while being called
        for subscription, handler in list(self._handlers.items()):
            if subscription.table != table or subscription.event != event:
                continue
            try:
                result = handler(payload)
                if inspect.isawaitable(result):
                    await result
                delivered += 1
            except Exception:
                logger.exception(f"Change handler #{subscription.id} failed for {table}:{event}")

        return delivered

    async def publish_many(self, table: str, event: str, records: list[dict[str, Any]]) -> None:
        for record in records:
            await self.publish(table, event, record)


_feed = ChangeFeed()


def get_feed() -> ChangeFeed:
    """Get the process-wide change feed."""
    return _feed


def queue_handler(queue: asyncio.Queue) -> Handler:
    """Build a handler that forwards payloads into an asyncio queue."""

    def _enqueue(payload: dict[str, Any]) -> None:
        queue.put_nowait(payload)

    return _enqueue
