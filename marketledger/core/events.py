"""Listing event bus — synchronous delivery of ledger notifications.

Events are published only after a mutation has committed, so handlers
always observe the committed state.  Handler failures are logged and do not
prevent delivery to the remaining handlers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from marketledger.models.events import EventKind, LedgerEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[LedgerEvent], None]


class ListingEventBus:
    """Routes ledger events to subscribed handlers.

    Usage
    -----
    >>> bus = ListingEventBus()
    >>> seen = []
    >>> bus.subscribe(EventKind.LISTING_CREATED, seen.append)
    """

    def __init__(self) -> None:
        self._handlers: dict[EventKind, list[EventHandler]] = {
            kind: [] for kind in EventKind
        }

    def subscribe(self, kind: EventKind, handler: EventHandler) -> None:
        """Register *handler* for events of *kind*, in registration order."""
        if handler not in self._handlers[kind]:
            self._handlers[kind].append(handler)

    def unsubscribe(self, kind: EventKind, handler: EventHandler) -> None:
        try:
            self._handlers[kind].remove(handler)
        except ValueError:
            pass

    def publish(self, event: LedgerEvent) -> int:
        """Deliver *event* to every handler of its kind.

        Returns the number of handlers that completed without raising.
        """
        delivered = 0
        for handler in list(self._handlers[event.event_kind]):
            try:
                handler(event)
                delivered += 1
            except Exception:
                logger.exception(
                    "Handler %r failed for %s (listing %d).",
                    handler,
                    event.event_kind.value,
                    event.listing_id,
                )
        return delivered
