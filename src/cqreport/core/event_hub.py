"""In-process event source with synchronous fan-out."""

from __future__ import annotations

from typing import Any, List

from cqreport.core.interfaces import EventHandler
from cqreport.utils.logging import get_logger


class HubSubscription:
    __slots__ = ("_hub", "handler", "active")

    def __init__(self, hub: "EventHub", handler: EventHandler) -> None:
        self._hub = hub
        self.handler = handler
        self.active = True

    def complete(self) -> None:
        if not self.active:
            return
        self.active = False
        self._hub._discard(self)


class EventHub:
    """Pub/sub hub whose handlers run inline on publish.

    Handlers must return quickly; long work belongs in a task spawned by
    the handler itself.
    """

    def __init__(self) -> None:
        self._subscriptions: List[HubSubscription] = []
        self._closed = False
        self.logger = get_logger("cqreport.EventHub")

    def subscribe_always(self, handler: EventHandler) -> HubSubscription:
        if self._closed:
            raise RuntimeError("EventHub is closed")
        subscription = HubSubscription(self, handler)
        self._subscriptions.append(subscription)
        return subscription

    def publish(self, event: Any) -> int:
        """Deliver ``event`` to every live subscriber; return how many saw it."""
        if self._closed:
            raise RuntimeError("EventHub is closed")

        delivered = 0
        for subscription in list(self._subscriptions):
            # may have been completed by an earlier handler in this loop
            if not subscription.active:
                continue
            try:
                subscription.handler(event)
            except Exception as exc:
                self.logger.exception("Event handler failed: %s", exc)
            delivered += 1
        return delivered

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def close(self) -> None:
        self._closed = True
        for subscription in list(self._subscriptions):
            subscription.complete()

    def _discard(self, subscription: HubSubscription) -> None:
        try:
            self._subscriptions.remove(subscription)
        except ValueError:
            pass
