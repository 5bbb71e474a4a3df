"""Interfaces the reporter expects from its host runtime."""

from __future__ import annotations

from typing import Any, Callable, Dict, Protocol, Union

from .settings import MessageFormat


class _Ignore:
    """Marker returned by serializers for events that must not be reported."""

    _instance = None

    def __new__(cls) -> "_Ignore":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "IGNORE"

    def __bool__(self) -> bool:
        return False


IGNORE = _Ignore()

EventHandler = Callable[[Any], None]
SerializedEvent = Union[str, _Ignore]


class Subscription(Protocol):
    def complete(self) -> None:
        """Stop delivering events to the subscribed handler."""
        ...


class EventSource(Protocol):
    """Stream of bot events owned by the host runtime."""

    def subscribe_always(self, handler: EventHandler) -> Subscription:
        ...


class EventSerializer(Protocol):
    def to_canonical_json(self, event: Any, message_format: MessageFormat) -> SerializedEvent:
        ...


class EventFilter(Protocol):
    def eval(self, serialized_event: str) -> bool:
        """Return True when the event may be delivered."""
        ...


class QuickOperationHandler(Protocol):
    """Host API that executes quick operations returned by the endpoint."""

    async def handle_quick_operation(self, params: Dict[str, Any]) -> None:
        ...


class BotSession(Protocol):
    @property
    def bot_id(self) -> int:
        ...

    @property
    def is_online(self) -> bool:
        ...
