"""Core runtime primitives for the HTTP reporter."""

from .errors import (
    ConfigurationError,
    EventHandlingError,
    ReportError,
    ResponseParseError,
    TransportError,
)
from .interfaces import IGNORE
from .models import (
    DeliveryAttempt,
    GenericEvent,
    HeartbeatMetaEvent,
    LifecycleMetaEvent,
    LifecyclePhase,
    QuickOperationEnvelope,
)
from .settings import HeartbeatConfig, MessageFormat, ReporterSettings, ReportTarget

__all__ = [
    "IGNORE",
    "ConfigurationError",
    "DeliveryAttempt",
    "EventHandlingError",
    "GenericEvent",
    "HeartbeatConfig",
    "HeartbeatMetaEvent",
    "LifecycleMetaEvent",
    "LifecyclePhase",
    "MessageFormat",
    "QuickOperationEnvelope",
    "ReportError",
    "ReportTarget",
    "ReporterSettings",
    "ResponseParseError",
    "TransportError",
]
