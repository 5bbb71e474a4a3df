"""Payload models for reported events."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field


def current_time_seconds() -> int:
    return int(time.time())


def dump_json(data: Any) -> str:
    """Serialize ``data`` to the compact JSON form used on the wire."""
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"))


class LifecyclePhase(str, Enum):
    ENABLE = "enable"
    DISABLE = "disable"


class OutboundEvent(BaseModel):
    """Base for events the reporter builds itself."""

    model_config = ConfigDict(frozen=True)

    time: int = Field(default_factory=current_time_seconds)
    self_id: int

    def to_json(self) -> str:
        return dump_json(self.model_dump(mode="json"))


class LifecycleMetaEvent(OutboundEvent):
    post_type: Literal["meta_event"] = "meta_event"
    meta_event_type: Literal["lifecycle"] = "lifecycle"
    sub_type: LifecyclePhase


class PluginStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    good: bool
    online: bool


class HeartbeatMetaEvent(OutboundEvent):
    post_type: Literal["meta_event"] = "meta_event"
    meta_event_type: Literal["heartbeat"] = "heartbeat"
    status: PluginStatus
    interval: int


class GenericEvent(BaseModel):
    """An already-shaped event coming from the host runtime."""

    model_config = ConfigDict(frozen=True)

    payload: Dict[str, Any]

    def to_json(self) -> str:
        return dump_json(self.payload)


@dataclass(frozen=True, slots=True)
class DeliveryAttempt:
    """A single POST of ``body`` to ``url`` on behalf of ``bot_id``."""

    url: str
    bot_id: int
    body: str
    secret: str = ""
    wants_quick_operation: bool = False

    def encoded(self) -> bytes:
        return self.body.encode("utf-8")


class QuickOperationEnvelope(BaseModel):
    """Parameters handed to the host quick-operation handler."""

    context: Dict[str, Any]
    operation: Dict[str, Any]

    @classmethod
    def build(cls, context: Mapping[str, Any], operation: Mapping[str, Any]) -> "QuickOperationEnvelope":
        return cls(context=dict(context), operation=dict(operation))

    def as_params(self) -> Dict[str, Dict[str, Any]]:
        return {"context": self.context, "operation": self.operation}
