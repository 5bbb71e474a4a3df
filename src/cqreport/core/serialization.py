"""Default canonical JSON serializer for host events."""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping

from pydantic import BaseModel

from .interfaces import IGNORE, SerializedEvent
from .models import GenericEvent, OutboundEvent, dump_json
from .settings import MessageFormat


_TEXT_ESCAPES = (("&", "&amp;"), ("[", "&#91;"), ("]", "&#93;"))
_PARAM_ESCAPES = _TEXT_ESCAPES + ((",", "&#44;"),)


def escape_cq(text: str, *, in_param: bool = False) -> str:
    for raw, escaped in _PARAM_ESCAPES if in_param else _TEXT_ESCAPES:
        text = text.replace(raw, escaped)
    return text


def _param_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def render_segment(segment: Mapping[str, Any]) -> str:
    """Render one message segment (``{"type": ..., "data": {...}}``) as CQ code."""
    seg_type = segment.get("type")
    data = segment.get("data") or {}
    if seg_type == "text":
        return escape_cq(str(data.get("text", "")))
    params = "".join(
        f",{key}={escape_cq(_param_value(value), in_param=True)}"
        for key, value in data.items()
        if value is not None
    )
    return f"[CQ:{seg_type}{params}]"


def render_message(segments: Iterable[Mapping[str, Any]]) -> str:
    return "".join(render_segment(segment) for segment in segments)


class JsonEventSerializer:
    """Serialize mappings and pydantic models to compact JSON.

    ``None`` and payloads with ``"post_type": "ignore"`` are not reported.
    With :attr:`MessageFormat.STRING` a segment list under ``message`` is
    rendered to CQ code and mirrored into ``raw_message`` when missing.
    """

    def to_canonical_json(self, event: Any, message_format: MessageFormat) -> SerializedEvent:
        if event is None:
            return IGNORE
        if isinstance(event, OutboundEvent):
            return event.to_json()
        payload = self._as_payload(event)
        if payload.get("post_type") == "ignore":
            return IGNORE
        if message_format is MessageFormat.STRING and isinstance(payload.get("message"), list):
            rendered = render_message(payload["message"])
            payload["message"] = rendered
            payload.setdefault("raw_message", rendered)
        return dump_json(payload)

    @staticmethod
    def _as_payload(event: Any) -> Dict[str, Any]:
        if isinstance(event, GenericEvent):
            return dict(event.payload)
        if isinstance(event, BaseModel):
            return event.model_dump(mode="json")
        if isinstance(event, Mapping):
            return dict(event)
        raise TypeError(f"Cannot serialize event of type {type(event).__name__}")
