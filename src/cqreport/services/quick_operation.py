"""Relay quick operations returned by the report endpoint to the host."""

from __future__ import annotations

import json
from typing import Any, Dict

from cqreport.core.errors import ResponseParseError
from cqreport.core.interfaces import QuickOperationHandler
from cqreport.core.models import QuickOperationEnvelope
from cqreport.utils.logging import get_logger


def _load_object(raw: str, what: str) -> Dict[str, Any]:
    try:
        value = json.loads(raw)
    except ValueError as exc:
        raise ResponseParseError(f"{what} is not valid JSON: {exc}") from exc
    if not isinstance(value, dict):
        raise ResponseParseError(f"{what} is not a JSON object")
    return value


def parse_quick_operation(sent_body: str, response_body: str) -> QuickOperationEnvelope:
    operation = _load_object(response_body, "report response")
    context = _load_object(sent_body, "reported event")
    return QuickOperationEnvelope.build(context=context, operation=operation)


class QuickOperationRelay:
    def __init__(self, handler: QuickOperationHandler) -> None:
        self._handler = handler
        self.logger = get_logger("cqreport.QuickOperationRelay")

    async def feedback(self, sent_body: str, response_body: str) -> bool:
        """Hand ``{context, operation}`` to the host; False if nothing was relayed."""
        if not response_body:
            return False
        try:
            envelope = parse_quick_operation(sent_body, response_body)
        except ResponseParseError as exc:
            self.logger.error("Failed to parse report response as JSON: %s", exc)
            return False
        await self._handler.handle_quick_operation(envelope.as_params())
        return True


class LoggingQuickOperationHandler:
    """Host stand-in that only logs the quick operations it receives."""

    def __init__(self) -> None:
        self.logger = get_logger("cqreport.QuickOperations")

    async def handle_quick_operation(self, params: Dict[str, Any]) -> None:
        self.logger.info("Quick operation %s for event %s", params.get("operation"), params.get("context"))
