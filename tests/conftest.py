from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from cqreport.services.http_client import DeliveryClient


class RecordingEndpoint:
    """Report endpoint double that records every request it receives."""

    def __init__(self, responder: Optional[Callable[[httpx.Request], httpx.Response]] = None) -> None:
        self.requests: List[httpx.Request] = []
        self._responder = responder or (lambda request: httpx.Response(204))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responder(request)

    def client(self) -> DeliveryClient:
        return DeliveryClient(transport=httpx.MockTransport(self))

    @property
    def bodies(self) -> List[Dict[str, Any]]:
        return [json.loads(request.content) for request in self.requests]

    def of_kind(self, meta_event_type: str) -> List[Dict[str, Any]]:
        return [body for body in self.bodies if body.get("meta_event_type") == meta_event_type]


class RecordingApi:
    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []

    async def handle_quick_operation(self, params: Dict[str, Any]) -> None:
        self.calls.append(params)


@pytest.fixture
def endpoint() -> RecordingEndpoint:
    return RecordingEndpoint()


@pytest.fixture
def api() -> RecordingApi:
    return RecordingApi()


@pytest.fixture
def make_endpoint() -> Callable[..., RecordingEndpoint]:
    return RecordingEndpoint
