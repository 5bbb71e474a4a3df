from __future__ import annotations

import json

import pytest
from pydantic import BaseModel

from cqreport.core.interfaces import IGNORE
from cqreport.core.models import GenericEvent, LifecycleMetaEvent, LifecyclePhase
from cqreport.core.serialization import JsonEventSerializer, escape_cq, render_message
from cqreport.core.settings import MessageFormat


SEGMENTS = [
    {"type": "text", "data": {"text": "a&b [x] , y"}},
    {"type": "at", "data": {"qq": 10001}},
    {"type": "image", "data": {"file": "1,2.jpg", "flash": True, "url": None}},
]


def test_escape_text_and_params():
    assert escape_cq("[a]&b,c") == "&#91;a&#93;&amp;b,c"
    assert escape_cq("[a]&b,c", in_param=True) == "&#91;a&#93;&amp;b&#44;c"


def test_render_message():
    assert render_message(SEGMENTS) == "a&amp;b &#91;x&#93; , y[CQ:at,qq=10001][CQ:image,file=1&#44;2.jpg,flash=true]"


def test_string_format_renders_segments():
    serializer = JsonEventSerializer()
    body = serializer.to_canonical_json({"post_type": "message", "message": SEGMENTS}, MessageFormat.STRING)

    payload = json.loads(body)
    assert payload["message"] == render_message(SEGMENTS)
    assert payload["raw_message"] == payload["message"]


def test_string_format_keeps_existing_raw_message():
    serializer = JsonEventSerializer()
    event = {"message": [{"type": "text", "data": {"text": "hi"}}], "raw_message": "hi!"}

    payload = json.loads(serializer.to_canonical_json(event, MessageFormat.STRING))

    assert payload["raw_message"] == "hi!"


def test_array_format_keeps_segments():
    serializer = JsonEventSerializer()
    body = serializer.to_canonical_json(GenericEvent(payload={"message": SEGMENTS}), MessageFormat.ARRAY)

    assert json.loads(body) == {"message": SEGMENTS}


def test_body_is_compact_and_not_ascii_escaped():
    body = JsonEventSerializer().to_canonical_json({"text": "你好", "n": 1}, MessageFormat.ARRAY)
    assert body == '{"text":"你好","n":1}'


def test_pydantic_events_are_dumped():
    class Notice(BaseModel):
        post_type: str = "notice"
        user_id: int

    body = JsonEventSerializer().to_canonical_json(Notice(user_id=3), MessageFormat.STRING)
    assert json.loads(body) == {"post_type": "notice", "user_id": 3}


def test_outbound_events_use_their_own_json():
    event = LifecycleMetaEvent(self_id=1, time=100, sub_type=LifecyclePhase.ENABLE)
    body = JsonEventSerializer().to_canonical_json(event, MessageFormat.STRING)

    assert body == '{"time":100,"self_id":1,"post_type":"meta_event","meta_event_type":"lifecycle","sub_type":"enable"}'


@pytest.mark.parametrize("event", [None, {"post_type": "ignore"}])
def test_ignored_events(event):
    assert JsonEventSerializer().to_canonical_json(event, MessageFormat.STRING) is IGNORE


def test_unsupported_event_type():
    with pytest.raises(TypeError):
        JsonEventSerializer().to_canonical_json(42, MessageFormat.STRING)


def test_source_event_is_not_mutated():
    event = {"message": [{"type": "text", "data": {"text": "hi"}}]}
    JsonEventSerializer().to_canonical_json(event, MessageFormat.STRING)
    assert isinstance(event["message"], list)
    assert "raw_message" not in event
