from __future__ import annotations

import asyncio
import io

import pytest

from cqreport import cli
from cqreport.core.event_hub import EventHub
from cqreport.core.settings import ReporterSettings


STDIN = '{"post_type":"message","message":"hi"}\n\nnot json\n[1]\n{"post_type":"notice"}\n'


@pytest.mark.asyncio
async def test_pump_stdin_publishes_json_objects(monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO(STDIN))
    hub = EventHub()
    seen = []
    hub.subscribe_always(seen.append)

    assert await cli._pump_stdin(hub) == 2
    assert [event.payload["post_type"] for event in seen] == ["message", "notice"]


@pytest.mark.asyncio
async def test_run_without_post_url_exits_on_eof(monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO(STDIN))

    await cli.run(ReporterSettings(), bot_id=10001)


def test_main_parses_arguments(monkeypatch, tmp_path):
    config = tmp_path / "reporter.yml"
    config.write_text("http:\n  post_url: ''\n")
    calls = []

    async def fake_run(settings, bot_id):
        calls.append((settings, bot_id))

    monkeypatch.setattr(cli, "run", fake_run)
    monkeypatch.delenv("CQREPORT_POST_URL", raising=False)
    monkeypatch.delenv("CQREPORT_SECRET", raising=False)

    cli.main(["--config", str(config), "--bot-id", "42"])

    ((settings, bot_id),) = calls
    assert bot_id == 42
    assert not settings.http.enabled


@pytest.mark.asyncio
async def test_run_with_heartbeats_closes_promptly_on_eof(monkeypatch, make_endpoint):
    endpoint = make_endpoint()
    monkeypatch.setattr("sys.stdin", io.StringIO('{"post_type":"notice"}\n'))
    monkeypatch.setattr("cqreport.core.reporter.DeliveryClient", lambda **kwargs: endpoint.client())
    settings = ReporterSettings.model_validate(
        {
            "http": {"post_url": "http://x/report", "timeout_seconds": 2},
            "heartbeat": {"enabled": True, "interval_millis": 500},
        }
    )

    loop = asyncio.get_running_loop()
    started = loop.time()
    await cli.run(settings, bot_id=1)
    elapsed = loop.time() - started

    assert elapsed < 1.0
    assert endpoint.bodies[-1]["sub_type"] == "disable"
    assert {"post_type": "notice"} in endpoint.bodies
    assert endpoint.of_kind("heartbeat")
