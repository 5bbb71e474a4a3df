"""CLI entrypoint: report JSON events read from stdin."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from cqreport.core.event_hub import EventHub
from cqreport.core.models import GenericEvent
from cqreport.core.reporter import Reporter
from cqreport.core.session import StaticBotSession
from cqreport.core.settings import ReporterSettings
from cqreport.services.quick_operation import LoggingQuickOperationHandler
from cqreport.utils.env import get_bool_env, get_str_env
from cqreport.utils.logging import get_logger, set_level


logger = get_logger("cqreport.cli")


def load_settings(path: Optional[Path]) -> ReporterSettings:
    settings = ReporterSettings.from_file(path) if path else ReporterSettings()
    data = settings.model_dump(mode="json")
    post_url = get_str_env("CQREPORT_POST_URL")
    if post_url:
        data["http"]["post_url"] = post_url
    secret = get_str_env("CQREPORT_SECRET")
    if secret:
        data["http"]["secret"] = secret
    return ReporterSettings.model_validate(data)


async def _pump_stdin(hub: EventHub) -> int:
    published = 0
    while True:
        line = await asyncio.to_thread(sys.stdin.readline)
        if not line:
            return published
        line = line.strip()
        if not line:
            continue
        try:
            payload = json.loads(line)
        except ValueError as exc:
            logger.warning("Skipping invalid JSON line: %s", exc)
            continue
        if not isinstance(payload, dict):
            logger.warning("Skipping non-object event: %s", line)
            continue
        hub.publish(GenericEvent(payload=payload))
        published += 1


async def run(settings: ReporterSettings, bot_id: int) -> None:
    hub = EventHub()
    reporter = Reporter(
        settings,
        session=StaticBotSession(bot_id=bot_id),
        events=hub,
        api=LoggingQuickOperationHandler(),
    )
    try:
        async with reporter:
            count = await _pump_stdin(hub)
            logger.info("Published %d events from stdin", count)
            await reporter.supervisor.drain(timeout=settings.http.timeout_seconds)
    finally:
        hub.close()


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Report bot events to an HTTP endpoint.")
    parser.add_argument("--config", type=Path, default=None, help="Path to reporter YAML")
    parser.add_argument("--bot-id", type=int, required=True, help="Numeric id of the reporting bot")
    args = parser.parse_args(argv)

    if get_bool_env("CQREPORT_DEBUG"):
        set_level(logging.DEBUG)

    settings = load_settings(args.config)
    try:
        asyncio.run(run(settings, args.bot_id))
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")


if __name__ == "__main__":
    main()
