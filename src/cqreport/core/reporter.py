"""HTTP event reporter orchestrating lifecycle, event and heartbeat reports."""

from __future__ import annotations

import asyncio
import enum
import functools
from dataclasses import dataclass
from typing import Any, Dict, Optional

from cqreport.core.errors import EventHandlingError, TransportError
from cqreport.core.heartbeat import HeartbeatLoop
from cqreport.core.interfaces import (
    IGNORE,
    BotSession,
    EventFilter,
    EventSerializer,
    EventSource,
    QuickOperationHandler,
    Subscription,
)
from cqreport.core.models import (
    DeliveryAttempt,
    HeartbeatMetaEvent,
    LifecycleMetaEvent,
    LifecyclePhase,
    PluginStatus,
)
from cqreport.core.serialization import JsonEventSerializer
from cqreport.core.settings import ReporterSettings
from cqreport.core.tasks import TaskSupervisor
from cqreport.services.event_filter import AllowAllFilter
from cqreport.services.http_client import DeliveryClient
from cqreport.services.quick_operation import QuickOperationRelay
from cqreport.services.signer import Signer
from cqreport.utils.logging import get_logger


USER_AGENT = "CQHttp/4.15.0"


class ReporterState(enum.Enum):
    IDLE = "idle"
    STARTING = "starting"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass(frozen=True, slots=True)
class DispatchContext:
    """Everything a dispatch needs, fixed when the reporter starts."""

    url: str
    bot_id: int
    secret: str = ""
    signer: Optional[Signer] = None

    def attempt(self, body: str, *, wants_quick_operation: bool = False) -> DeliveryAttempt:
        return DeliveryAttempt(
            url=self.url,
            bot_id=self.bot_id,
            body=body,
            secret=self.secret,
            wants_quick_operation=wants_quick_operation,
        )

    def headers(self, attempt: DeliveryAttempt, body: bytes) -> Dict[str, str]:
        headers = {"User-Agent": USER_AGENT, "X-Self-ID": str(attempt.bot_id)}
        if attempt.secret and self.signer is not None:
            headers["X-Signature"] = self.signer.sign(body)
        return headers


class Reporter:
    """Posts bot events to the configured HTTP endpoint.

    ``start()`` reports the ``enable`` lifecycle event, subscribes to the
    event source and starts the heartbeat loop. Every event that survives
    serialization and filtering is posted from its own supervised task, so
    a slow endpoint never holds up the event source. ``close()``
    unsubscribes, reports ``disable`` and releases the HTTP client.

    Without a ``post_url`` the reporter never touches the network.
    """

    def __init__(
        self,
        settings: ReporterSettings,
        *,
        session: BotSession,
        events: EventSource,
        api: QuickOperationHandler,
        serializer: Optional[EventSerializer] = None,
        event_filter: Optional[EventFilter] = None,
        http_client: Optional[DeliveryClient] = None,
        supervisor: Optional[TaskSupervisor] = None,
    ) -> None:
        self.settings = settings
        self.target = settings.http
        self.session = session
        self.events = events
        self.serializer = serializer or JsonEventSerializer()
        self.event_filter = event_filter or AllowAllFilter()
        self.logger = get_logger("cqreport.Reporter")
        self._relay = QuickOperationRelay(api)
        self._supervisor = supervisor or TaskSupervisor()
        self._state = ReporterState.IDLE
        self._lock = asyncio.Lock()
        self._context: Optional[DispatchContext] = None
        self._subscription: Optional[Subscription] = None
        self._heartbeat: Optional[HeartbeatLoop] = None

        # ConfigurationError from the signer aborts construction
        self._signer = Signer(self.target.secret) if self.target.enabled and self.target.secret else None
        self._client: Optional[DeliveryClient] = None
        if self.target.enabled:
            self._client = http_client or DeliveryClient(
                timeout=self.target.timeout_seconds,
                retries=self.target.connect_retries,
            )

    @property
    def state(self) -> ReporterState:
        return self._state

    @property
    def supervisor(self) -> TaskSupervisor:
        return self._supervisor

    async def __aenter__(self) -> "Reporter":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def launch(self) -> asyncio.Task[None]:
        """Run ``start()`` as a supervised background task."""
        return self._supervisor.spawn(self.start(), name="start")

    async def start(self) -> None:
        async with self._lock:
            if self._state is not ReporterState.IDLE:
                return
            if not self.target.enabled:
                self.logger.info("No post_url configured; HTTP reporting is disabled")
                return

            self._state = ReporterState.STARTING
            context = DispatchContext(
                url=self.target.post_url,
                bot_id=self.session.bot_id,
                secret=self.target.secret,
                signer=self._signer,
            )
            self._context = context
            self.logger.info("Starting HTTP reporter for bot %s -> %s", context.bot_id, context.url)

            await self._dispatch(context, context.attempt(self._lifecycle_json(LifecyclePhase.ENABLE)))

            try:
                self._subscription = self.events.subscribe_always(functools.partial(self._handle_event, context))
            except Exception:
                self.logger.exception("Failed to subscribe to bot events; stopping HTTP reporter")
                self._state = ReporterState.STOPPED
                await self._dispatch(context, context.attempt(self._lifecycle_json(LifecyclePhase.DISABLE)))
                await self._client.aclose()
                raise

            if self.settings.heartbeat.enabled:
                self._heartbeat = HeartbeatLoop(
                    self.settings.heartbeat,
                    functools.partial(self._beat, context),
                    supervisor=self._supervisor,
                )
                self._heartbeat.start()
            self._state = ReporterState.RUNNING

    async def close(self) -> None:
        async with self._lock:
            if self._state is ReporterState.STOPPED:
                return
            previous, self._state = self._state, ReporterState.STOPPED
            if previous is ReporterState.IDLE:
                if self._client is not None:
                    await self._client.aclose()
                return

            self.logger.info("Stopping HTTP reporter")
            if self._subscription is not None:
                self._subscription.complete()
                self._subscription = None

            context = self._context
            if context is not None:
                await self._dispatch(context, context.attempt(self._lifecycle_json(LifecyclePhase.DISABLE)))

            if self._heartbeat is not None:
                await self._heartbeat.stop()
                self._heartbeat = None
            if self._client is not None:
                await self._client.aclose()

    def _handle_event(self, context: DispatchContext, event: Any) -> None:
        try:
            body = self.serializer.to_canonical_json(event, self.target.message_format)
            if body is IGNORE:
                return
            self.logger.debug("Reporting event: %s", body)
            if not self.event_filter.eval(body):
                self.logger.debug("Event suppressed by event filter")
                return
            attempt = context.attempt(body, wants_quick_operation=True)
            self._supervisor.spawn(self._dispatch(context, attempt), name="event")
        except Exception as exc:
            error = EventHandlingError(f"Failed to report {type(event).__name__}: {exc}")
            self.logger.error("%s", error, exc_info=exc)

    async def _beat(self, context: DispatchContext) -> None:
        online = self.session.is_online
        event = HeartbeatMetaEvent(
            self_id=context.bot_id,
            status=PluginStatus(good=online, online=online),
            interval=self.settings.heartbeat.interval_millis,
        )
        await self._dispatch(context, context.attempt(event.to_json()))

    async def _dispatch(self, context: DispatchContext, attempt: DeliveryAttempt) -> None:
        body = attempt.encoded()
        try:
            response = await self._client.deliver(attempt.url, body, context.headers(attempt, body))
        except TransportError as exc:
            self.logger.error("Failed to report to %s: %s", attempt.url, exc)
            return

        if response:
            self.logger.debug("Received report response %s", response)
        if attempt.wants_quick_operation and response:
            await self._relay.feedback(attempt.body, response)

    def _lifecycle_json(self, phase: LifecyclePhase) -> str:
        return LifecycleMetaEvent(self_id=self.session.bot_id, sub_type=phase).to_json()
