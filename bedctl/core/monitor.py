"""Device polling loop: reconnect, poll, diff taps, dispatch gesture actions."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from bedctl.core.dispatcher import GestureDispatcher
from bedctl.core.gestures import diff_snapshots
from bedctl.core.model import DeviceSnapshot
from bedctl.core.status import HealthRecord
from bedctl.transports.base import DeviceConnector, SettingsSource

FAST_POLL_MS = 2_000
SLOW_POLL_MS = 60_000

LOGGER = logging.getLogger(__name__)


def poll_interval_ms(snapshot: DeviceSnapshot) -> int:
    """Covers without tap sensing only need a periodic liveness check."""
    return FAST_POLL_MS if snapshot.has_gestures else SLOW_POLL_MS


class Monitor:
    """Single long-lived polling task per device.

    ``stop()`` only keeps the next iteration from starting. In-flight device
    calls, gesture dispatches, and movement-completion timers still run to the end.
    """

    def __init__(
        self,
        connector: DeviceConnector,
        dispatcher: GestureDispatcher,
        settings: SettingsSource,
        health: HealthRecord,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.connector = connector
        self.dispatcher = dispatcher
        self.settings = settings
        self.health = health
        self.snapshot: DeviceSnapshot | None = None
        self.wait_ms = FAST_POLL_MS
        self._sleep = sleep
        self._running = False
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def task(self) -> asyncio.Task[None] | None:
        return self._task

    def start(self) -> None:
        if self._running:
            LOGGER.warning("Monitor is already running")
            return
        self._running = True
        self.health.mark_started()
        self._task = asyncio.create_task(self._supervise())

    def stop(self) -> None:
        if not self._running:
            return
        LOGGER.debug("Stopping monitor loop")
        self._running = False

    async def _supervise(self) -> None:
        try:
            await self._loop()
        except Exception as exc:
            LOGGER.exception("Monitor loop crashed")
            self.health.mark_failed(str(exc))
            self._running = False

    async def _loop(self) -> None:
        device = await self.connector.connect()
        self.snapshot = await device.get_snapshot(False)
        self.wait_ms = poll_interval_ms(self.snapshot)
        if self.snapshot.has_gestures:
            self.snapshot = await device.get_snapshot(True)
            LOGGER.debug("Gestures supported for %s", self.snapshot.cover_version)
        else:
            LOGGER.debug("Gestures not supported for %s", self.snapshot.cover_version)

        while self._running:
            try:
                while self._running:
                    await self._poll_once()
            except Exception as exc:
                self.health.mark_failed(str(exc))
                LOGGER.error("Device disconnected: %s", exc)
                await self._sleep(self.wait_ms / 1000)
        LOGGER.debug("Monitor loop exited")

    async def _poll_once(self) -> None:
        # Capability is re-derived every time; a reconnect may report another cover.
        has_gestures = self.snapshot.has_gestures
        self.wait_ms = poll_interval_ms(self.snapshot)
        await self._sleep(self.wait_ms / 1000)
        if not self._running:
            return

        device = await self.connector.connect()
        nxt = await device.get_snapshot(has_gestures)
        await self.settings.refresh()
        if has_gestures:
            # Actions read the state the taps were made against.
            for event in diff_snapshots(self.snapshot, nxt):
                self.dispatcher.schedule(event, self.snapshot)
        self.snapshot = nxt
        self.health.mark_healthy()
