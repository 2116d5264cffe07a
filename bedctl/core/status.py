"""Shared status records: subsystem health and bed-base movement state."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from dataclasses import asdict
from datetime import datetime
from pathlib import Path

from bedctl.core.model import BaseStatus, HealthState, HealthStatus

LOGGER = logging.getLogger(__name__)


def _local_now() -> datetime:
    return datetime.now().astimezone()


def _timestamp(clock: Callable[[], datetime]) -> str:
    return clock().isoformat(timespec="seconds")


class HealthRecord:
    """Point-in-time health of the monitor. Each mark overwrites the previous one."""

    def __init__(self, *, clock: Callable[[], datetime] = _local_now) -> None:
        self._clock = clock
        self.current = HealthStatus(status=HealthState.STARTED, message="", timestamp=_timestamp(clock))

    def mark_started(self) -> None:
        self._set(HealthState.STARTED, "")

    def mark_healthy(self) -> None:
        self._set(HealthState.HEALTHY, "")

    def mark_failed(self, message: str) -> None:
        self._set(HealthState.FAILED, message)

    def _set(self, state: HealthState, message: str) -> None:
        self.current = HealthStatus(status=state, message=message, timestamp=_timestamp(self._clock))


class BaseStatusStore:
    """Owner of the shared base movement status.

    Mutations are serialized with a lock because the movement-completion timer
    writes from outside the poll loop. When ``path`` is set, every mutation is
    flushed to a JSON file before the call returns.
    """

    def __init__(
        self,
        path: Path | None = None,
        *,
        clock: Callable[[], datetime] = _local_now,
    ) -> None:
        self.path = path
        self._clock = clock
        self._lock = asyncio.Lock()
        self.status: BaseStatus | None = None

    async def begin_movement(self, head: float, feet: float) -> None:
        async with self._lock:
            self.status = BaseStatus(
                head=head,
                feet=feet,
                is_moving=True,
                last_update=_timestamp(self._clock),
                is_configured=True,
            )
            await self.write()

    async def finish_movement(self) -> None:
        async with self._lock:
            if self.status is None:
                return
            self.status.is_moving = False
            await self.write()

    async def write(self) -> None:
        if self.path is None:
            return
        document = asdict(self.status) if self.status is not None else None
        text = json.dumps({"baseStatus": document}, indent=2)
        await asyncio.to_thread(self.path.write_text, text, encoding="utf-8")
        LOGGER.debug("Flushed base status to %s", self.path)
