"""Stable public API for embedding the bedctl monitor.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path

from bedctl.core.dispatcher import GestureDispatcher
from bedctl.core.errors import (
    ActuatorError,
    AlarmDataError,
    BedctlError,
    CommandError,
    DeviceConnectionError,
    DeviceError,
    SettingsLoadError,
    SettingsValidationError,
)
from bedctl.core.model import (
    AlarmBehavior,
    AlarmRecord,
    BaseBehavior,
    BasePresetName,
    BaseStatus,
    CoverVersion,
    DeviceSnapshot,
    GestureEvent,
    GestureKind,
    GestureOutcome,
    HealthState,
    HealthStatus,
    Side,
    SideSnapshot,
    TemperatureBehavior,
    TemperatureChange,
)
from bedctl.core.monitor import Monitor
from bedctl.core.settings_loader import SettingsStore
from bedctl.core.snooze import AlarmSnoozer
from bedctl.core.status import BaseStatusStore, HealthRecord
from bedctl.transports.base import (
    BaseActuator,
    CommandChannel,
    DeviceConnector,
    DeviceHandle,
    DeviceStatusUpdater,
    SettingsSource,
)

__all__ = [
    "BedctlError",
    "SettingsLoadError",
    "SettingsValidationError",
    "DeviceError",
    "DeviceConnectionError",
    "CommandError",
    "AlarmDataError",
    "ActuatorError",
    "AlarmBehavior",
    "AlarmRecord",
    "BaseBehavior",
    "BasePresetName",
    "BaseStatus",
    "CoverVersion",
    "DeviceSnapshot",
    "GestureEvent",
    "GestureKind",
    "GestureOutcome",
    "HealthState",
    "HealthStatus",
    "Side",
    "SideSnapshot",
    "TemperatureBehavior",
    "TemperatureChange",
    "BaseActuator",
    "CommandChannel",
    "DeviceConnector",
    "DeviceHandle",
    "DeviceStatusUpdater",
    "SettingsSource",
    "AlarmSnoozer",
    "BaseStatusStore",
    "GestureDispatcher",
    "HealthRecord",
    "Monitor",
    "SettingsStore",
    "build_monitor",
]


def build_monitor(
    *,
    connector: DeviceConnector,
    commands: CommandChannel,
    actuator: BaseActuator,
    status_updater: DeviceStatusUpdater,
    settings: SettingsSource | None = None,
    health: HealthRecord | None = None,
    base_status: BaseStatusStore | None = None,
    alarm_path: Path | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> Monitor:
    """Wire a `Monitor` and its dispatcher from the device-facing collaborators.

    Anything not supplied falls back to the default: settings from the user
    settings file (or packaged defaults), a fresh health record, an in-memory
    base status store, and the alarm blob at ``$BEDCTL_ALARM_PATH``.
    """
    settings = settings or SettingsStore()
    dispatcher = GestureDispatcher(
        settings,
        status_updater,
        AlarmSnoozer(commands, alarm_path=alarm_path),
        actuator,
        base_status or BaseStatusStore(),
        sleep=sleep,
    )
    return Monitor(
        connector,
        dispatcher,
        settings,
        health or HealthRecord(),
        sleep=sleep,
    )
