"""Interfaces for the collaborators the monitor drives."""

from __future__ import annotations

from typing import Any, Protocol

from bedctl.core.model import DeviceSnapshot, GestureBehavior, GestureKind, Side


class DeviceHandle(Protocol):
    async def get_snapshot(self, include_gestures: bool) -> DeviceSnapshot:
        """Fetch the current device status, optionally with tap state."""


class DeviceConnector(Protocol):
    async def connect(self) -> DeviceHandle:
        """Return a live device handle. Raises DeviceConnectionError on failure."""


class CommandChannel(Protocol):
    async def execute(self, command: str, payload: str) -> None:
        """Run a named device command with a hex (or literal) payload."""


class BaseActuator(Protocol):
    async def go_to_flat(self) -> None:
        """Move the base to its flat rest position."""

    async def set_position(self, *, head: float, feet: float, feed_rate: int) -> None:
        """Move the base to an absolute head/feet position."""


class DeviceStatusUpdater(Protocol):
    async def update_device_status(self, patch: dict[str, dict[str, Any]]) -> None:
        """Apply a partial per-side status update."""


class SettingsSource(Protocol):
    async def refresh(self) -> None:
        """Re-read settings from their backing store."""

    def behavior(self, side: Side, gesture: GestureKind) -> GestureBehavior | None:
        """Return the configured behavior for a side and gesture, if any."""
