"""Alarm snoozing against the persisted CBOR alarm blob."""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Callable, Mapping
from pathlib import Path

import cbor2

from bedctl.core.errors import AlarmDataError
from bedctl.core.model import AlarmRecord, Side
from bedctl.transports.base import CommandChannel

DEFAULT_SNOOZE_MINUTES = 10
MIN_SNOOZE_MINUTES = 1
MAX_SNOOZE_MINUTES = 10

ALARM_COMMANDS = {Side.LEFT: "ALARM_LEFT", Side.RIGHT: "ALARM_RIGHT"}
ALARM_CLEAR_COMMAND = "ALARM_CLEAR"
ALARM_CLEAR_PAYLOAD = "empty"

LOGGER = logging.getLogger(__name__)


def default_alarm_path() -> Path:
    return Path(os.environ.get("BEDCTL_ALARM_PATH", "/persistent/alarm.cbr"))


def clamp_snooze_minutes(minutes: int) -> int:
    if minutes < MIN_SNOOZE_MINUTES or minutes > MAX_SNOOZE_MINUTES:
        LOGGER.warning(
            "Snooze minutes %s out of range. Defaulting to %d.",
            minutes,
            DEFAULT_SNOOZE_MINUTES,
        )
        return DEFAULT_SNOOZE_MINUTES
    return minutes


def _decode_blob(path: Path) -> Mapping:
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise AlarmDataError(f"Could not read alarm data {path}: {exc}") from exc

    try:
        decoded = cbor2.loads(raw)
    except (cbor2.CBORDecodeError, ValueError) as exc:
        raise AlarmDataError(f"Invalid alarm data in {path}: {exc}") from exc

    if not isinstance(decoded, Mapping):
        raise AlarmDataError(f"Alarm data in {path} must contain a mapping at root")
    return decoded


def read_alarms(path: Path | None = None) -> dict[Side, AlarmRecord]:
    """Decode every well-formed side record from the alarm blob."""
    decoded = _decode_blob(path or default_alarm_path())
    records: dict[Side, AlarmRecord] = {}
    for side in Side:
        try:
            records[side] = AlarmRecord.from_mapping(side, decoded.get(side.value))
        except AlarmDataError as exc:
            LOGGER.debug("Skipping alarm record: %s", exc)
    return records


class AlarmSnoozer:
    """Re-arms an already configured alarm a few minutes in the future.

    The stored record is the only source of alarm parameters: only the trigger
    time is ever replaced. When the record cannot be read or re-encoded the
    alarm is cleared instead.
    """

    def __init__(
        self,
        commands: CommandChannel,
        *,
        alarm_path: Path | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.commands = commands
        self.alarm_path = alarm_path or default_alarm_path()
        self._clock = clock

    async def snooze(self, side: Side, minutes: int = DEFAULT_SNOOZE_MINUTES) -> None:
        LOGGER.info("Snoozing alarm for %s for %s minutes.", side.value, minutes)
        try:
            decoded = _decode_blob(self.alarm_path)
            LOGGER.debug("Decoded alarm data: %r", decoded)
            record = AlarmRecord.from_mapping(side, decoded.get(side.value))

            minutes = clamp_snooze_minutes(minutes)
            snoozed = AlarmRecord(
                payload=record.payload,
                duration=record.duration,
                trigger_time=int(self._clock()) + minutes * 60,
                pattern=record.pattern,
            )
            hex_payload = cbor2.dumps(snoozed.to_mapping()).hex()

            LOGGER.info(
                "Setting snooze alarm for %s side in %d minutes with pattern %s (payload: %r)",
                side.value,
                minutes,
                snoozed.pattern,
                snoozed.to_mapping(),
            )
            await self.commands.execute(ALARM_COMMANDS[side], hex_payload)
        except Exception as exc:
            LOGGER.error("Failed to snooze alarm: %s", exc)
            await self.commands.execute(ALARM_CLEAR_COMMAND, ALARM_CLEAR_PAYLOAD)
