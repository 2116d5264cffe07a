"""Core data models used across settings, monitor, dispatcher, and CLI."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from bedctl.core.errors import AlarmDataError


class Side(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class GestureKind(str, Enum):
    DOUBLE_TAP = "doubleTap"
    TRIPLE_TAP = "tripleTap"
    QUAD_TAP = "quadTap"


class CoverVersion(str, Enum):
    POD3 = "Pod 3"
    POD4 = "Pod 4"
    POD5 = "Pod 5"


class TemperatureChange(str, Enum):
    INCREMENT = "increment"
    DECREMENT = "decrement"


class BasePresetName(str, Enum):
    RELAX = "relax"
    FLAT = "flat"


class HealthState(str, Enum):
    STARTED = "started"
    HEALTHY = "healthy"
    FAILED = "failed"


@dataclass(frozen=True)
class SideSnapshot:
    target_temperature_f: float
    is_alarm_vibrating: bool = False
    taps: Mapping[GestureKind, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DeviceSnapshot:
    """One poll of the device. Superseded, never mutated, by the next poll."""

    left: SideSnapshot
    right: SideSnapshot
    cover_version: str

    def side(self, side: Side) -> SideSnapshot:
        return self.left if side is Side.LEFT else self.right

    @property
    def has_gestures(self) -> bool:
        return self.cover_version != CoverVersion.POD3.value

    @property
    def any_alarm_vibrating(self) -> bool:
        return self.left.is_alarm_vibrating or self.right.is_alarm_vibrating


@dataclass(frozen=True)
class TemperatureBehavior:
    change: TemperatureChange
    amount: float

    def apply(self, current: float) -> float:
        if self.change is TemperatureChange.INCREMENT:
            return current + self.amount
        return current - self.amount


@dataclass(frozen=True)
class AlarmBehavior:
    pass


@dataclass(frozen=True)
class BaseBehavior:
    pass


GestureBehavior = Union[TemperatureBehavior, AlarmBehavior, BaseBehavior]


@dataclass(frozen=True)
class TapSettings:
    left: dict[GestureKind, GestureBehavior]
    right: dict[GestureKind, GestureBehavior]

    def for_side(self, side: Side) -> dict[GestureKind, GestureBehavior]:
        return self.left if side is Side.LEFT else self.right


@dataclass(frozen=True)
class AlarmRecord:
    """One side of the persisted alarm blob (CBOR keys pl/du/tt/pi)."""

    payload: Any
    duration: Any
    trigger_time: int | None
    pattern: Any

    @classmethod
    def from_mapping(cls, side: Side, data: Any) -> AlarmRecord:
        if not isinstance(data, Mapping):
            raise AlarmDataError(f"Invalid alarm data for {side.value} side")
        missing = [key for key in ("pl", "du", "pi") if key not in data]
        if missing:
            raise AlarmDataError(
                f"Alarm data for {side.value} side is missing {', '.join(missing)}"
            )
        return cls(
            payload=data["pl"],
            duration=data["du"],
            trigger_time=data.get("tt"),
            pattern=data["pi"],
        )

    def to_mapping(self) -> dict[str, Any]:
        return {
            "pl": self.payload,
            "du": self.duration,
            "tt": self.trigger_time,
            "pi": self.pattern,
        }


@dataclass(frozen=True)
class BasePreset:
    head: float
    feet: float
    feed_rate: int


@dataclass
class BaseStatus:
    head: float
    feet: float
    is_moving: bool
    last_update: str
    is_configured: bool


@dataclass(frozen=True)
class HealthStatus:
    status: HealthState
    message: str
    timestamp: str


@dataclass(frozen=True)
class GestureEvent:
    side: Side
    gesture: GestureKind


@dataclass(frozen=True)
class GestureOutcome:
    event: GestureEvent
    behavior: GestureBehavior | None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
