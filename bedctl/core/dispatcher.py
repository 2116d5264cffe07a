"""Gesture action dispatch: temperature steps, alarm snooze, and base preset cycling."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import assert_never

from bedctl.core.model import (
    AlarmBehavior,
    BaseBehavior,
    BasePresetName,
    DeviceSnapshot,
    GestureEvent,
    GestureOutcome,
    TemperatureBehavior,
)
from bedctl.core.presets import BASE_PRESETS, estimate_movement_ms, toggle_preset
from bedctl.core.snooze import DEFAULT_SNOOZE_MINUTES, AlarmSnoozer
from bedctl.core.status import BaseStatusStore
from bedctl.transports.base import BaseActuator, DeviceStatusUpdater, SettingsSource

LOGGER = logging.getLogger(__name__)


class GestureDispatcher:
    def __init__(
        self,
        settings: SettingsSource,
        status_updater: DeviceStatusUpdater,
        snoozer: AlarmSnoozer,
        actuator: BaseActuator,
        base_status: BaseStatusStore,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.settings = settings
        self.status_updater = status_updater
        self.snoozer = snoozer
        self.actuator = actuator
        self.base_status = base_status
        self.current_preset = BasePresetName.RELAX
        self._sleep = sleep
        self._base_lock = asyncio.Lock()
        self._dispatches: set[asyncio.Task[GestureOutcome]] = set()
        self._completions: set[asyncio.Task[None]] = set()

    def schedule(self, event: GestureEvent, snapshot: DeviceSnapshot) -> asyncio.Task[GestureOutcome]:
        """Dispatch without waiting; the poll loop never blocks on gesture actions."""
        task = asyncio.create_task(self.dispatch(event, snapshot))
        self._dispatches.add(task)
        task.add_done_callback(self._dispatches.discard)
        return task

    async def drain(self) -> list[GestureOutcome]:
        outcomes: list[GestureOutcome] = []
        while self._dispatches or self._completions:
            pending = list(self._dispatches) + list(self._completions)
            results = await asyncio.gather(*pending, return_exceptions=True)
            outcomes.extend(r for r in results if isinstance(r, GestureOutcome))
        return outcomes

    def cancel_completions(self) -> None:
        for task in list(self._completions):
            task.cancel()

    async def dispatch(self, event: GestureEvent, snapshot: DeviceSnapshot) -> GestureOutcome:
        behavior = None
        try:
            behavior = self.settings.behavior(event.side, event.gesture)
            if behavior is None:
                LOGGER.debug("No behavior configured for %s on %s side", event.gesture.value, event.side.value)
                return GestureOutcome(event=event, behavior=None)

            match behavior:
                case TemperatureBehavior():
                    await self._adjust_temperature(event, behavior, snapshot)
                case AlarmBehavior():
                    await self._snooze_alarm(event, snapshot)
                case BaseBehavior():
                    async with self._base_lock:
                        await self._cycle_base_preset(event)
                case _:
                    assert_never(behavior)
        except Exception as exc:
            LOGGER.exception("Gesture %s on %s side failed", event.gesture.value, event.side.value)
            return GestureOutcome(event=event, behavior=behavior, error=str(exc))
        return GestureOutcome(event=event, behavior=behavior)

    async def _adjust_temperature(
        self,
        event: GestureEvent,
        behavior: TemperatureBehavior,
        snapshot: DeviceSnapshot,
    ) -> None:
        current = snapshot.side(event.side).target_temperature_f
        target = behavior.apply(current)
        LOGGER.debug(
            "Processing gesture temperature change for %s. %s -> %s",
            event.side.value,
            current,
            target,
        )
        await self.status_updater.update_device_status(
            {event.side.value: {"targetTemperatureF": target}}
        )

    async def _snooze_alarm(self, event: GestureEvent, snapshot: DeviceSnapshot) -> None:
        if not snapshot.any_alarm_vibrating:
            LOGGER.debug("No active alarm, ignoring %s on %s side", event.gesture.value, event.side.value)
            return
        LOGGER.info("[%s] Snoozing active alarm on %s side.", event.gesture.value, event.side.value)
        await self.snoozer.snooze(event.side, DEFAULT_SNOOZE_MINUTES)

    async def _cycle_base_preset(self, event: GestureEvent) -> None:
        previous_preset = self.current_preset
        self.current_preset = toggle_preset(previous_preset)
        tag = event.gesture.value

        try:
            preset = BASE_PRESETS[self.current_preset]
            LOGGER.info("[%s] Cycling base to %s preset: %s", tag, self.current_preset.value, preset)

            before = self.base_status.status
            previous_head = before.head if before is not None else 0
            previous_feet = before.feet if before is not None else 0

            await self.base_status.begin_movement(preset.head, preset.feet)

            if self.current_preset is BasePresetName.FLAT:
                await self.actuator.go_to_flat()
            else:
                await self.actuator.set_position(
                    head=preset.head,
                    feet=preset.feet,
                    feed_rate=preset.feed_rate,
                )
        except Exception:
            self.current_preset = previous_preset
            await self.base_status.finish_movement()
            raise

        estimate_ms = estimate_movement_ms(previous_head, previous_feet, preset)
        completion = asyncio.create_task(self._complete_movement(tag, self.current_preset, estimate_ms))
        self._completions.add(completion)
        completion.add_done_callback(self._completions.discard)

    async def _complete_movement(self, tag: str, preset: BasePresetName, estimate_ms: int) -> None:
        await self._sleep(estimate_ms / 1000)
        LOGGER.info("[%s] Base %s preset movement completed", tag, preset.value)
        try:
            await self.base_status.finish_movement()
        except Exception:
            LOGGER.exception("[%s] Failed to record base movement completion", tag)
