"""Bed-base presets and movement timing."""

from __future__ import annotations

from bedctl.core.model import BasePreset, BasePresetName

MS_PER_POSITION_UNIT = 200
MIN_MOVEMENT_MS = 3000

BASE_PRESETS: dict[BasePresetName, BasePreset] = {
    BasePresetName.FLAT: BasePreset(head=0, feet=0, feed_rate=50),
    BasePresetName.RELAX: BasePreset(head=10, feet=1, feed_rate=50),
}


def toggle_preset(name: BasePresetName) -> BasePresetName:
    if name is BasePresetName.RELAX:
        return BasePresetName.FLAT
    return BasePresetName.RELAX


def estimate_movement_ms(previous_head: float, previous_feet: float, target: BasePreset) -> int:
    """Return how long the base needs to travel from the previous position to ``target``.

    Travel time grows with the larger of the two actuator deltas and never drops
    below ``MIN_MOVEMENT_MS``.
    """
    return int(
        max(
            abs(previous_head - target.head) * MS_PER_POSITION_UNIT,
            abs(previous_feet - target.feet) * MS_PER_POSITION_UNIT,
            MIN_MOVEMENT_MS,
        )
    )
