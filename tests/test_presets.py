from __future__ import annotations

from bedctl.core.model import BasePreset, BasePresetName
from bedctl.core.presets import BASE_PRESETS, estimate_movement_ms, toggle_preset


def test_estimate_uses_floor_for_short_travel() -> None:
    assert estimate_movement_ms(0, 0, BasePreset(head=10, feet=1, feed_rate=50)) == 3000


def test_estimate_scales_with_largest_delta() -> None:
    assert estimate_movement_ms(0, 0, BasePreset(head=20, feet=1, feed_rate=50)) == 4000
    assert estimate_movement_ms(30, 2, BasePreset(head=0, feet=0, feed_rate=50)) == 6000
    assert estimate_movement_ms(0, 25, BasePreset(head=1, feet=0, feed_rate=50)) == 5000


def test_toggle_cycles_between_relax_and_flat() -> None:
    assert toggle_preset(BasePresetName.RELAX) is BasePresetName.FLAT
    assert toggle_preset(BasePresetName.FLAT) is BasePresetName.RELAX


def test_flat_preset_is_origin() -> None:
    flat = BASE_PRESETS[BasePresetName.FLAT]
    assert (flat.head, flat.feet) == (0, 0)
