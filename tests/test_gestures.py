from __future__ import annotations

import logging

import pytest

from bedctl.core import gestures
from bedctl.core.gestures import detect_gestures, diff_snapshots
from bedctl.core.model import DeviceSnapshot, GestureEvent, GestureKind, Side, SideSnapshot


def _snapshot(left_taps=None, right_taps=None) -> DeviceSnapshot:
    return DeviceSnapshot(
        left=SideSnapshot(target_temperature_f=80, taps=left_taps or {}),
        right=SideSnapshot(target_temperature_f=80, taps=right_taps or {}),
        cover_version="Pod 4",
    )


def test_identical_snapshots_report_nothing() -> None:
    taps = {GestureKind.DOUBLE_TAP: 1, GestureKind.TRIPLE_TAP: 0, GestureKind.QUAD_TAP: 3}
    assert diff_snapshots(_snapshot(taps, taps), _snapshot(dict(taps), dict(taps))) == []


def test_changed_entry_reported_once_per_side() -> None:
    before = _snapshot({GestureKind.DOUBLE_TAP: 1}, {GestureKind.QUAD_TAP: 2})
    after = _snapshot({GestureKind.DOUBLE_TAP: 2}, {GestureKind.QUAD_TAP: 3})

    assert diff_snapshots(before, after) == [
        GestureEvent(side=Side.LEFT, gesture=GestureKind.DOUBLE_TAP),
        GestureEvent(side=Side.RIGHT, gesture=GestureKind.QUAD_TAP),
    ]


def test_missing_versus_present_is_a_change() -> None:
    before = _snapshot({})
    after = _snapshot({GestureKind.TRIPLE_TAP: 0})

    assert detect_gestures(before, after, Side.LEFT) == [
        GestureEvent(side=Side.LEFT, gesture=GestureKind.TRIPLE_TAP)
    ]
    assert detect_gestures(after, before, Side.LEFT) == [
        GestureEvent(side=Side.LEFT, gesture=GestureKind.TRIPLE_TAP)
    ]


def test_multiple_gestures_on_one_side() -> None:
    before = _snapshot({GestureKind.DOUBLE_TAP: 1, GestureKind.TRIPLE_TAP: 1, GestureKind.QUAD_TAP: 1})
    after = _snapshot({GestureKind.DOUBLE_TAP: 2, GestureKind.TRIPLE_TAP: 1, GestureKind.QUAD_TAP: 2})

    events = detect_gestures(before, after, Side.LEFT)
    assert [e.gesture for e in events] == [GestureKind.DOUBLE_TAP, GestureKind.QUAD_TAP]
    assert detect_gestures(before, after, Side.RIGHT) == []


def test_no_previous_snapshot_skips_with_warning(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="bedctl.core.gestures"):
        assert diff_snapshots(None, _snapshot({GestureKind.DOUBLE_TAP: 1})) == []
    assert "Missing previous device snapshot" in caplog.text


def test_failure_on_one_side_does_not_hide_other(monkeypatch: pytest.MonkeyPatch) -> None:
    real_detect = gestures.detect_gestures

    def flaky_detect(previous, nxt, side):
        if side is Side.LEFT:
            raise RuntimeError("corrupt tap state")
        return real_detect(previous, nxt, side)

    monkeypatch.setattr(gestures, "detect_gestures", flaky_detect)

    before = _snapshot({GestureKind.DOUBLE_TAP: 1}, {GestureKind.DOUBLE_TAP: 1})
    after = _snapshot({GestureKind.DOUBLE_TAP: 2}, {GestureKind.DOUBLE_TAP: 2})

    assert diff_snapshots(before, after) == [
        GestureEvent(side=Side.RIGHT, gesture=GestureKind.DOUBLE_TAP)
    ]
