"""Snapshot-to-gesture diffing."""

from __future__ import annotations

import logging

from bedctl.core.model import DeviceSnapshot, GestureEvent, GestureKind, Side

LOGGER = logging.getLogger(__name__)


def detect_gestures(previous: DeviceSnapshot, nxt: DeviceSnapshot, side: Side) -> list[GestureEvent]:
    before = previous.side(side).taps
    after = nxt.side(side).taps
    return [
        GestureEvent(side=side, gesture=gesture)
        for gesture in GestureKind
        if after.get(gesture) != before.get(gesture)
    ]


def diff_snapshots(previous: DeviceSnapshot | None, nxt: DeviceSnapshot) -> list[GestureEvent]:
    """Return every tap-state transition between two polls, left side first.

    Only transitions matter, so nothing is reported without a previous snapshot.
    A side that fails to compare is logged and skipped; the other side still runs.
    """
    if previous is None:
        LOGGER.warning("Missing previous device snapshot, skipping gesture detection")
        return []

    events: list[GestureEvent] = []
    for side in Side:
        try:
            events.extend(detect_gestures(previous, nxt, side))
        except Exception:
            LOGGER.exception("Gesture detection failed for %s side", side.value)
    return events
