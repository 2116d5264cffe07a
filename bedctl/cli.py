"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from bedctl.core.errors import BedctlError
from bedctl.core.model import BasePresetName, GestureKind, Side, TemperatureBehavior
from bedctl.core.presets import BASE_PRESETS, estimate_movement_ms
from bedctl.core.settings_loader import SettingsStore
from bedctl.core.snooze import read_alarms

app = typer.Typer(help="Smart-bed tap gesture and alarm tooling")


def _describe(behavior) -> str:
    if behavior is None:
        return "<none>"
    if isinstance(behavior, TemperatureBehavior):
        sign = "+" if behavior.change.value == "increment" else "-"
        return f"temperature {sign}{behavior.amount:g}F"
    return type(behavior).__name__.removesuffix("Behavior").lower()


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command("settings")
def show_settings(
    file: Path | None = typer.Option(None, "--file", help="Settings YAML to load instead of the default"),
) -> None:
    """Show the effective tap behavior for each side and gesture."""
    try:
        store = SettingsStore(file)
        for warning in store.warnings:
            typer.echo(f"Warning: {warning}", err=True)
        typer.echo(f"Source: {store.source}")
        for side in Side:
            typer.echo(f"{side.value}:")
            for gesture in GestureKind:
                typer.echo(f"  {gesture.value}: {_describe(store.behavior(side, gesture))}")
    except BedctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("alarms")
def show_alarms(
    path: Path | None = typer.Option(None, "--path", help="Alarm blob to decode"),
) -> None:
    """Decode the persisted alarm blob and print each side's record."""
    try:
        records = read_alarms(path)
        if not records:
            typer.echo("No alarm records")
            raise typer.Exit(code=1)
        for side, record in sorted(records.items(), key=lambda item: item[0].value):
            typer.echo(
                f"{side.value}: pattern={record.pattern} duration={record.duration} "
                f"trigger_time={record.trigger_time} payload={record.payload}"
            )
    except BedctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("presets")
def show_presets() -> None:
    """List base presets and their estimated travel time from flat."""
    flat = BASE_PRESETS[BasePresetName.FLAT]
    for name, preset in BASE_PRESETS.items():
        estimate = estimate_movement_ms(flat.head, flat.feet, preset)
        typer.echo(
            f"{name.value}: head={preset.head:g} feet={preset.feet:g} "
            f"feed_rate={preset.feed_rate} travel_ms={estimate}"
        )


def run() -> None:
    app()


if __name__ == "__main__":
    run()
