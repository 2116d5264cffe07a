"""Tap-settings loading and validation for YAML-based bedctl settings."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from bedctl.core.errors import SettingsLoadError, SettingsValidationError
from bedctl.core.model import (
    AlarmBehavior,
    BaseBehavior,
    GestureBehavior,
    GestureKind,
    Side,
    TapSettings,
    TemperatureBehavior,
    TemperatureChange,
)

LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise SettingsValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class LoadedSettings:
    taps: TapSettings
    source: str
    warnings: tuple[str, ...]


@lru_cache(maxsize=1)
def _load_schema_validator() -> Any:
    schema_text = resources.files("bedctl.schemas").joinpath("settings.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def default_settings_path() -> Path:
    override = os.environ.get("BEDCTL_SETTINGS")
    if override:
        return Path(override)
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "bedctl/settings.yaml"


def _read_yaml(path: Path | Traversable) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SettingsLoadError(f"Could not read settings file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise SettingsValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise SettingsValidationError(f"Settings file {path} must contain a mapping at root")
    return loaded


def _validate(doc: dict[str, Any], source: Path | Traversable) -> None:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise SettingsValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc


def _build_behavior(spec: dict[str, Any]) -> GestureBehavior:
    behavior_type = spec["type"]
    if behavior_type == "temperature":
        return TemperatureBehavior(
            change=TemperatureChange(spec["change"]),
            amount=float(spec["amount"]),
        )
    if behavior_type == "alarm":
        return AlarmBehavior()
    if behavior_type == "base":
        return BaseBehavior()
    raise SettingsValidationError(f"Unsupported tap behavior type '{behavior_type}'")


def _build_side(doc: dict[str, Any]) -> dict[GestureKind, GestureBehavior]:
    taps: dict[GestureKind, GestureBehavior] = {}
    for gesture_name, spec in doc.get("taps", {}).items():
        taps[GestureKind(gesture_name)] = _build_behavior(spec)
    return taps


def load_settings(path: Path | None = None) -> LoadedSettings:
    defaults_path = resources.files("bedctl.defaults").joinpath("settings.yaml")
    merged = _read_yaml(defaults_path)
    _validate(merged, defaults_path)
    source = "packaged defaults"
    warnings: list[str] = []

    user_path = path or default_settings_path()
    if user_path.exists():
        doc = _read_yaml(user_path)
        _validate(doc, user_path)
        for side in Side:
            if side.value in doc:
                warning = f"User settings override packaged {side.value} tap behaviors"
                LOGGER.debug(warning)
                warnings.append(warning)
                merged[side.value] = doc[side.value]
        source = str(user_path)
    elif path is not None:
        raise SettingsLoadError(f"Settings file {path} does not exist")

    taps = TapSettings(
        left=_build_side(merged.get(Side.LEFT.value, {})),
        right=_build_side(merged.get(Side.RIGHT.value, {})),
    )
    return LoadedSettings(taps=taps, source=source, warnings=tuple(warnings))


class SettingsStore:
    """Refreshable, read-only view of the configured tap behaviors."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        loaded = load_settings(path)
        self.taps = loaded.taps
        self.source = loaded.source
        self.warnings = loaded.warnings

    async def refresh(self) -> None:
        loaded = await asyncio.to_thread(load_settings, self.path)
        self.taps = loaded.taps
        self.source = loaded.source
        self.warnings = loaded.warnings

    def behavior(self, side: Side, gesture: GestureKind) -> GestureBehavior | None:
        return self.taps.for_side(side).get(gesture)
