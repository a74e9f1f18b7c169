from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from pathlib import Path
from typing import TypeAlias
import tomllib

DEFAULT_CONFIG_NAME = "dpgen.toml"
DEFAULT_ARTIFACT_NAME = "DependencyProperties.g.cs"

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]

_ORDER_MODES = frozenset({"source", "sorted"})


@dataclass(frozen=True)
class WellKnownNames:
    object: str = "System.Object"
    target: str = "System.Windows.DependencyObject"
    change_args: str = "System.Windows.DependencyPropertyChangedEventArgs"
    options: str = "System.Windows.FrameworkPropertyMetadataOptions"
    signal: str = "System.Windows.RoutedEvent"
    token: str = "System.Windows.DependencyProperty"
    keyed_token: str = "System.Windows.DependencyPropertyKey"


@dataclass(frozen=True)
class GeneratorConfig:
    # None means "derive from the graph's language version".
    nullable_context: bool | None = None
    order: str = "source"
    artifact_name: str = DEFAULT_ARTIFACT_NAME
    routed_signal_suffix: str = "ChangedEvent"
    routed_signal_raiser: str = "UIElement"
    well_known: WellKnownNames = field(default_factory=WellKnownNames)


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError:
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def _as_bool(value: TomlValue) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return False


def _as_tristate(value: TomlValue) -> bool | None:
    if value is None:
        return None
    if isinstance(value, str) and value.strip().lower() in {"", "auto"}:
        return None
    return _as_bool(value)


def _as_text(value: TomlValue, fallback: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return fallback


def merge_payload(payload: TomlTable, defaults: TomlTable) -> TomlTable:
    merged = dict(defaults)
    for key, value in payload.items():
        if value is None:
            continue
        merged[key] = value
    return merged


def well_known_names(section: TomlTable | None) -> WellKnownNames:
    base = WellKnownNames()
    if not isinstance(section, dict):
        return base
    return WellKnownNames(
        object=_as_text(section.get("object"), base.object),
        target=_as_text(section.get("target"), base.target),
        change_args=_as_text(section.get("change_args"), base.change_args),
        options=_as_text(section.get("options"), base.options),
        signal=_as_text(section.get("signal"), base.signal),
        token=_as_text(section.get("token"), base.token),
        keyed_token=_as_text(section.get("keyed_token"), base.keyed_token),
    )


def generator_config(
    section: TomlTable | None,
    well_known: TomlTable | None = None,
) -> GeneratorConfig:
    base = GeneratorConfig()
    if not isinstance(section, dict):
        section = {}
    order = _as_text(section.get("order"), base.order).lower()
    if order not in _ORDER_MODES:
        order = base.order
    return GeneratorConfig(
        nullable_context=_as_tristate(section.get("nullable_context")),
        order=order,
        artifact_name=_as_text(section.get("artifact_name"), base.artifact_name),
        routed_signal_suffix=_as_text(
            section.get("routed_signal_suffix"), base.routed_signal_suffix
        ),
        routed_signal_raiser=_as_text(
            section.get("routed_signal_raiser"), base.routed_signal_raiser
        ),
        well_known=well_known_names(well_known),
    )


def load_generator_config(
    root: Path | None = None,
    config_path: Path | None = None,
    overrides: TomlTable | None = None,
) -> GeneratorConfig:
    data = load_config(root=root, config_path=config_path)
    section = data.get("generator", {})
    if not isinstance(section, dict):
        section = {}
    merged = merge_payload(overrides or {}, section)
    return generator_config(merged, data.get("well_known"))
