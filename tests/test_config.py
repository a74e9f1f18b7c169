from __future__ import annotations

import textwrap
from pathlib import Path

from dpgen.config import (
    DEFAULT_ARTIFACT_NAME,
    GeneratorConfig,
    load_generator_config,
    merge_payload,
)


def _write(path: Path, text: str) -> Path:
    path.write_text(textwrap.dedent(text).strip() + "\n", encoding="utf-8")
    return path


def test_missing_config_file_yields_defaults(tmp_path: Path) -> None:
    config = load_generator_config(root=tmp_path)
    assert config == GeneratorConfig()
    assert config.artifact_name == DEFAULT_ARTIFACT_NAME
    assert config.nullable_context is None
    assert config.routed_signal_suffix == "ChangedEvent"


def test_reads_generator_and_well_known_sections(tmp_path: Path) -> None:
    _write(
        tmp_path / "dpgen.toml",
        """
        [generator]
        nullable_context = false
        order = "sorted"
        artifact_name = "Props.g.cs"
        routed_signal_suffix = "ChangedSignal"
        routed_signal_raiser = "FrameworkElement"

        [well_known]
        target = "Avalonia.AvaloniaObject"
        """,
    )
    config = load_generator_config(root=tmp_path)
    assert config.nullable_context is False
    assert config.order == "sorted"
    assert config.artifact_name == "Props.g.cs"
    assert config.routed_signal_suffix == "ChangedSignal"
    assert config.routed_signal_raiser == "FrameworkElement"
    assert config.well_known.target == "Avalonia.AvaloniaObject"
    assert config.well_known.object == "System.Object"


def test_auto_nullable_and_unknown_order_fall_back(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "custom.toml",
        """
        [generator]
        nullable_context = "auto"
        order = "random"
        """,
    )
    config = load_generator_config(config_path=path)
    assert config.nullable_context is None
    assert config.order == "source"


def test_malformed_toml_yields_defaults(tmp_path: Path) -> None:
    _write(tmp_path / "dpgen.toml", "[generator\norder = ")
    assert load_generator_config(root=tmp_path) == GeneratorConfig()


def test_overrides_take_precedence_over_file(tmp_path: Path) -> None:
    _write(
        tmp_path / "dpgen.toml",
        """
        [generator]
        nullable_context = true
        order = "sorted"
        """,
    )
    config = load_generator_config(
        root=tmp_path, overrides={"nullable_context": False, "order": None}
    )
    assert config.nullable_context is False
    assert config.order == "sorted"


def test_merge_payload_skips_none_values() -> None:
    merged = merge_payload({"a": None, "b": 2}, {"a": 1, "c": 3})
    assert merged == {"a": 1, "b": 2, "c": 3}
