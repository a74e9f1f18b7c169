from __future__ import annotations

from pathlib import Path

from dpgen.exceptions import SymbolGraphError
from dpgen.ingest.adapter_contract import GraphAdapter, GraphDocument
from dpgen.ingest.json_graph import JsonGraphAdapter


_ADAPTERS_BY_FORMAT: dict[str, GraphAdapter] = {}
_ADAPTERS_BY_EXTENSION: dict[str, GraphAdapter] = {}


def register_adapter(adapter: GraphAdapter) -> None:
    _ADAPTERS_BY_FORMAT[adapter.format_id] = adapter
    for extension in adapter.file_extensions:
        _ADAPTERS_BY_EXTENSION[extension.lower()] = adapter


def adapter_for_format(format_id: str) -> GraphAdapter | None:
    return _ADAPTERS_BY_FORMAT.get(format_id.lower())


def adapter_for_extension(extension: str) -> GraphAdapter | None:
    return _ADAPTERS_BY_EXTENSION.get(extension.lower())


def resolve_adapter(
    *,
    path: Path | None = None,
    format_id: str | None = None,
    default_format_id: str = "json",
) -> GraphAdapter:
    if format_id is not None:
        adapter = adapter_for_format(format_id)
        if adapter is None:
            raise SymbolGraphError(f"unknown symbol graph format: {format_id}")
        return adapter
    if path is not None and path.suffix:
        adapter = adapter_for_extension(path.suffix)
        if adapter is not None:
            return adapter
    # Import-time registration guarantees a canonical fallback adapter.
    return _ADAPTERS_BY_FORMAT[default_format_id.lower()]


def load_graph_document(path: Path, *, format_id: str | None = None) -> GraphDocument:
    adapter = resolve_adapter(path=path, format_id=format_id)
    return adapter.load_text(path.read_text(encoding="utf-8"))


register_adapter(JsonGraphAdapter())
