from __future__ import annotations

from dataclasses import dataclass

from dpgen.config import GeneratorConfig
from dpgen.ingest.adapter_contract import SymbolGraph
from dpgen.ingest.model import TypeSymbol
from dpgen.timeout_context import check_deadline

# C# 8 introduced nullable reference annotations.
NULLABLE_LANGUAGE_VERSION = 8


@dataclass(frozen=True)
class WellKnownTypes:
    object_type: TypeSymbol
    target_type: TypeSymbol
    change_args_type: TypeSymbol
    options_type: TypeSymbol | None = None
    signal_type: TypeSymbol | None = None
    token_type: TypeSymbol | None = None
    keyed_token_type: TypeSymbol | None = None


@dataclass(frozen=True)
class GenerationContext:
    """Everything a generation run resolves once and shares across stages."""

    graph: SymbolGraph
    well_known: WellKnownTypes
    nullable_context: bool
    config: GeneratorConfig

    def is_top_type(self, type_symbol: TypeSymbol | None) -> bool:
        return self.graph.types_equal(type_symbol, self.well_known.object_type)

    def is_target_type(self, type_symbol: TypeSymbol | None) -> bool:
        return self.graph.types_equal(type_symbol, self.well_known.target_type)

    def is_change_args_type(self, type_symbol: TypeSymbol | None) -> bool:
        return self.graph.types_equal(type_symbol, self.well_known.change_args_type)

    def can_cast_to(self, derived: TypeSymbol, base: TypeSymbol) -> bool:
        """Return True when `base` is `derived` or one of its base types."""
        current: TypeSymbol | None = derived
        seen: set[str] = set()
        while current is not None and current.metadata_name not in seen:
            check_deadline()
            if self.graph.types_equal(current, base):
                return True
            seen.add(current.metadata_name)
            current = self.graph.base_type_of(current)
        return False


def resolve_nullable_context(graph: SymbolGraph, config: GeneratorConfig) -> bool:
    if config.nullable_context is not None:
        return config.nullable_context
    return graph.language_version >= NULLABLE_LANGUAGE_VERSION


def build_context(
    graph: SymbolGraph, config: GeneratorConfig
) -> GenerationContext | None:
    """Resolve the well-known types; None when a required one is missing."""
    names = config.well_known
    object_type = graph.well_known_type(names.object)
    target_type = graph.well_known_type(names.target)
    change_args_type = graph.well_known_type(names.change_args)
    if object_type is None or target_type is None or change_args_type is None:
        return None
    return GenerationContext(
        graph=graph,
        well_known=WellKnownTypes(
            object_type=object_type,
            target_type=target_type,
            change_args_type=change_args_type,
            options_type=graph.well_known_type(names.options),
            signal_type=graph.well_known_type(names.signal),
            token_type=graph.well_known_type(names.token),
            keyed_token_type=graph.well_known_type(names.keyed_token),
        ),
        nullable_context=resolve_nullable_context(graph, config),
        config=config,
    )
