from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from dpgen.ingest.model import (
    CallSiteRef,
    CandidateRequest,
    FieldSymbol,
    MemberSymbol,
    TypeSymbol,
)


@runtime_checkable
class SymbolGraph(Protocol):
    """Read-only query surface over a compiled host program.

    Implementations must return members in declaration order and must answer
    every query identically for the lifetime of one generation run.
    """

    language_version: int

    def resolve_enclosing_field(self, site: CallSiteRef) -> FieldSymbol | None: ...

    def members_of(self, type_symbol: TypeSymbol) -> Sequence[MemberSymbol]: ...

    def find_member(self, type_symbol: TypeSymbol, name: str) -> MemberSymbol | None: ...

    def types_equal(self, left: TypeSymbol | None, right: TypeSymbol | None) -> bool: ...

    def base_type_of(self, type_symbol: TypeSymbol) -> TypeSymbol | None: ...

    def containing_type_of(self, type_symbol: TypeSymbol) -> TypeSymbol | None: ...

    def generic_argument_of(self, site: CallSiteRef) -> TypeSymbol | None: ...

    def receiver_generic_argument_of(self, site: CallSiteRef) -> TypeSymbol | None: ...

    def argument_types_of(self, site: CallSiteRef) -> Sequence[TypeSymbol | None]: ...

    def well_known_type(self, metadata_name: str) -> TypeSymbol | None: ...


@dataclass(frozen=True)
class GraphDocument:
    graph: SymbolGraph
    candidates: tuple[CandidateRequest, ...] = ()


@runtime_checkable
class GraphAdapter(Protocol):
    format_id: str
    file_extensions: tuple[str, ...]

    def load_text(self, text: str) -> GraphDocument: ...
