from dpgen.ingest.adapter_contract import GraphAdapter, GraphDocument, SymbolGraph
from dpgen.ingest.json_graph import (
    JsonGraphAdapter,
    JsonSymbolGraph,
    load_symbol_graph_payload,
)
from dpgen.ingest.model import (
    Accessibility,
    CallSiteRef,
    CalleeKind,
    CandidateRequest,
    FieldSymbol,
    MemberSymbol,
    MethodSymbol,
    OtherMemberSymbol,
    ParameterSymbol,
    TypeSymbol,
)
from dpgen.ingest.registry import load_graph_document, resolve_adapter


__all__ = [
    "Accessibility",
    "CallSiteRef",
    "CalleeKind",
    "CandidateRequest",
    "FieldSymbol",
    "GraphAdapter",
    "GraphDocument",
    "JsonGraphAdapter",
    "JsonSymbolGraph",
    "MemberSymbol",
    "MethodSymbol",
    "OtherMemberSymbol",
    "ParameterSymbol",
    "SymbolGraph",
    "TypeSymbol",
    "load_graph_document",
    "load_symbol_graph_payload",
    "resolve_adapter",
]
