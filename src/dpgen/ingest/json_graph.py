from __future__ import annotations

import json
from collections.abc import Sequence

from pydantic import ValidationError

from dpgen.exceptions import SymbolGraphError
from dpgen.ingest.adapter_contract import GraphAdapter, GraphDocument
from dpgen.ingest.model import (
    Accessibility,
    CallSite,
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
from dpgen.json_types import JSONObject
from dpgen.schema import (
    FieldMemberDTO,
    MethodMemberDTO,
    OtherMemberDTO,
    SymbolGraphDocument,
    TypeDTO,
)

# Spelling the host compiler uses for its built-in types.
_KEYWORD_TYPES: dict[str, tuple[str, bool]] = {
    "System.Object": ("object", False),
    "System.String": ("string", False),
    "System.Boolean": ("bool", True),
    "System.Byte": ("byte", True),
    "System.SByte": ("sbyte", True),
    "System.Char": ("char", True),
    "System.Int16": ("short", True),
    "System.UInt16": ("ushort", True),
    "System.Int32": ("int", True),
    "System.UInt32": ("uint", True),
    "System.Int64": ("long", True),
    "System.UInt64": ("ulong", True),
    "System.Single": ("float", True),
    "System.Double": ("double", True),
    "System.Decimal": ("decimal", True),
}


def _split_metadata_name(metadata_name: str) -> tuple[str, str]:
    head, _, tail = metadata_name.rpartition(".")
    return head, tail or metadata_name


class JsonSymbolGraph:
    """Symbol graph backed by a validated symbol-graph document."""

    def __init__(self, document: SymbolGraphDocument) -> None:
        self.language_version = int(document.language_version)
        self._types: dict[str, TypeSymbol] = {}
        self._opaque: dict[str, TypeSymbol] = {}
        self._members: dict[str, tuple[MemberSymbol, ...]] = {}
        self._sites: dict[str, CallSite] = {}
        for type_dto in document.types:
            if type_dto.metadata_name in self._types:
                raise SymbolGraphError(f"duplicate type: {type_dto.metadata_name}")
            self._types[type_dto.metadata_name] = self._declared_type(type_dto)
        for type_dto in document.types:
            owner = self._types[type_dto.metadata_name]
            self._members[owner.metadata_name] = tuple(
                self._member(owner, member) for member in type_dto.members
            )
        for site_dto in document.call_sites:
            if site_dto.id in self._sites:
                raise SymbolGraphError(f"duplicate call site: {site_dto.id}")
            if site_dto.field.owner not in self._types:
                raise SymbolGraphError(
                    f"call site {site_dto.id} names undeclared owner {site_dto.field.owner}"
                )
            self._sites[site_dto.id] = CallSite(
                ref=CallSiteRef(site_dto.id),
                owner=site_dto.field.owner,
                field_name=site_dto.field.name,
                generic_argument=self._optional_ref(site_dto.generic_argument),
                receiver_generic_argument=self._optional_ref(
                    site_dto.receiver_generic_argument
                ),
                argument_types=tuple(
                    self._optional_ref(argument) for argument in site_dto.arguments
                ),
            )

    def _declared_type(self, dto: TypeDTO) -> TypeSymbol:
        keyword = _KEYWORD_TYPES.get(dto.metadata_name)
        display = dto.display_name or (keyword[0] if keyword else dto.metadata_name)
        if dto.name:
            name, namespace = dto.name, dto.namespace
        else:
            # Without an explicit name the metadata name is split on its last dot.
            namespace, name = _split_metadata_name(dto.metadata_name)
        return TypeSymbol(
            metadata_name=dto.metadata_name,
            name=name,
            namespace=namespace,
            display_name=display,
            base_type=dto.base_type,
            containing_type=dto.containing_type,
            type_parameters=tuple(dto.type_parameters),
            is_static=dto.is_static,
            is_value_type=dto.is_value_type or bool(keyword and keyword[1]),
        )

    def _member(
        self, owner: TypeSymbol, dto: FieldMemberDTO | MethodMemberDTO | OtherMemberDTO
    ) -> MemberSymbol:
        match dto:
            case FieldMemberDTO():
                return FieldSymbol(
                    name=dto.name,
                    type=self._ref(dto.type),
                    containing_type=owner,
                    is_static=dto.is_static,
                    is_readonly=dto.is_readonly,
                    accessibility=self._accessibility(dto.accessibility, owner, dto.name),
                )
            case MethodMemberDTO():
                return MethodSymbol(
                    name=dto.name,
                    containing_type=owner,
                    return_type=self._optional_ref(dto.return_type),
                    parameters=tuple(
                        ParameterSymbol(name=param.name, type=self._ref(param.type))
                        for param in dto.parameters
                    ),
                    is_static=dto.is_static,
                    accessibility=self._accessibility(dto.accessibility, owner, dto.name),
                )
            case _:
                return OtherMemberSymbol(
                    name=dto.name,
                    containing_type=owner,
                    accessibility=self._accessibility(dto.accessibility, owner, dto.name),
                )

    @staticmethod
    def _accessibility(value: str, owner: TypeSymbol, member: str) -> Accessibility:
        try:
            return Accessibility.parse(value)
        except ValueError as exc:
            raise SymbolGraphError(
                f"{owner.metadata_name}.{member}: {exc}"
            ) from exc

    def _optional_ref(self, reference: str | None) -> TypeSymbol | None:
        if reference is None:
            return None
        return self._ref(reference)

    def _ref(self, reference: str) -> TypeSymbol:
        text = reference.strip()
        if not text:
            raise SymbolGraphError("empty type reference")
        annotated = text.endswith("?")
        metadata_name = text[:-1] if annotated else text
        resolved = self._type_for(metadata_name)
        if not annotated:
            return resolved
        if resolved.is_value_type:
            # `int?` is a distinct (nullable value) type, not an annotation.
            return self._nullable_value_type(resolved)
        return resolved.with_nullable_annotation()

    def _nullable_value_type(self, underlying: TypeSymbol) -> TypeSymbol:
        metadata_name = f"{underlying.metadata_name}?"
        nullable = self._opaque.get(metadata_name)
        if nullable is None:
            nullable = TypeSymbol(
                metadata_name=metadata_name,
                name=f"{underlying.name}?",
                namespace=underlying.namespace,
                display_name=f"{underlying.display_name}?",
                is_value_type=True,
            )
            self._opaque[metadata_name] = nullable
        return nullable

    def _type_for(self, metadata_name: str) -> TypeSymbol:
        declared = self._types.get(metadata_name)
        if declared is not None:
            return declared
        opaque = self._opaque.get(metadata_name)
        if opaque is None:
            namespace, simple = _split_metadata_name(metadata_name)
            keyword = _KEYWORD_TYPES.get(metadata_name)
            opaque = TypeSymbol(
                metadata_name=metadata_name,
                name=simple,
                namespace=namespace,
                display_name=keyword[0] if keyword else metadata_name,
                is_value_type=bool(keyword and keyword[1]),
            )
            self._opaque[metadata_name] = opaque
        return opaque

    def resolve_enclosing_field(self, site: CallSiteRef) -> FieldSymbol | None:
        call_site = self._sites.get(site.id)
        if call_site is None:
            return None
        owner = self._types[call_site.owner]
        member = self.find_member(owner, call_site.field_name)
        return member if isinstance(member, FieldSymbol) else None

    def members_of(self, type_symbol: TypeSymbol) -> Sequence[MemberSymbol]:
        return self._members.get(type_symbol.metadata_name, ())

    def find_member(self, type_symbol: TypeSymbol, name: str) -> MemberSymbol | None:
        for member in self.members_of(type_symbol):
            if member.name == name:
                return member
        return None

    def types_equal(self, left: TypeSymbol | None, right: TypeSymbol | None) -> bool:
        if left is None or right is None:
            return False
        return left.metadata_name == right.metadata_name

    def base_type_of(self, type_symbol: TypeSymbol) -> TypeSymbol | None:
        declared = self._types.get(type_symbol.metadata_name, type_symbol)
        if declared.base_type is None:
            return None
        return self._type_for(declared.base_type)

    def containing_type_of(self, type_symbol: TypeSymbol) -> TypeSymbol | None:
        if type_symbol.containing_type is None:
            return None
        return self._type_for(type_symbol.containing_type)

    def generic_argument_of(self, site: CallSiteRef) -> TypeSymbol | None:
        call_site = self._sites.get(site.id)
        return call_site.generic_argument if call_site is not None else None

    def receiver_generic_argument_of(self, site: CallSiteRef) -> TypeSymbol | None:
        call_site = self._sites.get(site.id)
        return call_site.receiver_generic_argument if call_site is not None else None

    def argument_types_of(self, site: CallSiteRef) -> Sequence[TypeSymbol | None]:
        call_site = self._sites.get(site.id)
        return call_site.argument_types if call_site is not None else ()

    def well_known_type(self, metadata_name: str) -> TypeSymbol | None:
        return self._types.get(metadata_name)

    def has_call_site(self, site: CallSiteRef) -> bool:
        return site.id in self._sites


def _candidates(
    document: SymbolGraphDocument, graph: JsonSymbolGraph
) -> tuple[CandidateRequest, ...]:
    candidates: list[CandidateRequest] = []
    for dto in document.candidates:
        site = CallSiteRef(dto.site)
        if not graph.has_call_site(site):
            raise SymbolGraphError(f"candidate {dto.property} names unknown call site {dto.site}")
        candidates.append(
            CandidateRequest(
                callee=CalleeKind(dto.callee),
                property_name=dto.property,
                site=site,
                receiver_generic=dto.receiver_generic,
                documentation=tuple(dto.documentation),
            )
        )
    return tuple(candidates)


def load_symbol_graph_payload(payload: JSONObject) -> GraphDocument:
    try:
        document = SymbolGraphDocument.model_validate(payload)
    except ValidationError as exc:
        raise SymbolGraphError(f"invalid symbol graph document: {exc}") from exc
    graph = JsonSymbolGraph(document)
    return GraphDocument(graph=graph, candidates=_candidates(document, graph))


class JsonGraphAdapter(GraphAdapter):
    format_id = "json"
    file_extensions = (".json",)

    def load_text(self, text: str) -> GraphDocument:
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SymbolGraphError(f"symbol graph is not valid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise SymbolGraphError("symbol graph document must be a JSON object")
        return load_symbol_graph_payload(payload)
