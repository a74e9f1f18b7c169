"""Grouping of request fragments into one generated compilation unit."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from dpgen.analysis.context import GenerationContext
from dpgen.ingest.model import TypeSymbol
from dpgen.order_contract import sort_once
from dpgen.synthesis.accessors import RequestFragment
from dpgen.synthesis.ir import (
    CompilationUnit,
    MemberDecl,
    NamespaceDecl,
    TypeDecl,
    render_unit,
)
from dpgen.timeout_context import check_deadline

GENERATOR_NAME = "dpgen.DependencyPropertyGenerator"
AUTO_GENERATED_HEADER = (
    "//------------------------------------------------------------------------------",
    "// <auto-generated>",
    "//     This code was generated by a dpgen source generator.",
    f"//     Generator = {GENERATOR_NAME}",
    "// </auto-generated>",
    "//------------------------------------------------------------------------------",
)
USINGS = ("System.Windows",)


@dataclass
class TypeGroup:
    owner: TypeSymbol
    fragments: list[RequestFragment] = field(default_factory=list)


@dataclass
class NamespaceGroup:
    name: str
    types: dict[str, TypeGroup] = field(default_factory=dict)


@dataclass(frozen=True)
class OutputArtifact:
    name: str
    source: str
    unit: CompilationUnit


def plan_groups(
    fragments: Iterable[RequestFragment], *, order: str = "source"
) -> list[NamespaceGroup]:
    """Group fragments by namespace, then owning type.

    `source` keeps first-seen order; `sorted` orders namespaces, types, and
    requests by name.
    """
    groups: dict[str, NamespaceGroup] = {}
    for fragment in fragments:
        owner = fragment.request.owner
        namespace = groups.setdefault(owner.namespace, NamespaceGroup(owner.namespace))
        type_group = namespace.types.setdefault(owner.metadata_name, TypeGroup(owner))
        type_group.fragments.append(fragment)

    planned = list(groups.values())
    if order != "sorted":
        return planned
    planned = sort_once(
        planned,
        source="emission.namespaces",
        key=lambda group: group.name,
    )
    for namespace in planned:
        ordered_types = sort_once(
            namespace.types.values(),
            source="emission.types",
            key=lambda group: group.owner.metadata_name,
        )
        namespace.types = {group.owner.metadata_name: group for group in ordered_types}
        for type_group in ordered_types:
            type_group.fragments = sort_once(
                type_group.fragments,
                source="emission.requests",
                key=lambda fragment: fragment.request.target_name,
            )
    return planned


def _containing_chain(owner: TypeSymbol, context: GenerationContext) -> list[TypeSymbol]:
    chain: list[TypeSymbol] = []
    current = context.graph.containing_type_of(owner)
    while current is not None:
        check_deadline()
        chain.append(current)
        current = context.graph.containing_type_of(current)
    chain.reverse()
    return chain


def _type_decl(group: TypeGroup, context: GenerationContext) -> TypeDecl:
    members: list[MemberDecl] = []
    for fragment in group.fragments:
        check_deadline()
        members.extend(fragment.members)
    declaration = TypeDecl(
        name=group.owner.declaration_name,
        is_static=group.owner.is_static,
        members=tuple(members),
    )
    # Nested owners are reopened inside each of their containing types.
    for container in reversed(_containing_chain(group.owner, context)):
        declaration = TypeDecl(
            name=container.declaration_name,
            is_static=container.is_static,
            nested=(declaration,),
        )
    return declaration


def build_unit(
    groups: Iterable[NamespaceGroup], context: GenerationContext
) -> CompilationUnit:
    namespaces = tuple(
        NamespaceDecl(
            name=group.name,
            types=tuple(_type_decl(type_group, context) for type_group in group.types.values()),
        )
        for group in groups
    )
    return CompilationUnit(
        header=AUTO_GENERATED_HEADER,
        usings=USINGS,
        nullable_enable=context.nullable_context,
        namespaces=namespaces,
    )


def render_artifact(
    fragments: Iterable[RequestFragment], context: GenerationContext
) -> OutputArtifact | None:
    """Render every fragment into one artifact; None when there are none."""
    groups = plan_groups(fragments, order=context.config.order)
    if not groups:
        return None
    unit = build_unit(groups, context)
    return OutputArtifact(
        name=context.config.artifact_name,
        source=render_unit(unit),
        unit=unit,
    )
