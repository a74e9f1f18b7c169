from __future__ import annotations

import logging
from dataclasses import dataclass

from dpgen.analysis.context import GenerationContext
from dpgen.analysis.handlers import DiscoveredHandlers
from dpgen.analysis.model import GenerationRequest
from dpgen.ingest.model import Accessibility, FieldSymbol
from dpgen.invariants import require_not_none
from dpgen.synthesis.ir import (
    Call,
    Cast,
    FieldDecl,
    HelperClassDecl,
    MemberAccess,
    MemberDecl,
    MethodDecl,
    Name,
    Parameter,
    PropertyDecl,
    RegistrationMethodDecl,
    StringLiteral,
    TypeOf,
)
from dpgen.synthesis.metadata import VALUE_TYPE_PARAMETER, build_metadata_expression

logger = logging.getLogger(__name__)

TARGET_TYPE_PARAMETER = "__TTarget"
# `DependencyPropertyKey.DependencyProperty` exposes the read-only token.
KEYED_TOKEN_PLAIN_MEMBER = "DependencyProperty"


@dataclass(frozen=True)
class TokenAccess:
    """Accessibility of the read (plain) and write (keyed) tokens."""

    read: Accessibility
    write: Accessibility
    synthesize_plain_token: bool = False


@dataclass(frozen=True)
class RequestFragment:
    request: GenerationRequest
    members: tuple[MemberDecl, ...]


def token_access(request: GenerationRequest, context: GenerationContext) -> TokenAccess:
    declared = request.backing_field.accessibility
    if not request.is_keyed:
        return TokenAccess(read=declared, write=declared)
    plain = context.graph.find_member(request.owner, request.plain_token_name)
    if plain is None:
        return TokenAccess(
            read=Accessibility.PUBLIC, write=declared, synthesize_plain_token=True
        )
    return TokenAccess(read=plain.accessibility, write=declared)


def _plain_token_field(request: GenerationRequest, context: GenerationContext) -> FieldDecl:
    token_type = require_not_none(context.well_known.token_type, reason="token type")
    return FieldDecl(
        accessibility=Accessibility.PUBLIC.keyword,
        type_name=token_type.name,
        name=request.plain_token_name,
        initializer=MemberAccess(Name(request.keyed_token_name), KEYED_TOKEN_PLAIN_MEMBER),
    )


def _write_token(request: GenerationRequest) -> str:
    return request.keyed_token_name if request.is_keyed else request.plain_token_name


def _documentation(lines: tuple[str, ...]) -> tuple[str, ...]:
    rendered = []
    for line in lines:
        text = line.rstrip()
        rendered.append(text if text.lstrip().startswith("///") else f"/// {text}".rstrip())
    return tuple(rendered)


def _instance_property(
    request: GenerationRequest, access: TokenAccess
) -> PropertyDecl:
    value_type = request.inferred_value_type().display_name
    setter_accessibility = None
    if request.is_keyed and access.write.is_narrower_than(access.read):
        setter_accessibility = access.write.keyword
    return PropertyDecl(
        accessibility=access.read.keyword,
        type_name=value_type,
        name=request.target_name,
        getter=Cast(
            value_type,
            Call(MemberAccess(Name("this"), "GetValue"), (Name(request.plain_token_name),)),
        ),
        setter=Call(
            MemberAccess(Name("this"), "SetValue"),
            (Name(_write_token(request)), Name("value")),
        ),
        setter_accessibility=setter_accessibility,
        documentation=_documentation(request.candidate.documentation),
    )


def _attached_accessors(
    request: GenerationRequest, access: TokenAccess, context: GenerationContext
) -> tuple[MethodDecl, MethodDecl]:
    value_type = request.inferred_value_type().display_name
    if request.narrowing_type is not None:
        target_type = request.narrowing_type.display_name
    else:
        target_type = context.well_known.target_type.name
    getter = MethodDecl(
        accessibility=access.read.keyword,
        return_type=value_type,
        name=f"Get{request.target_name}",
        parameters=(Parameter(target_type, "d"),),
        body=Cast(
            value_type,
            Call(MemberAccess(Name("d"), "GetValue"), (Name(request.plain_token_name),)),
        ),
    )
    setter = MethodDecl(
        accessibility=(access.write if request.is_keyed else access.read).keyword,
        return_type="void",
        name=f"Set{request.target_name}",
        parameters=(Parameter(target_type, "d"), Parameter(value_type, "value")),
        body=Call(
            MemberAccess(Name("d"), "SetValue"),
            (Name(_write_token(request)), Name("value")),
        ),
    )
    return getter, setter


def _helper_declaration(request: GenerationRequest, context: GenerationContext) -> str:
    if not request.is_attached:
        return "Gen"
    if request.candidate.receiver_generic:
        return (
            f"GenAttached<{TARGET_TYPE_PARAMETER}> where {TARGET_TYPE_PARAMETER} : "
            f"{context.well_known.target_type.name}"
        )
    return "GenAttached"


def _summary(request: GenerationRequest) -> str:
    if request.is_keyed:
        what = (
            "a read-only attached property"
            if request.is_attached
            else "a read-only dependency property"
        )
    else:
        what = "an attached property" if request.is_attached else "a dependency property"
    summary = (
        f'Registers {what} named "{request.target_name}" whose type is '
        f'<typeparamref name="{VALUE_TYPE_PARAMETER}"/>.'
    )
    if request.narrowing_type is not None:
        summary += (
            "<br/>This attached property is only for use with objects of type "
            f'<typeparamref name="{TARGET_TYPE_PARAMETER}"/>.'
        )
    return summary


def _options_type_name(context: GenerationContext) -> str:
    options_type = context.well_known.options_type
    if options_type is not None:
        return options_type.name
    return context.config.well_known.options.rpartition(".")[2]


def _registration_method(
    request: GenerationRequest,
    handlers: DiscoveredHandlers,
    context: GenerationContext,
) -> RegistrationMethodDecl:
    token_type = require_not_none(context.well_known.token_type, reason="token type")
    parameters: list[Parameter] = []
    if request.has_default_value:
        parameters.append(Parameter(VALUE_TYPE_PARAMETER, "defaultValue"))
    if request.has_flags:
        parameters.append(Parameter(_options_type_name(context), "flags"))
    attached = "Attached" if request.is_attached else ""
    read_only = "ReadOnly" if request.is_keyed else ""
    return RegistrationMethodDecl(
        summary=_summary(request),
        return_type=request.backing_field.type.name,
        name=request.target_name,
        type_parameter=VALUE_TYPE_PARAMETER,
        parameters=tuple(parameters),
        metadata=build_metadata_expression(
            has_default_value=request.has_default_value,
            has_flags=request.has_flags,
            change=handlers.change_expression,
            coercion=handlers.coercion,
            nullable_context=context.nullable_context,
        ),
        registration=Call(
            MemberAccess(Name(token_type.name), f"Register{attached}{read_only}"),
            (
                StringLiteral(request.target_name),
                TypeOf(VALUE_TYPE_PARAMETER),
                TypeOf(request.owner.declaration_name),
                Name("metadata"),
            ),
        ),
    )


def build_fragment(
    request: GenerationRequest,
    handlers: DiscoveredHandlers,
    context: GenerationContext,
) -> RequestFragment:
    """Build every declaration one request contributes to its owning type."""
    backing_field: FieldSymbol = require_not_none(
        request.backing_field, reason="backing field unset", property=request.target_name
    )
    access = token_access(request, context)
    members: list[MemberDecl] = []
    if access.synthesize_plain_token:
        members.append(_plain_token_field(request, context))
    if request.is_attached:
        members.extend(_attached_accessors(request, access, context))
    else:
        members.append(_instance_property(request, access))
    members.append(
        HelperClassDecl(
            declaration=_helper_declaration(request, context),
            methods=(_registration_method(request, handlers, context),),
        )
    )
    logger.debug(
        "fragment for %s.%s: %d members",
        backing_field.containing_type.metadata_name,
        request.target_name,
        len(members),
    )
    return RequestFragment(request=request, members=tuple(members))
