"""Discovery of change-notification and coercion callbacks.

The owning type's members are scanned once, in declaration order. The best
change-notification source is kept by rank; the first qualifying coercion
method wins outright. The scan stops early only after both a static change
method and a coercion method have been found.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum, IntFlag

from dpgen.analysis.context import GenerationContext
from dpgen.analysis.model import GenerationRequest
from dpgen.ingest.model import FieldSymbol, MethodSymbol, TypeSymbol
from dpgen.synthesis import casts
from dpgen.synthesis.ir import Expr
from dpgen.timeout_context import check_deadline

logger = logging.getLogger(__name__)

CHANGED_SUFFIX = "Changed"
COERCE_PREFIX = "Coerce"


class ChangeHandlerKind(IntEnum):
    """Change-notification sources; higher values take priority."""

    NONE = 0
    ROUTED_SIGNAL = 1
    INSTANCE_METHOD = 2
    STATIC_METHOD = 3


class AssociatedHandlers(IntFlag):
    NONE = 0
    PROPERTY_CHANGED = 1
    COERCE = 2
    ALL = PROPERTY_CHANGED | COERCE


@dataclass(frozen=True)
class HandlerCandidate:
    expression: Expr
    rank: ChangeHandlerKind


@dataclass(frozen=True)
class DiscoveredHandlers:
    change: HandlerCandidate | None = None
    coercion: Expr | None = None

    @property
    def change_expression(self) -> Expr | None:
        return self.change.expression if self.change is not None else None


def _compatibility_root(request: GenerationRequest, context: GenerationContext) -> TypeSymbol:
    # The type every target object is known to be an instance of.
    if request.is_attached:
        return request.narrowing_type or context.well_known.target_type
    return request.owner


def _value_cast(request: GenerationRequest, context: GenerationContext) -> str | None:
    value_type = request.inferred_value_type()
    if context.is_top_type(value_type):
        return None
    return value_type.display_name


def _routed_signal(
    member: FieldSymbol, request: GenerationRequest, context: GenerationContext
) -> HandlerCandidate | None:
    signal_type = context.well_known.signal_type
    if signal_type is None:
        return None
    expected_name = request.target_name + context.config.routed_signal_suffix
    if not (
        member.is_static
        and member.is_readonly
        and member.name == expected_name
        and context.graph.types_equal(member.type, signal_type)
    ):
        return None
    return HandlerCandidate(
        expression=casts.routed_signal_callback(
            context.config.routed_signal_raiser,
            request.inferred_value_type().display_name,
            member.name,
            _value_cast(request, context),
        ),
        rank=ChangeHandlerKind.ROUTED_SIGNAL,
    )


def _static_change(
    method: MethodSymbol, request: GenerationRequest, context: GenerationContext
) -> HandlerCandidate | None:
    name = method.name
    if len(method.parameters) != 2 or not name.endswith(CHANGED_SUFFIX):
        return None
    if request.target_name not in name[: -len(CHANGED_SUFFIX)]:
        return None
    target_param, args_param = method.parameters
    if not context.is_change_args_type(args_param.type):
        return None
    if context.is_target_type(target_param.type):
        expression = casts.static_change_callback(name)
    elif context.can_cast_to(_compatibility_root(request, context), target_param.type):
        expression = casts.static_change_callback(name, target_param.type.display_name)
    else:
        return None
    return HandlerCandidate(expression=expression, rank=ChangeHandlerKind.STATIC_METHOD)


def _instance_change(
    method: MethodSymbol, request: GenerationRequest, context: GenerationContext
) -> HandlerCandidate | None:
    name = method.name
    if request.is_attached:
        return None
    if name not in (f"On{request.target_name}Changed", f"{request.target_name}Changed"):
        return None
    owner = request.owner.display_name
    graph = context.graph
    if len(method.parameters) == 2:
        old_param, new_param = method.parameters
        if (
            graph.types_equal(old_param.type, new_param.type)
            and graph.types_equal(old_param.type, request.inferred_value_type())
            and old_param.name.lower().startswith("old")
            and new_param.name.lower().startswith("new")
        ):
            return HandlerCandidate(
                expression=casts.instance_old_new_callback(
                    owner, name, _value_cast(request, context)
                ),
                rank=ChangeHandlerKind.INSTANCE_METHOD,
            )
    elif len(method.parameters) == 1:
        if context.is_change_args_type(method.parameters[0].type):
            return HandlerCandidate(
                expression=casts.instance_args_callback(owner, name),
                rank=ChangeHandlerKind.INSTANCE_METHOD,
            )
    return None


def _change_method(
    method: MethodSymbol, request: GenerationRequest, context: GenerationContext
) -> HandlerCandidate | None:
    if not method.returns_void:
        return None
    if method.is_static:
        return _static_change(method, request, context)
    return _instance_change(method, request, context)


def _coercion(
    method: MethodSymbol, request: GenerationRequest, context: GenerationContext
) -> Expr | None:
    if not method.is_static or method.returns_void or len(method.parameters) != 2:
        return None
    if method.name != COERCE_PREFIX + request.target_name:
        return None
    graph = context.graph
    value_type = request.inferred_value_type()
    return_is_object = context.is_top_type(method.return_type)
    if not return_is_object and not graph.types_equal(method.return_type, value_type):
        return None

    target_param, value_param = method.parameters
    target_cast = None
    if not context.is_target_type(target_param.type):
        if not context.can_cast_to(_compatibility_root(request, context), target_param.type):
            return None
        target_cast = target_param.type.display_name

    value_cast = None
    if not context.is_top_type(value_param.type):
        if not graph.types_equal(value_param.type, value_type):
            return None
        value_cast = value_type.display_name

    plan = casts.CastPlan(
        target_cast=target_cast,
        value_cast=value_cast,
        force_wrap=not return_is_object,
    )
    return casts.coercion_callback(method.name, plan)


def discover_handlers(
    request: GenerationRequest, context: GenerationContext
) -> DiscoveredHandlers:
    best_rank = ChangeHandlerKind.NONE
    change: HandlerCandidate | None = None
    coercion: Expr | None = None
    found = AssociatedHandlers.NONE

    for member in context.graph.members_of(request.owner):
        check_deadline()
        if isinstance(member, FieldSymbol):
            if best_rank < ChangeHandlerKind.ROUTED_SIGNAL:
                candidate = _routed_signal(member, request, context)
                if candidate is not None:
                    best_rank, change = candidate.rank, candidate
        elif isinstance(member, MethodSymbol):
            candidate = None
            if best_rank < ChangeHandlerKind.STATIC_METHOD:
                candidate = _change_method(member, request, context)
            if candidate is not None:
                best_rank, change = candidate.rank, candidate
                if candidate.rank is ChangeHandlerKind.STATIC_METHOD:
                    found |= AssociatedHandlers.PROPERTY_CHANGED
            elif not found & AssociatedHandlers.COERCE:
                coercion = _coercion(member, request, context)
                if coercion is not None:
                    found |= AssociatedHandlers.COERCE
        else:
            continue
        if found == AssociatedHandlers.ALL:
            break

    logger.debug(
        "handlers for %s: change=%s coerce=%s",
        request.target_name,
        best_rank.name,
        coercion is not None,
    )
    return DiscoveredHandlers(change=change, coercion=coercion)
