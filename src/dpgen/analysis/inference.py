"""Value-type and call-shape inference for admitted requests.

Precedence, highest first:

1. an explicit generic argument on the registration call;
2. the static type of a first argument that is not the options type, which
   is then the default value (an untyped argument counts as `object`);
3. `object`.

A lone options-typed argument is always the flags argument, so an
options-typed default value cannot be expressed.
"""

from __future__ import annotations

import logging

from dpgen.analysis.context import GenerationContext
from dpgen.analysis.model import GenerationRequest, InferenceResult
from dpgen.ingest.model import TypeSymbol

logger = logging.getLogger(__name__)


def _is_options_type(context: GenerationContext, type_symbol: TypeSymbol) -> bool:
    options_type = context.well_known.options_type
    return options_type is not None and context.graph.types_equal(
        type_symbol, options_type
    )


def infer(request: GenerationRequest, context: GenerationContext) -> InferenceResult:
    graph = context.graph
    site = request.candidate.site
    generic_argument = graph.generic_argument_of(site)
    arguments = list(graph.argument_types_of(site))

    has_default_value = False
    has_flags = False
    default_type: TypeSymbol | None = None
    if arguments:
        first = arguments[0] or context.well_known.object_type
        if _is_options_type(context, first):
            has_flags = True
        else:
            has_default_value = True
            default_type = first
            has_flags = len(arguments) > 1

    value_type = generic_argument or default_type or context.well_known.object_type

    narrowing_type = None
    if request.is_attached and request.candidate.receiver_generic:
        narrowing_type = graph.receiver_generic_argument_of(site)

    result = InferenceResult(
        value_type=value_type,
        has_default_value=has_default_value,
        has_flags=has_flags,
        narrowing_type=narrowing_type,
    )
    logger.debug(
        "inferred %s: type=%s shape=%s narrowing=%s",
        request.target_name,
        value_type.display_name,
        result.shape.value,
        narrowing_type.display_name if narrowing_type is not None else None,
    )
    return result


def apply_inference(
    request: GenerationRequest, context: GenerationContext
) -> GenerationRequest:
    return request.with_inference(infer(request, context))
