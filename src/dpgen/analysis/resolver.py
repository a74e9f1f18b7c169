from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from dpgen.analysis.context import GenerationContext
from dpgen.analysis.diagnostics import (
    DiagnosticSink,
    MismatchedIdentifiers,
    NotAStaticReadonlyField,
    UnexpectedFieldType,
)
from dpgen.analysis.model import (
    KEYED_PROPERTY_SUFFIX,
    PROPERTY_SUFFIX,
    GenerationRequest,
)
from dpgen.ingest.model import CandidateRequest
from dpgen.timeout_context import deadline_loop_iter

logger = logging.getLogger(__name__)


def resolve_requests(
    candidates: Iterable[CandidateRequest],
    context: GenerationContext,
    sink: DiagnosticSink,
) -> Iterator[GenerationRequest]:
    """Yield a GenerationRequest for every well-formed candidate.

    Malformed candidates are reported to `sink` and dropped. When either
    registration-token type is absent from the graph nothing is admitted and
    nothing is reported.
    """
    token_type = context.well_known.token_type
    keyed_token_type = context.well_known.keyed_token_type
    if token_type is None or keyed_token_type is None:
        logger.debug("registration token types missing; no candidates admitted")
        return
    graph = context.graph
    for candidate in deadline_loop_iter(candidates):
        field_symbol = graph.resolve_enclosing_field(candidate.site)
        if field_symbol is None:
            logger.debug(
                "skipping %s: call site %s is not inside a field",
                candidate.property_name,
                candidate.site.id,
            )
            continue
        if not (field_symbol.is_static and field_symbol.is_readonly):
            sink.report(NotAStaticReadonlyField(field=field_symbol))
            continue
        is_plain = graph.types_equal(field_symbol.type, token_type)
        if not is_plain and not graph.types_equal(field_symbol.type, keyed_token_type):
            sink.report(
                UnexpectedFieldType(
                    field=field_symbol,
                    expected_types=(
                        token_type.display_name,
                        keyed_token_type.display_name,
                    ),
                )
            )
            continue
        suffix = PROPERTY_SUFFIX if is_plain else KEYED_PROPERTY_SUFFIX
        expected_name = candidate.property_name + suffix
        if field_symbol.name != expected_name:
            sink.report(
                MismatchedIdentifiers(
                    field=field_symbol,
                    expected_name=expected_name,
                    actual_name=field_symbol.name,
                )
            )
            continue
        logger.debug(
            "admitted %s.%s (keyed=%s, attached=%s)",
            field_symbol.containing_type.metadata_name,
            candidate.property_name,
            not is_plain,
            candidate.is_attached,
        )
        yield GenerationRequest(
            candidate=candidate,
            backing_field=field_symbol,
            is_keyed=not is_plain,
        )
