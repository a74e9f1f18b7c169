from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from dpgen.analysis.context import build_context
from dpgen.analysis.diagnostics import Diagnostic, DiagnosticCollector, DiagnosticSink
from dpgen.analysis.handlers import discover_handlers
from dpgen.analysis.inference import apply_inference
from dpgen.analysis.model import GenerationRequest
from dpgen.analysis.resolver import resolve_requests
from dpgen.config import GeneratorConfig
from dpgen.ingest.adapter_contract import GraphDocument, SymbolGraph
from dpgen.ingest.model import CandidateRequest
from dpgen.synthesis.accessors import RequestFragment, build_fragment
from dpgen.synthesis.emission import OutputArtifact, render_artifact
from dpgen.timeout_context import check_deadline

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationResult:
    artifact: OutputArtifact | None = None
    requests: tuple[GenerationRequest, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()
    # False when a required well-known type is missing from the graph.
    preconditions_met: bool = True

    @property
    def admitted(self) -> list[str]:
        return [
            f"{request.owner.metadata_name}.{request.target_name}"
            for request in self.requests
        ]


@dataclass
class _RunState:
    sink: DiagnosticSink
    collector: DiagnosticCollector = field(default_factory=DiagnosticCollector)

    def report(self, diagnostic: Diagnostic) -> None:
        self.collector.report(diagnostic)
        if self.sink is not self.collector:
            self.sink.report(diagnostic)


def run_generation(
    graph: SymbolGraph,
    candidates: Iterable[CandidateRequest],
    config: GeneratorConfig | None = None,
    sink: DiagnosticSink | None = None,
) -> GenerationResult:
    """Run one generation pass over `candidates`.

    Must be called inside a deadline scope (see `generation_scope`).
    Diagnostics go to `sink` (if given) and are also returned on the result.
    """
    config = config or GeneratorConfig()
    context = build_context(graph, config)
    if context is None:
        logger.debug("required well-known types missing; nothing generated")
        return GenerationResult(preconditions_met=False)

    state = _RunState(sink=sink if sink is not None else DiagnosticCollector())
    requests: list[GenerationRequest] = []
    fragments: list[RequestFragment] = []
    for request in resolve_requests(candidates, context, state):
        check_deadline()
        request = apply_inference(request, context)
        handlers = discover_handlers(request, context)
        fragments.append(build_fragment(request, handlers, context))
        requests.append(request)

    artifact = render_artifact(fragments, context)
    logger.debug(
        "generated %d properties, %d diagnostics",
        len(requests),
        len(state.collector),
    )
    return GenerationResult(
        artifact=artifact,
        requests=tuple(requests),
        diagnostics=tuple(state.collector.diagnostics),
    )


def run_document(
    document: GraphDocument,
    config: GeneratorConfig | None = None,
    sink: DiagnosticSink | None = None,
) -> GenerationResult:
    return run_generation(document.graph, document.candidates, config=config, sink=sink)
