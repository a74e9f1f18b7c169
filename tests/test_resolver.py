from __future__ import annotations

from dpgen.analysis.context import build_context
from dpgen.analysis.diagnostics import (
    DiagnosticCollector,
    MismatchedIdentifiers,
    NotAStaticReadonlyField,
    UnexpectedFieldType,
)
from dpgen.analysis.resolver import resolve_requests
from dpgen.config import GeneratorConfig
from dpgen.pipeline import run_document

from tests.graph_helpers import (
    KEYED_TOKEN,
    STRING,
    TOKEN,
    GraphBuilder,
    field,
    owner,
)


def _resolve(builder: GraphBuilder):
    document = builder.load()
    context = build_context(document.graph, GeneratorConfig())
    assert context is not None
    sink = DiagnosticCollector()
    requests = list(resolve_requests(document.candidates, context, sink))
    return requests, sink


def test_admits_plain_and_keyed_fields() -> None:
    builder = GraphBuilder()
    builder.add_type(
        owner(
            "Goodies.Widget",
            field("FooProperty"),
            field("BarPropertyKey", KEYED_TOKEN, accessibility="private"),
        )
    )
    builder.register("Goodies.Widget", "FooProperty", "Foo")
    builder.register("Goodies.Widget", "BarPropertyKey", "Bar", callee="GenAttached")
    requests, sink = _resolve(builder)
    assert len(sink) == 0
    assert [(r.target_name, r.is_keyed, r.is_attached) for r in requests] == [
        ("Foo", False, False),
        ("Bar", True, True),
    ]
    for request in requests:
        assert request.backing_field.name == request.expected_field_name
        assert request.value_type is None


def test_rejects_mismatched_identifier() -> None:
    builder = GraphBuilder()
    builder.add_type(owner("Goodies.Widget", field("FooPropertyKey")))
    builder.register("Goodies.Widget", "FooPropertyKey", "Foo")
    requests, sink = _resolve(builder)
    assert requests == []
    (diagnostic,) = sink.diagnostics
    assert isinstance(diagnostic, MismatchedIdentifiers)
    assert diagnostic.expected_name == "FooProperty"
    assert diagnostic.actual_name == "FooPropertyKey"
    assert diagnostic.code == "DPG1001"
    assert "Goodies.Widget.FooPropertyKey" in diagnostic.message


def test_rejects_unexpected_field_type() -> None:
    builder = GraphBuilder()
    builder.add_type(owner("Goodies.Widget", field("FooProperty", STRING)))
    builder.register("Goodies.Widget", "FooProperty", "Foo")
    requests, sink = _resolve(builder)
    assert requests == []
    (diagnostic,) = sink.diagnostics
    assert isinstance(diagnostic, UnexpectedFieldType)
    assert diagnostic.expected_types == (TOKEN, KEYED_TOKEN)
    payload = diagnostic.as_payload()
    assert payload["code"] == "DPG1002"
    assert payload["details"]["actual_type"] == "string"


def test_rejects_non_static_or_non_readonly_field() -> None:
    builder = GraphBuilder()
    builder.add_type(
        owner(
            "Goodies.Widget",
            field("FooProperty", static=False),
            field("BarProperty", readonly=False),
        )
    )
    builder.register("Goodies.Widget", "FooProperty", "Foo")
    builder.register("Goodies.Widget", "BarProperty", "Bar")
    requests, sink = _resolve(builder)
    assert requests == []
    assert [type(d) for d in sink.diagnostics] == [
        NotAStaticReadonlyField,
        NotAStaticReadonlyField,
    ]
    assert sink.codes() == ["DPG1003", "DPG1003"]


def test_site_outside_a_field_is_skipped_silently() -> None:
    builder = GraphBuilder()
    builder.add_type(owner("Goodies.Widget", field("FooProperty")))
    builder.register("Goodies.Widget", "NotDeclared", "Foo")
    requests, sink = _resolve(builder)
    assert requests == []
    assert len(sink) == 0


def test_rejection_does_not_stop_later_candidates() -> None:
    builder = GraphBuilder()
    builder.add_type(owner("Goodies.Widget", field("WrongProperty"), field("BarProperty")))
    builder.register("Goodies.Widget", "WrongProperty", "Foo")
    builder.register("Goodies.Widget", "BarProperty", "Bar")
    requests, sink = _resolve(builder)
    assert [r.target_name for r in requests] == ["Bar"]
    assert sink.codes() == ["DPG1001"]


def test_missing_token_types_admit_nothing_and_report_nothing() -> None:
    builder = GraphBuilder()
    builder.types = [t for t in builder.types if t["metadata_name"] != KEYED_TOKEN]
    builder.add_type(owner("Goodies.Widget", field("WrongProperty")))
    builder.register("Goodies.Widget", "WrongProperty", "Foo")
    requests, sink = _resolve(builder)
    assert requests == []
    assert len(sink) == 0


def test_missing_required_framework_type_yields_no_output() -> None:
    for missing in (
        "System.Object",
        "System.Windows.DependencyObject",
        "System.Windows.DependencyPropertyChangedEventArgs",
    ):
        builder = GraphBuilder()
        builder.types = [t for t in builder.types if t["metadata_name"] != missing]
        builder.add_type(owner("Goodies.Widget", field("FooProperty"), base="Goodies.Base"))
        builder.register("Goodies.Widget", "FooProperty", "Foo")
        result = run_document(builder.load())
        assert result.artifact is None, missing
        assert result.preconditions_met is False
        assert result.diagnostics == ()


def test_pipeline_forwards_diagnostics_to_external_sink() -> None:
    builder = GraphBuilder()
    builder.add_type(owner("Goodies.Widget", field("WrongProperty")))
    builder.register("Goodies.Widget", "WrongProperty", "Foo")
    sink = DiagnosticCollector()
    result = run_document(builder.load(), sink=sink)
    assert sink.codes() == ["DPG1001"]
    assert [d.code for d in result.diagnostics] == ["DPG1001"]
