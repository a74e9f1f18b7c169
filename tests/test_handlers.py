from __future__ import annotations

from dpgen.analysis.context import build_context
from dpgen.analysis.diagnostics import DiagnosticCollector
from dpgen.analysis.handlers import ChangeHandlerKind, discover_handlers
from dpgen.analysis.inference import apply_inference
from dpgen.analysis.resolver import resolve_requests
from dpgen.config import GeneratorConfig
from dpgen.synthesis.ir import render_expression

from tests.graph_helpers import (
    BUTTON,
    CHANGE_ARGS,
    DEPENDENCY_OBJECT,
    INT,
    OBJECT,
    ROUTED_EVENT,
    STRING,
    UI_ELEMENT,
    GraphBuilder,
    field,
    method,
    other,
    owner,
)


def _discover(*members, generic=INT, callee="Gen", receiver_generic=None, config=None):
    builder = GraphBuilder()
    builder.add_type(
        owner("Goodies.Widget", field("FooProperty"), *members, display_name="Widget")
    )
    builder.register(
        "Goodies.Widget",
        "FooProperty",
        "Foo",
        generic=generic,
        callee=callee,
        receiver_generic=receiver_generic,
    )
    document = builder.load()
    context = build_context(document.graph, config or GeneratorConfig())
    assert context is not None
    (request,) = resolve_requests(document.candidates, context, DiagnosticCollector())
    return discover_handlers(apply_inference(request, context), context)


def _change(handlers) -> str | None:
    expression = handlers.change_expression
    return render_expression(expression) if expression is not None else None


def _coerce(handlers) -> str | None:
    return render_expression(handlers.coercion) if handlers.coercion is not None else None


def _static_changed(name="OnFooChanged", target=DEPENDENCY_OBJECT):
    return method(name, ("d", target), ("e", CHANGE_ARGS), static=True)


def _coerce_method(returns=OBJECT, target=DEPENDENCY_OBJECT, value=OBJECT):
    return method("CoerceFoo", ("d", target), ("baseValue", value), returns=returns, static=True)


def test_static_change_method_with_dependency_object_is_used_directly() -> None:
    handlers = _discover(_static_changed())
    assert handlers.change is not None
    assert handlers.change.rank is ChangeHandlerKind.STATIC_METHOD
    assert _change(handlers) == "OnFooChanged"


def test_static_change_method_name_must_contain_property_before_suffix() -> None:
    handlers = _discover(
        _static_changed(name="BarChanged"),
        _static_changed(name="ChangedFoo"),
    )
    assert handlers.change is None


def test_static_change_method_with_owner_parameter_is_wrapped() -> None:
    handlers = _discover(_static_changed(name="FooPropertyChanged", target="Goodies.Widget"))
    assert _change(handlers) == "(d, e) => FooPropertyChanged((Widget)d, e)"


def test_static_change_method_with_unrelated_parameter_is_ignored() -> None:
    handlers = _discover(_static_changed(target=BUTTON))
    assert handlers.change is None


def test_attached_static_change_checks_narrowing_type() -> None:
    handlers = _discover(
        _static_changed(target=UI_ELEMENT), callee="GenAttached", receiver_generic=BUTTON
    )
    assert _change(handlers) == "(d, e) => OnFooChanged((UIElement)d, e)"


def test_attached_static_change_without_narrowing_uses_dependency_object() -> None:
    handlers = _discover(_static_changed(target=UI_ELEMENT), callee="GenAttached")
    assert handlers.change is None


def test_instance_change_with_args_parameter() -> None:
    handlers = _discover(method("OnFooChanged", ("e", CHANGE_ARGS)))
    assert handlers.change.rank is ChangeHandlerKind.INSTANCE_METHOD
    assert _change(handlers) == "(d, e) => ((Widget)d).OnFooChanged(e)"


def test_instance_change_with_old_and_new_values() -> None:
    handlers = _discover(method("FooChanged", ("oldFoo", INT), ("NewFoo", INT)))
    assert _change(handlers) == "(d, e) => ((Widget)d).FooChanged((int)e.OldValue, (int)e.NewValue)"


def test_instance_change_with_object_values_needs_no_cast() -> None:
    handlers = _discover(
        method("FooChanged", ("oldValue", OBJECT), ("newValue", OBJECT)), generic=None
    )
    assert _change(handlers) == "(d, e) => ((Widget)d).FooChanged(e.OldValue, e.NewValue)"


def test_instance_change_requires_old_new_names_and_value_type() -> None:
    handlers = _discover(
        method("FooChanged", ("a", INT), ("b", INT)),
        method("OnFooChanged", ("oldFoo", STRING), ("newFoo", STRING)),
    )
    assert handlers.change is None


def test_instance_change_is_not_used_for_attached_properties() -> None:
    handlers = _discover(method("OnFooChanged", ("e", CHANGE_ARGS)), callee="GenAttached")
    assert handlers.change is None


def test_routed_signal_field() -> None:
    handlers = _discover(field("FooChangedEvent", ROUTED_EVENT))
    assert handlers.change.rank is ChangeHandlerKind.ROUTED_SIGNAL
    assert _change(handlers) == (
        "(d, e) => ((UIElement)d).RaiseEvent(new RoutedPropertyChangedEventArgs<int>"
        "((int)e.OldValue, (int)e.NewValue, FooChangedEvent))"
    )


def test_routed_signal_suffix_is_configurable() -> None:
    handlers = _discover(
        field("FooChangedSignal", ROUTED_EVENT),
        config=GeneratorConfig(routed_signal_suffix="ChangedSignal"),
    )
    assert handlers.change.rank is ChangeHandlerKind.ROUTED_SIGNAL


def test_routed_signal_then_method_method_wins() -> None:
    handlers = _discover(
        field("FooChangedEvent", ROUTED_EVENT),
        method("OnFooChanged", ("e", CHANGE_ARGS)),
    )
    assert handlers.change.rank is ChangeHandlerKind.INSTANCE_METHOD


def test_method_then_routed_signal_method_stays() -> None:
    handlers = _discover(
        method("OnFooChanged", ("e", CHANGE_ARGS)),
        field("FooChangedEvent", ROUTED_EVENT),
    )
    assert handlers.change.rank is ChangeHandlerKind.INSTANCE_METHOD


def test_static_method_overrides_instance_method() -> None:
    handlers = _discover(
        method("OnFooChanged", ("e", CHANGE_ARGS)),
        _static_changed(name="FooPropertyChanged"),
    )
    assert handlers.change.rank is ChangeHandlerKind.STATIC_METHOD
    assert _change(handlers) == "FooPropertyChanged"


def test_later_instance_method_does_not_replace_static_method() -> None:
    handlers = _discover(
        _static_changed(name="FooPropertyChanged"),
        method("OnFooChanged", ("e", CHANGE_ARGS)),
    )
    assert _change(handlers) == "FooPropertyChanged"


def test_coercion_method_used_directly() -> None:
    handlers = _discover(_coerce_method())
    assert _coerce(handlers) == "CoerceFoo"


def test_coercion_method_with_typed_parameters_is_wrapped() -> None:
    handlers = _discover(_coerce_method(returns=INT, target="Goodies.Widget", value=INT))
    assert _coerce(handlers) == "(d, baseValue) => CoerceFoo((Widget)d, (int)baseValue)"


def test_coercion_method_returning_value_type_is_wrapped_without_casts() -> None:
    handlers = _discover(_coerce_method(returns=INT))
    assert _coerce(handlers) == "(d, baseValue) => CoerceFoo(d, baseValue)"


def test_coercion_method_with_wrong_types_is_ignored() -> None:
    handlers = _discover(
        _coerce_method(returns=STRING),
        _coerce_method(value=STRING),
        _coerce_method(target=BUTTON),
        method("CoerceFoo", ("d", DEPENDENCY_OBJECT), ("v", OBJECT), returns=OBJECT),
    )
    assert handlers.coercion is None


def test_first_qualifying_coercion_wins() -> None:
    handlers = _discover(
        _coerce_method(returns=INT, value=INT),
        _coerce_method(),
    )
    assert _coerce(handlers) == "(d, baseValue) => CoerceFoo(d, (int)baseValue)"


def test_early_exit_matches_full_scan() -> None:
    full = _discover(_static_changed(), _coerce_method(), other("Irrelevant"))
    early = _discover(_static_changed(), _coerce_method())
    assert _change(full) == _change(early) == "OnFooChanged"
    assert _coerce(full) == _coerce(early) == "CoerceFoo"


def test_scan_stops_once_static_change_and_coercion_are_found() -> None:
    handlers = _discover(
        _static_changed(),
        _coerce_method(),
        method("CoerceFoo", ("d", DEPENDENCY_OBJECT), ("v", OBJECT), returns=OBJECT, static=True),
    )
    assert _coerce(handlers) == "CoerceFoo"



class _CountingGraph:
    def __init__(self, graph) -> None:
        self._graph = graph
        self.visited: list[str] = []

    def __getattr__(self, name):
        return getattr(self._graph, name)

    def members_of(self, type_symbol):
        for member in self._graph.members_of(type_symbol):
            self.visited.append(member.name)
            yield member


def test_scan_does_not_visit_members_after_early_exit() -> None:
    builder = GraphBuilder()
    builder.add_type(
        owner(
            "Goodies.Widget",
            _static_changed(),
            _coerce_method(),
            field("FooProperty"),
            other("Irrelevant"),
        )
    )
    builder.register("Goodies.Widget", "FooProperty", "Foo", generic=INT)
    document = builder.load()
    graph = _CountingGraph(document.graph)
    context = build_context(graph, GeneratorConfig())
    assert context is not None
    (request,) = resolve_requests(document.candidates, context, DiagnosticCollector())
    graph.visited.clear()
    discover_handlers(apply_inference(request, context), context)
    assert graph.visited == ["OnFooChanged", "CoerceFoo"]


def test_instance_change_and_coercion_do_not_stop_the_scan() -> None:
    builder = GraphBuilder()
    builder.add_type(
        owner(
            "Goodies.Widget",
            method("OnFooChanged", ("e", CHANGE_ARGS)),
            _coerce_method(),
            field("FooProperty"),
            _static_changed(name="FooPropertyChanged"),
        )
    )
    builder.register("Goodies.Widget", "FooProperty", "Foo", generic=INT)
    document = builder.load()
    context = build_context(document.graph, GeneratorConfig())
    assert context is not None
    (request,) = resolve_requests(document.candidates, context, DiagnosticCollector())
    handlers = discover_handlers(apply_inference(request, context), context)
    assert _change(handlers) == "FooPropertyChanged"
    assert _coerce(handlers) == "CoerceFoo"
