from __future__ import annotations

from dpgen.synthesis import casts
from dpgen.synthesis.ir import render_expression


def test_static_change_direct_and_wrapped() -> None:
    assert render_expression(casts.static_change_callback("OnFooChanged")) == "OnFooChanged"
    assert (
        render_expression(casts.static_change_callback("OnFooChanged", "Goodies.Widget"))
        == "(d, e) => OnFooChanged((Goodies.Widget)d, e)"
    )


def test_cast_plan_direct_only_without_casts_or_forced_wrap() -> None:
    assert casts.CastPlan().is_direct
    assert not casts.CastPlan(force_wrap=True).is_direct
    assert not casts.CastPlan(target_cast="Widget").is_direct
    assert not casts.CastPlan(value_cast="int").is_direct


def test_coercion_callback_casts_only_what_differs() -> None:
    plan = casts.CastPlan(value_cast="int")
    assert (
        render_expression(casts.coercion_callback("CoerceFoo", plan))
        == "(d, baseValue) => CoerceFoo(d, (int)baseValue)"
    )


def test_routed_signal_without_value_cast() -> None:
    expression = casts.routed_signal_callback("UIElement", "object", "FooChangedEvent", None)
    assert render_expression(expression) == (
        "(d, e) => ((UIElement)d).RaiseEvent(new RoutedPropertyChangedEventArgs<object>"
        "(e.OldValue, e.NewValue, FooChangedEvent))"
    )
