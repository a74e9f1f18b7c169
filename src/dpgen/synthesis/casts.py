"""Callback expressions for discovered handlers.

A handler whose signature already matches the framework delegate is used as
a method group; anything else is wrapped in a closure that applies the
minimal set of casts.
"""

from __future__ import annotations

from dataclasses import dataclass

from dpgen.synthesis.ir import Call, Cast, Expr, Lambda, MemberAccess, Name, New

CHANGE_PARAMETERS = ("d", "e")
COERCE_PARAMETERS = ("d", "baseValue")


@dataclass(frozen=True)
class CastPlan:
    """Casts applied to the target and value arguments of a wrapped callback."""

    target_cast: str | None = None
    value_cast: str | None = None
    force_wrap: bool = False

    @property
    def is_direct(self) -> bool:
        return not self.force_wrap and self.target_cast is None and self.value_cast is None


def _cast(type_name: str | None, operand: Expr) -> Expr:
    if type_name is None:
        return operand
    return Cast(type_name, operand)


def _change_values(value_cast: str | None) -> tuple[Expr, Expr]:
    return (
        _cast(value_cast, MemberAccess(Name("e"), "OldValue")),
        _cast(value_cast, MemberAccess(Name("e"), "NewValue")),
    )


def static_change_callback(method_name: str, target_cast: str | None = None) -> Expr:
    """`Method` or `(d, e) => Method((Target)d, e)`."""
    if target_cast is None:
        return Name(method_name)
    return Lambda(
        CHANGE_PARAMETERS,
        Call(Name(method_name), (Cast(target_cast, Name("d")), Name("e"))),
    )


def instance_args_callback(owner: str, method_name: str) -> Expr:
    """`(d, e) => ((Owner)d).Method(e)`."""
    return Lambda(
        CHANGE_PARAMETERS,
        Call(MemberAccess(Cast(owner, Name("d")), method_name), (Name("e"),)),
    )


def instance_old_new_callback(
    owner: str, method_name: str, value_cast: str | None
) -> Expr:
    """`(d, e) => ((Owner)d).Method((V)e.OldValue, (V)e.NewValue)`."""
    return Lambda(
        CHANGE_PARAMETERS,
        Call(
            MemberAccess(Cast(owner, Name("d")), method_name),
            _change_values(value_cast),
        ),
    )


def routed_signal_callback(
    raiser: str, value_type: str, signal_field: str, value_cast: str | None
) -> Expr:
    """Raise `signal_field` with the old and new values on the target."""
    old_value, new_value = _change_values(value_cast)
    return Lambda(
        CHANGE_PARAMETERS,
        Call(
            MemberAccess(Cast(raiser, Name("d")), "RaiseEvent"),
            (
                New(
                    f"RoutedPropertyChangedEventArgs<{value_type}>",
                    (old_value, new_value, Name(signal_field)),
                ),
            ),
        ),
    )


def coercion_callback(method_name: str, plan: CastPlan) -> Expr:
    if plan.is_direct:
        return Name(method_name)
    return Lambda(
        COERCE_PARAMETERS,
        Call(
            Name(method_name),
            (
                _cast(plan.target_cast, Name("d")),
                _cast(plan.value_cast, Name("baseValue")),
            ),
        ),
    )
