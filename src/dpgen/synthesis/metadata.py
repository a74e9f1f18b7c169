from __future__ import annotations

from enum import Enum

from dpgen.synthesis.ir import Cast, Default, Expr, Name, New, NullLiteral, is_null

VALUE_TYPE_PARAMETER = "__T"


class MetadataShape(str, Enum):
    FRAMEWORK_WITH_FLAGS = "framework_with_flags"
    WITH_DEFAULT = "with_default"
    CHANGE_WITH_COERCE_INITIALIZER = "change_with_coerce_initializer"
    COERCE_INITIALIZER_ONLY = "coerce_initializer_only"
    NULL = "null"


def metadata_shape(
    *,
    has_default_value: bool,
    has_flags: bool,
    change: Expr | None,
    coercion: Expr | None,
) -> MetadataShape:
    if has_flags:
        return MetadataShape.FRAMEWORK_WITH_FLAGS
    if has_default_value:
        return MetadataShape.WITH_DEFAULT
    if not is_null(change):
        return MetadataShape.CHANGE_WITH_COERCE_INITIALIZER
    if not is_null(coercion):
        return MetadataShape.COERCE_INITIALIZER_ONLY
    return MetadataShape.NULL


def build_metadata_expression(
    *,
    has_default_value: bool,
    has_flags: bool,
    change: Expr | None,
    coercion: Expr | None,
    nullable_context: bool,
) -> Expr:
    """Build the property-metadata argument for the registration call."""
    change_expr = change if change is not None else NullLiteral()
    coerce_expr = coercion if coercion is not None else NullLiteral()
    shape = metadata_shape(
        has_default_value=has_default_value,
        has_flags=has_flags,
        change=change,
        coercion=coercion,
    )
    match shape:
        case MetadataShape.FRAMEWORK_WITH_FLAGS:
            default_value = (
                Name("defaultValue")
                if has_default_value
                else Default(VALUE_TYPE_PARAMETER)
            )
            return New(
                "FrameworkPropertyMetadata",
                (default_value, Name("flags"), change_expr, coerce_expr),
            )
        case MetadataShape.WITH_DEFAULT:
            return New(
                "PropertyMetadata",
                (Name("defaultValue"), change_expr, coerce_expr),
            )
        case MetadataShape.CHANGE_WITH_COERCE_INITIALIZER:
            return New(
                "PropertyMetadata",
                (change_expr,),
                initializers=(("CoerceValueCallback", coerce_expr),),
            )
        case MetadataShape.COERCE_INITIALIZER_ONLY:
            return New(
                "PropertyMetadata",
                initializers=(("CoerceValueCallback", coerce_expr),),
            )
    return Cast("PropertyMetadata", NullLiteral(forgiving=nullable_context))
