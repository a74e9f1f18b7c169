from __future__ import annotations

from dpgen.synthesis.ir import (
    Call,
    Cast,
    CompilationUnit,
    FieldDecl,
    Lambda,
    MemberAccess,
    MethodDecl,
    Name,
    NamespaceDecl,
    New,
    Parameter,
    StringLiteral,
    TypeDecl,
    render_expression,
    render_unit,
)


def test_string_literal_is_escaped() -> None:
    assert render_expression(StringLiteral('a"b\\c')) == '"a\\"b\\\\c"'


def test_member_access_on_cast_is_parenthesized() -> None:
    expr = Call(MemberAccess(Cast("Widget", Name("d")), "Refresh"))
    assert render_expression(expr) == "((Widget)d).Refresh()"


def test_cast_of_lambda_is_parenthesized() -> None:
    expr = Cast("PropertyChangedCallback", Lambda(("d", "e"), Name("x")))
    assert render_expression(expr) == "(PropertyChangedCallback)((d, e) => x)"


def test_new_with_initializers() -> None:
    expr = New("Point", (), (("X", Name("1")), ("Y", Name("2"))))
    assert render_expression(expr) == "new Point() { X = 1, Y = 2 }"


def test_render_unit_layout() -> None:
    unit = CompilationUnit(
        header=("// header",),
        usings=("System.Windows",),
        nullable_enable=True,
        namespaces=(
            NamespaceDecl(
                name="Goodies",
                types=(
                    TypeDecl(
                        name="Widget",
                        members=(
                            FieldDecl("public", "int", "Answer", Name("42")),
                            MethodDecl(
                                "public",
                                "int",
                                "Twice",
                                (Parameter("int", "x"),),
                                Name("x * 2"),
                            ),
                        ),
                    ),
                ),
            ),
        ),
    )
    assert render_unit(unit) == (
        "// header\n"
        "#nullable enable\n"
        "using System.Windows;\n"
        "\n"
        "namespace Goodies\n"
        "{\n"
        "\tpartial class Widget\n"
        "\t{\n"
        "\t\tpublic static readonly int Answer = 42;\n"
        "\n"
        "\t\tpublic static int Twice(int x) => x * 2;\n"
        "\t}\n"
        "}\n"
    )
