"""Structured output for generated C#: expression and declaration nodes.

Stages build these nodes; only `render_expression` and `CSharpEmitter` turn
them into text.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from io import StringIO

from dpgen.invariants import never


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Name:
    text: str


@dataclass(frozen=True)
class StringLiteral:
    value: str


@dataclass(frozen=True)
class NullLiteral:
    # `null!` suppresses the nullable warning when the context is enabled.
    forgiving: bool = False


@dataclass(frozen=True)
class Default:
    type_name: str


@dataclass(frozen=True)
class TypeOf:
    type_name: str


@dataclass(frozen=True)
class Cast:
    type_name: str
    operand: "Expr"


@dataclass(frozen=True)
class MemberAccess:
    target: "Expr"
    name: str


@dataclass(frozen=True)
class Call:
    callee: "Expr"
    arguments: tuple["Expr", ...] = ()


@dataclass(frozen=True)
class New:
    type_name: str
    arguments: tuple["Expr", ...] = ()
    initializers: tuple[tuple[str, "Expr"], ...] = ()


@dataclass(frozen=True)
class Lambda:
    parameters: tuple[str, ...]
    body: "Expr"


Expr = (
    Name
    | StringLiteral
    | NullLiteral
    | Default
    | TypeOf
    | Cast
    | MemberAccess
    | Call
    | New
    | Lambda
)


def is_null(expr: Expr | None) -> bool:
    return expr is None or isinstance(expr, NullLiteral)


def _needs_parens_as_target(expr: Expr) -> bool:
    return isinstance(expr, (Cast, Lambda))


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def render_expression(expr: Expr) -> str:
    match expr:
        case Name(text=text):
            return text
        case StringLiteral(value=value):
            return f'"{_escape(value)}"'
        case NullLiteral(forgiving=forgiving):
            return "null!" if forgiving else "null"
        case Default(type_name=type_name):
            return f"default({type_name})"
        case TypeOf(type_name=type_name):
            return f"typeof({type_name})"
        case Cast(type_name=type_name, operand=operand):
            inner = render_expression(operand)
            if isinstance(operand, Lambda):
                inner = f"({inner})"
            return f"({type_name}){inner}"
        case MemberAccess(target=target, name=name):
            rendered = render_expression(target)
            if _needs_parens_as_target(target):
                rendered = f"({rendered})"
            return f"{rendered}.{name}"
        case Call(callee=callee, arguments=arguments):
            rendered = render_expression(callee)
            if _needs_parens_as_target(callee):
                rendered = f"({rendered})"
            return f"{rendered}({', '.join(render_expression(arg) for arg in arguments)})"
        case New(type_name=type_name, arguments=arguments, initializers=initializers):
            text = f"new {type_name}({', '.join(render_expression(arg) for arg in arguments)})"
            if initializers:
                assigned = ", ".join(
                    f"{name} = {render_expression(value)}" for name, value in initializers
                )
                text = f"{text} {{ {assigned} }}"
            return text
        case Lambda(parameters=parameters, body=body):
            return f"({', '.join(parameters)}) => {render_expression(body)}"
    never("unknown expression node", node=type(expr).__name__)


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Parameter:
    type_name: str
    name: str

    def render(self) -> str:
        return f"{self.type_name} {self.name}"


@dataclass(frozen=True)
class FieldDecl:
    accessibility: str
    type_name: str
    name: str
    initializer: Expr
    modifiers: tuple[str, ...] = ("static", "readonly")


@dataclass(frozen=True)
class PropertyDecl:
    accessibility: str
    type_name: str
    name: str
    getter: Expr
    setter: Expr
    # None when the setter shares the property's accessibility.
    setter_accessibility: str | None = None
    documentation: tuple[str, ...] = ()


@dataclass(frozen=True)
class MethodDecl:
    """An expression-bodied static method."""

    accessibility: str
    return_type: str
    name: str
    parameters: tuple[Parameter, ...]
    body: Expr


@dataclass(frozen=True)
class RegistrationMethodDecl:
    summary: str
    return_type: str
    name: str
    type_parameter: str
    parameters: tuple[Parameter, ...]
    metadata: Expr
    registration: Expr


@dataclass(frozen=True)
class HelperClassDecl:
    # e.g. `GenAttached<__TTarget> where __TTarget : DependencyObject`
    declaration: str
    methods: tuple[RegistrationMethodDecl, ...] = ()


MemberDecl = FieldDecl | PropertyDecl | MethodDecl | HelperClassDecl


@dataclass(frozen=True)
class TypeDecl:
    name: str
    is_static: bool = False
    members: tuple[MemberDecl, ...] = ()
    nested: tuple["TypeDecl", ...] = ()


@dataclass(frozen=True)
class NamespaceDecl:
    # Empty for the global namespace.
    name: str
    types: tuple[TypeDecl, ...] = ()


@dataclass(frozen=True)
class CompilationUnit:
    header: tuple[str, ...] = ()
    usings: tuple[str, ...] = ()
    nullable_enable: bool = False
    namespaces: tuple[NamespaceDecl, ...] = field(default_factory=tuple)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


class CSharpEmitter:
    """Line-oriented C# writer with indentation management."""

    def __init__(self, indent_str: str = "\t") -> None:
        self._buffer = StringIO()
        self._indent_str = indent_str
        self._indent_level = 0

    def emit(self, code: str) -> None:
        if code.strip():
            self._buffer.write(self._indent_str * self._indent_level)
            self._buffer.write(code)
        self._buffer.write("\n")

    def emit_blank(self) -> None:
        self._buffer.write("\n")

    @contextmanager
    def block(self, header: str) -> Iterator[None]:
        self.emit(header)
        self.emit("{")
        self._indent_level += 1
        try:
            yield
        finally:
            self._indent_level -= 1
            self.emit("}")

    def getvalue(self) -> str:
        return self._buffer.getvalue()

    def compilation_unit(self, unit: CompilationUnit) -> None:
        for line in unit.header:
            self.emit(line)
        if unit.nullable_enable:
            self.emit("#nullable enable")
        for using in unit.usings:
            self.emit(f"using {using};")
        for namespace in unit.namespaces:
            self.emit_blank()
            self.namespace(namespace)

    def namespace(self, namespace: NamespaceDecl) -> None:
        if not namespace.name:
            self._types(namespace.types)
            return
        with self.block(f"namespace {namespace.name}"):
            self._types(namespace.types)

    def _types(self, types: tuple[TypeDecl, ...]) -> None:
        for index, type_decl in enumerate(types):
            if index:
                self.emit_blank()
            self.type_decl(type_decl)

    def type_decl(self, type_decl: TypeDecl) -> None:
        static = "static " if type_decl.is_static else ""
        with self.block(f"{static}partial class {type_decl.name}"):
            first = True
            for member in type_decl.members:
                if not first:
                    self.emit_blank()
                first = False
                self.member(member)
            for nested in type_decl.nested:
                if not first:
                    self.emit_blank()
                first = False
                self.type_decl(nested)

    def member(self, member: MemberDecl) -> None:
        match member:
            case FieldDecl():
                modifiers = " ".join((member.accessibility, *member.modifiers))
                self.emit(
                    f"{modifiers} {member.type_name} {member.name} = "
                    f"{render_expression(member.initializer)};"
                )
            case PropertyDecl():
                for line in member.documentation:
                    self.emit(line)
                with self.block(f"{member.accessibility} {member.type_name} {member.name}"):
                    self.emit(f"get => {render_expression(member.getter)};")
                    setter = (
                        f"{member.setter_accessibility} "
                        if member.setter_accessibility
                        else ""
                    )
                    self.emit(f"{setter}set => {render_expression(member.setter)};")
            case MethodDecl():
                parameters = ", ".join(param.render() for param in member.parameters)
                self.emit(
                    f"{member.accessibility} static {member.return_type} "
                    f"{member.name}({parameters}) => {render_expression(member.body)};"
                )
            case HelperClassDecl():
                with self.block(f"private static partial class {member.declaration}"):
                    for index, method in enumerate(member.methods):
                        if index:
                            self.emit_blank()
                        self.registration_method(method)
            case _:
                never("unknown member declaration", node=type(member).__name__)

    def registration_method(self, method: RegistrationMethodDecl) -> None:
        self.emit("/// <summary>")
        self.emit(f"/// {method.summary}")
        self.emit("/// </summary>")
        parameters = ", ".join(param.render() for param in method.parameters)
        with self.block(
            f"public static {method.return_type} "
            f"{method.name}<{method.type_parameter}>({parameters})"
        ):
            self.emit(f"var metadata = {render_expression(method.metadata)};")
            self.emit(f"return {render_expression(method.registration)};")


def render_unit(unit: CompilationUnit) -> str:
    emitter = CSharpEmitter()
    emitter.compilation_unit(unit)
    return emitter.getvalue()
