from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum


class Accessibility(str, Enum):
    PUBLIC = "public"
    INTERNAL = "internal"
    PROTECTED = "protected"
    PROTECTED_INTERNAL = "protected internal"
    PRIVATE_PROTECTED = "private protected"
    PRIVATE = "private"

    @property
    def keyword(self) -> str:
        return self.value

    def is_narrower_than(self, other: "Accessibility") -> bool:
        """True when `self` may restrict an accessor of an `other` member."""
        return other in _WIDER_THAN[self]

    @classmethod
    def parse(cls, value: str) -> "Accessibility":
        normalized = " ".join(value.replace("_", " ").split()).lower()
        for candidate in cls:
            if candidate.value == normalized:
                return candidate
        # Host compilers spell the compound forms as single words.
        aliases = {
            "protectedorinternal": cls.PROTECTED_INTERNAL,
            "protectedandinternal": cls.PRIVATE_PROTECTED,
            "friend": cls.INTERNAL,
        }
        alias = aliases.get(normalized.replace(" ", ""))
        if alias is None:
            raise ValueError(f"unknown accessibility: {value!r}")
        return alias


# `internal` and `protected` do not restrict each other.
_WIDER_THAN: dict[Accessibility, frozenset[Accessibility]] = {
    Accessibility.PUBLIC: frozenset(),
    Accessibility.PROTECTED_INTERNAL: frozenset({Accessibility.PUBLIC}),
    Accessibility.INTERNAL: frozenset({Accessibility.PUBLIC, Accessibility.PROTECTED_INTERNAL}),
    Accessibility.PROTECTED: frozenset({Accessibility.PUBLIC, Accessibility.PROTECTED_INTERNAL}),
    Accessibility.PRIVATE_PROTECTED: frozenset(
        {
            Accessibility.PUBLIC,
            Accessibility.PROTECTED_INTERNAL,
            Accessibility.INTERNAL,
            Accessibility.PROTECTED,
        }
    ),
    Accessibility.PRIVATE: frozenset(
        {
            Accessibility.PUBLIC,
            Accessibility.PROTECTED_INTERNAL,
            Accessibility.INTERNAL,
            Accessibility.PROTECTED,
            Accessibility.PRIVATE_PROTECTED,
        }
    ),
}


@dataclass(frozen=True)
class TypeSymbol:
    """A named type in the host program.

    Identity is `metadata_name`; `display_name` is what generated code spells,
    and may carry a nullable annotation that identity ignores.
    """

    metadata_name: str
    name: str
    namespace: str = ""
    display_name: str = ""
    base_type: str | None = None
    containing_type: str | None = None
    type_parameters: tuple[str, ...] = ()
    is_static: bool = False
    is_value_type: bool = False
    nullable_annotated: bool = False

    def __post_init__(self) -> None:
        if not self.display_name:
            object.__setattr__(self, "display_name", self.metadata_name)

    @property
    def declaration_name(self) -> str:
        if not self.type_parameters:
            return self.name
        return f"{self.name}<{', '.join(self.type_parameters)}>"

    def with_nullable_annotation(self) -> "TypeSymbol":
        if self.nullable_annotated or self.is_value_type:
            return self
        return replace(
            self,
            display_name=f"{self.display_name}?",
            nullable_annotated=True,
        )


@dataclass(frozen=True)
class FieldSymbol:
    name: str
    type: TypeSymbol
    containing_type: TypeSymbol
    is_static: bool = False
    is_readonly: bool = False
    accessibility: Accessibility = Accessibility.PRIVATE


@dataclass(frozen=True)
class ParameterSymbol:
    name: str
    type: TypeSymbol


@dataclass(frozen=True)
class MethodSymbol:
    name: str
    containing_type: TypeSymbol
    # None is `void`.
    return_type: TypeSymbol | None = None
    parameters: tuple[ParameterSymbol, ...] = ()
    is_static: bool = False
    accessibility: Accessibility = Accessibility.PRIVATE

    @property
    def returns_void(self) -> bool:
        return self.return_type is None


@dataclass(frozen=True)
class OtherMemberSymbol:
    """Properties, events, nested types: present for ordering, never matched."""

    name: str
    containing_type: TypeSymbol
    kind: str = "other"
    accessibility: Accessibility = Accessibility.PRIVATE


MemberSymbol = FieldSymbol | MethodSymbol | OtherMemberSymbol


@dataclass(frozen=True)
class CallSiteRef:
    """Opaque handle to a registration call site inside a field initializer."""

    id: str


@dataclass(frozen=True)
class CallSite:
    ref: CallSiteRef
    owner: str
    field_name: str
    generic_argument: TypeSymbol | None = None
    receiver_generic_argument: TypeSymbol | None = None
    # One entry per positional argument; None when the host could not type it.
    argument_types: tuple[TypeSymbol | None, ...] = field(default_factory=tuple)


class CalleeKind(str, Enum):
    PLAIN = "Gen"
    ATTACHED = "GenAttached"

    @property
    def is_attached(self) -> bool:
        return self is CalleeKind.ATTACHED


@dataclass(frozen=True)
class CandidateRequest:
    """One abbreviated declaration found by the syntactic scan."""

    callee: CalleeKind
    property_name: str
    site: CallSiteRef
    # True for `GenAttached<T>.Foo(...)`; the graph resolves `T` separately.
    receiver_generic: bool = False
    documentation: tuple[str, ...] = ()

    @property
    def is_attached(self) -> bool:
        return self.callee.is_attached
