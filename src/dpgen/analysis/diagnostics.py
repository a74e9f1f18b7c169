"""Typed diagnostics for candidates the resolver rejects.

Diagnostics are never fatal: the candidate is dropped and generation
continues. Each one renders to a plain message and to a JSON payload.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Protocol, runtime_checkable

from dpgen.ingest.model import FieldSymbol
from dpgen.json_types import JSONObject

WARNING = "warning"


def field_display(symbol: FieldSymbol) -> str:
    return f"{symbol.containing_type.display_name}.{symbol.name}"


@dataclass(frozen=True)
class MismatchedIdentifiers:
    code: ClassVar[str] = "DPG1001"
    severity: ClassVar[str] = WARNING

    field: FieldSymbol
    expected_name: str
    actual_name: str

    @property
    def message(self) -> str:
        return (
            f"Field '{field_display(self.field)}' should be named "
            f"'{self.expected_name}' to match its registration call, "
            f"but is named '{self.actual_name}'."
        )

    def as_payload(self) -> JSONObject:
        return {
            "code": self.code,
            "severity": self.severity,
            "message": self.message,
            "field": field_display(self.field),
            "details": {
                "expected_name": self.expected_name,
                "actual_name": self.actual_name,
            },
        }


@dataclass(frozen=True)
class UnexpectedFieldType:
    code: ClassVar[str] = "DPG1002"
    severity: ClassVar[str] = WARNING

    field: FieldSymbol
    expected_types: tuple[str, ...] = ()

    @property
    def message(self) -> str:
        expected = " or ".join(f"'{name}'" for name in self.expected_types)
        return (
            f"Field '{field_display(self.field)}' has type "
            f"'{self.field.type.display_name}'; expected {expected}."
        )

    def as_payload(self) -> JSONObject:
        return {
            "code": self.code,
            "severity": self.severity,
            "message": self.message,
            "field": field_display(self.field),
            "details": {
                "actual_type": self.field.type.display_name,
                "expected_types": list(self.expected_types),
            },
        }


@dataclass(frozen=True)
class NotAStaticReadonlyField:
    code: ClassVar[str] = "DPG1003"
    severity: ClassVar[str] = WARNING

    field: FieldSymbol

    @property
    def message(self) -> str:
        return (
            f"Field '{field_display(self.field)}' must be declared "
            "'static readonly' to be generated."
        )

    def as_payload(self) -> JSONObject:
        return {
            "code": self.code,
            "severity": self.severity,
            "message": self.message,
            "field": field_display(self.field),
            "details": {},
        }


Diagnostic = MismatchedIdentifiers | UnexpectedFieldType | NotAStaticReadonlyField


@runtime_checkable
class DiagnosticSink(Protocol):
    def report(self, diagnostic: Diagnostic) -> None: ...


@dataclass
class DiagnosticCollector:
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def report(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    def __len__(self) -> int:
        return len(self.diagnostics)

    def codes(self) -> list[str]:
        return [diagnostic.code for diagnostic in self.diagnostics]
