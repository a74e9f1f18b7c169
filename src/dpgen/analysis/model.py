from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from dpgen.ingest.model import CandidateRequest, FieldSymbol, TypeSymbol
from dpgen.invariants import never

PROPERTY_SUFFIX = "Property"
KEYED_PROPERTY_SUFFIX = "PropertyKey"


class CallShape(str, Enum):
    """Argument shapes a registration call may take."""

    NO_ARGS = "no_args"
    DEFAULT_ONLY = "default_only"
    FLAGS_ONLY = "flags_only"
    DEFAULT_AND_FLAGS = "default_and_flags"

    @classmethod
    def from_flags(cls, *, has_default_value: bool, has_flags: bool) -> "CallShape":
        if has_default_value:
            return cls.DEFAULT_AND_FLAGS if has_flags else cls.DEFAULT_ONLY
        return cls.FLAGS_ONLY if has_flags else cls.NO_ARGS


@dataclass(frozen=True)
class InferenceResult:
    value_type: TypeSymbol
    has_default_value: bool = False
    has_flags: bool = False
    narrowing_type: TypeSymbol | None = None

    @property
    def shape(self) -> CallShape:
        return CallShape.from_flags(
            has_default_value=self.has_default_value,
            has_flags=self.has_flags,
        )


@dataclass(frozen=True)
class GenerationRequest:
    """An admitted candidate, bound to its backing field."""

    candidate: CandidateRequest
    backing_field: FieldSymbol
    is_keyed: bool
    value_type: TypeSymbol | None = None
    narrowing_type: TypeSymbol | None = None
    has_default_value: bool = False
    has_flags: bool = False

    @property
    def target_name(self) -> str:
        return self.candidate.property_name

    @property
    def is_attached(self) -> bool:
        return self.candidate.is_attached

    @property
    def owner(self) -> TypeSymbol:
        return self.backing_field.containing_type

    @property
    def plain_token_name(self) -> str:
        return self.target_name + PROPERTY_SUFFIX

    @property
    def keyed_token_name(self) -> str:
        return self.target_name + KEYED_PROPERTY_SUFFIX

    @property
    def expected_field_name(self) -> str:
        return self.keyed_token_name if self.is_keyed else self.plain_token_name

    @property
    def shape(self) -> CallShape:
        return CallShape.from_flags(
            has_default_value=self.has_default_value,
            has_flags=self.has_flags,
        )

    def with_inference(self, result: InferenceResult) -> "GenerationRequest":
        if self.value_type is not None:
            never(
                "value type written twice",
                property=self.target_name,
                existing=self.value_type.metadata_name,
                incoming=result.value_type.metadata_name,
            )
        return replace(
            self,
            value_type=result.value_type,
            narrowing_type=result.narrowing_type,
            has_default_value=result.has_default_value,
            has_flags=result.has_flags,
        )

    def inferred_value_type(self) -> TypeSymbol:
        if self.value_type is None:
            never("value type read before inference", property=self.target_name)
        return self.value_type
