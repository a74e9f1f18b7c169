from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class ParameterDTO(BaseModel):
    name: str
    type: str


class FieldMemberDTO(BaseModel):
    kind: Literal["field"]
    name: str
    type: str
    is_static: bool = False
    is_readonly: bool = False
    accessibility: str = "private"


class MethodMemberDTO(BaseModel):
    kind: Literal["method"]
    name: str
    is_static: bool = False
    return_type: Optional[str] = None
    parameters: List[ParameterDTO] = []
    accessibility: str = "private"


class OtherMemberDTO(BaseModel):
    kind: Literal["other"]
    name: str
    accessibility: str = "private"


MemberDTO = Annotated[
    Union[FieldMemberDTO, MethodMemberDTO, OtherMemberDTO],
    Field(discriminator="kind"),
]


class TypeDTO(BaseModel):
    metadata_name: str
    name: Optional[str] = None
    namespace: str = ""
    display_name: Optional[str] = None
    base_type: Optional[str] = None
    containing_type: Optional[str] = None
    type_parameters: List[str] = []
    is_static: bool = False
    is_value_type: bool = False
    members: List[MemberDTO] = []


class FieldRefDTO(BaseModel):
    owner: str
    name: str


class CallSiteDTO(BaseModel):
    id: str
    field: FieldRefDTO
    generic_argument: Optional[str] = None
    receiver_generic_argument: Optional[str] = None
    arguments: List[Optional[str]] = []


class CandidateDTO(BaseModel):
    callee: Literal["Gen", "GenAttached"]
    property: str
    site: str
    receiver_generic: bool = False
    documentation: List[str] = []


class SymbolGraphDocument(BaseModel):
    language_version: int = 8
    types: List[TypeDTO] = []
    call_sites: List[CallSiteDTO] = []
    candidates: List[CandidateDTO] = []


class DiagnosticDTO(BaseModel):
    code: str
    severity: str
    message: str
    field: str
    details: dict[str, Union[str, List[str]]] = {}


class GenerationResponse(BaseModel):
    artifact_name: Optional[str] = None
    source: Optional[str] = None
    admitted: List[str] = []
    diagnostics: List[DiagnosticDTO] = []
    errors: List[str] = []
