"""Pydantic schemas for workspaces, generation inputs and generated documents."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DocumentType(str, Enum):
    """Kinds of document the generator can produce."""
    PRD = "prd"
    USER_STORY = "user_story"

    @property
    def label(self) -> str:
        return "PRD" if self is DocumentType.PRD else "User Stories"


# ============================================================================
# Workspace entities (rows owned by Supabase)
# ============================================================================


class Workspace(BaseModel):
    """Container for personas and canvases."""
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    description: Optional[str] = None
    user_id: Optional[str] = None


class Persona(BaseModel):
    """A named user archetype used as generation input."""
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    role: Optional[str] = None
    age: Optional[int] = None
    bio: Optional[str] = None
    goals: list[str] = Field(default_factory=list)
    frustrations: list[str] = Field(default_factory=list)
    tools: list[str] = Field(default_factory=list)
    workspace_id: Optional[str] = None

    @field_validator("goals", "frustrations", "tools", mode="before")
    @classmethod
    def _null_list(cls, v):
        return v or []


class ProblemCanvas(BaseModel):
    """Pain points, behaviors and opportunities mapped for a workspace."""
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    pain_points: list[str] = Field(default_factory=list)
    opportunities: list[str] = Field(default_factory=list)
    current_behaviors: list[str] = Field(default_factory=list)
    workspace_id: Optional[str] = None

    @field_validator("pain_points", "opportunities", "current_behaviors", mode="before")
    @classmethod
    def _null_list(cls, v):
        return v or []


# ============================================================================
# Generation request / response
# ============================================================================


class GenerationRequest(BaseModel):
    """One generation attempt's selection. Immutable once built."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    workspace_id: str = Field(default="", alias="workspaceId")
    document_type: DocumentType = Field(default=DocumentType.PRD, alias="documentType")
    selected_persona_ids: tuple[str, ...] = Field(default=(), alias="selectedPersonas")
    selected_canvas_id: Optional[str] = Field(default=None, alias="selectedCanvas")

    @field_validator("selected_canvas_id", mode="before")
    @classmethod
    def _empty_canvas_is_none(cls, v):
        return v or None

    def to_payload(self) -> dict:
        """Wire body for the proxy endpoint."""
        return {
            "workspaceId": self.workspace_id,
            "documentType": self.document_type.value,
            "selectedPersonas": list(self.selected_persona_ids),
            "selectedCanvas": self.selected_canvas_id,
        }


class GenerateDocumentBody(BaseModel):
    """Request body as received by the server. Nothing here is trusted."""

    workspaceId: Optional[str] = None
    documentType: Optional[DocumentType] = None
    selectedPersonas: list[str] = Field(default_factory=list)
    selectedCanvas: Optional[str] = None

    @field_validator("selectedPersonas", mode="before")
    @classmethod
    def _null_personas(cls, v):
        return v or []


class GeneratedDocument(BaseModel):
    """Persisted output of a successful generation."""
    model_config = ConfigDict(extra="ignore")

    id: str
    workspace_id: str
    document_type: DocumentType
    title: str
    content: str
    source_personas: list[str] = Field(default_factory=list)
    source_canvas: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("source_personas", mode="before")
    @classmethod
    def _null_sources(cls, v):
        return v or []


class DocumentSummary(BaseModel):
    """Document as returned by the single-shot endpoint."""
    id: str
    title: str
    content: str
    document_type: DocumentType
    created_at: Optional[datetime] = None


class LegacyGenerationResponse(BaseModel):
    """Single-shot endpoint response body."""
    success: bool
    document: Optional[DocumentSummary] = None
    error: Optional[str] = None
