"""Pre-flight validation of a document generation request.

Pure functions: the same inputs always give the same result, and nothing
outside the arguments is read.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from prodstack.core.schemas_documents import (
    DocumentType,
    GenerationRequest,
    Persona,
    ProblemCanvas,
    Workspace,
)

SELECT_WORKSPACE = "Please select a workspace"
INVALID_WORKSPACE = "Selected workspace is invalid"
USER_STORY_NEEDS_PERSONA = "User story generation requires at least one persona"
PRD_NEEDS_SOURCE = "PRD generation requires at least one persona or problem canvas"
INVALID_PERSONAS = "Some selected personas are invalid"
INVALID_CANVAS = "Selected canvas is invalid"


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: str | None = None


VALID = ValidationResult(valid=True)


def source_requirement_error(
    document_type: DocumentType, has_personas: bool, has_canvas: bool
) -> str | None:
    """Document-type rule shared by client and server checks."""
    if document_type is DocumentType.USER_STORY and not has_personas:
        return USER_STORY_NEEDS_PERSONA
    if document_type is DocumentType.PRD and not (has_personas or has_canvas):
        return PRD_NEEDS_SOURCE
    return None


def validate_document_request(
    request: GenerationRequest,
    workspaces: Iterable[Workspace],
    personas: Iterable[Persona],
    canvases: Iterable[ProblemCanvas],
) -> ValidationResult:
    """
    Check a request against the entities currently known to the caller.

    Rules are checked in order and the first failure wins.

    Args:
        request: Selection to validate
        workspaces: Workspaces the caller can see
        personas: Personas of the selected workspace
        canvases: Problem canvases of the selected workspace

    Returns:
        ValidationResult with ``valid`` and, on failure, the user-facing error
    """
    if not request.workspace_id:
        return ValidationResult(False, SELECT_WORKSPACE)

    if request.workspace_id not in {w.id for w in workspaces}:
        return ValidationResult(False, INVALID_WORKSPACE)

    error = source_requirement_error(
        request.document_type,
        has_personas=bool(request.selected_persona_ids),
        has_canvas=bool(request.selected_canvas_id),
    )
    if error:
        return ValidationResult(False, error)

    known_personas = {p.id for p in personas}
    if any(pid not in known_personas for pid in request.selected_persona_ids):
        return ValidationResult(False, INVALID_PERSONAS)

    if request.selected_canvas_id and request.selected_canvas_id not in {c.id for c in canvases}:
        return ValidationResult(False, INVALID_CANVAS)

    return VALID


def get_validation_message(
    workspace_id: str,
    document_type: DocumentType,
    persona_ids: Sequence[str],
    canvas_id: str | None,
) -> str | None:
    """Hint shown next to the generate action; None when nothing is missing."""
    if not workspace_id:
        return SELECT_WORKSPACE
    return source_requirement_error(document_type, bool(persona_ids), bool(canvas_id))


def can_generate(
    workspace_id: str,
    document_type: DocumentType,
    persona_ids: Sequence[str],
    canvas_id: str | None,
) -> bool:
    return get_validation_message(workspace_id, document_type, persona_ids, canvas_id) is None


def toggle_persona(persona_ids: Sequence[str], persona_id: str) -> list[str]:
    """Add or remove a persona from a selection without mutating it."""
    if persona_id in persona_ids:
        return [pid for pid in persona_ids if pid != persona_id]
    return [*persona_ids, persona_id]
