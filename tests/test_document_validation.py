"""Tests for document request validation."""

from prodstack.core.document_validation import (
    INVALID_CANVAS,
    INVALID_PERSONAS,
    INVALID_WORKSPACE,
    PRD_NEEDS_SOURCE,
    SELECT_WORKSPACE,
    USER_STORY_NEEDS_PERSONA,
    can_generate,
    get_validation_message,
    toggle_persona,
    validate_document_request,
)
from prodstack.core.schemas_documents import (
    DocumentType,
    GenerationRequest,
    Persona,
    ProblemCanvas,
    Workspace,
)

WORKSPACES = [Workspace(id="W1", name="Checkout"), Workspace(id="W2", name="Onboarding")]
PERSONAS = [
    Persona(id="P1", name="Priya", role="Ops lead", goals=["Ship faster"]),
    Persona(id="P2", name="Sam", role="Analyst"),
]
CANVASES = [ProblemCanvas(id="C1", name="Cart abandonment", pain_points=["Slow payment"])]


def _request(**overrides) -> GenerationRequest:
    fields = {
        "workspace_id": "W1",
        "document_type": DocumentType.PRD,
        "selected_persona_ids": ("P1",),
        "selected_canvas_id": None,
    }
    fields.update(overrides)
    return GenerationRequest(**fields)


def _validate(request: GenerationRequest):
    return validate_document_request(request, WORKSPACES, PERSONAS, CANVASES)


class TestValidateDocumentRequest:
    def test_valid_prd_with_persona(self) -> None:
        result = _validate(_request())
        assert result.valid is True
        assert result.error is None

    def test_valid_prd_with_canvas_only(self) -> None:
        result = _validate(_request(selected_persona_ids=(), selected_canvas_id="C1"))
        assert result.valid is True

    def test_valid_user_story(self) -> None:
        result = _validate(_request(document_type=DocumentType.USER_STORY))
        assert result.valid is True

    def test_missing_workspace(self) -> None:
        result = _validate(_request(workspace_id=""))
        assert result.valid is False
        assert result.error == SELECT_WORKSPACE

    def test_unknown_workspace(self) -> None:
        result = _validate(_request(workspace_id="W9"))
        assert result.error == INVALID_WORKSPACE

    def test_user_story_without_personas(self) -> None:
        result = _validate(
            _request(document_type=DocumentType.USER_STORY, selected_persona_ids=(), selected_canvas_id="C1")
        )
        assert result.valid is False
        assert result.error == "User story generation requires at least one persona"

    def test_prd_without_personas_or_canvas(self) -> None:
        result = _validate(_request(selected_persona_ids=(), selected_canvas_id=None))
        assert result.valid is False
        assert result.error == "PRD generation requires at least one persona or problem canvas"

    def test_unknown_persona(self) -> None:
        result = _validate(_request(selected_persona_ids=("P1", "P404"), selected_canvas_id="C1"))
        assert result.valid is False
        assert result.error == "Some selected personas are invalid"

    def test_unknown_persona_for_user_story(self) -> None:
        result = _validate(_request(document_type=DocumentType.USER_STORY, selected_persona_ids=("P404",)))
        assert result.error == INVALID_PERSONAS

    def test_unknown_canvas(self) -> None:
        result = _validate(_request(selected_canvas_id="C404"))
        assert result.error == INVALID_CANVAS

    def test_first_failure_wins(self) -> None:
        """Workspace errors take precedence over persona/canvas errors."""
        result = _validate(_request(workspace_id="W9", selected_persona_ids=("P404",), selected_canvas_id="C404"))
        assert result.error == INVALID_WORKSPACE

    def test_source_requirement_before_persona_lookup(self) -> None:
        result = _validate(
            _request(document_type=DocumentType.USER_STORY, selected_persona_ids=(), selected_canvas_id="C404")
        )
        assert result.error == USER_STORY_NEEDS_PERSONA

    def test_empty_canvas_string_treated_as_none(self) -> None:
        request = _request(selected_persona_ids=(), selected_canvas_id="")
        assert request.selected_canvas_id is None
        assert _validate(request).error == PRD_NEEDS_SOURCE

    def test_idempotent(self) -> None:
        request = _request(selected_persona_ids=("P404",))
        assert _validate(request) == _validate(request)


class TestValidationHints:
    def test_message_for_missing_workspace(self) -> None:
        assert get_validation_message("", DocumentType.PRD, ["P1"], None) == SELECT_WORKSPACE

    def test_message_none_when_ready(self) -> None:
        assert get_validation_message("W1", DocumentType.PRD, [], "C1") is None

    def test_message_for_user_story(self) -> None:
        assert get_validation_message("W1", DocumentType.USER_STORY, [], "C1") == USER_STORY_NEEDS_PERSONA

    def test_can_generate(self) -> None:
        assert can_generate("W1", DocumentType.USER_STORY, ["P1"], None) is True
        assert can_generate("W1", DocumentType.PRD, [], None) is False
        assert can_generate("", DocumentType.PRD, ["P1"], "C1") is False


class TestTogglePersona:
    def test_adds_missing_persona(self) -> None:
        assert toggle_persona(["P1"], "P2") == ["P1", "P2"]

    def test_removes_present_persona(self) -> None:
        assert toggle_persona(["P1", "P2"], "P1") == ["P2"]

    def test_does_not_mutate_input(self) -> None:
        selection = ["P1"]
        toggle_persona(selection, "P2")
        assert selection == ["P1"]
