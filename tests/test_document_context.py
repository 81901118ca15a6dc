"""Tests for context and prompt assembly."""

from prodstack.core.document_context import (
    GenerationSources,
    build_context,
    build_document_prompt,
    document_title,
)
from prodstack.core.document_prompts import DOCUMENT_SYSTEM_PROMPT, PRD_SECTIONS
from prodstack.core.schemas_documents import DocumentType, Persona, ProblemCanvas, Workspace


def _sources(**overrides) -> GenerationSources:
    fields = {
        "workspace": Workspace(id="W1", name="Checkout", description="Payments revamp"),
        "personas": [
            Persona(
                id="P1",
                name="Priya",
                role="Ops lead",
                age=34,
                bio="Runs fulfilment",
                goals=["Ship faster", "Fewer refunds"],
                frustrations=["Manual reconciliation"],
                tools=["Excel"],
            )
        ],
        "canvas": ProblemCanvas(
            id="C1",
            name="Cart abandonment",
            pain_points=["Slow payment"],
            current_behaviors=["Pays by invoice"],
            opportunities=["One-click checkout"],
        ),
    }
    fields.update(overrides)
    return GenerationSources(**fields)


class TestBuildContext:
    def test_full_context(self) -> None:
        context = build_context(_sources())

        assert context.startswith("Workspace: Checkout\nDescription: Payments revamp\n")
        assert "User Personas:\n- Priya (Ops lead), Age: 34\n" in context
        assert "  Bio: Runs fulfilment\n" in context
        assert "  Goals: Ship faster, Fewer refunds\n" in context
        assert "  Frustrations: Manual reconciliation\n" in context
        assert "  Tools: Excel\n" in context
        assert "Problem Canvas:\nName: Cart abandonment\n" in context
        assert "Pain Points: Slow payment\n" in context
        assert "Current Behaviors: Pays by invoice\n" in context
        assert "Opportunities: One-click checkout\n" in context

    def test_canvas_after_personas(self) -> None:
        context = build_context(_sources())
        assert context.index("User Personas:") < context.index("Problem Canvas:")

    def test_optional_fields_omitted(self) -> None:
        sources = _sources(
            workspace=Workspace(id="W1", name="Checkout"),
            personas=[Persona(id="P2", name="Sam")],
            canvas=None,
        )
        context = build_context(sources)

        assert "Description:" not in context
        assert "- Sam\n" in context
        assert "Goals:" not in context
        assert "Problem Canvas" not in context

    def test_canvas_only(self) -> None:
        context = build_context(_sources(personas=[]))
        assert "User Personas" not in context
        assert "Problem Canvas:" in context


class TestBuildDocumentPrompt:
    def test_prd_prompt(self) -> None:
        prompt = build_document_prompt(DocumentType.PRD, _sources())

        assert prompt.title == "PRD for Checkout"
        assert prompt.system == DOCUMENT_SYSTEM_PROMPT
        for i, section in enumerate(PRD_SECTIONS, start=1):
            assert f"{i}. {section}" in prompt.user
        assert len(PRD_SECTIONS) == 7
        assert "Workspace: Checkout" in prompt.user

    def test_user_story_prompt(self) -> None:
        prompt = build_document_prompt(DocumentType.USER_STORY, _sources())

        assert prompt.title == "User Stories for Checkout"
        assert "3-5 user stories" in prompt.user
        assert '"As a [persona], I want [goal] so that [benefit]"' in prompt.user
        assert "Acceptance criteria" in prompt.user
        assert "Priority level" in prompt.user
        assert "Estimated effort" in prompt.user

    def test_messages(self) -> None:
        prompt = build_document_prompt(DocumentType.PRD, _sources())
        messages = prompt.messages()
        assert [m["role"] for m in messages] == ["system", "user"]
        assert messages[1]["content"] == prompt.user

    def test_document_title(self) -> None:
        assert document_title(DocumentType.USER_STORY, "X") == "User Stories for X"
