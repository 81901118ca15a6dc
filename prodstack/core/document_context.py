"""Context and prompt assembly for document generation."""

from dataclasses import dataclass, field

from prodstack.core.document_prompts import (
    DOCUMENT_SYSTEM_PROMPT,
    PRD_SECTIONS,
    PRD_TITLE_TEMPLATE,
    PRD_USER_PROMPT,
    USER_STORY_TITLE_TEMPLATE,
    USER_STORY_USER_PROMPT,
)
from prodstack.core.schemas_documents import DocumentType, Persona, ProblemCanvas, Workspace


@dataclass
class GenerationSources:
    """Entities resolved server-side for one generation request."""

    workspace: Workspace
    personas: list[Persona] = field(default_factory=list)
    canvas: ProblemCanvas | None = None


@dataclass(frozen=True)
class DocumentPrompt:
    title: str
    system: str
    user: str

    def messages(self) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": self.system},
            {"role": "user", "content": self.user},
        ]


def _persona_block(persona: Persona) -> list[str]:
    header = f"- {persona.name}"
    if persona.role:
        header += f" ({persona.role})"
    if persona.age:
        header += f", Age: {persona.age}"

    lines = [header]
    if persona.bio:
        lines.append(f"  Bio: {persona.bio}")
    if persona.goals:
        lines.append(f"  Goals: {', '.join(persona.goals)}")
    if persona.frustrations:
        lines.append(f"  Frustrations: {', '.join(persona.frustrations)}")
    if persona.tools:
        lines.append(f"  Tools: {', '.join(persona.tools)}")
    lines.append("")
    return lines


def build_context(sources: GenerationSources) -> str:
    """
    Render workspace, personas and canvas as labeled plain text.

    Empty optional fields are left out entirely rather than printed blank.
    """
    workspace = sources.workspace
    lines = [f"Workspace: {workspace.name}"]
    if workspace.description:
        lines.append(f"Description: {workspace.description}")

    if sources.personas:
        lines.extend(["", "User Personas:"])
        for persona in sources.personas:
            lines.extend(_persona_block(persona))

    canvas = sources.canvas
    if canvas:
        lines.extend(["", "Problem Canvas:", f"Name: {canvas.name}"])
        if canvas.pain_points:
            lines.append(f"Pain Points: {', '.join(canvas.pain_points)}")
        if canvas.current_behaviors:
            lines.append(f"Current Behaviors: {', '.join(canvas.current_behaviors)}")
        if canvas.opportunities:
            lines.append(f"Opportunities: {', '.join(canvas.opportunities)}")

    return "\n".join(lines) + "\n"


def document_title(document_type: DocumentType, workspace_name: str) -> str:
    template = PRD_TITLE_TEMPLATE if document_type is DocumentType.PRD else USER_STORY_TITLE_TEMPLATE
    return template.format(workspace_name=workspace_name)


def build_document_prompt(document_type: DocumentType, sources: GenerationSources) -> DocumentPrompt:
    """Build title and chat messages for the requested document type."""
    context = build_context(sources)
    if document_type is DocumentType.PRD:
        sections = "\n".join(f"{i}. {name}" for i, name in enumerate(PRD_SECTIONS, start=1))
        user = PRD_USER_PROMPT.format(context=context, sections=sections)
    else:
        user = USER_STORY_USER_PROMPT.format(context=context)

    return DocumentPrompt(
        title=document_title(document_type, sources.workspace.name),
        system=DOCUMENT_SYSTEM_PROMPT,
        user=user,
    )
