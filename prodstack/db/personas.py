"""Database operations for personas table."""

from prodstack.core.schemas_documents import Persona
from prodstack.db.supabase_client import get_supabase


def list_workspace_personas(workspace_id: str, persona_ids: list[str]) -> list[Persona]:
    """
    Fetch the given personas, restricted to one workspace.

    Ids that belong to another workspace (or do not exist) are simply absent
    from the result.

    Args:
        workspace_id: Workspace ID
        persona_ids: Persona IDs to resolve

    Returns:
        Resolved personas
    """
    supabase = get_supabase()

    response = (
        supabase.table("personas")
        .select("*")
        .eq("workspace_id", workspace_id)
        .in_("id", persona_ids)
        .execute()
    )

    return [Persona.model_validate(row) for row in response.data or []]
