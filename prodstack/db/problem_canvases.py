"""Database operations for problem_canvases table."""

from prodstack.core.schemas_documents import ProblemCanvas
from prodstack.db.supabase_client import get_supabase


def get_workspace_canvas(workspace_id: str, canvas_id: str) -> ProblemCanvas | None:
    """Get a problem canvas by ID, restricted to one workspace."""
    supabase = get_supabase()

    response = (
        supabase.table("problem_canvases")
        .select("*")
        .eq("workspace_id", workspace_id)
        .eq("id", canvas_id)
        .maybe_single()
        .execute()
    )

    if not response or not response.data:
        return None
    return ProblemCanvas.model_validate(response.data)
