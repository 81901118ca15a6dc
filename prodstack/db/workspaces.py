"""Database operations for workspaces table."""

from prodstack.core.schemas_documents import Workspace
from prodstack.db.supabase_client import get_supabase


def get_owned_workspace(workspace_id: str, user_id: str) -> Workspace | None:
    """
    Get a workspace only if it belongs to the given user.

    Args:
        workspace_id: Workspace ID
        user_id: Authenticated user ID

    Returns:
        Workspace, or None if it does not exist or is owned by someone else
    """
    supabase = get_supabase()

    response = (
        supabase.table("workspaces")
        .select("*")
        .eq("id", workspace_id)
        .eq("user_id", user_id)
        .maybe_single()
        .execute()
    )

    if not response or not response.data:
        return None
    return Workspace.model_validate(response.data)
