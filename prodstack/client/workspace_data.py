"""Load the workspaces, personas and canvases a generation is configured from."""

from dataclasses import dataclass, field
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from prodstack.core.logging import get_logger
from prodstack.core.schemas_documents import Persona, ProblemCanvas, Workspace

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


def parse_rows(model: type[M], rows: list[dict] | None, table: str) -> list[M]:
    """Validate rows into ``model``; malformed rows are logged and dropped."""
    parsed: list[M] = []
    for row in rows or []:
        try:
            parsed.append(model.model_validate(row))
        except ValidationError as e:
            row_id = row.get("id") if isinstance(row, dict) else None
            logger.warning(f"Dropping malformed {table} row {row_id}: {e.error_count()} errors")
    return parsed


@dataclass
class WorkspaceCatalog:
    """Everything the caller can select from, for one workspace."""

    workspaces: list[Workspace] = field(default_factory=list)
    personas: list[Persona] = field(default_factory=list)
    canvases: list[ProblemCanvas] = field(default_factory=list)
    selected_workspace_id: str = ""


class WorkspaceCatalogLoader:
    """Reads selection data through an injected Supabase client."""

    def __init__(self, supabase: Any, user_id: str | None = None):
        self._supabase = supabase
        self._user_id = user_id

    def load_workspaces(self) -> list[Workspace]:
        """Workspaces of the user, newest first."""
        query = self._supabase.table("workspaces").select("*")
        if self._user_id:
            query = query.eq("user_id", self._user_id)
        response = query.order("created_at", desc=True).execute()
        return parse_rows(Workspace, response.data, "workspaces")

    def load_personas(self, workspace_id: str) -> list[Persona]:
        response = (
            self._supabase.table("personas")
            .select("*")
            .eq("workspace_id", workspace_id)
            .execute()
        )
        return parse_rows(Persona, response.data, "personas")

    def load_canvases(self, workspace_id: str) -> list[ProblemCanvas]:
        response = (
            self._supabase.table("problem_canvases")
            .select("*")
            .eq("workspace_id", workspace_id)
            .execute()
        )
        return parse_rows(ProblemCanvas, response.data, "problem_canvases")

    def load(self, workspace_id: str | None = None) -> WorkspaceCatalog:
        """
        Load workspaces and, for the selected one, its personas and canvases.

        Defaults the selection to the newest workspace when none is given.
        """
        workspaces = self.load_workspaces()
        selected = workspace_id or (workspaces[0].id if workspaces else "")
        if not selected:
            return WorkspaceCatalog(workspaces=workspaces)

        return WorkspaceCatalog(
            workspaces=workspaces,
            personas=self.load_personas(selected),
            canvases=self.load_canvases(selected),
            selected_workspace_id=selected,
        )
