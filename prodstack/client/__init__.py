"""Client side of document generation: transport, retry, orchestration."""

from prodstack.client.orchestrator import DocumentGenerationOrchestrator, LoggingNotifier
from prodstack.client.retry import RetryController, RetryState
from prodstack.client.transport import (
    ClientSession,
    DocumentGenerationClient,
    GenerationParams,
    StaticSessionProvider,
    SupabaseSessionProvider,
    session_from_token,
)
from prodstack.client.workspace_data import WorkspaceCatalog, WorkspaceCatalogLoader

__all__ = [
    "ClientSession",
    "DocumentGenerationClient",
    "DocumentGenerationOrchestrator",
    "GenerationParams",
    "LoggingNotifier",
    "RetryController",
    "RetryState",
    "StaticSessionProvider",
    "SupabaseSessionProvider",
    "WorkspaceCatalog",
    "WorkspaceCatalogLoader",
    "session_from_token",
]
