"""Server-side document generation: source resolution, streaming relay, persistence."""

import logging
import uuid
from collections.abc import AsyncGenerator
from contextlib import aclosing
from dataclasses import dataclass, field

from prodstack.core.document_context import GenerationSources
from prodstack.core.document_validation import source_requirement_error
from prodstack.core.errors import NO_CONTENT_MESSAGE, ApiError
from prodstack.core.logging import get_logger, log_with_context
from prodstack.core.schemas_documents import DocumentType, GenerateDocumentBody, GeneratedDocument
from prodstack.core.sse import DONE_FRAME, content_frame
from prodstack.db.generated_documents import insert_generated_document
from prodstack.db.personas import list_workspace_personas
from prodstack.db.problem_canvases import get_workspace_canvas
from prodstack.db.workspaces import get_owned_workspace

logger = get_logger(__name__)

WORKSPACE_NOT_FOUND = "Workspace not found or access denied"
INVALID_PERSONAS = "Some selected personas are invalid"


@dataclass
class DocumentStreamConfig:
    """Explicit inputs for one server-side generation."""

    user_id: str
    workspace_id: str
    document_type: DocumentType
    persona_ids: list[str] = field(default_factory=list)
    canvas_id: str | None = None
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def log_fields(self) -> dict:
        return {
            "request_id": self.request_id,
            "user_id": self.user_id,
            "workspace_id": self.workspace_id,
            "document_type": self.document_type.value,
        }


def config_from_body(user_id: str, body: GenerateDocumentBody) -> DocumentStreamConfig:
    """Check required parameters and build the generation config (400 if missing)."""
    if not body.workspaceId or not body.documentType:
        log_with_context(logger, logging.WARNING, "Missing required parameters", user_id=user_id)
        raise ApiError(400, "Missing required parameters")

    return DocumentStreamConfig(
        user_id=user_id,
        workspace_id=body.workspaceId,
        document_type=body.documentType,
        persona_ids=list(dict.fromkeys(body.selectedPersonas)),
        canvas_id=body.selectedCanvas or None,
    )


def resolve_sources(config: DocumentStreamConfig) -> GenerationSources:
    """
    Load and check everything the prompt is built from.

    Ownership failures are reported exactly like missing workspaces. The
    document-type requirement is re-checked against the resolved entities,
    not the submitted ids.

    Raises:
        ApiError: 404 for unknown/foreign workspace, 500 on fetch failure,
            400 when personas or canvas do not resolve or sources are insufficient
    """
    ctx = config.log_fields()

    try:
        workspace = get_owned_workspace(config.workspace_id, config.user_id)
    except Exception as e:
        log_with_context(logger, logging.ERROR, f"Workspace lookup failed: {e}", **ctx)
        workspace = None

    if not workspace:
        log_with_context(logger, logging.WARNING, WORKSPACE_NOT_FOUND, **ctx)
        raise ApiError(404, WORKSPACE_NOT_FOUND)

    personas = []
    if config.persona_ids:
        try:
            personas = list_workspace_personas(config.workspace_id, config.persona_ids)
        except Exception as e:
            log_with_context(logger, logging.ERROR, f"Error fetching personas: {e}", **ctx)
            raise ApiError(500, "Failed to fetch personas") from e

        if not personas:
            log_with_context(logger, logging.WARNING, "No personas resolved", **ctx)
            raise ApiError(400, "No valid personas found. Please create personas first.")

        if len(personas) < len(set(config.persona_ids)):
            log_with_context(
                logger,
                logging.WARNING,
                INVALID_PERSONAS,
                requested=len(set(config.persona_ids)),
                resolved=len(personas),
                **ctx,
            )
            raise ApiError(400, INVALID_PERSONAS)

    canvas = None
    if config.canvas_id:
        try:
            canvas = get_workspace_canvas(config.workspace_id, config.canvas_id)
        except Exception as e:
            log_with_context(logger, logging.ERROR, f"Error fetching canvas: {e}", **ctx)
            raise ApiError(500, "Failed to fetch problem canvas") from e

        if not canvas:
            log_with_context(logger, logging.WARNING, "Canvas did not resolve", **ctx)
            raise ApiError(
                400, "Problem canvas not found. Please create a problem canvas first."
            )

    error = source_requirement_error(
        config.document_type, has_personas=bool(personas), has_canvas=canvas is not None
    )
    if error:
        log_with_context(logger, logging.WARNING, error, **ctx)
        raise ApiError(400, error)

    return GenerationSources(workspace=workspace, personas=personas, canvas=canvas)


def persist_document(
    config: DocumentStreamConfig, title: str, content: str
) -> GeneratedDocument:
    return insert_generated_document(
        workspace_id=config.workspace_id,
        document_type=config.document_type,
        title=title,
        content=content,
        source_personas=config.persona_ids,
        source_canvas=config.canvas_id,
    )


async def relay_document_stream(
    config: DocumentStreamConfig,
    title: str,
    deltas: AsyncGenerator[str, None],
) -> AsyncGenerator[str, None]:
    """
    Re-emit upstream deltas as SSE frames, then persist the assembled document.

    The ``[DONE]`` frame goes out before persistence; a failed save is logged
    and never turns the delivered stream into an error. If the upstream
    stream breaks, the error propagates, no ``[DONE]`` is sent and nothing is
    saved. The upstream stream is closed whenever the relay ends, including
    when the caller disconnects mid-stream.
    """
    ctx = config.log_fields()
    full_content = ""

    try:
        async with aclosing(deltas) as upstream:
            async for delta in upstream:
                full_content += delta
                yield content_frame(delta)
    except Exception as e:
        log_with_context(
            logger, logging.ERROR, f"Streaming error: {e}", received_chars=len(full_content), **ctx
        )
        raise

    yield DONE_FRAME

    if not full_content:
        log_with_context(logger, logging.WARNING, "Stream completed with no content; not saving", **ctx)
        return

    try:
        document = persist_document(config, title, full_content)
        log_with_context(
            logger, logging.INFO, "Document saved", document_id=document.id, chars=len(full_content), **ctx
        )
    except Exception as e:
        log_with_context(logger, logging.ERROR, f"Error saving document: {e}", **ctx)


def persist_single_shot(config: DocumentStreamConfig, title: str, content: str) -> GeneratedDocument:
    """Persist a non-streamed document; failures here are reported to the caller."""
    ctx = config.log_fields()
    if not content:
        log_with_context(logger, logging.ERROR, NO_CONTENT_MESSAGE, **ctx)
        raise ApiError(500, NO_CONTENT_MESSAGE)

    try:
        return persist_document(config, title, content)
    except Exception as e:
        log_with_context(logger, logging.ERROR, f"Error saving document: {e}", **ctx)
        raise ApiError(500, "Failed to save generated document", details=str(e)) from e
