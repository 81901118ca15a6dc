"""Document generation API endpoints."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from prodstack.core.auth_middleware import AuthContext, require_auth
from prodstack.core.config import get_settings
from prodstack.core.document_context import build_document_prompt
from prodstack.core.document_stream import (
    config_from_body,
    persist_single_shot,
    relay_document_stream,
    resolve_sources,
)
from prodstack.core.logging import get_logger, log_with_context
from prodstack.core.schemas_documents import (
    DocumentSummary,
    GenerateDocumentBody,
    LegacyGenerationResponse,
)
from prodstack.services.ai_gateway import AIGateway

logger = get_logger(__name__)

router = APIRouter()


def get_ai_gateway() -> AIGateway:
    """Gateway for the current settings; 503 if the AI key is missing."""
    return AIGateway.from_settings(get_settings())


@router.post("/generate-document-ai")
async def generate_document_ai(
    body: GenerateDocumentBody,
    auth: AuthContext = Depends(require_auth),
) -> StreamingResponse:
    """
    Generate a PRD or user stories and stream it as Server-Sent Events.

    This endpoint:
    1. Authenticates the caller and checks workspace ownership
    2. Resolves personas and canvas within the workspace
    3. Builds the prompt and opens the upstream stream
    4. Relays each delta as ``data: {"content": ...}`` then ``data: [DONE]``
    5. Persists the assembled document once the stream ends

    Upstream refusals are answered as JSON errors before any stream opens.
    """
    config = config_from_body(auth.user_id, body)
    sources = resolve_sources(config)
    prompt = build_document_prompt(config.document_type, sources)

    gateway = get_ai_gateway()
    log_with_context(
        logger,
        logging.INFO,
        f"Streaming {config.document_type.value} for workspace {sources.workspace.name}",
        personas=len(sources.personas),
        canvas="yes" if sources.canvas else "no",
        **config.log_fields(),
    )
    deltas = await gateway.open_stream(prompt.messages())

    return StreamingResponse(
        relay_document_stream(config, prompt.title, deltas),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
            "X-Request-ID": config.request_id,
        },
    )


@router.post("/generate-documents", response_model=LegacyGenerationResponse)
async def generate_documents(
    body: GenerateDocumentBody,
    auth: AuthContext = Depends(require_auth),
) -> LegacyGenerationResponse:
    """Single-shot variant: wait for the full document, save it, return it."""
    config = config_from_body(auth.user_id, body)
    sources = resolve_sources(config)
    prompt = build_document_prompt(config.document_type, sources)

    gateway = get_ai_gateway()
    content = await gateway.complete(prompt.messages())
    document = persist_single_shot(config, prompt.title, content)

    return LegacyGenerationResponse(
        success=True,
        document=DocumentSummary(
            id=document.id,
            title=document.title,
            content=document.content,
            document_type=document.document_type,
            created_at=document.created_at,
        ),
    )
