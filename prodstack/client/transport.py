"""HTTP client for the document generation endpoints.

Uses httpx for async HTTP requests. The streaming path consumes SSE frames
from ``/generate-document-ai``; the single-shot path waits for the JSON
document from ``/generate-documents``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

import httpx
from pydantic import ValidationError

from prodstack.core.document_validation import validate_document_request
from prodstack.core.errors import (
    AUTH_FAILED_MESSAGE,
    AUTH_REQUIRED_MESSAGE,
    DEFAULT_FAILURE_MESSAGE,
    INVALID_DATA_MESSAGE,
    NO_CONTENT_MESSAGE,
    NOT_FOUND_MESSAGE,
    SERVICE_UNAVAILABLE_MESSAGE,
    STREAM_FAILED_MESSAGE,
    AuthenticationError,
    AuthorizationError,
    DocumentValidationError,
    GenerationError,
    NotFoundError,
    PaymentRequiredError,
    RateLimitError,
    StreamIntegrityError,
    UpstreamUnavailableError,
)
from prodstack.core.logging import get_logger
from prodstack.core.schemas_documents import (
    GenerationRequest,
    LegacyGenerationResponse,
    Persona,
    ProblemCanvas,
    Workspace,
)
from prodstack.core.sse import iter_sse_deltas

logger = get_logger(__name__)

STREAM_PATH = "/generate-document-ai"
SINGLE_SHOT_PATH = "/generate-documents"


@dataclass(frozen=True)
class ClientSession:
    """Credential of the signed-in user."""

    access_token: str
    user_id: str | None = None


class SessionProvider(Protocol):
    async def get_session(self) -> ClientSession | None: ...


class StaticSessionProvider:
    """Session known up front (CLI, tests, server-to-server)."""

    def __init__(self, session: ClientSession | None):
        self._session = session

    async def get_session(self) -> ClientSession | None:
        return self._session


class SupabaseSessionProvider:
    """Session held by a signed-in Supabase client."""

    def __init__(self, supabase: Any):
        self._supabase = supabase

    async def get_session(self) -> ClientSession | None:
        session = self._supabase.auth.get_session()
        if not session or not session.access_token:
            return None
        user = getattr(session, "user", None)
        return ClientSession(
            access_token=session.access_token,
            user_id=str(user.id) if user else None,
        )


def session_from_token(supabase: Any, access_token: str) -> ClientSession | None:
    """
    Resolve an access token to a session via Supabase.

    Returns None if the token is rejected, expired or unknown.
    """
    try:
        # Raises on invalid or expired JWTs
        auth_response = supabase.auth.get_user(access_token)
    except Exception as e:
        logger.warning(f"Access token rejected: {e}")
        return None

    if not auth_response or not auth_response.user:
        return None

    return ClientSession(access_token=access_token, user_id=str(auth_response.user.id))


@dataclass
class GenerationParams:
    """A request together with the entities the caller validated it against."""

    request: GenerationRequest
    workspaces: list[Workspace] = field(default_factory=list)
    personas: list[Persona] = field(default_factory=list)
    canvases: list[ProblemCanvas] = field(default_factory=list)


def _error_body(response: httpx.Response) -> dict:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def error_from_response(status_code: int, body: dict) -> GenerationError:
    """
    Map an error response to a semantic error.

    Args:
        status_code: HTTP status of the response
        body: Parsed ``{error, code?, details?}`` body (may be empty)

    Returns:
        The GenerationError subclass for the failure category
    """
    code = body.get("code")
    error = body.get("error")
    details = body.get("details") or error

    if code == "RATE_LIMIT" or status_code == 429:
        return RateLimitError(details=details)
    if code == "PAYMENT_REQUIRED" or status_code == 402:
        return PaymentRequiredError(details=details)
    if status_code == 401:
        return AuthenticationError(AUTH_FAILED_MESSAGE, details=details)
    if status_code == 403:
        return AuthorizationError(NOT_FOUND_MESSAGE, details=details)
    if status_code == 404:
        return NotFoundError(NOT_FOUND_MESSAGE, details=details)
    if status_code == 400:
        user_message = f"{INVALID_DATA_MESSAGE}: {error}" if error else INVALID_DATA_MESSAGE
        return DocumentValidationError(INVALID_DATA_MESSAGE, user_message=user_message, details=details)
    if status_code == 503:
        return UpstreamUnavailableError(SERVICE_UNAVAILABLE_MESSAGE, details=details)
    return GenerationError(error or DEFAULT_FAILURE_MESSAGE, details=details)


class DocumentGenerationClient:
    """Authenticated client for generating documents through the proxy."""

    def __init__(
        self,
        base_url: str,
        session_provider: SessionProvider,
        timeout: float = 120.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._sessions = session_provider
        self._http = http_client or httpx.AsyncClient(base_url=self.base_url, timeout=timeout)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> DocumentGenerationClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def generate_document(
        self,
        params: GenerationParams,
        on_chunk: Callable[[str], None] | None = None,
    ) -> str:
        """
        Generate a document and return its full text.

        With ``on_chunk`` the streaming endpoint is used and every delta is
        passed to the callback as it arrives; without it the single-shot
        endpoint is used.

        Raises:
            AuthenticationError: No active session
            DocumentValidationError: Request fails local validation
            RateLimitError: Upstream rate limited (retryable)
            StreamIntegrityError: Broken stream or no content
            GenerationError: Any other mapped failure
        """
        session = await self._sessions.get_session()
        if not session or not session.access_token:
            raise AuthenticationError(AUTH_REQUIRED_MESSAGE)

        validation = validate_document_request(
            params.request, params.workspaces, params.personas, params.canvases
        )
        if not validation.valid:
            raise DocumentValidationError(validation.error)

        payload = params.request.to_payload()
        headers = {"Authorization": f"Bearer {session.access_token}"}
        logger.info(
            f"Document generation request: type={payload['documentType']} "
            f"workspace={payload['workspaceId']} personas={len(payload['selectedPersonas'])} "
            f"canvas={payload['selectedCanvas'] or 'none'} stream={on_chunk is not None}"
        )

        try:
            if on_chunk is not None:
                content = await self._generate_streaming(payload, headers, on_chunk)
            else:
                content = await self._generate_single_shot(payload, headers)
        except httpx.TransportError as e:
            logger.error(f"Document service unreachable: {e}")
            raise UpstreamUnavailableError(SERVICE_UNAVAILABLE_MESSAGE, details=str(e)) from e

        if not content:
            raise StreamIntegrityError(NO_CONTENT_MESSAGE)

        logger.info(f"Document generated successfully, length: {len(content)}")
        return content

    async def _generate_streaming(
        self, payload: dict, headers: dict, on_chunk: Callable[[str], None]
    ) -> str:
        full_content = ""
        async with self._http.stream("POST", STREAM_PATH, json=payload, headers=headers) as response:
            if response.is_error:
                await response.aread()
                body = _error_body(response)
                logger.error(f"Document service error {response.status_code}: {body}")
                raise error_from_response(response.status_code, body)

            try:
                async for delta in iter_sse_deltas(response.aiter_bytes()):
                    full_content += delta
                    on_chunk(delta)
            except httpx.HTTPError as e:
                logger.error(f"Streaming error after {len(full_content)} chars: {e}")
                raise StreamIntegrityError(STREAM_FAILED_MESSAGE, details=str(e)) from e

        return full_content

    async def _generate_single_shot(self, payload: dict, headers: dict) -> str:
        response = await self._http.post(SINGLE_SHOT_PATH, json=payload, headers=headers)
        if response.is_error:
            body = _error_body(response)
            logger.error(f"Document service error {response.status_code}: {body}")
            raise error_from_response(response.status_code, body)

        try:
            result = LegacyGenerationResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise StreamIntegrityError(NO_CONTENT_MESSAGE, details=str(e)) from e

        if not result.success or not result.document:
            raise GenerationError(result.error or NO_CONTENT_MESSAGE)
        return result.document.content
