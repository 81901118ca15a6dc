"""Stateful driver of a document generation, as seen by the UI."""

import logging
from typing import Protocol

from prodstack.client.retry import RetryController
from prodstack.client.transport import DocumentGenerationClient, GenerationParams
from prodstack.core.errors import DEFAULT_FAILURE_MESSAGE, GenerationError
from prodstack.core.logging import get_logger, log_with_context

logger = get_logger(__name__)


class Notifier(Protocol):
    def success(self, title: str, description: str) -> None: ...

    def failure(self, title: str, description: str) -> None: ...


class LoggingNotifier:
    """Notifier that only writes to the log."""

    def success(self, title: str, description: str) -> None:
        logger.info(f"{title}: {description}")

    def failure(self, title: str, description: str) -> None:
        logger.error(f"{title}: {description}")


class DocumentGenerationOrchestrator:
    """
    Owns ``loading``, ``generated_text`` and ``error`` for one generator view.

    Only this object mutates that state, one generation at a time. Deltas are
    appended in arrival order; the buffer is cleared before the first attempt
    and again before every retry.
    """

    def __init__(
        self,
        client: DocumentGenerationClient,
        notifier: Notifier | None = None,
        retry_controller: RetryController | None = None,
        stream: bool = True,
    ):
        self._client = client
        self._notifier = notifier or LoggingNotifier()
        self._retry = retry_controller or RetryController()
        self.stream = stream
        self.loading = False
        self.generated_text = ""
        self.error: str | None = None

    def _append(self, delta: str) -> None:
        self.generated_text += delta

    def _reset_buffer(self, retry_number: int) -> None:
        log_with_context(
            logger,
            logging.INFO,
            "Discarding partial output before retry",
            retry=retry_number,
            discarded_chars=len(self.generated_text),
        )
        self.generated_text = ""

    async def generate(self, params: GenerationParams) -> bool:
        """
        Run one generation to a terminal state.

        Returns:
            True on success, False on failure or if a generation is already running
        """
        if self.loading:
            logger.warning("Generation already in progress; ignoring request")
            return False

        self.loading = True
        self.generated_text = ""
        self.error = None
        document_type = params.request.document_type

        async def run_once() -> str:
            on_chunk = self._append if self.stream else None
            return await self._client.generate_document(params, on_chunk=on_chunk)

        try:
            content = await self._retry.attempt(run_once, on_retry=self._reset_buffer)
            self.generated_text = content
            self._notifier.success("Success", f"{document_type.label} generated successfully")
            return True
        except GenerationError as e:
            self.error = e.user_message
            log_with_context(
                logger,
                logging.ERROR,
                f"Document generation failed: {e}",
                error_type=type(e).__name__,
                details=e.details,
            )
        except Exception as e:
            self.error = DEFAULT_FAILURE_MESSAGE
            logger.exception(f"Unexpected error during document generation: {e}")
        finally:
            self.loading = False

        self._notifier.failure("Error", self.error)
        return False
