"""Generate a PRD or user stories from the command line.

Usage:
    python scripts/generate_document.py --workspace <id> --type prd \
        --persona <id> [--persona <id> ...] [--canvas <id>] [--token <jwt>] [--no-stream]

The access token defaults to $PRODSTACK_ACCESS_TOKEN. Deltas are printed as
they arrive; with --no-stream the full document is printed at the end.
"""

import argparse
import asyncio
import os
import sys

from prodstack.client import (
    DocumentGenerationClient,
    DocumentGenerationOrchestrator,
    GenerationParams,
    RetryController,
    StaticSessionProvider,
    WorkspaceCatalogLoader,
    session_from_token,
)
from prodstack.core.config import get_settings
from prodstack.core.document_validation import get_validation_message
from prodstack.core.schemas_documents import DocumentType, GenerationRequest
from prodstack.db.supabase_client import get_supabase


class ConsoleNotifier:
    def success(self, title: str, description: str) -> None:
        print(f"\n✅ {description}", file=sys.stderr)

    def failure(self, title: str, description: str) -> None:
        print(f"\n❌ {title}: {description}", file=sys.stderr)


class StreamingOrchestrator(DocumentGenerationOrchestrator):
    """Echoes each delta to stdout as it is appended."""

    def _append(self, delta: str) -> None:
        super()._append(delta)
        sys.stdout.write(delta)
        sys.stdout.flush()

    def _reset_buffer(self, retry_number: int) -> None:
        super()._reset_buffer(retry_number)
        print(f"\n⏳ Rate limited, retry {retry_number}...\n", file=sys.stderr)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a PRD or user stories")
    parser.add_argument("--workspace", required=True, help="Workspace ID")
    parser.add_argument(
        "--type",
        dest="document_type",
        choices=[t.value for t in DocumentType],
        default=DocumentType.PRD.value,
    )
    parser.add_argument("--persona", action="append", default=[], help="Persona ID (repeatable)")
    parser.add_argument("--canvas", default=None, help="Problem canvas ID")
    parser.add_argument("--token", default=os.getenv("PRODSTACK_ACCESS_TOKEN"), help="Access token")
    parser.add_argument("--no-stream", action="store_true", help="Use the single-shot endpoint")
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> int:
    settings = get_settings()
    document_type = DocumentType(args.document_type)

    hint = get_validation_message(args.workspace, document_type, args.persona, args.canvas)
    if hint:
        print(f"❌ {hint}", file=sys.stderr)
        return 2

    if not args.token:
        print("❌ No access token (use --token or PRODSTACK_ACCESS_TOKEN)", file=sys.stderr)
        return 2

    supabase = get_supabase()
    session = session_from_token(supabase, args.token)
    if not session:
        print("❌ Access token rejected", file=sys.stderr)
        return 2

    catalog = WorkspaceCatalogLoader(supabase, user_id=session.user_id).load(args.workspace)
    params = GenerationParams(
        request=GenerationRequest(
            workspace_id=args.workspace,
            document_type=document_type,
            selected_persona_ids=tuple(args.persona),
            selected_canvas_id=args.canvas,
        ),
        workspaces=catalog.workspaces,
        personas=catalog.personas,
        canvases=catalog.canvases,
    )

    async with DocumentGenerationClient(
        base_url=settings.PRODSTACK_API_URL,
        session_provider=StaticSessionProvider(session),
        timeout=settings.CLIENT_TIMEOUT_SECONDS,
    ) as client:
        orchestrator = StreamingOrchestrator(
            client,
            notifier=ConsoleNotifier(),
            retry_controller=RetryController(
                max_retries=settings.GENERATION_MAX_RETRIES,
                base_delay_ms=settings.GENERATION_RETRY_BASE_MS,
            ),
            stream=not args.no_stream,
        )
        ok = await orchestrator.generate(params)

    if ok and args.no_stream:
        print(orchestrator.generated_text)
    return 0 if ok else 1


def main() -> None:
    sys.exit(asyncio.run(run(_parse_args())))


if __name__ == "__main__":
    main()
