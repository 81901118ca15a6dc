"""Database operations for generated_documents table."""

from prodstack.core.logging import get_logger
from prodstack.core.schemas_documents import DocumentType, GeneratedDocument
from prodstack.db.supabase_client import get_supabase

logger = get_logger(__name__)


def insert_generated_document(
    workspace_id: str,
    document_type: DocumentType,
    title: str,
    content: str,
    source_personas: list[str],
    source_canvas: str | None,
) -> GeneratedDocument:
    """
    Persist a generated document.

    Args:
        workspace_id: Owning workspace ID
        document_type: PRD or user stories
        title: Document title
        content: Full generated text (must be non-empty)
        source_personas: Persona IDs the document was generated from
        source_canvas: Canvas ID the document was generated from, if any

    Returns:
        The stored document

    Raises:
        ValueError: If content is empty
        RuntimeError: If the insert returned no row
    """
    if not content:
        raise ValueError("Refusing to persist an empty document")

    supabase = get_supabase()

    response = (
        supabase.table("generated_documents")
        .insert(
            {
                "workspace_id": workspace_id,
                "document_type": document_type.value,
                "title": title,
                "content": content,
                "source_personas": source_personas,
                "source_canvas": source_canvas,
            }
        )
        .execute()
    )

    if not response.data:
        raise RuntimeError("Insert into generated_documents returned no data")

    document = GeneratedDocument.model_validate(response.data[0])
    logger.info(f"Saved generated document {document.id} ({document.document_type.value})")
    return document
