"""API router for v1 endpoints."""

from fastapi import APIRouter

from prodstack.api import documents

router = APIRouter()

# Document generation (streaming + single-shot)
router.include_router(documents.router, tags=["documents"])
