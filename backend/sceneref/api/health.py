"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from sceneref.engine.registry import get_registry
from sceneref.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    registry = get_registry()
    return HealthResponse(
        status="ok",
        version="0.1.0",
        relation_phrases=len(registry.phrases("relation")),
        descriptor_phrases=len(registry.phrases("descriptor")),
    )
