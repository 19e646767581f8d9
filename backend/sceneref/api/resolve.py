"""POST /api/resolve — full command: descriptors, then the relationship chain."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from sceneref.api.scenes import entities, snapshot
from sceneref.dependencies import get_engine_config
from sceneref.engine.config import EngineConfig
from sceneref.engine.context import RelationshipEdge
from sceneref.engine.labels import StaticLabelIndex
from sceneref.engine.pipeline import ReferenceCommand, create_pipeline
from sceneref.models.requests import ResolveRequest
from sceneref.models.responses import FallbackModel, ResolveResponse

router = APIRouter()


@router.post("/resolve", response_model=ResolveResponse)
async def resolve(
    req: ResolveRequest,
    config: EngineConfig = Depends(get_engine_config),
) -> ResolveResponse:
    scene = snapshot(req.scene, config)
    labels = StaticLabelIndex({label: entities(scene, ids) for label, ids in req.labels.items()})
    command = ReferenceCommand(
        focus_label=req.focus_label,
        candidates=entities(scene, req.focus_ids),
        descriptors=req.descriptors,
        relationships=[RelationshipEdge(e.main, e.relation, e.related) for e in req.relationships],
    )

    result = await create_pipeline(scene, labels).run(command)
    return ResolveResponse(
        ids=[e.id for e in result.entities],
        trace=[FallbackModel(label=r.label, kind=r.kind.value, detail=r.detail) for r in result.trace.records],
        processing_time_ms=result.processing_time_ms,
        descriptors_applied=result.descriptors_applied,
        relationships_applied=result.relationships_applied,
    )
