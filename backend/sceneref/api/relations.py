"""POST /api/relations/evaluate — one relation phrase over explicit id sets."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from sceneref.api.scenes import entities, snapshot
from sceneref.dependencies import get_engine_config
from sceneref.engine.config import EngineConfig
from sceneref.engine.relation_evaluator import RelationEvaluator
from sceneref.models.requests import RelationEvaluateRequest
from sceneref.models.responses import RelationEvaluateResponse

router = APIRouter()


@router.post("/relations/evaluate", response_model=RelationEvaluateResponse)
async def evaluate_relation(
    req: RelationEvaluateRequest,
    config: EngineConfig = Depends(get_engine_config),
) -> RelationEvaluateResponse:
    scene = snapshot(req.scene, config)
    mains = entities(scene, req.main_ids)
    related = entities(scene, req.related_ids)
    related_b = entities(scene, req.related_b_ids) if req.related_b_ids is not None else None

    result = RelationEvaluator(scene).evaluate_detailed(req.relation, mains, related, related_b)
    return RelationEvaluateResponse(
        ids=[e.id for e in result.entities],
        kind=result.kind.value if result.kind is not None else None,
        matches=result.matches,
    )
