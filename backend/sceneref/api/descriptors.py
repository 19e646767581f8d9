"""POST /api/descriptors/evaluate — comparative/ordinal phrases over a candidate set."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from sceneref.api.scenes import entities, snapshot
from sceneref.dependencies import get_engine_config
from sceneref.engine.config import EngineConfig
from sceneref.engine.descriptive_evaluator import DescriptiveEvaluator
from sceneref.models.requests import DescriptorEvaluateRequest
from sceneref.models.responses import DescriptorEvaluateResponse

router = APIRouter()


@router.post("/descriptors/evaluate", response_model=DescriptorEvaluateResponse)
async def evaluate_descriptors(
    req: DescriptorEvaluateRequest,
    config: EngineConfig = Depends(get_engine_config),
) -> DescriptorEvaluateResponse:
    scene = snapshot(req.scene, config)
    mains = entities(scene, req.main_ids)
    reference = entities(scene, req.reference_ids)
    result = DescriptiveEvaluator(scene).evaluate(req.descriptors, mains, reference)
    return DescriptorEvaluateResponse(ids=[e.id for e in result])
