"""POST /api/cluster — adaptive proximity grouping."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from sceneref.api.scenes import entities, snapshot
from sceneref.dependencies import get_engine_config
from sceneref.engine.clustering import cluster_entities
from sceneref.engine.config import EngineConfig
from sceneref.models.requests import ClusterRequest
from sceneref.models.responses import ClusterResponse

router = APIRouter()


@router.post("/cluster", response_model=ClusterResponse)
async def cluster(
    req: ClusterRequest,
    config: EngineConfig = Depends(get_engine_config),
) -> ClusterResponse:
    scene = snapshot(req.scene, config)
    result = cluster_entities(scene, entities(scene, req.ids), k=req.k)
    return ClusterResponse(
        clusters=[[e.id for e in group] for group in result.clusters],
        epsilon=round(result.epsilon, 4),
    )
