"""Master API router — mounts all endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from sceneref.api import cluster, descriptors, health, relations, resolve

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(relations.router)
api_router.include_router(descriptors.router)
api_router.include_router(cluster.router)
api_router.include_router(resolve.router)
