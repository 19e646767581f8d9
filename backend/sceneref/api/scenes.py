"""Shared request handling: payload → snapshot, ids → entities, errors → HTTP status."""

from __future__ import annotations

from fastapi import HTTPException

from sceneref.engine.config import EngineConfig
from sceneref.engine.context import SceneEntity, SceneSnapshot
from sceneref.models.requests import SceneModel
from sceneref.scene.loader import UnknownEntityError, load_scene, pick


def snapshot(payload: SceneModel, config: EngineConfig) -> SceneSnapshot:
    try:
        return load_scene(payload, config)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


def entities(scene: SceneSnapshot, ids: list[str]) -> list[SceneEntity]:
    try:
        return pick(scene, ids)
    except UnknownEntityError as e:
        raise HTTPException(status_code=404, detail=f"Unknown entity id(s): {', '.join(e.missing)}") from e
