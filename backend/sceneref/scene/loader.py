"""Scene loader — converts request payloads into a SceneSnapshot."""

from __future__ import annotations

import logging

import numpy as np
from scipy.spatial import QhullError

from sceneref.engine.config import EngineConfig
from sceneref.engine.context import SceneEntity, SceneSnapshot, Viewpoint
from sceneref.models.requests import EntityModel, SceneModel, SolidModel
from sceneref.solids import BoxSolid, ConvexSolid, Solid, SphereSolid

logger = logging.getLogger(__name__)


class UnknownEntityError(KeyError):
    """A request referenced an id that is not in the scene."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__(", ".join(missing))
        self.missing = missing


def _build_solid(spec: SolidModel, entity: EntityModel) -> Solid:
    if spec.type == "box":
        if entity.min is None or entity.max is None:
            raise ValueError(f"Entity {entity.id!r}: box solid needs min and max")
        return BoxSolid(np.array(entity.min), np.array(entity.max))
    if spec.type == "sphere":
        if spec.center is None or spec.radius is None:
            raise ValueError(f"Entity {entity.id!r}: sphere solid needs center and radius")
        return SphereSolid(np.array(spec.center), spec.radius)
    if not spec.points or len(spec.points) < 4:
        raise ValueError(f"Entity {entity.id!r}: convex solid needs at least 4 points")
    try:
        return ConvexSolid(np.array(spec.points))
    except QhullError as e:
        raise ValueError(f"Entity {entity.id!r}: degenerate convex hull ({e})") from e


def _build_entity(model: EntityModel) -> SceneEntity:
    solid = _build_solid(model.solid, model) if model.solid is not None else None
    if model.min is None and model.max is None and solid is not None:
        return SceneEntity.from_solid(model.id, solid, name=model.name, parent_id=model.parent_id)
    return SceneEntity(
        id=model.id,
        name=model.name or model.id,
        bounds_min=None if model.min is None else np.array(model.min),
        bounds_max=None if model.max is None else np.array(model.max),
        solid=solid,
        parent_id=model.parent_id,
    )


def load_scene(payload: SceneModel, config: EngineConfig | None = None) -> SceneSnapshot:
    """Build a snapshot; malformed geometry raises ValueError."""
    entities = [_build_entity(m) for m in payload.entities]
    viewpoint = None
    if payload.viewpoint is not None:
        vp = payload.viewpoint
        viewpoint = Viewpoint(
            position=np.array(vp.position),
            forward=np.array(vp.forward),
            up=np.array(vp.up),
            vertical_fov_deg=vp.vertical_fov_deg,
            aspect=vp.aspect,
        )
    scene = SceneSnapshot.of(entities, viewpoint=viewpoint, config=config)
    logger.debug("Loaded scene: %d entities, viewpoint=%s", len(entities), viewpoint is not None)
    return scene


def pick(scene: SceneSnapshot, ids: list[str]) -> list[SceneEntity]:
    """Entities for ``ids`` in order; any unknown id raises UnknownEntityError."""
    missing = [i for i in ids if i not in scene.entities]
    if missing:
        raise UnknownEntityError(missing)
    return [scene.entities[i] for i in ids]
