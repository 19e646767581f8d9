"""Entity-level measures built on the geometry library.

Each measure tries the precise solid test first, rejects far pairs with a
slackened box test, and falls back to pure box geometry when a solid is
missing.
"""

from __future__ import annotations

import numpy as np

from sceneref import geometry
from sceneref.engine.context import SceneEntity, SceneSnapshot


def both_solid(scene: SceneSnapshot, a: SceneEntity, b: SceneEntity) -> bool:
    return scene.get_solid(a) is not None and scene.get_solid(b) is not None


def solid_gap(scene: SceneSnapshot, a: SceneEntity, b: SceneEntity) -> float:
    sa, sb = scene.get_solid(a), scene.get_solid(b)
    return geometry.solid_gap(sa, sb, a.center, b.center)


def gap(scene: SceneSnapshot, a: SceneEntity, b: SceneEntity) -> float:
    """Surface separation: solid closest-point gap if both have solids, else box gap."""
    if both_solid(scene, a, b):
        return solid_gap(scene, a, b)
    return geometry.gap(scene.get_bounds(a), scene.get_bounds(b))


def distance(scene: SceneSnapshot, a: SceneEntity, b: SceneEntity) -> float:
    """Ranking distance for "closest": solid gap when both have solids, else centre distance."""
    if both_solid(scene, a, b):
        return solid_gap(scene, a, b)
    return float(np.linalg.norm(a.center - b.center))


def touching(scene: SceneSnapshot, main: SceneEntity, rel: SceneEntity) -> tuple[bool, bool]:
    """(touches, used_solids)."""
    cfg = scene.config
    bm, br = scene.get_bounds(main), scene.get_bounds(rel)
    if both_solid(scene, main, rel):
        if not geometry.bounds_intersect(bm, br, slack=cfg.aabb_slack):
            return False, True
        hit = geometry.precise_touch(
            scene.get_solid(main), scene.get_solid(rel), main.center, rel.center, cfg.touch_epsilon
        )
        return hit, True
    return geometry.touch(bm, br, cfg.touch_epsilon), False


def inside(scene: SceneSnapshot, main: SceneEntity, rel: SceneEntity) -> bool:
    """Any of the main's 9 box samples strictly inside the related solid.

    Without a related solid: box containment, or any overlap (touching faces count).
    """
    bm, br = scene.get_bounds(main), scene.get_bounds(rel)
    solid = scene.get_solid(rel)
    if solid is not None:
        if not geometry.bounds_intersect(br, bm, slack=scene.config.aabb_slack):
            return False
        return any(geometry.precise_contains(solid, p) for p in geometry.sample_points(bm))
    return geometry.contains_bounds(br, bm) or geometry.bounds_intersect(bm, br)


def separated(scene: SceneSnapshot, main: SceneEntity, rel: SceneEntity) -> bool:
    """Apart by more than the touch epsilon."""
    eps = scene.config.touch_epsilon
    if both_solid(scene, main, rel):
        return solid_gap(scene, main, rel) > eps
    return geometry.bounds_separate(scene.get_bounds(main), scene.get_bounds(rel), eps)


def sort_along(entities: list[SceneEntity], axis: np.ndarray) -> list[SceneEntity]:
    """Stable ascending sort by centre projected onto ``axis``."""
    return sorted(entities, key=lambda e: float(np.dot(e.center, axis)))
