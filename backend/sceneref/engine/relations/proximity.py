"""Proximity relations: "near", closest main per related object, single global closest pair."""

from __future__ import annotations

import logging

from sceneref.engine import measures
from sceneref.engine.context import RelationQuery, SceneEntity
from sceneref.engine.registry import Family, RelationKind, predicate

logger = logging.getLogger(__name__)


@predicate(
    kind=RelationKind.NEAR,
    family=Family.RELATION,
    phrases=("near", "beside", "right beside", "next to", "right next to", "at", "close to"),
    description="Surface gap to some related object within the near threshold",
)
def near(q: RelationQuery) -> list[SceneEntity]:
    threshold = q.config.near_threshold
    logger.debug("near: threshold %.2f", threshold)
    valid: list[SceneEntity] = []
    for main in q.mains:
        for rel in q.related:
            if main != rel and measures.gap(q.scene, main, rel) <= threshold:
                valid.append(main)
                break
    return valid


@predicate(
    kind=RelationKind.CLOSEST_PER_RELATED,
    family=Family.RELATION,
    phrases=("closest", "closest to", "closer to", "nearest", "nearest to", "nearer to"),
    description="For each related object, the nearest main",
)
def closest_per_related(q: RelationQuery) -> list[SceneEntity]:
    winners: list[SceneEntity] = []
    for rel in q.related:
        best: SceneEntity | None = None
        best_dist = float("inf")
        for main in q.mains:
            if main == rel:
                continue
            d = measures.distance(q.scene, main, rel)
            if d < best_dist:
                best, best_dist = main, d
        if best is None:
            continue
        q.matches.setdefault(best.id, rel.id)
        if best not in winners:
            winners.append(best)
    return winners


@predicate(
    kind=RelationKind.CLOSEST_GLOBAL,
    family=Family.RELATION,
    phrases=("the closest to", "single closest"),
    description="The one main nearest to any related object",
)
def closest_global(q: RelationQuery) -> list[SceneEntity]:
    best_main: SceneEntity | None = None
    best_rel: SceneEntity | None = None
    best_dist = float("inf")
    for rel in q.related:
        for main in q.mains:
            if main == rel:
                continue
            d = measures.distance(q.scene, main, rel)
            if d < best_dist:
                best_main, best_rel, best_dist = main, rel, d
    if best_main is None:
        return []
    q.matches[best_main.id] = best_rel.id
    return [best_main]
