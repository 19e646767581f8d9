"""Support relations: "on" (any face contact) and "on top of" (resting with footprint overlap)."""

from __future__ import annotations

import logging

from sceneref import geometry
from sceneref.engine import measures
from sceneref.engine.context import RelationQuery, SceneEntity
from sceneref.engine.registry import Family, RelationKind, predicate

logger = logging.getLogger(__name__)


@predicate(
    kind=RelationKind.ON,
    family=Family.RELATION,
    phrases=("on",),
    description="Main touches a related object (collider contact, else box adjacency)",
)
def on(q: RelationQuery) -> list[SceneEntity]:
    valid: list[SceneEntity] = []
    box_fallbacks = 0
    for main in q.mains:
        for rel in q.related:
            if main == rel:
                continue
            hit, used_solids = measures.touching(q.scene, main, rel)
            if not used_solids:
                box_fallbacks += 1
            if hit:
                valid.append(main)
                break

    if box_fallbacks:
        logger.warning("on: %d pair(s) without solids evaluated by box contact", box_fallbacks)
    return valid


@predicate(
    kind=RelationKind.ON_TOP_OF,
    family=Family.RELATION,
    phrases=(
        "on top",
        "on top of",
        "sitting on",
        "placed on",
        "resting on",
        "positioned on",
        "left on",
        "atop",
    ),
    description="Main's bottom meets a related top with enough footprint overlap",
)
def on_top_of(q: RelationQuery) -> list[SceneEntity]:
    eps = q.config.touch_epsilon
    valid: list[SceneEntity] = []
    for main in q.mains:
        bm = q.scene.get_bounds(main)
        for rel in q.related:
            if main == rel:
                continue
            br = q.scene.get_bounds(rel)
            resting = abs(bm[0][1] - br[1][1]) <= eps
            if resting and geometry.planar_overlap_fraction(bm, br) >= q.config.min_planar_overlap:
                valid.append(main)
                break
    return valid
