"""Ternary "between": the main's centre lies near the segment joining some a in A and b in B."""

from __future__ import annotations

import numpy as np

from sceneref import geometry
from sceneref.engine.context import RelationQuery, SceneEntity
from sceneref.engine.registry import Family, RelationKind, predicate


@predicate(
    kind=RelationKind.BETWEEN,
    family=Family.TERNARY,
    phrases=("between", "in between"),
    description="Centre projects inside segment AB within a separation-scaled tolerance",
)
def between(q: RelationQuery) -> list[SceneEntity]:
    cfg = q.config
    centres_a = [(a, a.center) for a in q.related]
    centres_b = [(b, b.center) for b in q.related_b]

    valid: list[SceneEntity] = []
    for main in q.mains:
        c = main.center
        hit = False
        for a, ca in centres_a:
            for b, cb in centres_b:
                if main == a or main == b:
                    continue
                offset = geometry.segment_offset(c, ca, cb)
                if offset is None:
                    continue
                t, dist = offset
                if not 0.0 <= t <= 1.0:
                    continue
                separation = float(np.linalg.norm(cb - ca))
                tol = geometry.slope_tolerance(separation, cfg.between_slope, cfg.between_max_tolerance)
                if dist <= tol:
                    hit = True
                    break
            if hit:
                break
        if hit:
            valid.append(main)
    return valid
