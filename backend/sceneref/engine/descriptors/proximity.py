"""Closest / furthest from a reference point (no relation keyword involved)."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from sceneref.engine.context import DescriptorQuery, SceneEntity
from sceneref.engine.registry import DescriptorKind, Family, predicate


def reference_point(q: DescriptorQuery) -> NDArray[np.float64]:
    """First measurable reference entity's centre, else the viewer, else the origin."""
    for ref in q.reference:
        if ref.measurable:
            return ref.center
    if q.scene.viewpoint is not None:
        return q.scene.viewpoint.position
    return np.zeros(3)


def _by_distance(q: DescriptorQuery, furthest: bool) -> list[SceneEntity]:
    candidates = [e for e in q.mains if e not in q.reference]
    if not candidates:
        return []
    point = reference_point(q)
    dist = lambda e: float(np.linalg.norm(e.center - point))  # noqa: E731
    return [max(candidates, key=dist) if furthest else min(candidates, key=dist)]


@predicate(
    kind=DescriptorKind.CLOSEST,
    family=Family.DESCRIPTOR,
    phrases=("close", "closest", "nearest", "most near"),
)
def closest(q: DescriptorQuery) -> list[SceneEntity]:
    return _by_distance(q, furthest=False)


@predicate(
    kind=DescriptorKind.FURTHEST,
    family=Family.DESCRIPTOR,
    phrases=("far", "furthest", "farthest", "most far"),
)
def furthest(q: DescriptorQuery) -> list[SceneEntity]:
    return _by_distance(q, furthest=True)
