"""Edge-most descriptors: left/right/top/bottom-most relative to the view."""

from __future__ import annotations

import numpy as np

from sceneref.engine.context import DescriptorQuery, SceneEntity
from sceneref.engine.registry import DescriptorKind, Family, predicate


def _extreme(q: DescriptorQuery, axis: np.ndarray, largest: bool) -> list[SceneEntity]:
    if not q.mains:
        return []
    score = lambda e: float(np.dot(e.center, axis))  # noqa: E731
    # min/max return the first extremum in input order
    pick = max(q.mains, key=score) if largest else min(q.mains, key=score)
    return [pick]


@predicate(
    kind=DescriptorKind.LEFTMOST,
    family=Family.DESCRIPTOR,
    phrases=("left", "leftmost", "furthest left", "most left"),
)
def leftmost(q: DescriptorQuery) -> list[SceneEntity]:
    return _extreme(q, q.scene.view_right(), largest=False)


@predicate(
    kind=DescriptorKind.RIGHTMOST,
    family=Family.DESCRIPTOR,
    phrases=("right", "rightmost", "furthest right", "most right"),
)
def rightmost(q: DescriptorQuery) -> list[SceneEntity]:
    return _extreme(q, q.scene.view_right(), largest=True)


@predicate(
    kind=DescriptorKind.TOPMOST,
    family=Family.DESCRIPTOR,
    phrases=("top", "topmost", "most high", "upper", "uppermost"),
)
def topmost(q: DescriptorQuery) -> list[SceneEntity]:
    return _extreme(q, q.scene.view_up(), largest=True)


@predicate(
    kind=DescriptorKind.BOTTOMMOST,
    family=Family.DESCRIPTOR,
    phrases=("bottom", "bottommost", "most bottom", "lower", "lowest", "most low"),
)
def bottommost(q: DescriptorQuery) -> list[SceneEntity]:
    return _extreme(q, q.scene.view_up(), largest=False)
