"""Order-along-the-view descriptors: nth-from-edge, middle, middle of each group, left/right half."""

from __future__ import annotations

import math

from sceneref.engine import measures
from sceneref.engine.clustering import cluster_entities
from sceneref.engine.context import DescriptorQuery, SceneEntity
from sceneref.engine.registry import DescriptorKind, Family, predicate


def _left_to_right(q: DescriptorQuery, entities: list[SceneEntity]) -> list[SceneEntity]:
    return measures.sort_along(entities, q.scene.view_right())


def _middle(ordered: list[SceneEntity]) -> list[SceneEntity]:
    count = len(ordered)
    if count == 0:
        return []
    if count % 2 == 1:
        return [ordered[count // 2]]
    return [ordered[count // 2 - 1], ordered[count // 2]]


@predicate(
    kind=DescriptorKind.NTH,
    family=Family.DESCRIPTOR,
    description="1-indexed position counted from the left (or right) edge of the view",
)
def nth(q: DescriptorQuery) -> list[SceneEntity]:
    n = q.ordinal
    if n is None or n < 1 or n > len(q.mains):
        return []
    ordered = _left_to_right(q, q.mains)
    if q.from_right:
        ordered.reverse()
    return [ordered[n - 1]]


@predicate(
    kind=DescriptorKind.MIDDLE,
    family=Family.DESCRIPTOR,
    phrases=("middle", "center", "centre"),
)
def middle(q: DescriptorQuery) -> list[SceneEntity]:
    return _middle(_left_to_right(q, q.mains))


@predicate(
    kind=DescriptorKind.MIDDLE_PER_GROUP,
    family=Family.DESCRIPTOR,
    phrases=("middle of each group", "middle of each row", "center of each group", "center of each row"),
    description="Middle entity of every proximity cluster",
)
def middle_per_group(q: DescriptorQuery) -> list[SceneEntity]:
    winners: list[SceneEntity] = []
    for group in cluster_entities(q.scene, q.mains).clusters:
        for e in _middle(_left_to_right(q, group)):
            if e not in winners:
                winners.append(e)
    return winners


def _fraction(q: DescriptorQuery, start: float, end: float) -> list[SceneEntity]:
    count = len(q.mains)
    if count == 0:
        return []
    ordered = _left_to_right(q, q.mains)
    lo = min(max(math.floor(start * count), 0), count - 1)
    hi = min(max(math.ceil(end * count) - 1, 0), count - 1)
    return ordered[lo : hi + 1]


@predicate(kind=DescriptorKind.LEFT_HALF, family=Family.DESCRIPTOR, phrases=("left half",))
def left_half(q: DescriptorQuery) -> list[SceneEntity]:
    return _fraction(q, 0.0, 0.5)


@predicate(kind=DescriptorKind.RIGHT_HALF, family=Family.DESCRIPTOR, phrases=("right half",))
def right_half(q: DescriptorQuery) -> list[SceneEntity]:
    return _fraction(q, 0.5, 1.0)
