"""Size extrema: largest/smallest by volume, tallest/shortest by height, widest by width.

Unlike edge-most, every entity tied with the extremum wins.
"""

from __future__ import annotations

import math
from typing import Callable

from sceneref import geometry
from sceneref.engine.context import DescriptorQuery, SceneEntity
from sceneref.engine.registry import DescriptorKind, Family, predicate

Measure = Callable[[SceneEntity], float]


def _volume(e: SceneEntity) -> float:
    return geometry.volume(e.bounds)


def _height(e: SceneEntity) -> float:
    return float(geometry.size(e.bounds)[1])


def _width(e: SceneEntity) -> float:
    return float(geometry.size(e.bounds)[0])


def _all_extreme(q: DescriptorQuery, measure: Measure, largest: bool) -> list[SceneEntity]:
    if not q.mains:
        return []
    values = [measure(e) for e in q.mains]
    target = max(values) if largest else min(values)
    tol = q.config.extrema_rel_tol
    return [e for e, v in zip(q.mains, values) if math.isclose(v, target, rel_tol=tol, abs_tol=1e-12)]


@predicate(
    kind=DescriptorKind.LARGEST,
    family=Family.DESCRIPTOR,
    phrases=("large", "largest", "most large", "most big", "biggest", "big"),
)
def largest(q: DescriptorQuery) -> list[SceneEntity]:
    return _all_extreme(q, _volume, largest=True)


@predicate(
    kind=DescriptorKind.SMALLEST,
    family=Family.DESCRIPTOR,
    phrases=("small", "smallest", "most small", "tiny", "most tiny", "petite", "most petite"),
)
def smallest(q: DescriptorQuery) -> list[SceneEntity]:
    return _all_extreme(q, _volume, largest=False)


@predicate(
    kind=DescriptorKind.TALLEST,
    family=Family.DESCRIPTOR,
    phrases=("tall", "tallest", "most tall"),
)
def tallest(q: DescriptorQuery) -> list[SceneEntity]:
    return _all_extreme(q, _height, largest=True)


@predicate(
    kind=DescriptorKind.SHORTEST,
    family=Family.DESCRIPTOR,
    phrases=("short", "shortest", "most short"),
)
def shortest(q: DescriptorQuery) -> list[SceneEntity]:
    return _all_extreme(q, _height, largest=False)


@predicate(
    kind=DescriptorKind.WIDEST,
    family=Family.DESCRIPTOR,
    phrases=("wide", "widest", "most wide"),
)
def widest(q: DescriptorQuery) -> list[SceneEntity]:
    return _all_extreme(q, _width, largest=True)
