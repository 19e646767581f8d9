"""Axis-relative relations: above/below (world Y), left/right (world X), behind/in front (view depth).

All six share one rule: the main must be on the correct side along the
primary axis, and must overlap the related object on the two perpendicular
axes within a tolerance that grows with the primary-axis gap.
"""

from __future__ import annotations

import enum
import logging
import math

import numpy as np
from numpy.typing import NDArray

from sceneref import geometry
from sceneref.engine.context import RelationQuery, SceneEntity
from sceneref.engine.registry import Family, RelationKind, predicate

logger = logging.getLogger(__name__)

_X = np.array([1.0, 0.0, 0.0])
_Y = np.array([0.0, 1.0, 0.0])
_Z = np.array([0.0, 0.0, 1.0])

# Right-handed, Y-up: with no camera the viewer is assumed to look down -Z
_FALLBACK_FORWARD = np.array([0.0, 0.0, -1.0])


class Side(enum.Enum):
    # main extends further along +axis
    POSITIVE = 1
    # main extends further along -axis
    NEGATIVE = -1


def _side_and_gap(main: tuple[float, float], rel: tuple[float, float], side: Side) -> tuple[bool, float]:
    (min_m, max_m), (min_r, max_r) = main, rel
    if side is Side.POSITIVE:
        return max_m >= max_r, max(0.0, min_m - max_r)
    return min_m <= min_r, max(0.0, min_r - max_m)


def _axis_relation(
    q: RelationQuery,
    primary: NDArray[np.float64],
    side: Side,
    cross_axes: tuple[NDArray[np.float64], NDArray[np.float64]],
    tolerance_fn,
) -> list[SceneEntity]:
    valid: list[SceneEntity] = []
    for main in q.mains:
        bm = q.scene.get_bounds(main)
        proj_m = geometry.project_onto_axis(bm, primary)
        for rel in q.related:
            if main == rel:
                continue
            br = q.scene.get_bounds(rel)
            correct_side, delta = _side_and_gap(proj_m, geometry.project_onto_axis(br, primary), side)
            if not correct_side:
                continue
            tol_1, tol_2 = tolerance_fn(delta)
            if geometry.overlap_along_axis(bm, br, cross_axes[0], tol_1) and geometry.overlap_along_axis(
                bm, br, cross_axes[1], tol_2
            ):
                valid.append(main)
                break
    return valid


def _slope(q: RelationQuery, slope: float):
    cap = q.config.axis_max_tolerance

    def tolerance(delta: float) -> tuple[float, float]:
        tol = geometry.slope_tolerance(delta, slope, cap)
        return tol, tol

    return tolerance


@predicate(kind=RelationKind.ABOVE, family=Family.RELATION, phrases=("above", "over"))
def above(q: RelationQuery) -> list[SceneEntity]:
    return _axis_relation(q, _Y, Side.POSITIVE, (_X, _Z), _slope(q, q.config.axis_slope_factor))


@predicate(
    kind=RelationKind.BELOW,
    family=Family.RELATION,
    phrases=("below", "under", "underneath", "beneath", "lower than"),
)
def below(q: RelationQuery) -> list[SceneEntity]:
    return _axis_relation(q, _Y, Side.NEGATIVE, (_X, _Z), _slope(q, q.config.axis_slope_factor))


@predicate(
    kind=RelationKind.LEFT_OF,
    family=Family.RELATION,
    phrases=("left", "left of", "to the left of"),
)
def left_of(q: RelationQuery) -> list[SceneEntity]:
    return _axis_relation(q, _X, Side.NEGATIVE, (_Y, _Z), _slope(q, q.config.axis_slope_factor))


@predicate(
    kind=RelationKind.RIGHT_OF,
    family=Family.RELATION,
    phrases=("right", "right of", "to the right of"),
)
def right_of(q: RelationQuery) -> list[SceneEntity]:
    return _axis_relation(q, _X, Side.POSITIVE, (_Y, _Z), _slope(q, q.config.axis_slope_factor))


def _depth_relation(q: RelationQuery, side: Side) -> list[SceneEntity]:
    view = q.scene.viewpoint
    if view is None:
        logger.warning("No viewpoint; depth relation falls back to world -Z with slope tolerance")
        return _axis_relation(q, _FALLBACK_FORWARD, side, (_X, _Y), _slope(q, q.config.depth_slope_factor))

    tan_h = math.tan(view.half_horizontal)
    tan_v = math.tan(view.half_vertical)

    # Frustum-matched: how far the view widens over the depth gap
    def frustum(delta: float) -> tuple[float, float]:
        return delta * tan_h, delta * tan_v

    return _axis_relation(q, view.forward, side, (view.right, view.up), frustum)


@predicate(kind=RelationKind.BEHIND, family=Family.RELATION, phrases=("behind",))
def behind(q: RelationQuery) -> list[SceneEntity]:
    return _depth_relation(q, Side.POSITIVE)


@predicate(
    kind=RelationKind.IN_FRONT_OF,
    family=Family.RELATION,
    phrases=("in front", "in front of", "ahead of"),
)
def in_front_of(q: RelationQuery) -> list[SceneEntity]:
    return _depth_relation(q, Side.NEGATIVE)
