"""Leaf-node geometry predicates over axis-aligned boxes and solids. No engine imports.

Boxes are ``(min, max)`` pairs of length-3 float arrays in a right-handed,
Y-up world frame measured in metres. A box whose corners are both the origin
is the "no measurable geometry" marker; callers treat it as unknown.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray
from shapely.geometry import box as planar_box

if TYPE_CHECKING:
    from sceneref.solids import Solid

Bounds = tuple[NDArray[np.float64], NDArray[np.float64]]

# Horizontal (floor-plan) axes: X and Z.
XZ_AXES = (0, 2)

# Alternating closest-point projections used to approximate solid-to-solid gaps.
_GAP_ITERATIONS = 16

# Segments shorter than this are treated as a single point.
_DEGENERATE_SEGMENT = 1e-4


def degenerate_bounds() -> Bounds:
    return (np.zeros(3), np.zeros(3))


def is_degenerate(bounds: Bounds) -> bool:
    """True for the zero box handed out when an entity has no measurable geometry."""
    lo, hi = bounds
    return bool(not np.any(lo) and not np.any(hi))


def center(bounds: Bounds) -> NDArray[np.float64]:
    lo, hi = bounds
    return (lo + hi) * 0.5


def size(bounds: Bounds) -> NDArray[np.float64]:
    lo, hi = bounds
    return hi - lo


def volume(bounds: Bounds) -> float:
    return float(np.prod(size(bounds)))


def corners(bounds: Bounds) -> NDArray[np.float64]:
    """All 8 corners, bit i of the index selecting max on axis i."""
    lo, hi = bounds
    return np.array([
        [hi[0] if i & 1 else lo[0], hi[1] if i & 2 else lo[1], hi[2] if i & 4 else lo[2]]
        for i in range(8)
    ])


def sample_points(bounds: Bounds) -> NDArray[np.float64]:
    """Centre followed by the 8 corners (9 x 3)."""
    return np.vstack([center(bounds), corners(bounds)])


def overlap(a: Bounds, b: Bounds, axes: tuple[int, ...] = XZ_AXES, slack: float = 0.0) -> bool:
    """Closed-interval overlap on every listed axis, widened by ``slack``."""
    (amin, amax), (bmin, bmax) = a, b
    return all(
        amax[ax] + slack >= bmin[ax] and amin[ax] - slack <= bmax[ax]
        for ax in axes
    )


def bounds_intersect(a: Bounds, b: Bounds, slack: float = 0.0) -> bool:
    return overlap(a, b, axes=(0, 1, 2), slack=slack)


def strictly_overlap(a: Bounds, b: Bounds) -> bool:
    """Positive-length overlap on all three axes (touching faces do not count)."""
    (amin, amax), (bmin, bmax) = a, b
    return bool(np.all(amax > bmin) and np.all(amin < bmax))


def bounds_separate(a: Bounds, b: Bounds, gap: float = 0.0) -> bool:
    """True if the boxes are apart by more than ``gap`` along at least one axis."""
    (amin, amax), (bmin, bmax) = a, b
    return bool(np.any(amin > bmax + gap) or np.any(amax < bmin - gap))


def contains_bounds(outer: Bounds, inner: Bounds, epsilon: float = 0.0) -> bool:
    """``inner`` shrunk by ``epsilon`` lies inside ``outer`` (boundary inclusive)."""
    (omin, omax), (imin, imax) = outer, inner
    return bool(np.all(imin + epsilon >= omin) and np.all(imax - epsilon <= omax))


def touch(a: Bounds, b: Bounds, epsilon: float) -> bool:
    """Face contact: some pair of opposing faces within ``epsilon`` while the
    other two axes overlap."""
    (amin, amax), (bmin, bmax) = a, b
    for axis in range(3):
        faces_meet = abs(amin[axis] - bmax[axis]) <= epsilon or abs(amax[axis] - bmin[axis]) <= epsilon
        others = tuple(ax for ax in range(3) if ax != axis)
        if faces_meet and overlap(a, b, axes=others):
            return True
    return False


def gap(a: Bounds, b: Bounds, ignore_axis: int | None = None) -> float:
    """Euclidean separation between two boxes, 0 when they overlap."""
    (amin, amax), (bmin, bmax) = a, b
    per_axis = np.maximum(0.0, np.maximum(amin - bmax, bmin - amax))
    if ignore_axis is not None:
        per_axis[ignore_axis] = 0.0
    return float(np.sqrt(np.sum(per_axis**2)))


def planar_overlap_fraction(a: Bounds, b: Bounds) -> float:
    """Overlap area of the two XZ footprints relative to the smaller footprint (0-1)."""
    fa = planar_box(a[0][0], a[0][2], a[1][0], a[1][2])
    fb = planar_box(b[0][0], b[0][2], b[1][0], b[1][2])
    smaller = min(fa.area, fb.area)
    if smaller <= 0:
        return 0.0
    return float(fa.intersection(fb).area / smaller)


def project_onto_axis(bounds: Bounds, axis: NDArray[np.float64]) -> tuple[float, float]:
    """Min / max projection of the 8 box corners onto ``axis``."""
    proj = corners(bounds) @ axis
    return float(np.min(proj)), float(np.max(proj))


def overlap_along_axis(a: Bounds, b: Bounds, axis: NDArray[np.float64], tolerance: float) -> bool:
    amin, amax = project_onto_axis(a, axis)
    bmin, bmax = project_onto_axis(b, axis)
    return amax >= bmin - tolerance and amin <= bmax + tolerance


def slope_tolerance(separation: float, slope: float, cap: float | None = None) -> float:
    """Tolerance that grows linearly with ``separation``, optionally capped."""
    tol = max(0.0, separation) * slope
    if cap is not None:
        tol = min(cap, tol)
    return tol


def segment_offset(
    point: NDArray[np.float64],
    start: NDArray[np.float64],
    end: NDArray[np.float64],
) -> tuple[float, float] | None:
    """Projection parameter ``t`` of ``point`` onto segment start→end and its
    perpendicular distance to the line. ``None`` for a degenerate segment."""
    seg = end - start
    length = float(np.linalg.norm(seg))
    if length < _DEGENERATE_SEGMENT:
        return None
    t = float(np.dot(point - start, seg) / (length * length))
    dist = float(np.linalg.norm(np.cross(seg / length, point - start)))
    return t, dist


def precise_contains(solid: Solid, point: NDArray[np.float64]) -> bool:
    return bool(solid.contains(point))


def solid_gap(
    a: Solid,
    b: Solid,
    seed_a: NDArray[np.float64],
    seed_b: NDArray[np.float64],
) -> float:
    """Closest-point distance between two solids (0 when they overlap).

    Alternates closest-point projections starting from each solid's seed
    (usually its box centre); for convex solids this converges to the true gap.
    """
    p = a.closest_point(seed_b)
    q = b.closest_point(p)
    for _ in range(_GAP_ITERATIONS):
        p_next = a.closest_point(q)
        q_next = b.closest_point(p_next)
        if np.allclose(p_next, p) and np.allclose(q_next, q):
            break
        p, q = p_next, q_next
    # a seed inside the other solid means the two already overlap
    if b.contains(seed_a) or a.contains(seed_b):
        return 0.0
    return float(np.linalg.norm(p - q))


def precise_touch(
    a: Solid,
    b: Solid,
    seed_a: NDArray[np.float64],
    seed_b: NDArray[np.float64],
    epsilon: float,
) -> bool:
    """Solids overlap or are separated by no more than ``epsilon``."""
    return solid_gap(a, b, seed_a, seed_b) <= epsilon
