"""Solid-boundary capabilities: precise containment and closest-point queries.

An entity with a solid gets collider-accurate tests; entities without one fall
back to their bounding box. No engine imports.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np
from numpy.typing import NDArray
from scipy.spatial import ConvexHull

from sceneref.geometry import Bounds

# Points closer than this to a surface are not strictly interior.
_INTERIOR_TOL = 1e-9


@runtime_checkable
class Solid(Protocol):
    def contains(self, point: NDArray[np.float64]) -> bool: ...

    def closest_point(self, point: NDArray[np.float64]) -> NDArray[np.float64]: ...

    @property
    def bounds(self) -> Bounds: ...


class BoxSolid:
    """Axis-aligned box collider."""

    def __init__(self, lo: NDArray[np.float64], hi: NDArray[np.float64]) -> None:
        self.lo = np.asarray(lo, dtype=float)
        self.hi = np.asarray(hi, dtype=float)

    @property
    def bounds(self) -> Bounds:
        return (self.lo.copy(), self.hi.copy())

    def contains(self, point: NDArray[np.float64]) -> bool:
        p = np.asarray(point, dtype=float)
        return bool(np.all(p > self.lo + _INTERIOR_TOL) and np.all(p < self.hi - _INTERIOR_TOL))

    def closest_point(self, point: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.clip(np.asarray(point, dtype=float), self.lo, self.hi)


class SphereSolid:
    def __init__(self, center: NDArray[np.float64], radius: float) -> None:
        self.center = np.asarray(center, dtype=float)
        self.radius = float(radius)

    @property
    def bounds(self) -> Bounds:
        return (self.center - self.radius, self.center + self.radius)

    def contains(self, point: NDArray[np.float64]) -> bool:
        d = float(np.linalg.norm(np.asarray(point, dtype=float) - self.center))
        return d < self.radius - _INTERIOR_TOL

    def closest_point(self, point: NDArray[np.float64]) -> NDArray[np.float64]:
        p = np.asarray(point, dtype=float)
        offset = p - self.center
        d = float(np.linalg.norm(offset))
        if d <= self.radius:
            return p
        return self.center + offset / d * self.radius


class ConvexSolid:
    """Convex hull of a point cloud (mesh vertices, scan points, ...)."""

    def __init__(self, points: NDArray[np.float64]) -> None:
        self.points = np.asarray(points, dtype=float)
        self.hull = ConvexHull(self.points)
        # Facet planes: normal . x + offset <= 0 inside
        self._normals = self.hull.equations[:, :3]
        self._offsets = self.hull.equations[:, 3]

    @property
    def bounds(self) -> Bounds:
        verts = self.points[self.hull.vertices]
        return (verts.min(axis=0), verts.max(axis=0))

    def _plane_distances(self, p: NDArray[np.float64]) -> NDArray[np.float64]:
        return self._normals @ p + self._offsets

    def contains(self, point: NDArray[np.float64]) -> bool:
        p = np.asarray(point, dtype=float)
        return bool(np.all(self._plane_distances(p) < -_INTERIOR_TOL))

    def closest_point(self, point: NDArray[np.float64]) -> NDArray[np.float64]:
        p = np.asarray(point, dtype=float)
        if np.all(self._plane_distances(p) <= _INTERIOR_TOL):
            return p
        best = p
        best_d2 = float("inf")
        for simplex in self.hull.simplices:
            a, b, c = self.points[simplex]
            q = closest_point_on_triangle(p, a, b, c)
            d2 = float(np.sum((q - p) ** 2))
            if d2 < best_d2:
                best, best_d2 = q, d2
        return best


def closest_point_on_triangle(
    p: NDArray[np.float64],
    a: NDArray[np.float64],
    b: NDArray[np.float64],
    c: NDArray[np.float64],
) -> NDArray[np.float64]:
    """Closest point to ``p`` on triangle abc via Voronoi-region tests."""
    ab = b - a
    ac = c - a
    ap = p - a
    d1 = float(np.dot(ab, ap))
    d2 = float(np.dot(ac, ap))
    if d1 <= 0 and d2 <= 0:
        return a

    bp = p - b
    d3 = float(np.dot(ab, bp))
    d4 = float(np.dot(ac, bp))
    if d3 >= 0 and d4 <= d3:
        return b

    vc = d1 * d4 - d3 * d2
    if vc <= 0 and d1 >= 0 and d3 <= 0:
        return a + ab * (d1 / (d1 - d3))

    cp = p - c
    d5 = float(np.dot(ab, cp))
    d6 = float(np.dot(ac, cp))
    if d6 >= 0 and d5 <= d6:
        return c

    vb = d5 * d2 - d1 * d6
    if vb <= 0 and d2 >= 0 and d6 <= 0:
        return a + ac * (d2 / (d2 - d6))

    va = d3 * d6 - d5 * d4
    if va <= 0 and (d4 - d3) >= 0 and (d5 - d6) >= 0:
        return b + (c - b) * ((d4 - d3) / ((d4 - d3) + (d5 - d6)))

    denom = 1.0 / (va + vb + vc)
    v = vb * denom
    w = vc * denom
    return a + ab * v + ac * w
