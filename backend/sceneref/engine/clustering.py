"""Adaptive distance clustering — groups shelves, rows or piles without a hand-tuned radius.

The radius comes from the sorted k-th nearest-neighbour box gaps: the largest
multiplicative jump (the "elbow") marks the boundary between within-group and
between-group spacing. Grouping itself is single-link, which is DBSCAN with
``min_samples=1`` over the precomputed gap matrix.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray
from sklearn.cluster import DBSCAN

from sceneref.engine.config import EngineConfig
from sceneref.engine.context import SceneEntity, SceneSnapshot, unique

logger = logging.getLogger(__name__)

# Vertical axis, ignored for floor-plan grouping
_Y_AXIS = 1
# Avoids division by zero when neighbouring gaps are 0 (touching boxes)
_MIN_RATIO_BASE = 1e-4


@dataclass
class ClusterResult:
    clusters: list[list[SceneEntity]] = field(default_factory=list)
    epsilon: float = 0.0


def gap_matrix(entities: list[SceneEntity], ignore_axis: int | None = _Y_AXIS) -> NDArray[np.float64]:
    """Pairwise box gaps (N x N, symmetric, zero diagonal)."""
    lo = np.array([e.bounds[0] for e in entities])
    hi = np.array([e.bounds[1] for e in entities])
    # per-axis separation, 0 where the intervals overlap
    sep = np.maximum(0.0, np.maximum(lo[:, None, :] - hi[None, :, :], lo[None, :, :] - hi[:, None, :]))
    if ignore_axis is not None:
        sep[:, :, ignore_axis] = 0.0
    return np.sqrt(np.sum(sep**2, axis=2))


def kth_nearest_gaps(gaps: NDArray[np.float64], k: int) -> NDArray[np.float64]:
    """Each row's k-th smallest gap to another entity (k clamped to what exists)."""
    n = gaps.shape[0]
    if n < 2:
        return np.zeros(n)
    others = np.sort(gaps[~np.eye(n, dtype=bool)].reshape(n, n - 1), axis=1)
    idx = min(max(k - 1, 0), n - 2)
    return others[:, idx]


def pick_epsilon(kth_gaps: NDArray[np.float64], config: EngineConfig) -> float:
    """Midpoint of the largest jump in the sorted gaps, else the median; clamped."""
    gaps = np.sort(np.asarray(kth_gaps, dtype=float))
    lo, hi = config.cluster_min_eps, config.cluster_max_eps
    best_ratio = config.cluster_min_ratio
    eps: float | None = None

    for i in range(1, len(gaps)):
        prev = max(float(gaps[i - 1]), _MIN_RATIO_BASE)
        curr = float(gaps[i])
        ratio = curr / prev
        if ratio > best_ratio and curr > lo:
            best_ratio = ratio
            eps = (prev + curr) * 0.5

    if eps is None:
        eps = float(gaps[len(gaps) // 2]) if len(gaps) else hi
        logger.debug("No elbow found, using median gap %.3f", eps)
    else:
        logger.debug("Elbow ratio %.2f, epsilon %.3f", best_ratio, eps)
    return float(np.clip(eps, lo, hi))


def cluster_entities(
    scene: SceneSnapshot,
    entities: list[SceneEntity],
    k: int | None = None,
) -> ClusterResult:
    """Partition ``entities`` into proximity clusters.

    Entities without measurable geometry cannot be placed and become
    singleton clusters, so the result still covers the input exactly once.
    """
    cfg = scene.config
    k = cfg.cluster_k if k is None else k
    if k < 1:
        raise ValueError(f"k must be >= 1, got {k}")

    items = unique(entities)
    placed = [e for e in items if e.measurable]
    unplaced = [e for e in items if not e.measurable]

    if len(placed) <= 1:
        clusters = [[e] for e in placed] + [[e] for e in unplaced]
        return ClusterResult(clusters=clusters, epsilon=0.0)

    gaps = gap_matrix(placed, _Y_AXIS if cfg.cluster_ignore_vertical else None)
    eps = pick_epsilon(kth_nearest_gaps(gaps, k), cfg)

    labels = DBSCAN(eps=eps, min_samples=1, metric="precomputed").fit(gaps).labels_
    grouped: dict[int, list[SceneEntity]] = {}
    for entity, label in zip(placed, labels):
        grouped.setdefault(int(label), []).append(entity)

    # dict order follows first member, i.e. input order
    clusters = list(grouped.values()) + [[e] for e in unplaced]
    logger.info("Clustered %d entities into %d groups (eps=%.3f)", len(items), len(clusters), eps)
    return ClusterResult(clusters=clusters, epsilon=eps)
