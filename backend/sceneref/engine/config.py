"""Engine configuration — every tolerance the predicates use."""

from __future__ import annotations

from dataclasses import dataclass

from sceneref.engine import spatial_constants as sc


@dataclass
class EngineConfig:
    """Numeric tolerances, passed to evaluators through the scene snapshot."""

    # Contact
    touch_epsilon: float = sc.TOUCH_EPSILON
    aabb_slack: float = sc.AABB_SLACK
    min_planar_overlap: float = sc.MIN_PLANAR_OVERLAP

    # Axis-relative relations
    axis_slope_factor: float = sc.AXIS_SLOPE_FACTOR
    axis_max_tolerance: float = sc.AXIS_MAX_TOLERANCE
    depth_slope_factor: float = sc.DEPTH_SLOPE_FACTOR

    # Proximity
    near_threshold: float = sc.NEAR_THRESHOLD

    # Between
    between_slope: float = sc.BETWEEN_SLOPE
    between_max_tolerance: float = sc.BETWEEN_MAX_TOLERANCE

    # Distance clustering
    cluster_k: int = sc.CLUSTER_K
    cluster_min_eps: float = sc.CLUSTER_MIN_EPS
    cluster_max_eps: float = sc.CLUSTER_MAX_EPS
    cluster_min_ratio: float = sc.CLUSTER_MIN_RATIO
    cluster_ignore_vertical: bool = True

    # Descriptors
    extrema_rel_tol: float = sc.EXTREMA_REL_TOL
    contains_epsilon: float = sc.CONTAINS_EPSILON

    def __post_init__(self) -> None:
        # negative thresholds clamp to contact
        self.near_threshold = max(0.0, self.near_threshold)
        if self.cluster_k < 1:
            raise ValueError(f"cluster_k must be >= 1, got {self.cluster_k}")
        if self.cluster_min_eps > self.cluster_max_eps:
            raise ValueError(
                f"cluster_min_eps ({self.cluster_min_eps}) exceeds cluster_max_eps ({self.cluster_max_eps})"
            )
