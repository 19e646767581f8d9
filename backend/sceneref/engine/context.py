"""Request-scoped data model shared by every evaluator.

SceneSnapshot   → the geometry provider: entities, optional viewpoint, tolerances
RelationQuery   → mutable state for one relation evaluation
DescriptorQuery → mutable state for one descriptor evaluation
ResolutionTrace → non-fatal fallbacks collected during a request
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import Iterable

import numpy as np
from numpy.typing import NDArray

from sceneref import geometry
from sceneref.engine import spatial_constants as sc
from sceneref.engine.config import EngineConfig
from sceneref.geometry import Bounds
from sceneref.solids import BoxSolid, Solid

VIEWER_LABEL = "*user"


def _vec3(value: Iterable[float] | NDArray[np.float64]) -> NDArray[np.float64]:
    arr = np.asarray(value, dtype=float).reshape(-1)
    if arr.shape != (3,):
        raise ValueError(f"Expected a 3-vector, got shape {arr.shape}")
    return arr


def _unit(v: NDArray[np.float64]) -> NDArray[np.float64]:
    n = float(np.linalg.norm(v))
    if n < 1e-12:
        raise ValueError("Direction vector has zero length")
    return v / n


@dataclass(frozen=True, eq=False)
class SceneEntity:
    """One scene object. Identity is the id; geometry is read-only."""

    id: str
    name: str = ""
    # World-space box corners; None when the object has no measurable geometry
    bounds_min: NDArray[np.float64] | None = None
    bounds_max: NDArray[np.float64] | None = None
    # Optional collider-accurate boundary
    solid: Solid | None = None
    # Parent in the scene hierarchy
    parent_id: str | None = None

    def __post_init__(self) -> None:
        if (self.bounds_min is None) != (self.bounds_max is None):
            raise ValueError(f"Entity {self.id!r}: give both bounds corners or neither")
        if self.bounds_min is not None:
            lo, hi = _vec3(self.bounds_min), _vec3(self.bounds_max)
            if np.any(lo > hi):
                raise ValueError(f"Entity {self.id!r}: bounds_min exceeds bounds_max")
            object.__setattr__(self, "bounds_min", lo)
            object.__setattr__(self, "bounds_max", hi)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SceneEntity):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"SceneEntity({self.id!r})"

    @property
    def bounds(self) -> Bounds:
        if self.bounds_min is None:
            return geometry.degenerate_bounds()
        return (self.bounds_min, self.bounds_max)

    @property
    def measurable(self) -> bool:
        return not geometry.is_degenerate(self.bounds)

    @property
    def center(self) -> NDArray[np.float64]:
        return geometry.center(self.bounds)

    @classmethod
    def box(
        cls,
        id: str,
        center: Iterable[float],
        size: Iterable[float] = (1.0, 1.0, 1.0),
        *,
        name: str = "",
        solid: bool = False,
        parent_id: str | None = None,
    ) -> SceneEntity:
        """Box entity from centre and size; ``solid=True`` also attaches a box collider."""
        c = _vec3(center)
        half = _vec3(size) * 0.5
        lo, hi = c - half, c + half
        return cls(
            id=id,
            name=name or id,
            bounds_min=lo,
            bounds_max=hi,
            solid=BoxSolid(lo, hi) if solid else None,
            parent_id=parent_id,
        )

    @classmethod
    def from_solid(
        cls,
        id: str,
        solid: Solid,
        *,
        name: str = "",
        parent_id: str | None = None,
    ) -> SceneEntity:
        lo, hi = solid.bounds
        return cls(id=id, name=name or id, bounds_min=lo, bounds_max=hi, solid=solid, parent_id=parent_id)


@dataclass
class Viewpoint:
    """Camera pose and frustum used by depth relations and view-relative descriptors."""

    position: NDArray[np.float64]
    # Right-handed, Y-up: the default camera looks down -Z
    forward: NDArray[np.float64] = field(default_factory=lambda: np.array([0.0, 0.0, -1.0]))
    up: NDArray[np.float64] = field(default_factory=lambda: np.array([0.0, 1.0, 0.0]))
    vertical_fov_deg: float = sc.DEFAULT_VERTICAL_FOV_DEG
    aspect: float = sc.DEFAULT_ASPECT

    def __post_init__(self) -> None:
        self.position = _vec3(self.position)
        self.forward = _unit(_vec3(self.forward))
        up = _vec3(self.up)
        # Gram-Schmidt so up is perpendicular to forward
        up = up - np.dot(up, self.forward) * self.forward
        self.up = _unit(up)
        if not 0.0 < self.vertical_fov_deg < 180.0:
            raise ValueError(f"vertical_fov_deg must be in (0, 180), got {self.vertical_fov_deg}")
        if self.aspect <= 0:
            raise ValueError(f"aspect must be positive, got {self.aspect}")

    @property
    def right(self) -> NDArray[np.float64]:
        return _unit(np.cross(self.forward, self.up))

    @property
    def half_vertical(self) -> float:
        return math.radians(self.vertical_fov_deg) * 0.5

    @property
    def half_horizontal(self) -> float:
        return math.atan(math.tan(self.half_vertical) * self.aspect)


@dataclass
class SceneSnapshot:
    """Immutable-for-the-request view of the scene: the geometry provider."""

    entities: dict[str, SceneEntity] = field(default_factory=dict)
    viewpoint: Viewpoint | None = None
    config: EngineConfig = field(default_factory=EngineConfig)

    @classmethod
    def of(
        cls,
        entities: Iterable[SceneEntity],
        viewpoint: Viewpoint | None = None,
        config: EngineConfig | None = None,
    ) -> SceneSnapshot:
        index: dict[str, SceneEntity] = {}
        for e in entities:
            if e.id in index:
                raise ValueError(f"Duplicate entity id: {e.id}")
            index[e.id] = e
        return cls(entities=index, viewpoint=viewpoint, config=config or EngineConfig())

    def get(self, entity_id: str) -> SceneEntity | None:
        return self.entities.get(entity_id)

    def get_bounds(self, entity: SceneEntity) -> Bounds:
        return entity.bounds

    def get_solid(self, entity: SceneEntity) -> Solid | None:
        if not entity.measurable:
            return None
        return entity.solid

    def measurable(self, entities: Iterable[SceneEntity]) -> list[SceneEntity]:
        return [e for e in entities if e.measurable]

    def view_right(self) -> NDArray[np.float64]:
        if self.viewpoint is not None:
            return self.viewpoint.right
        return np.array([1.0, 0.0, 0.0])

    def view_up(self) -> NDArray[np.float64]:
        if self.viewpoint is not None:
            return self.viewpoint.up
        return np.array([0.0, 1.0, 0.0])

    def is_self_or_descendant(self, candidate: SceneEntity, ancestor: SceneEntity) -> bool:
        """Walk ``candidate``'s parent chain looking for ``ancestor``."""
        seen: set[str] = set()
        current: str | None = candidate.id
        while current is not None and current not in seen:
            if current == ancestor.id:
                return True
            seen.add(current)
            node = self.entities.get(current)
            current = node.parent_id if node is not None else None
        return False

    def viewer_entity(self) -> SceneEntity | None:
        """Small box at the camera standing in for the person giving the command."""
        if self.viewpoint is None:
            return None
        half = sc.VIEWER_HALF_EXTENT
        pos = self.viewpoint.position
        return SceneEntity(id=VIEWER_LABEL, name="user", bounds_min=pos - half, bounds_max=pos + half)


def unique(entities: Iterable[SceneEntity]) -> list[SceneEntity]:
    """Drop repeated entities, keeping first-occurrence order."""
    seen: set[str] = set()
    out: list[SceneEntity] = []
    for e in entities:
        if e.id not in seen:
            seen.add(e.id)
            out.append(e)
    return out


@dataclass(frozen=True)
class RelationshipEdge:
    """One directed constraint: ``main`` stands in ``relation`` to ``related``."""

    main: str
    relation: str
    related: str


class FallbackKind(str, enum.Enum):
    CYCLE_BREAK = "cycle_break"
    HEAD_NOUN = "head_noun"
    ALIAS = "alias"
    LOOKUP_FAILED = "lookup_failed"
    MALFORMED_BETWEEN = "malformed_between"
    UNKNOWN_RELATION = "unknown_relation"
    UNKNOWN_DESCRIPTOR = "unknown_descriptor"
    DESCRIPTOR_DISCARDED = "descriptor_discarded"


@dataclass(frozen=True)
class FallbackRecord:
    label: str
    kind: FallbackKind
    detail: str = ""


@dataclass
class ResolutionTrace:
    """Diagnostics only; never consulted for correctness."""

    records: list[FallbackRecord] = field(default_factory=list)

    def add(self, label: str, kind: FallbackKind, detail: str = "") -> None:
        self.records.append(FallbackRecord(label=label, kind=kind, detail=detail))

    def kinds(self) -> list[FallbackKind]:
        return [r.kind for r in self.records]

    def for_label(self, label: str) -> list[FallbackRecord]:
        return [r for r in self.records if r.label == label]


@dataclass
class RelationQuery:
    """State for one relation evaluation. Predicates read it and may add matches."""

    scene: SceneSnapshot
    mains: list[SceneEntity]
    related: list[SceneEntity]
    related_b: list[SceneEntity] = field(default_factory=list)
    # main id -> id of the related entity that justified it (closest relations)
    matches: dict[str, str] = field(default_factory=dict)

    @property
    def config(self) -> EngineConfig:
        return self.scene.config


@dataclass
class DescriptorQuery:
    """State for one descriptor evaluation."""

    scene: SceneSnapshot
    mains: list[SceneEntity]
    reference: list[SceneEntity] = field(default_factory=list)
    # Ordinal descriptors: 1-indexed position and counting direction
    ordinal: int | None = None
    from_right: bool = False

    @property
    def config(self) -> EngineConfig:
        return self.scene.config
