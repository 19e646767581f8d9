"""API request models."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field

Vec3 = Annotated[list[float], Field(min_length=3, max_length=3)]


class SolidModel(BaseModel):
    type: Literal["box", "sphere", "convex"] = Field(..., description="Collider shape")
    center: Vec3 | None = Field(default=None, description="Sphere centre")
    radius: float | None = Field(default=None, gt=0, description="Sphere radius")
    points: list[Vec3] | None = Field(default=None, description="Convex hull input points (>= 4, not coplanar)")


class EntityModel(BaseModel):
    id: str = Field(..., min_length=1, description="Unique entity handle")
    name: str = Field(default="", description="Display name")
    min: Vec3 | None = Field(default=None, description="World-space box min corner")
    max: Vec3 | None = Field(default=None, description="World-space box max corner")
    solid: SolidModel | None = Field(default=None, description="Optional precise collider")
    parent_id: str | None = Field(default=None, description="Parent entity in the scene hierarchy")


class ViewpointModel(BaseModel):
    position: Vec3 = Field(...)
    forward: Vec3 = Field(default_factory=lambda: [0.0, 0.0, -1.0])
    up: Vec3 = Field(default_factory=lambda: [0.0, 1.0, 0.0])
    vertical_fov_deg: float = Field(default=60.0, gt=0, lt=180)
    aspect: float = Field(default=16 / 9, gt=0)


class SceneModel(BaseModel):
    entities: list[EntityModel] = Field(default_factory=list, description="Scene objects")
    viewpoint: ViewpointModel | None = Field(default=None, description="Camera, if known")


class RelationEvaluateRequest(BaseModel):
    scene: SceneModel
    relation: str = Field(..., description="Relation phrase, e.g. 'on top of'")
    main_ids: list[str] = Field(..., description="Candidate entities to filter")
    related_ids: list[str] = Field(..., description="Reference entities")
    related_b_ids: list[str] | None = Field(default=None, description="Second reference group (between)")


class DescriptorEvaluateRequest(BaseModel):
    scene: SceneModel
    descriptors: list[str] = Field(..., description="Descriptor phrases, first match governs")
    main_ids: list[str] = Field(..., description="Candidate entities")
    reference_ids: list[str] = Field(default_factory=list, description="Reference for closest/furthest")


class ClusterRequest(BaseModel):
    scene: SceneModel
    ids: list[str] = Field(..., description="Entities to group")
    k: int | None = Field(default=None, ge=1, description="Neighbour rank for radius selection")


class EdgeModel(BaseModel):
    main: str
    relation: str
    related: str


class ResolveRequest(BaseModel):
    scene: SceneModel
    focus_label: str = Field(..., description="Label of the object the command refers to")
    focus_ids: list[str] = Field(..., description="Raw candidates for the focus label")
    descriptors: list[str] = Field(default_factory=list)
    relationships: list[EdgeModel] = Field(default_factory=list)
    labels: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Raw candidate ids for every other label (label resolver)",
    )
