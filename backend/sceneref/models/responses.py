"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    relation_phrases: int = 0
    descriptor_phrases: int = 0


class RelationEvaluateResponse(BaseModel):
    ids: list[str] = Field(default_factory=list)
    kind: str | None = None
    # main id -> related id it was matched to (closest relations)
    matches: dict[str, str] = Field(default_factory=dict)


class DescriptorEvaluateResponse(BaseModel):
    ids: list[str] = Field(default_factory=list)


class ClusterResponse(BaseModel):
    clusters: list[list[str]] = Field(default_factory=list)
    epsilon: float = 0.0


class FallbackModel(BaseModel):
    label: str
    kind: str
    detail: str = ""


class ResolveResponse(BaseModel):
    ids: list[str] = Field(default_factory=list)
    trace: list[FallbackModel] = Field(default_factory=list)
    processing_time_ms: float = 0.0
    descriptors_applied: bool = False
    relationships_applied: bool = False
