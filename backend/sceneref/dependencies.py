"""FastAPI dependency injection."""

from __future__ import annotations

from sceneref.config import Settings, settings
from sceneref.engine.config import EngineConfig


def get_settings() -> Settings:
    return settings


def get_engine_config() -> EngineConfig:
    return EngineConfig(near_threshold=settings.near_threshold, cluster_k=settings.cluster_k)
