"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings

from sceneref.engine import spatial_constants as sc


class Settings(BaseSettings):
    env: str = "development"
    log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Engine overrides for the HTTP surface
    near_threshold: float = sc.NEAR_THRESHOLD
    cluster_k: int = sc.CLUSTER_K

    model_config = {"env_prefix": "SCENEREF_", "env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
