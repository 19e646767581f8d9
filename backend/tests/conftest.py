"""Shared test fixtures."""

from __future__ import annotations

from typing import Iterable

import pytest

from sceneref.engine.config import EngineConfig
from sceneref.engine.context import SceneEntity, SceneSnapshot, Viewpoint


def box(id: str, center, size=(1.0, 1.0, 1.0), **kwargs) -> SceneEntity:
    return SceneEntity.box(id, center, size, **kwargs)


def scene_of(*entities: SceneEntity, viewpoint: Viewpoint | None = None, config: EngineConfig | None = None) -> SceneSnapshot:
    return SceneSnapshot.of(entities, viewpoint=viewpoint, config=config)


def ids(entities: Iterable[SceneEntity]) -> set[str]:
    return {e.id for e in entities}


# Three unit boxes stacked with exact face contact: box1 on box2 on box3
STACK = [
    box("box1", (0.0, 2.5, 0.0)),
    box("box2", (0.0, 1.5, 0.0)),
    box("box3", (0.0, 0.5, 0.0)),
]

# Five unit boxes along X; consecutive gaps 0.1, 0.1, 2.0, 0.1
ROW = [
    box("o1", (0.5, 0.5, 0.0)),
    box("o2", (1.6, 0.5, 0.0)),
    box("o3", (2.7, 0.5, 0.0)),
    box("o4", (5.7, 0.5, 0.0)),
    box("o5", (6.8, 0.5, 0.0)),
]

# Classroom: two desks with a laptop each, a chalkboard near the first desk
CLASSROOM = [
    box("desk1", (0.0, 0.5, 0.0), (2.0, 1.0, 1.0), name="desk"),
    box("desk2", (20.0, 0.5, 0.0), (2.0, 1.0, 1.0), name="desk"),
    box("laptop1", (0.0, 1.05, 0.0), (0.4, 0.1, 0.3), name="laptop"),
    box("laptop2", (20.0, 1.05, 0.0), (0.4, 0.1, 0.3), name="laptop"),
    box("board", (0.0, 0.5, -2.5), name="chalkboard"),
]


@pytest.fixture
def stack_scene() -> SceneSnapshot:
    return scene_of(*STACK)


@pytest.fixture
def row_scene() -> SceneSnapshot:
    return scene_of(*ROW)


@pytest.fixture
def classroom() -> SceneSnapshot:
    return scene_of(*CLASSROOM)
