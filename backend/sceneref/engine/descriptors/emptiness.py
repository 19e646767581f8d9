"""'empty': nothing foreign sits fully inside the entity's bounds."""

from __future__ import annotations

import logging

from sceneref import geometry
from sceneref.engine.context import DescriptorQuery, SceneEntity, SceneSnapshot
from sceneref.engine.registry import DescriptorKind, Family, predicate

logger = logging.getLogger(__name__)


def holds_foreign(scene: SceneSnapshot, container: SceneEntity) -> bool:
    """True if some entity outside the container's own hierarchy fits inside its box."""
    outer = container.bounds
    eps = scene.config.contains_epsilon
    for other in scene.entities.values():
        if not other.measurable or scene.is_self_or_descendant(other, container):
            continue
        if geometry.contains_bounds(outer, other.bounds, epsilon=eps):
            logger.debug("%s holds %s", container.id, other.id)
            return True
    return False


@predicate(kind=DescriptorKind.EMPTY, family=Family.DESCRIPTOR, phrases=("empty",))
def empty(q: DescriptorQuery) -> list[SceneEntity]:
    return [e for e in q.mains if not holds_foreign(q.scene, e)]
