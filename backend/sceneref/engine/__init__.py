"""SceneRef spatial constraint resolution engine."""

from sceneref.engine.registry import predicate, Family, RelationKind, DescriptorKind, get_registry
from sceneref.engine.context import SceneEntity, SceneSnapshot, Viewpoint, RelationshipEdge
from sceneref.engine.pipeline import SelectionPipeline, ReferenceCommand

__all__ = [
    "predicate",
    "Family",
    "RelationKind",
    "DescriptorKind",
    "get_registry",
    "SceneEntity",
    "SceneSnapshot",
    "Viewpoint",
    "RelationshipEdge",
    "SelectionPipeline",
    "ReferenceCommand",
]
