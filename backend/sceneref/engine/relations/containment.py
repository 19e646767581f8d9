"""Containment relations: "inside" and "outside"."""

from __future__ import annotations

from sceneref.engine import measures
from sceneref.engine.context import RelationQuery, SceneEntity
from sceneref.engine.registry import Family, RelationKind, predicate


@predicate(
    kind=RelationKind.INSIDE,
    family=Family.RELATION,
    phrases=("in", "inside", "within"),
    description="Any box sample of the main lies strictly inside a related object",
)
def inside(q: RelationQuery) -> list[SceneEntity]:
    valid: list[SceneEntity] = []
    for main in q.mains:
        if any(main != rel and measures.inside(q.scene, main, rel) for rel in q.related):
            valid.append(main)
    return valid


@predicate(
    kind=RelationKind.OUTSIDE,
    family=Family.RELATION,
    phrases=("outside", "outside of", "out of"),
    description="Inside no related object and separated from every one",
)
def outside(q: RelationQuery) -> list[SceneEntity]:
    valid: list[SceneEntity] = []
    for main in q.mains:
        others = [rel for rel in q.related if rel != main]
        if not others:
            continue
        # containment in any one related object vetoes, whatever the others say
        if any(measures.inside(q.scene, main, rel) for rel in others):
            continue
        if all(measures.separated(q.scene, main, rel) for rel in others):
            valid.append(main)
    return valid
