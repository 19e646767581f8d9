"""Relation evaluator — phrase lookup plus the set contract every relation shares.

Whatever a predicate returns, the caller gets a duplicate-free subset of the
mains. Unknown phrases, missing geometry and empty related sets all yield an
empty result rather than an exception.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from sceneref.engine.context import (
    FallbackKind,
    RelationQuery,
    ResolutionTrace,
    SceneEntity,
    SceneSnapshot,
    unique,
)
from sceneref.engine.registry import Family, PredicateRegistry, RelationKind, get_registry

logger = logging.getLogger(__name__)


@dataclass
class RelationEvaluation:
    entities: list[SceneEntity] = field(default_factory=list)
    kind: RelationKind | None = None
    # main id -> related id that justified it (closest relations only)
    matches: dict[str, str] = field(default_factory=dict)


class RelationEvaluator:
    """Evaluates relation phrases against one scene snapshot."""

    def __init__(self, scene: SceneSnapshot, registry: PredicateRegistry | None = None) -> None:
        self.scene = scene
        self.registry = registry or get_registry()

    def evaluate(
        self,
        relation: str,
        mains: list[SceneEntity],
        related: list[SceneEntity],
        related_b: list[SceneEntity] | None = None,
        *,
        trace: ResolutionTrace | None = None,
        label: str = "",
    ) -> list[SceneEntity]:
        return self.evaluate_detailed(relation, mains, related, related_b, trace=trace, label=label).entities

    def evaluate_detailed(
        self,
        relation: str,
        mains: list[SceneEntity],
        related: list[SceneEntity],
        related_b: list[SceneEntity] | None = None,
        *,
        trace: ResolutionTrace | None = None,
        label: str = "",
    ) -> RelationEvaluation:
        spec = self.registry.lookup_relation(relation)
        if spec is None:
            logger.warning("Unknown relation %r; returning no matches", relation)
            if trace is not None:
                trace.add(label, FallbackKind.UNKNOWN_RELATION, relation)
            return RelationEvaluation()

        candidates = unique(mains)
        usable = self.scene.measurable(candidates)
        if len(usable) < len(candidates):
            logger.debug("%s: %d main(s) without geometry excluded", spec.kind.value, len(candidates) - len(usable))
        rel_a = self.scene.measurable(unique(related))
        rel_b = self.scene.measurable(unique(related_b or []))

        if spec.family == Family.TERNARY:
            if related_b is None:
                logger.warning("%r needs two related sets; got one", relation)
                return RelationEvaluation(kind=spec.kind)
            if not rel_a or not rel_b:
                return RelationEvaluation(kind=spec.kind)
        elif not rel_a:
            return RelationEvaluation(kind=spec.kind)

        if not usable:
            return RelationEvaluation(kind=spec.kind)

        t0 = time.perf_counter()
        q = RelationQuery(scene=self.scene, mains=usable, related=rel_a, related_b=rel_b)
        result = spec.fn(q)

        allowed = {e.id for e in usable}
        entities = unique(e for e in result if e.id in allowed)
        elapsed = (time.perf_counter() - t0) * 1000
        logger.debug(
            "%s: %d/%d mains matched against %d related in %.1fms",
            spec.kind.value,
            len(entities),
            len(usable),
            len(rel_a) + len(rel_b),
            elapsed,
        )
        matches = {k: v for k, v in q.matches.items() if k in {e.id for e in entities}}
        return RelationEvaluation(entities=entities, kind=spec.kind, matches=matches)


def evaluate_relation(
    scene: SceneSnapshot,
    relation: str,
    mains: list[SceneEntity],
    related: list[SceneEntity],
    related_b: list[SceneEntity] | None = None,
) -> list[SceneEntity]:
    """Convenience wrapper using the global registry."""
    return RelationEvaluator(scene).evaluate(relation, mains, related, related_b)
