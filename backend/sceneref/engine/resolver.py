"""Relationship chain resolver — narrows a focus label's candidates through a graph of spatial edges.

Given edges such as ("laptop", "on", "desk") and ("desk", "beside", "chalkboard"),
every related label is resolved first (post-order), then the dependent label's
raw candidates are filtered edge by edge against those resolved sets.

Node states:
    UNVISITED → RESOLVING → RESOLVED
                          ↘ CYCLE_BROKEN (re-entered while RESOLVING; raw set used as final)

Per-request state lives in ``_Run`` and is discarded when ``resolve`` returns.
Raw candidates are fetched at most once per label; siblings are resolved
sequentially.
"""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass, field

from sceneref.engine.context import (
    VIEWER_LABEL,
    FallbackKind,
    RelationshipEdge,
    ResolutionTrace,
    SceneEntity,
    SceneSnapshot,
    unique,
)
from sceneref.engine.labels import LabelResolver
from sceneref.engine.registry import Family, PredicateRegistry, get_registry, normalize_phrase
from sceneref.engine.relation_evaluator import RelationEvaluator

logger = logging.getLogger(__name__)


class NodeState(enum.Enum):
    UNVISITED = "unvisited"
    RESOLVING = "resolving"
    RESOLVED = "resolved"
    CYCLE_BROKEN = "cycle_broken"


@dataclass
class ResolutionOutcome:
    entities: list[SceneEntity] = field(default_factory=list)
    trace: ResolutionTrace = field(default_factory=ResolutionTrace)
    states: dict[str, NodeState] = field(default_factory=dict)
    # Final candidate sets for every label visited, keyed by normalised label
    finals: dict[str, list[SceneEntity]] = field(default_factory=dict)


@dataclass
class _Run:
    outgoing: dict[str, list[RelationshipEdge]]
    trace: ResolutionTrace
    raw: dict[str, list[SceneEntity]] = field(default_factory=dict)
    final: dict[str, list[SceneEntity]] = field(default_factory=dict)
    states: dict[str, NodeState] = field(default_factory=dict)
    active: set[str] = field(default_factory=set)


def group_edges(edges: list[RelationshipEdge]) -> dict[str, list[RelationshipEdge]]:
    """Outgoing edges per main label, normalised, preserving edge order."""
    grouped: dict[str, list[RelationshipEdge]] = {}
    for edge in edges:
        grouped.setdefault(normalize_phrase(edge.main), []).append(edge)
    return grouped


class ChainResolver:
    """Resolves a relationship graph against one scene snapshot."""

    def __init__(
        self,
        scene: SceneSnapshot,
        labels: LabelResolver,
        registry: PredicateRegistry | None = None,
    ) -> None:
        self.scene = scene
        self.labels = labels
        self.registry = registry or get_registry()
        self.relations = RelationEvaluator(scene, self.registry)

    async def resolve(
        self,
        edges: list[RelationshipEdge],
        focus_label: str,
        focus_candidates: list[SceneEntity],
        trace: ResolutionTrace | None = None,
    ) -> ResolutionOutcome:
        start = time.perf_counter()
        run = _Run(outgoing=group_edges(edges), trace=trace if trace is not None else ResolutionTrace())

        focus_key = normalize_phrase(focus_label)
        # The focus set comes from the caller and is never fetched again
        run.raw[focus_key] = unique(focus_candidates)

        logger.info(
            "Resolving %r: %d candidates, %d edges over %d labels",
            focus_label,
            len(run.raw[focus_key]),
            len(edges),
            len(run.outgoing),
        )
        result = await self._resolve(run, focus_label)

        elapsed = (time.perf_counter() - start) * 1000
        logger.info("Resolved %r to %d entities in %.0fms", focus_label, len(result), elapsed)
        return ResolutionOutcome(entities=list(result), trace=run.trace, states=dict(run.states), finals=dict(run.final))

    async def _resolve(self, run: _Run, label: str) -> list[SceneEntity]:
        key = normalize_phrase(label)
        state = run.states.get(key, NodeState.UNVISITED)

        if state is NodeState.RESOLVED:
            logger.debug("  %r cached (%d)", label, len(run.final[key]))
            return run.final[key]

        if key in run.active:
            if state is not NodeState.CYCLE_BROKEN:
                logger.warning("Cycle at %r; using its unfiltered candidates", label)
                run.trace.add(label, FallbackKind.CYCLE_BREAK, "re-entered while resolving")
                run.states[key] = NodeState.CYCLE_BROKEN
                run.final[key] = run.raw.get(key, [])
            return run.final[key]

        run.active.add(key)
        run.states[key] = NodeState.RESOLVING
        try:
            await self._ensure_raw(run, label)
            outgoing = self._outgoing(run, label)

            if not outgoing:
                run.final[key] = run.raw[key]
                logger.debug("  %r is a leaf (%d)", label, len(run.final[key]))
            else:
                for edge in outgoing:
                    await self._resolve(run, edge.related)
                run.final[key] = self._filter(run, label, outgoing)
        finally:
            run.active.discard(key)

        run.states[key] = NodeState.RESOLVED
        return run.final[key]

    async def _ensure_raw(self, run: _Run, label: str) -> None:
        key = normalize_phrase(label)
        if key in run.raw:
            logger.debug("  raw %r cached (%d)", label, len(run.raw[key]))
            return

        if key == VIEWER_LABEL:
            viewer = self.scene.viewer_entity()
            run.raw[key] = [viewer] if viewer is not None else []
            return

        try:
            fetched = await self.labels.resolve(label)
        except Exception as e:
            logger.warning("Lookup for %r failed: %s", label, e)
            run.trace.add(label, FallbackKind.LOOKUP_FAILED, str(e))
            fetched = []
        run.raw[key] = unique(fetched or [])
        logger.debug("  fetched %r (%d)", label, len(run.raw[key]))

    def _outgoing(self, run: _Run, label: str) -> list[RelationshipEdge]:
        """Exact label, else its head noun, else the shortest longer label ending in it."""
        key = normalize_phrase(label)
        if key in run.outgoing:
            return run.outgoing[key]

        tokens = key.split()
        if len(tokens) > 1 and tokens[-1] in run.outgoing:
            run.trace.add(label, FallbackKind.HEAD_NOUN, tokens[-1])
            logger.debug("  head-noun match %r -> %r", label, tokens[-1])
            return run.outgoing[tokens[-1]]

        aliases = [k for k in run.outgoing if len(k) > len(key) and k.endswith(" " + key)]
        if aliases:
            alias = min(aliases, key=len)
            run.trace.add(label, FallbackKind.ALIAS, alias)
            logger.debug("  alias match %r -> %r", label, alias)
            return run.outgoing[alias]
        return []

    def _filter(self, run: _Run, label: str, outgoing: list[RelationshipEdge]) -> list[SceneEntity]:
        key = normalize_phrase(label)
        current = run.raw[key]
        consumed: set = set()

        for edge in outgoing:
            spec = self.registry.lookup_relation(edge.relation)
            if spec is not None and spec.family == Family.TERNARY:
                if spec.kind in consumed:
                    continue
                consumed.add(spec.kind)
                group = [e for e in outgoing if self.registry.lookup_relation(e.relation) is spec]
                if len(group) != 2:
                    logger.warning("%r expects 2 edges for %r, got %d; skipped", edge.relation, label, len(group))
                    run.trace.add(label, FallbackKind.MALFORMED_BETWEEN, f"{len(group)} edges")
                    continue
                set_a = run.final[normalize_phrase(group[0].related)]
                set_b = run.final[normalize_phrase(group[1].related)]
                before = len(current)
                current = self.relations.evaluate(edge.relation, current, set_a, set_b, trace=run.trace, label=label)
            else:
                related = run.final[normalize_phrase(edge.related)]
                before = len(current)
                current = self.relations.evaluate(edge.relation, current, related, trace=run.trace, label=label)
            logger.debug("  %r %s: %d -> %d", label, edge.relation, before, len(current))

        return current
