"""Selection pipeline — turns one parsed reference command into the entities it refers to."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from sceneref.engine.context import (
    FallbackKind,
    RelationshipEdge,
    ResolutionTrace,
    SceneEntity,
    SceneSnapshot,
    unique,
)
from sceneref.engine.descriptive_evaluator import DescriptiveEvaluator
from sceneref.engine.labels import LabelResolver
from sceneref.engine.registry import PredicateRegistry, get_registry
from sceneref.engine.resolver import ChainResolver

logger = logging.getLogger(__name__)


@dataclass
class ReferenceCommand:
    """What the language service extracted from one utterance."""

    focus_label: str
    candidates: list[SceneEntity] = field(default_factory=list)
    descriptors: list[str] = field(default_factory=list)
    relationships: list[RelationshipEdge] = field(default_factory=list)


@dataclass
class SelectionResult:
    entities: list[SceneEntity] = field(default_factory=list)
    trace: ResolutionTrace = field(default_factory=ResolutionTrace)
    processing_time_ms: float = 0.0
    descriptors_applied: bool = False
    relationships_applied: bool = False


class SelectionPipeline:
    """Descriptors first, then the relationship chain."""

    def __init__(
        self,
        scene: SceneSnapshot,
        labels: LabelResolver,
        registry: PredicateRegistry | None = None,
    ) -> None:
        self.scene = scene
        self.registry = registry or get_registry()
        self.descriptors = DescriptiveEvaluator(scene, self.registry)
        self.resolver = ChainResolver(scene, labels, self.registry)

    async def run(self, command: ReferenceCommand) -> SelectionResult:
        start = time.perf_counter()
        trace = ResolutionTrace()
        result = SelectionResult(trace=trace)
        current = unique(command.candidates)

        if command.descriptors:
            narrowed = self.descriptors.evaluate(
                command.descriptors, current, trace=trace, label=command.focus_label
            )
            if narrowed:
                current = narrowed
                result.descriptors_applied = True
            else:
                logger.warning("Descriptors %r matched nothing; keeping %d candidates", command.descriptors, len(current))
                trace.add(command.focus_label, FallbackKind.DESCRIPTOR_DISCARDED, ", ".join(command.descriptors))

        if command.relationships and len(current) > 1:
            outcome = await self.resolver.resolve(command.relationships, command.focus_label, current, trace=trace)
            current = outcome.entities
            result.relationships_applied = True

        result.entities = current
        result.processing_time_ms = round((time.perf_counter() - start) * 1000, 1)
        logger.info(
            "Selection for %r: %d entities (%d fallbacks) in %.0fms",
            command.focus_label,
            len(current),
            len(trace.records),
            result.processing_time_ms,
        )
        return result


def create_pipeline(scene: SceneSnapshot, labels: LabelResolver) -> SelectionPipeline:
    """Factory function for creating a pipeline instance."""
    return SelectionPipeline(scene, labels)
