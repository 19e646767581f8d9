"""Descriptive evaluator — comparative and ordinal language over a single candidate set.

Phrases are tried in order and the first one that matches governs; later
phrases are not combined with it. Matching is exact against the closed
vocabulary, then an ordinal pattern ("2nd", "third from the right").
"""

from __future__ import annotations

import logging
import re

from sceneref.engine.context import (
    DescriptorQuery,
    FallbackKind,
    ResolutionTrace,
    SceneEntity,
    SceneSnapshot,
    unique,
)
from sceneref.engine.registry import (
    DescriptorKind,
    PredicateRegistry,
    PredicateSpec,
    get_registry,
    normalize_phrase,
)

logger = logging.getLogger(__name__)

_DIGIT_ORDINAL = re.compile(
    r"^(?P<ord>\d+)(st|nd|rd|th)\s*(from\s+the\s+(?P<dir>left|right))?$",
    re.IGNORECASE,
)

_WORD_ORDINALS = {
    "first": 1,
    "second": 2,
    "third": 3,
    "fourth": 4,
    "fifth": 5,
    "sixth": 6,
    "seventh": 7,
    "eighth": 8,
    "ninth": 9,
    "tenth": 10,
}

_WORD_PATTERNS = [
    (re.compile(rf"\b{word}\b(?:.*\bfrom\s+the\s+(left|right)\b)?", re.IGNORECASE), n)
    for word, n in _WORD_ORDINALS.items()
]


def parse_ordinal(phrase: str) -> tuple[int, bool] | None:
    """Return ``(n, from_right)`` for an ordinal phrase, else None."""
    text = phrase.strip()
    m = _DIGIT_ORDINAL.match(text)
    if m:
        direction = m.group("dir")
        return int(m.group("ord")), bool(direction and direction.lower() == "right")
    for pattern, n in _WORD_PATTERNS:
        m = pattern.search(text)
        if m:
            direction = m.group(1)
            return n, bool(direction and direction.lower() == "right")
    return None


class DescriptiveEvaluator:
    """Evaluates descriptor phrases against one scene snapshot."""

    def __init__(self, scene: SceneSnapshot, registry: PredicateRegistry | None = None) -> None:
        self.scene = scene
        self.registry = registry or get_registry()

    def match(self, phrase: str) -> tuple[PredicateSpec, int | None, bool] | None:
        """Resolve one phrase to (spec, ordinal, from_right)."""
        spec = self.registry.lookup_descriptor(phrase)
        if spec is not None:
            return spec, None, False
        ordinal = parse_ordinal(phrase)
        if ordinal is not None:
            n, from_right = ordinal
            return self.registry.get(DescriptorKind.NTH), n, from_right
        return None

    def evaluate(
        self,
        phrases: list[str],
        mains: list[SceneEntity],
        reference: list[SceneEntity] | None = None,
        *,
        trace: ResolutionTrace | None = None,
        label: str = "",
    ) -> list[SceneEntity]:
        for phrase in phrases:
            if not phrase or not phrase.strip():
                continue
            matched = self.match(phrase)
            if matched is None:
                continue
            spec, ordinal, from_right = matched

            candidates = unique(mains)
            usable = self.scene.measurable(candidates)
            q = DescriptorQuery(
                scene=self.scene,
                mains=usable,
                reference=self.scene.measurable(unique(reference or [])),
                ordinal=ordinal,
                from_right=from_right,
            )
            result = spec.fn(q) if usable else []
            allowed = {e.id for e in usable}
            entities = unique(e for e in result if e.id in allowed)
            logger.debug(
                "Descriptor %r -> %s: %d/%d kept",
                normalize_phrase(phrase),
                spec.kind.value,
                len(entities),
                len(candidates),
            )
            return entities

        logger.warning("No descriptor matched among %r", phrases)
        if trace is not None:
            trace.add(label, FallbackKind.UNKNOWN_DESCRIPTOR, ", ".join(phrases))
        return []


def evaluate_descriptors(
    scene: SceneSnapshot,
    phrases: list[str],
    mains: list[SceneEntity],
    reference: list[SceneEntity] | None = None,
) -> list[SceneEntity]:
    """Convenience wrapper using the global registry."""
    return DescriptiveEvaluator(scene).evaluate(phrases, mains, reference)
