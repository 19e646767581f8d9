"""Predicate registry — every relation and descriptor is a function registered via decorator.

Usage:
    @predicate(kind=RelationKind.ABOVE, family=Family.RELATION, phrases=("above", "over"))
    def above(q: RelationQuery) -> list[SceneEntity]:
        return [m for m in q.mains if ...]

The phrase vocabulary is closed: a phrase maps to exactly one kind, lookup is
case-insensitive with collapsed whitespace, and anything else is unknown.
"""

from __future__ import annotations

import enum
import importlib
import logging
import pkgutil
from dataclasses import dataclass, field
from typing import Any, Callable

logger = logging.getLogger(__name__)


class Family(enum.IntEnum):
    RELATION = 0  # binary: mains vs one related set
    TERNARY = 1  # mains vs two related sets ("between")
    DESCRIPTOR = 2  # ranks or partitions one candidate set


class RelationKind(str, enum.Enum):
    ON = "on"
    ON_TOP_OF = "on_top_of"
    ABOVE = "above"
    BELOW = "below"
    INSIDE = "inside"
    OUTSIDE = "outside"
    BEHIND = "behind"
    IN_FRONT_OF = "in_front_of"
    LEFT_OF = "left_of"
    RIGHT_OF = "right_of"
    NEAR = "near"
    CLOSEST_PER_RELATED = "closest_per_related"
    CLOSEST_GLOBAL = "closest_global"
    BETWEEN = "between"


class DescriptorKind(str, enum.Enum):
    LEFTMOST = "leftmost"
    RIGHTMOST = "rightmost"
    TOPMOST = "topmost"
    BOTTOMMOST = "bottommost"
    LARGEST = "largest"
    SMALLEST = "smallest"
    TALLEST = "tallest"
    SHORTEST = "shortest"
    WIDEST = "widest"
    NTH = "nth"
    MIDDLE = "middle"
    MIDDLE_PER_GROUP = "middle_per_group"
    CLOSEST = "closest"
    FURTHEST = "furthest"
    EMPTY = "empty"
    LEFT_HALF = "left_half"
    RIGHT_HALF = "right_half"


PredicateKind = RelationKind | DescriptorKind


def normalize_phrase(phrase: str) -> str:
    return " ".join(phrase.lower().split())


def _vocabulary(family: Family) -> str:
    return "descriptor" if family == Family.DESCRIPTOR else "relation"


@dataclass
class PredicateSpec:
    kind: PredicateKind
    family: Family
    fn: Callable[[Any], list]
    phrases: tuple[str, ...] = field(default_factory=tuple)
    description: str = ""


class PredicateRegistry:
    """Closed mapping from surface phrases to predicate functions."""

    def __init__(self) -> None:
        self._specs: dict[PredicateKind, PredicateSpec] = {}
        # (vocabulary, normalised phrase) -> spec
        self._phrases: dict[tuple[str, str], PredicateSpec] = {}

    def register(self, spec: PredicateSpec) -> None:
        if spec.kind in self._specs:
            raise ValueError(f"Duplicate predicate kind: {spec.kind.value}")
        vocab = _vocabulary(spec.family)
        keys = [(vocab, normalize_phrase(p)) for p in spec.phrases]
        for key in keys:
            if key in self._phrases:
                owner = self._phrases[key].kind.value
                raise ValueError(f"Phrase {key[1]!r} already registered to {owner}")
        self._specs[spec.kind] = spec
        for key in keys:
            self._phrases[key] = spec
        logger.debug("Registered predicate %s (%s, %d phrases)", spec.kind.value, spec.family.name, len(keys))

    def get(self, kind: PredicateKind) -> PredicateSpec:
        return self._specs[kind]

    def lookup_relation(self, phrase: str) -> PredicateSpec | None:
        return self._phrases.get(("relation", normalize_phrase(phrase)))

    def lookup_descriptor(self, phrase: str) -> PredicateSpec | None:
        return self._phrases.get(("descriptor", normalize_phrase(phrase)))

    def family(self, family: Family) -> list[PredicateSpec]:
        return [s for s in self._specs.values() if s.family == family]

    def phrases(self, vocabulary: str) -> list[str]:
        return sorted(p for (v, p) in self._phrases if v == vocabulary)

    @property
    def count(self) -> int:
        return len(self._specs)


# Module-level singleton
_registry = PredicateRegistry()


def get_registry() -> PredicateRegistry:
    load_predicates()
    return _registry


def predicate(
    *,
    kind: PredicateKind,
    family: Family,
    phrases: tuple[str, ...] = (),
    description: str = "",
):
    """Decorator to register a predicate function."""

    def decorator(fn: Callable[[Any], list]):
        _registry.register(
            PredicateSpec(kind=kind, family=family, fn=fn, phrases=tuple(phrases), description=description)
        )
        return fn

    return decorator


_PREDICATE_PACKAGES = ("sceneref.engine.relations", "sceneref.engine.descriptors")
_loaded = False


def load_predicates() -> None:
    """Import every predicate module so the @predicate decorators fire."""
    global _loaded
    if _loaded:
        return
    for package_name in _PREDICATE_PACKAGES:
        package = importlib.import_module(package_name)
        for _, module_name, _ in pkgutil.iter_modules(package.__path__):
            importlib.import_module(f"{package_name}.{module_name}")
    logger.debug("Loaded %d predicates", _registry.count)
    _loaded = True
