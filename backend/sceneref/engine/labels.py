"""Label resolvers — map a free-text object reference to its raw candidate entities."""

from __future__ import annotations

import inspect
import logging
from typing import Awaitable, Callable, Iterable, Protocol, Union

from sceneref.engine.context import SceneEntity
from sceneref.engine.registry import normalize_phrase

logger = logging.getLogger(__name__)

LookupFn = Callable[[str], Union[Iterable[SceneEntity], Awaitable[Iterable[SceneEntity]]]]


class LabelResolver(Protocol):
    async def resolve(self, label: str) -> list[SceneEntity]: ...


class StaticLabelIndex:
    """In-memory index keyed by normalised label."""

    def __init__(self, mapping: dict[str, Iterable[SceneEntity]] | None = None) -> None:
        self._index: dict[str, list[SceneEntity]] = {}
        # labels in the order they were asked for
        self.calls: list[str] = []
        for label, entities in (mapping or {}).items():
            self.add(label, entities)

    def add(self, label: str, entities: Iterable[SceneEntity]) -> None:
        self._index.setdefault(normalize_phrase(label), []).extend(entities)

    async def resolve(self, label: str) -> list[SceneEntity]:
        self.calls.append(label)
        found = list(self._index.get(normalize_phrase(label), []))
        logger.debug("Label %r -> %d candidates", label, len(found))
        return found


class CallableLabelResolver:
    """Wraps a plain or async function as a label resolver."""

    def __init__(self, fn: LookupFn) -> None:
        self._fn = fn

    async def resolve(self, label: str) -> list[SceneEntity]:
        result = self._fn(label)
        if inspect.isawaitable(result):
            result = await result
        return list(result or [])
