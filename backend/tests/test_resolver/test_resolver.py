"""Tests for the relationship chain resolver."""

from __future__ import annotations

import asyncio

import numpy as np

from sceneref.engine.context import FallbackKind, RelationshipEdge, Viewpoint
from sceneref.engine.labels import CallableLabelResolver, StaticLabelIndex
from sceneref.engine.resolver import ChainResolver, NodeState
from tests.conftest import CLASSROOM, box, ids, scene_of


def _classroom_labels(scene) -> StaticLabelIndex:
    return StaticLabelIndex(
        {
            "desk": [scene.get("desk1"), scene.get("desk2")],
            "chalkboard": [scene.get("board")],
        }
    )


def _laptops(scene):
    return [scene.get("laptop1"), scene.get("laptop2")]


def _run(scene, labels, edges, focus="laptop", candidates=None):
    resolver = ChainResolver(scene, labels)
    return asyncio.run(resolver.resolve(edges, focus, candidates if candidates is not None else _laptops(scene)))


def test_chain_narrows_through_dependencies(classroom):
    labels = _classroom_labels(classroom)
    edges = [
        RelationshipEdge("laptop", "on", "desk"),
        RelationshipEdge("desk", "near", "chalkboard"),
    ]
    outcome = _run(classroom, labels, edges)
    assert ids(outcome.entities) == {"laptop1"}
    assert ids(outcome.finals["desk"]) == {"desk1"}
    assert outcome.states["laptop"] is NodeState.RESOLVED
    assert outcome.trace.records == []


def test_focus_is_never_fetched_and_labels_fetched_once(classroom):
    labels = _classroom_labels(classroom)
    edges = [
        RelationshipEdge("laptop", "on", "desk"),
        RelationshipEdge("laptop", "near", "Desk"),
        RelationshipEdge("desk", "near", "chalkboard"),
    ]
    _run(classroom, labels, edges)
    assert labels.calls == ["desk", "chalkboard"]


def test_cycle_terminates_with_raw_set(classroom):
    labels = _classroom_labels(classroom)
    edges = [
        RelationshipEdge("laptop", "on", "desk"),
        RelationshipEdge("desk", "near", "laptop"),
    ]
    outcome = _run(classroom, labels, edges)
    assert ids(outcome.entities) == {"laptop1", "laptop2"}
    assert outcome.trace.kinds() == [FallbackKind.CYCLE_BREAK]
    assert outcome.states["desk"] is NodeState.RESOLVED


def test_head_noun_finds_outgoing_edges(classroom):
    labels = _classroom_labels(classroom)
    labels.add("wooden desk", [classroom.get("desk1"), classroom.get("desk2")])
    edges = [
        RelationshipEdge("laptop", "on", "wooden desk"),
        RelationshipEdge("desk", "near", "chalkboard"),
    ]
    outcome = _run(classroom, labels, edges)
    assert ids(outcome.entities) == {"laptop1"}
    assert FallbackKind.HEAD_NOUN in outcome.trace.kinds()


def test_alias_finds_longer_label(classroom):
    labels = _classroom_labels(classroom)
    edges = [
        RelationshipEdge("laptop", "on", "desk"),
        RelationshipEdge("wooden desk", "near", "chalkboard"),
        RelationshipEdge("old wooden desk", "far from", "chalkboard"),
    ]
    outcome = _run(classroom, labels, edges)
    assert ids(outcome.entities) == {"laptop1"}
    alias = outcome.trace.for_label("desk")
    assert [r.kind for r in alias] == [FallbackKind.ALIAS]
    assert alias[0].detail == "wooden desk"


def test_failed_lookup_is_empty_not_fatal(classroom):
    def broken(label):
        raise RuntimeError("index offline")

    edges = [RelationshipEdge("laptop", "on", "desk")]
    outcome = _run(classroom, CallableLabelResolver(broken), edges)
    assert outcome.entities == []
    assert outcome.trace.kinds() == [FallbackKind.LOOKUP_FAILED]
    assert "index offline" in outcome.trace.records[0].detail


def test_async_lookup(classroom):
    async def lookup(label):
        await asyncio.sleep(0)
        return [classroom.get("desk1")] if label == "desk" else []

    outcome = _run(classroom, CallableLabelResolver(lookup), [RelationshipEdge("laptop", "on", "desk")])
    assert ids(outcome.entities) == {"laptop1"}


def test_between_uses_both_edges():
    a, b = box("a", (0, 0, 0)), box("b", (10, 0, 0))
    m1, m2 = box("m1", (5, 0, 0)), box("m2", (5, 0, 5))
    scene = scene_of(a, b, m1, m2)
    labels = StaticLabelIndex({"red box": [a], "blue box": [b]})
    edges = [
        RelationshipEdge("ball", "between", "red box"),
        RelationshipEdge("ball", "between", "blue box"),
    ]
    outcome = _run(scene, labels, edges, focus="ball", candidates=[m1, m2])
    assert ids(outcome.entities) == {"m1"}


def test_single_between_edge_is_skipped():
    a = box("a", (0, 0, 0))
    m1, m2 = box("m1", (5, 0, 0)), box("m2", (5, 0, 5))
    scene = scene_of(a, m1, m2)
    edges = [RelationshipEdge("ball", "between", "red box")]
    outcome = _run(scene, StaticLabelIndex({"red box": [a]}), edges, focus="ball", candidates=[m1, m2])
    assert ids(outcome.entities) == {"m1", "m2"}
    assert outcome.trace.kinds() == [FallbackKind.MALFORMED_BETWEEN]


def test_viewer_label():
    camera = Viewpoint(position=np.array([20.0, 1.0, 3.0]))
    scene = scene_of(*CLASSROOM, viewpoint=camera)
    labels = StaticLabelIndex()
    edges = [RelationshipEdge("laptop", "closest to", "*user")]
    outcome = _run(scene, labels, edges)
    assert ids(outcome.entities) == {"laptop2"}
    assert labels.calls == []


def test_viewer_label_without_camera(classroom):
    edges = [RelationshipEdge("laptop", "closest to", "*user")]
    assert _run(classroom, StaticLabelIndex(), edges).entities == []


def test_unknown_relation_empties_the_chain(classroom):
    labels = _classroom_labels(classroom)
    outcome = _run(classroom, labels, [RelationshipEdge("laptop", "orbiting", "desk")])
    assert outcome.entities == []
    assert outcome.trace.kinds() == [FallbackKind.UNKNOWN_RELATION]


def test_no_edges_returns_candidates(classroom):
    outcome = _run(classroom, StaticLabelIndex(), [])
    assert ids(outcome.entities) == {"laptop1", "laptop2"}
