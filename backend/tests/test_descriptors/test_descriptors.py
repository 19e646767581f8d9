"""Tests for the descriptive evaluator: edge-most, extrema, ordinal, proximity, emptiness."""

from __future__ import annotations

import numpy as np
import pytest

from sceneref.engine.context import FallbackKind, ResolutionTrace, SceneEntity, Viewpoint
from sceneref.engine.descriptive_evaluator import DescriptiveEvaluator, evaluate_descriptors, parse_ordinal
from tests.conftest import ROW, STACK, box, ids, scene_of


def _abc():
    return [box("A", (0, 0, 0)), box("B", (2, 0, 0)), box("C", (4, 0, 0))]


def test_nth_from_either_edge():
    abc = _abc()
    scene = scene_of(*abc)
    ev = DescriptiveEvaluator(scene)
    assert ids(ev.evaluate(["2nd"], abc)) == {"B"}
    assert ids(ev.evaluate(["2nd from the right"], abc)) == {"B"}
    assert ids(ev.evaluate(["first"], abc)) == {"A"}
    assert ids(ev.evaluate(["1st from the right"], abc)) == {"C"}
    # input order does not matter, only the view axis
    assert ids(ev.evaluate(["first one"], list(reversed(abc)))) == {"A"}


def test_nth_out_of_range():
    abc = _abc()
    assert evaluate_descriptors(scene_of(*abc), ["9th"], abc) == []


@pytest.mark.parametrize(
    "phrase,expected",
    [
        ("2nd", (2, False)),
        ("3rd from the right", (3, True)),
        ("the third from the left", (3, False)),
        ("Second from the RIGHT", (2, True)),
        ("tenth", (10, False)),
        ("banana", None),
    ],
)
def test_parse_ordinal(phrase, expected):
    assert parse_ordinal(phrase) == expected


def test_edge_most_along_view(row_scene):
    ev = DescriptiveEvaluator(row_scene)
    assert ids(ev.evaluate(["leftmost"], ROW)) == {"o1"}
    assert ids(ev.evaluate(["furthest right"], ROW)) == {"o5"}


def test_top_and_bottom(stack_scene):
    ev = DescriptiveEvaluator(stack_scene)
    assert ids(ev.evaluate(["top"], STACK)) == {"box1"}
    assert ids(ev.evaluate(["lowest"], STACK)) == {"box3"}


def test_edge_most_tie_keeps_first():
    a = box("a", (0, 0, 0))
    b = box("b", (0, 5, 0))
    assert ids(evaluate_descriptors(scene_of(a, b), ["leftmost"], [b, a])) == {"b"}


def test_edge_most_uses_camera_right():
    near_z = box("near_z", (0, 0, -3))
    far_z = box("far_z", (0, 0, 3))
    # looking down +X, view right is +Z
    camera = Viewpoint(position=np.array([-10.0, 0, 0]), forward=np.array([1.0, 0, 0]))
    scene = scene_of(near_z, far_z, viewpoint=camera)
    assert ids(evaluate_descriptors(scene, ["leftmost"], [near_z, far_z])) == {"near_z"}
    assert ids(evaluate_descriptors(scene, ["rightmost"], [near_z, far_z])) == {"far_z"}


def test_size_extrema_keep_ties():
    small1 = box("small1", (0, 0, 0), (1, 1, 1))
    small2 = box("small2", (3, 0, 0), (1, 1, 1))
    tall = box("tall", (6, 0, 0), (1, 4, 1))
    wide = box("wide", (9, 0, 0), (3, 1, 1))
    items = [small1, small2, tall, wide]
    ev = DescriptiveEvaluator(scene_of(*items))
    assert ids(ev.evaluate(["smallest"], items)) == {"small1", "small2"}
    assert ids(ev.evaluate(["biggest"], items)) == {"tall"}
    assert ids(ev.evaluate(["tallest"], items)) == {"tall"}
    assert ids(ev.evaluate(["shortest"], items)) == {"small1", "small2", "wide"}
    assert ids(ev.evaluate(["widest"], items)) == {"wide"}


def test_middle_odd_and_even(row_scene):
    ev = DescriptiveEvaluator(row_scene)
    assert ids(ev.evaluate(["middle"], ROW)) == {"o3"}
    assert ids(ev.evaluate(["centre"], ROW[:4])) == {"o2", "o3"}


def test_middle_of_each_row():
    rows = [box(f"r{i}", (x, 0.5, 0)) for i, x in enumerate((0.0, 1.2, 2.4, 10.0, 11.2, 12.4))]
    out = evaluate_descriptors(scene_of(*rows), ["middle of each row"], rows)
    assert ids(out) == {"r1", "r4"}


def test_halves(row_scene):
    ev = DescriptiveEvaluator(row_scene)
    assert [e.id for e in ev.evaluate(["left half"], ROW)] == ["o1", "o2", "o3"]
    assert [e.id for e in ev.evaluate(["right half"], ROW)] == ["o3", "o4", "o5"]
    single = ROW[:1]
    assert ids(ev.evaluate(["left half"], single)) == {"o1"}
    assert ids(ev.evaluate(["right half"], single)) == {"o1"}


def test_closest_and_furthest_from_reference():
    anchor = box("anchor", (0, 0, 0))
    m1 = box("m1", (1.5, 0, 0))
    m2 = box("m2", (5, 0, 0))
    ev = DescriptiveEvaluator(scene_of(anchor, m1, m2))
    assert ids(ev.evaluate(["closest"], [m1, m2], [anchor])) == {"m1"}
    assert ids(ev.evaluate(["farthest"], [m1, m2], [anchor])) == {"m2"}
    # the reference never selects itself
    assert ids(ev.evaluate(["nearest"], [anchor, m2], [anchor])) == {"m2"}


def test_closest_defaults_to_viewer():
    m1 = box("m1", (1.5, 0, 0))
    m2 = box("m2", (5, 0, 0))
    camera = Viewpoint(position=np.array([10.0, 0, 0]))
    assert ids(evaluate_descriptors(scene_of(m1, m2, viewpoint=camera), ["closest"], [m1, m2])) == {"m2"}
    # no camera: measured from the origin
    assert ids(evaluate_descriptors(scene_of(m1, m2), ["closest"], [m1, m2])) == {"m1"}


def test_empty_ignores_own_children():
    shelf = box("shelf", (0, 0, 0), (2, 2, 2))
    book = box("book", (0, 0, 0), (0.5, 0.5, 0.5))
    cabinet = box("cabinet", (10, 0, 0), (2, 2, 2))
    knob = box("knob", (10, 0, 0), (0.2, 0.2, 0.2), parent_id="cabinet")
    items = [shelf, book, cabinet, knob]
    out = evaluate_descriptors(scene_of(*items), ["empty"], [shelf, cabinet])
    assert ids(out) == {"cabinet"}


def test_first_matching_phrase_governs():
    small = box("small", (0, 0, 0), (1, 1, 1))
    big = box("big", (5, 0, 0), (2, 2, 2))
    out = evaluate_descriptors(scene_of(small, big), ["sparkly", "largest", "smallest"], [small, big])
    assert ids(out) == {"big"}


def test_unknown_descriptor_is_empty_and_traced():
    a = box("a", (0, 0, 0))
    trace = ResolutionTrace()
    out = DescriptiveEvaluator(scene_of(a)).evaluate(["sparkly"], [a], trace=trace, label="lamp")
    assert out == []
    assert trace.kinds() == [FallbackKind.UNKNOWN_DESCRIPTOR]
    assert trace.for_label("lamp")[0].detail == "sparkly"


def test_unmeasurable_mains_are_dropped():
    ghost = SceneEntity("ghost")
    a = box("a", (0, 0, 0))
    out = evaluate_descriptors(scene_of(ghost, a), ["leftmost"], [ghost, a])
    assert ids(out) == {"a"}


def test_reference_is_never_ranked():
    shelf = box("shelf", (0, 0, 0))
    vase = box("vase", (3, 0, 0))
    lamp = box("lamp", (8, 0, 0))
    mains = [shelf, vase, lamp]
    ev = DescriptiveEvaluator(scene_of(*mains))
    # shelf is its own nearest point but is the reference
    assert ids(ev.evaluate(["closest"], mains, [shelf])) == {"vase"}
    assert ids(ev.evaluate(["furthest"], mains, [lamp])) == {"shelf"}
    assert ev.evaluate(["closest"], [shelf], [shelf]) == []
