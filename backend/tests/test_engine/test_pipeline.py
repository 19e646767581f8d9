"""Tests for the selection pipeline."""

import asyncio

from sceneref.engine.context import FallbackKind, RelationshipEdge
from sceneref.engine.labels import StaticLabelIndex
from sceneref.engine.pipeline import ReferenceCommand, create_pipeline
from tests.conftest import ids


def _labels(scene) -> StaticLabelIndex:
    return StaticLabelIndex({"desk": [scene.get("desk1"), scene.get("desk2")], "chalkboard": [scene.get("board")]})


def _laptops(scene):
    return [scene.get("laptop1"), scene.get("laptop2")]


def test_pipeline_applies_relationships(classroom):
    command = ReferenceCommand(
        focus_label="laptop",
        candidates=_laptops(classroom),
        relationships=[
            RelationshipEdge("laptop", "on", "desk"),
            RelationshipEdge("desk", "near", "chalkboard"),
        ],
    )
    result = asyncio.run(create_pipeline(classroom, _labels(classroom)).run(command))
    assert ids(result.entities) == {"laptop1"}
    assert result.relationships_applied
    assert not result.descriptors_applied
    assert result.processing_time_ms >= 0


def test_descriptor_leaving_one_skips_the_chain(classroom):
    labels = _labels(classroom)
    command = ReferenceCommand(
        focus_label="laptop",
        candidates=_laptops(classroom),
        descriptors=["rightmost"],
        relationships=[RelationshipEdge("laptop", "on", "desk")],
    )
    result = asyncio.run(create_pipeline(classroom, labels).run(command))
    assert ids(result.entities) == {"laptop2"}
    assert result.descriptors_applied
    assert not result.relationships_applied
    assert labels.calls == []


def test_unmatched_descriptor_is_discarded(classroom):
    command = ReferenceCommand(
        focus_label="laptop",
        candidates=_laptops(classroom),
        descriptors=["sparkly"],
        relationships=[
            RelationshipEdge("laptop", "on", "desk"),
            RelationshipEdge("desk", "near", "chalkboard"),
        ],
    )
    result = asyncio.run(create_pipeline(classroom, _labels(classroom)).run(command))
    assert ids(result.entities) == {"laptop1"}
    assert not result.descriptors_applied
    assert result.trace.kinds() == [FallbackKind.UNKNOWN_DESCRIPTOR, FallbackKind.DESCRIPTOR_DISCARDED]


def test_plain_reference_returns_candidates(classroom):
    command = ReferenceCommand(focus_label="laptop", candidates=_laptops(classroom) + _laptops(classroom))
    result = asyncio.run(create_pipeline(classroom, StaticLabelIndex()).run(command))
    assert [e.id for e in result.entities] == ["laptop1", "laptop2"]
    assert result.trace.records == []
