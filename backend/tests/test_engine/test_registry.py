"""Tests for the predicate registry."""

import pytest

from sceneref.engine.registry import (
    DescriptorKind,
    Family,
    PredicateRegistry,
    PredicateSpec,
    RelationKind,
    get_registry,
)


def _noop(q) -> list:
    return []


def test_register_and_get():
    reg = PredicateRegistry()
    spec = PredicateSpec(kind=RelationKind.ABOVE, family=Family.RELATION, fn=_noop, phrases=("above", "over"))
    reg.register(spec)
    assert reg.get(RelationKind.ABOVE) is spec
    assert reg.lookup_relation("over") is spec
    assert reg.count == 1


def test_duplicate_kind_rejected():
    reg = PredicateRegistry()
    reg.register(PredicateSpec(kind=RelationKind.ON, family=Family.RELATION, fn=_noop, phrases=("on",)))
    with pytest.raises(ValueError):
        reg.register(PredicateSpec(kind=RelationKind.ON, family=Family.RELATION, fn=_noop))


def test_phrase_maps_to_one_kind():
    reg = PredicateRegistry()
    reg.register(PredicateSpec(kind=RelationKind.NEAR, family=Family.RELATION, fn=_noop, phrases=("near",)))
    with pytest.raises(ValueError):
        reg.register(PredicateSpec(kind=RelationKind.ON, family=Family.RELATION, fn=_noop, phrases=(" NEAR ",)))
    # the failed registration left nothing behind
    assert reg.count == 1


def test_vocabularies_are_separate():
    reg = PredicateRegistry()
    rel = PredicateSpec(kind=RelationKind.LEFT_OF, family=Family.RELATION, fn=_noop, phrases=("left",))
    desc = PredicateSpec(kind=DescriptorKind.LEFTMOST, family=Family.DESCRIPTOR, fn=_noop, phrases=("left",))
    reg.register(rel)
    reg.register(desc)
    assert reg.lookup_relation("left") is rel
    assert reg.lookup_descriptor("left") is desc


def test_lookup_normalises_case_and_spacing():
    reg = get_registry()
    assert reg.lookup_relation("To  The Left   Of").kind is RelationKind.LEFT_OF
    assert reg.lookup_relation("levitating") is None
    assert reg.lookup_descriptor("Biggest").kind is DescriptorKind.LARGEST


def test_every_kind_is_registered():
    reg = get_registry()
    for kind in RelationKind:
        assert reg.get(kind).family in (Family.RELATION, Family.TERNARY)
    for kind in DescriptorKind:
        assert reg.get(kind).family == Family.DESCRIPTOR
    assert [s.kind for s in reg.family(Family.TERNARY)] == [RelationKind.BETWEEN]


def test_vocabulary_sizes():
    reg = get_registry()
    assert len(reg.phrases("relation")) == 49
    assert len(reg.phrases("descriptor")) == 59
    assert "on top of" in reg.phrases("relation")
    assert "middle of each row" in reg.phrases("descriptor")


def test_failed_load_can_be_retried(monkeypatch):
    from sceneref.engine import registry as registry_module

    monkeypatch.setattr(registry_module, "_loaded", False)
    monkeypatch.setattr(
        registry_module,
        "_PREDICATE_PACKAGES",
        ("sceneref.engine.relations", "sceneref.engine.missing_predicates"),
    )
    with pytest.raises(ImportError):
        registry_module.load_predicates()
    assert registry_module._loaded is False
