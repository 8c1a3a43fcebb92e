from enum import IntEnum

import pytest

from combo_engine.config.settings import DetailSetting
from combo_engine.rulesets.base import RuleSet
from combo_engine.rulesets.descriptor import RuleSetDescriptor
from combo_engine.rulesets.ids import RuleSetID
from combo_engine.rulesets.registry import RuleSetRegistry, create_registry


class Sample(IntEnum):
    Hidden = 5
    Root = 200
    Child = 201
    Grandchild = 202
    Rival = 203
    Other = 204


class FixedRuleSet(RuleSet):
    result = 0

    def decide(self, ctx, pressed, last_used, elapsed, level):
        return self.result


def make_ruleset(descriptor, result=0):
    return type(f"Fixed{descriptor.name}", (FixedRuleSet,), {"descriptor": descriptor, "result": result})()


def _desc(ruleset, job=19, **kwargs):
    return RuleSetDescriptor(ruleset, job, ruleset.name, **kwargs)


def test_duplicate_registration_rejected():
    registry = RuleSetRegistry()
    registry.register(_desc(Sample.Root))
    with pytest.raises(ValueError):
        registry.register(_desc(Sample.Root))


def test_unknown_parent_rejected():
    with pytest.raises(ValueError, match="unknown rule-set"):
        create_registry(features=[_desc(Sample.Child, parent=Sample.Root)])


def test_cyclic_parent_chain_rejected():
    with pytest.raises(ValueError, match="cyclic"):
        create_registry(
            features=[
                _desc(Sample.Root, parent=Sample.Child),
                _desc(Sample.Child, parent=Sample.Root),
            ]
        )


def test_conflict_with_ancestor_rejected():
    with pytest.raises(ValueError, match="ancestor or descendant"):
        create_registry(
            features=[
                _desc(Sample.Root),
                _desc(Sample.Child, parent=Sample.Root),
                _desc(Sample.Grandchild, parent=Sample.Child, conflicts=(Sample.Root,)),
            ]
        )


def test_setting_for_unknown_ruleset_rejected():
    setting = DetailSetting(Sample.Other, "x", "X", maximum=1)
    with pytest.raises(ValueError):
        create_registry(features=[_desc(Sample.Root)], settings=[setting])


def test_conflicts_are_symmetric():
    registry = create_registry(features=[_desc(Sample.Root, conflicts=(Sample.Rival,)), _desc(Sample.Rival)])

    assert registry.conflicts_of(Sample.Root) == {Sample.Rival}
    assert registry.conflicts_of(Sample.Rival) == {Sample.Root}
    assert registry.conflicts_of(Sample.Other) == frozenset()


def test_validated_registry_is_frozen():
    registry = create_registry(features=[_desc(Sample.Root)])
    with pytest.raises(RuntimeError):
        registry.register(_desc(Sample.Other))
    with pytest.raises(RuntimeError):
        registry.register_setting(DetailSetting(Sample.Root, "x", "X", maximum=1))


def test_claimants_follow_declaration_order():
    first = make_ruleset(_desc(Sample.Rival, claims=(500,)))
    second = make_ruleset(_desc(Sample.Root, claims=(500, 501)))
    registry = create_registry(rulesets=[first, second])

    assert registry.claimants(500) == (first, second)
    assert registry.claimants(501) == (second,)
    assert registry.claimants(502) == ()
    assert registry.rulesets() == (first, second)


def test_lineage_queries():
    registry = create_registry(
        features=[
            _desc(Sample.Root),
            _desc(Sample.Grandchild, parent=Sample.Child),
            _desc(Sample.Child, parent=Sample.Root),
            _desc(Sample.Other, parent=Sample.Root, order=-1),
        ]
    )

    assert registry.parent_of(Sample.Grandchild) == Sample.Child
    assert registry.ancestors(Sample.Grandchild) == (Sample.Child, Sample.Root)
    assert registry.children_of(Sample.Root) == (Sample.Other, Sample.Child)
    assert registry.children_of(Sample.Grandchild) == ()


def test_lookup_errors_are_key_errors():
    registry = create_registry(features=[_desc(Sample.Root)])

    with pytest.raises(KeyError):
        registry.get(Sample.Other)
    with pytest.raises(KeyError):
        registry.by_name("Missing")
    with pytest.raises(KeyError):
        registry.setting(Sample.Root, "missing")
    assert registry.by_name("Root") == Sample.Root
    assert registry.has(Sample.Root) and not registry.has(Sample.Other)


def test_settings_for_sorted_by_label():
    registry = create_registry(
        features=[_desc(Sample.Root)],
        settings=[
            DetailSetting(Sample.Root, "zeta", "Beta", maximum=1),
            DetailSetting(Sample.Root, "alpha", "Zulu", maximum=1),
        ],
    )

    assert [setting.name for setting in registry.settings_for(Sample.Root)] == ["zeta", "alpha"]


def test_role_groups_listed_after_jobs_and_hidden_entries_omitted():
    registry = create_registry(
        features=[
            _desc(Sample.Hidden),
            _desc(Sample.Root, job=0),
            _desc(Sample.Child, job=21),
            _desc(Sample.Other, job=1),
        ]
    )

    groups = registry.grouped_by_job()
    assert list(groups) == ["Gladiator", "Warrior", "Disciple of the War"]
    assert Sample.Hidden not in registry.display_ordinals()


def test_default_registry_groups_jobs_alphabetically(registry):
    assert list(registry.grouped_by_job()) == ["Paladin", "Warrior"]


def test_display_ordinals_put_children_right_after_parent(registry):
    ordinals = registry.display_ordinals()

    assert ordinals[RuleSetID.PaladinStunInterruptFeature] == 1
    assert ordinals[RuleSetID.PaladinRoyalAuthorityCombo] == 2
    assert ordinals[RuleSetID.PaladinRoyalWeaveFightOrFlight] == 3
    assert ordinals[RuleSetID.PaladinAtonementFeature] == 8
    assert ordinals[RuleSetID.PaladinProminenceCombo] == 9
    assert ordinals[RuleSetID.PaladinSheltronSentinel] == 16
    assert ordinals[RuleSetID.PaladinScornfulSpiritsFeature] == 17
    assert ordinals[RuleSetID.WarriorStunInterruptFeature] == 18
    assert ordinals[RuleSetID.WarriorStormsPathCombo] == 19
    assert ordinals[RuleSetID.WarriorSmartStormCombo] == 20
    assert ordinals[RuleSetID.WarriorGaugeSpenderFeature] == 21
    assert ordinals[RuleSetID.WarriorStormsEyeCombo] == 22
    assert sorted(ordinals.values()) == list(range(1, len(RuleSetID) + 1))


def test_default_registry_conflicts(registry):
    assert registry.conflicts_of(RuleSetID.WarriorSmartStormCombo) == {RuleSetID.WarriorStormsEyeCombo}
    assert registry.conflicts_of(RuleSetID.WarriorStormsEyeCombo) == {
        RuleSetID.WarriorSmartStormCombo,
        RuleSetID.WarriorLegacyEyeFeature,
    }
