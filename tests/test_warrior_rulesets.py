import pytest

from combo_engine.rulesets.ids import RuleSetID
from combo_engine.rulesets.warrior import WAR
from combo_engine.world import apply_status, create_world, local_player, set_gauge, set_replacement
from tests.helpers import build_resolver


@pytest.fixture
def warrior():
    def _build(enabled, level=90):
        world = create_world(job_id=WAR.JOB_ID, level=level)
        resolver, _, config = build_resolver(enabled, world=world)
        return resolver, world, config

    return _build


def test_storms_path_chain(warrior):
    resolver, _, _ = warrior([RuleSetID.WarriorStormsPathCombo])

    assert resolver.resolve(WAR.StormsPath, 0, 0, 90) == WAR.HeavySwing
    assert resolver.resolve(WAR.StormsPath, WAR.HeavySwing, 1.0, 90) == WAR.Maim
    assert resolver.resolve(WAR.StormsPath, WAR.Maim, 1.0, 90) is None
    assert resolver.resolve(WAR.StormsPath, WAR.HeavySwing, 0, 90) == WAR.HeavySwing


def test_smart_storm_refreshes_surging_tempest(warrior):
    resolver, world, config = warrior([RuleSetID.WarriorSmartStormCombo])

    assert resolver.resolve(WAR.StormsPath, WAR.Maim, 1.0, 90) == WAR.StormsEye

    apply_status(world, local_player(world), WAR.Buffs.SurgingTempest, remaining=20.0)
    assert resolver.resolve(WAR.StormsPath, WAR.Maim, 1.0, 90) is None

    config.set_parameter(RuleSetID.WarriorSmartStormCombo, "storm_buff_threshold", 25)
    assert resolver.resolve(WAR.StormsPath, WAR.Maim, 1.0, 90) == WAR.StormsEye


def test_smart_storm_below_storms_eye_level(warrior):
    resolver, _, _ = warrior([RuleSetID.WarriorSmartStormCombo], level=45)

    assert resolver.resolve(WAR.StormsPath, WAR.Maim, 1.0, 45) is None


def test_gauge_spender(warrior):
    resolver, world, _ = warrior([RuleSetID.WarriorGaugeSpenderFeature])
    set_replacement(world, WAR.InnerBeast, WAR.FellCleave)

    set_gauge(world, WAR.JOB_ID, beast_gauge=80)
    assert resolver.resolve(WAR.StormsPath, 0, 0, 90) == WAR.HeavySwing

    set_gauge(world, WAR.JOB_ID, beast_gauge=90)
    assert resolver.resolve(WAR.StormsPath, 0, 0, 90) == WAR.FellCleave
    assert resolver.resolve(WAR.StormsPath, 0, 0, 34) == WAR.HeavySwing


def test_storms_eye_chain(warrior):
    resolver, _, _ = warrior([RuleSetID.WarriorStormsEyeCombo])

    assert resolver.resolve(WAR.StormsEye, 0, 0, 90) == WAR.HeavySwing
    assert resolver.resolve(WAR.StormsEye, WAR.HeavySwing, 1.0, 90) == WAR.Maim
    assert resolver.resolve(WAR.StormsEye, WAR.Maim, 1.0, 90) is None


def test_storms_eye_combo_and_smart_storm_exclude_each_other(warrior):
    _, _, config = warrior([RuleSetID.WarriorSmartStormCombo, RuleSetID.WarriorStormsEyeCombo])

    assert config.enabled() == {RuleSetID.WarriorStormsPathCombo, RuleSetID.WarriorStormsEyeCombo}


def test_legacy_eye_feature(warrior):
    resolver, world, _ = warrior([RuleSetID.WarriorLegacyEyeFeature])
    player = local_player(world)

    apply_status(world, player, WAR.Buffs.SurgingTempest, remaining=5.0)
    assert resolver.resolve(WAR.StormsEye, 0, 0, 90) is None

    apply_status(world, player, WAR.Buffs.SurgingTempest, remaining=15.0)
    # The first matching status in game order is what counts.
    assert resolver.resolve(WAR.StormsEye, 0, 0, 90) is None


def test_legacy_eye_with_long_buff(warrior):
    resolver, world, _ = warrior([RuleSetID.WarriorLegacyEyeFeature])
    apply_status(world, local_player(world), WAR.Buffs.SurgingTempest, remaining=15.0)

    assert resolver.resolve(WAR.StormsEye, 0, 0, 90) == WAR.StormsPath


def test_mythril_tempest_chain(warrior):
    resolver, _, _ = warrior([RuleSetID.WarriorMythrilTempestCombo])

    assert resolver.resolve(WAR.MythrilTempest, 0, 0, 90) == WAR.Overpower
    assert resolver.resolve(WAR.MythrilTempest, WAR.Overpower, 1.0, 90) is None
    assert resolver.resolve(WAR.MythrilTempest, WAR.Overpower, 1.0, 39) == WAR.Overpower


@pytest.mark.parametrize("pressed", [WAR.Berserk, WAR.InnerRelease])
def test_primal_rend_feature(warrior, pressed):
    resolver, world, _ = warrior([RuleSetID.WarriorPrimalRendFeature])

    assert resolver.resolve(pressed, 0, 0, 90) is None
    apply_status(world, local_player(world), WAR.Buffs.PrimalRendReady)
    assert resolver.resolve(pressed, 0, 0, 90) == WAR.PrimalRend
    assert resolver.resolve(pressed, 0, 0, 89) is None
