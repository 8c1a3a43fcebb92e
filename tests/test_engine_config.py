import itertools
import math
from enum import IntEnum

import pytest

from combo_engine.config.engine_config import PREFERENCE_DEFAULTS, EngineConfig
from combo_engine.config.settings import DetailSetting
from combo_engine.events.bus import (
    EVENT_KILL_SWITCH_CHANGED,
    EVENT_PARAMETER_CHANGED,
    EVENT_RULESET_ENABLED,
    EventBus,
)
from combo_engine.rulesets.descriptor import RuleSetDescriptor
from combo_engine.rulesets.ids import RuleSetID
from combo_engine.rulesets.registry import create_registry

SMART = RuleSetID.WarriorSmartStormCombo
STORMS_PATH = RuleSetID.WarriorStormsPathCombo
STORMS_EYE = RuleSetID.WarriorStormsEyeCombo
LEGACY_EYE = RuleSetID.WarriorLegacyEyeFeature
GAUGE = RuleSetID.WarriorGaugeSpenderFeature


@pytest.fixture
def config(registry):
    return EngineConfig(registry, EventBus())


def _record(bus, name):
    seen = []
    bus.subscribe(name, lambda sender, **payload: seen.append(payload))
    return seen


def test_starts_with_nothing_enabled(config):
    assert config.enabled() == frozenset()
    assert config.active
    assert config.preferences() == PREFERENCE_DEFAULTS


def test_enable_child_enables_parent(config):
    seen = _record(config.event_bus, EVENT_RULESET_ENABLED)

    config.enable(SMART)

    assert config.enabled() == {SMART, STORMS_PATH}
    assert config.is_active(SMART)
    assert seen == [{"ruleset": SMART, "removed": (), "parents": (STORMS_PATH,)}]


def test_enable_drops_conflicts_and_reports_them(config):
    config.enable(SMART)

    removed = config.enable(STORMS_EYE)

    assert removed == {SMART}
    assert config.enabled() == {STORMS_PATH, STORMS_EYE}


@pytest.mark.parametrize("order", list(itertools.permutations([SMART, STORMS_EYE, LEGACY_EYE, GAUGE])))
def test_no_conflicting_pair_survives_any_enable_order(registry, order):
    config = EngineConfig(registry)
    for ruleset in order:
        config.enable(ruleset)
        enabled = config.enabled()
        assert ruleset in enabled
        for member in enabled:
            assert not (registry.conflicts_of(member) & enabled)


def test_disable_leaves_children_stored_but_inactive(config):
    config.enable(SMART)

    config.disable(STORMS_PATH)

    assert config.is_enabled(SMART)
    assert not config.is_active(SMART)
    config.enable(STORMS_PATH)
    assert config.is_active(SMART)


def test_set_enabled_dispatches(config):
    config.set_enabled(STORMS_EYE, True)
    assert config.is_enabled(STORMS_EYE)
    config.set_enabled(STORMS_EYE, False)
    assert not config.is_enabled(STORMS_EYE)


def test_unknown_ruleset_raises(registry):
    class Unknown(IntEnum):
        Missing = 9999

    config = EngineConfig(registry)
    with pytest.raises(KeyError):
        config.enable(Unknown.Missing)


def test_parameter_defaults_come_from_setting(config):
    assert config.parameter(SMART, "storm_buff_threshold") == 7
    assert config.parameter(GAUGE, "beast_gauge_threshold") == 90


@pytest.mark.parametrize(
    "ruleset, name, value, stored",
    [
        (SMART, "storm_buff_threshold", 45, 30),
        (SMART, "storm_buff_threshold", -3, 0),
        (SMART, "storm_buff_threshold", 7.26, 7.3),
        (SMART, "storm_buff_threshold", math.inf, 30),
        (GAUGE, "beast_gauge_threshold", 49, 50),
        (GAUGE, "beast_gauge_threshold", 92.6, 93),
    ],
)
def test_set_parameter_clamps_and_rounds(config, ruleset, name, value, stored):
    seen = _record(config.event_bus, EVENT_PARAMETER_CHANGED)

    assert config.set_parameter(ruleset, name, value) == stored
    assert config.parameter(ruleset, name) == stored
    assert seen == [{"ruleset": ruleset, "name": name, "value": stored}]


def test_int_parameter_is_stored_as_int(config):
    config.set_parameter(GAUGE, "beast_gauge_threshold", 80.4)
    assert isinstance(config.parameter(GAUGE, "beast_gauge_threshold"), int)


def test_nan_parameter_rejected(config):
    with pytest.raises(ValueError):
        config.set_parameter(SMART, "storm_buff_threshold", float("nan"))


def test_unknown_parameter_rejected(config):
    with pytest.raises(KeyError):
        config.set_parameter(SMART, "missing", 1)


def test_detail_setting_rejects_default_outside_range():
    with pytest.raises(ValueError):
        DetailSetting(SMART, "bad", "Bad", minimum=0, maximum=10, default=11)


def test_kill_switch_is_announced_once(config):
    seen = _record(config.event_bus, EVENT_KILL_SWITCH_CHANGED)

    config.active = False
    config.active = False
    config.active = True

    assert seen == [{"active": False}, {"active": True}]


def test_preferences(config):
    config.set_preference("hide_disabled_children", True)
    assert config.preference("hide_disabled_children") is True
    with pytest.raises(KeyError):
        config.set_preference("missing", True)
    with pytest.raises(KeyError):
        config.preference("missing")


def test_reset_restores_defaults(config):
    config.enable(SMART)
    config.set_parameter(SMART, "storm_buff_threshold", 12)
    config.set_preference("compact_display", True)

    config.reset()

    assert config.enabled() == frozenset()
    assert config.parameter(SMART, "storm_buff_threshold") == 7
    assert config.preferences() == PREFERENCE_DEFAULTS


def test_restore_drops_later_conflicting_entries(config):
    config.restore([SMART, STORMS_PATH, STORMS_EYE], {(GAUGE, "beast_gauge_threshold"): 10}, {"compact_display": 1})

    assert config.enabled() == {SMART, STORMS_PATH}
    assert config.parameter(GAUGE, "beast_gauge_threshold") == 50
    assert config.preference("compact_display") is True


def test_ids_below_threshold_are_always_enabled():
    class Catalog(IntEnum):
        Core = 1
        Extra = 300

    registry = create_registry(
        features=[
            RuleSetDescriptor(Catalog.Core, 19, "Core"),
            RuleSetDescriptor(Catalog.Extra, 19, "Extra", parent=Catalog.Core),
        ]
    )
    config = EngineConfig(registry)

    assert config.is_enabled(Catalog.Core)
    assert config.is_active(Catalog.Core)
    assert not config.is_active(Catalog.Extra)
    config.enable(Catalog.Extra)
    assert config.is_active(Catalog.Extra)


def test_detail_setting_rounding_never_leaves_range():
    setting = DetailSetting(SMART, "ratio", "Ratio", minimum=0.25, maximum=0.75, default=0.5, precision=1)

    assert setting.coerce(0.76) == 0.75
    assert setting.coerce(0.1) == 0.25
    assert setting.coerce(0.55) <= setting.maximum


def test_detail_setting_int_rounding_stays_inside_fractional_bounds():
    setting = DetailSetting(SMART, "count", "Count", minimum=0.5, maximum=4.5, default=2, kind="int")

    assert setting.coerce(4.5) == 4
    assert setting.coerce(0.5) == 1
    assert setting.coerce(float("inf")) == 4


def test_detail_setting_rejects_nan():
    setting = DetailSetting(SMART, "ratio", "Ratio", minimum=0, maximum=1, default=0.5)

    with pytest.raises(ValueError):
        setting.coerce(float("nan"))
