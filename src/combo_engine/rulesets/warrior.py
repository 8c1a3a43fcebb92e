from __future__ import annotations

from combo_engine.config.settings import DetailSetting
from combo_engine.rulesets.base import DecisionContext, RuleSet
from combo_engine.rulesets.descriptor import RuleSetDescriptor
from combo_engine.rulesets.ids import RuleSetID
from combo_engine.rulesets.primitives import simple_chain_combo
from combo_engine.rulesets.tank import TNK, StunInterruptCombo


class WAR:
    JOB_ID = 21

    HeavySwing = 31
    Maim = 37
    Berserk = 38
    Overpower = 41
    StormsPath = 42
    StormsEye = 45
    InnerBeast = 49
    FellCleave = 3549
    InnerRelease = 7389
    MythrilTempest = 16462
    PrimalRend = 25753

    class Buffs:
        InnerRelease = 1177
        PrimalRendReady = 2624
        SurgingTempest = 2677

    class Gauge:
        BeastGauge = "beast_gauge"

    class Levels:
        Maim = 4
        Berserk = 6
        Overpower = 10
        StormsPath = 26
        InnerBeast = 35
        MythrilTempest = 40
        StormsEye = 50
        FellCleave = 54
        InnerRelease = 70
        PrimalRend = 90


# Surging Tempest time left above which the deprecated Storm's Eye swap kicks in.
LEGACY_EYE_BUFF_TIME = 10


class WarriorStunInterruptFeature(StunInterruptCombo):
    descriptor = RuleSetDescriptor(
        RuleSetID.WarriorStunInterruptFeature,
        WAR.JOB_ID,
        "Tank Interrupt Feature",
        "Replace Low Blow with Interject when the target's cast can be interrupted.",
        claims=(TNK.LowBlow, TNK.Interject),
        order=1,
    )


class WarriorStormsPathCombo(RuleSet):
    descriptor = RuleSetDescriptor(
        RuleSetID.WarriorStormsPathCombo,
        WAR.JOB_ID,
        "Storm's Path Combo",
        "Replace Storm's Path with its combo chain.",
        claims=(WAR.StormsPath,),
        order=2,
    )

    def decide(self, ctx: DecisionContext, pressed: int, last_used: int, elapsed: float, level: int) -> int:
        if ctx.is_active(RuleSetID.WarriorGaugeSpenderFeature) and level >= WAR.Levels.InnerBeast:
            beast = ctx.gauge(WAR.JOB_ID).get(WAR.Gauge.BeastGauge, 0)
            if beast >= ctx.parameter(RuleSetID.WarriorGaugeSpenderFeature, "beast_gauge_threshold"):
                return ctx.original_hook(WAR.InnerBeast)

        finisher = (WAR.Levels.StormsPath, WAR.StormsPath)
        if ctx.is_active(RuleSetID.WarriorSmartStormCombo) and level >= WAR.Levels.StormsEye:
            threshold = ctx.parameter(RuleSetID.WarriorSmartStormCombo, "storm_buff_threshold")
            if ctx.self_effect_duration(WAR.Buffs.SurgingTempest) <= threshold:
                finisher = (WAR.Levels.StormsEye, WAR.StormsEye)

        return simple_chain_combo(
            level,
            last_used,
            elapsed,
            (1, WAR.HeavySwing),
            (WAR.Levels.Maim, WAR.Maim),
            finisher,
        )


class WarriorStormsEyeCombo(RuleSet):
    descriptor = RuleSetDescriptor(
        RuleSetID.WarriorStormsEyeCombo,
        WAR.JOB_ID,
        "Storm's Eye Combo",
        "Replace Storm's Eye with its combo chain.",
        claims=(WAR.StormsEye,),
        order=10,
        conflicts=(RuleSetID.WarriorSmartStormCombo,),
    )

    def decide(self, ctx: DecisionContext, pressed: int, last_used: int, elapsed: float, level: int) -> int:
        return simple_chain_combo(
            level,
            last_used,
            elapsed,
            (1, WAR.HeavySwing),
            (WAR.Levels.Maim, WAR.Maim),
            (WAR.Levels.StormsEye, WAR.StormsEye),
        )


class WarriorLegacyEyeFeature(RuleSet):
    descriptor = RuleSetDescriptor(
        RuleSetID.WarriorLegacyEyeFeature,
        WAR.JOB_ID,
        "Storm's Eye Saver",
        "Replace Storm's Eye with Storm's Path while Surging Tempest has plenty of time left.",
        claims=(WAR.StormsEye,),
        order=11,
        conflicts=(RuleSetID.WarriorStormsEyeCombo,),
        deprecated=True,
        alternatives=(RuleSetID.WarriorSmartStormCombo,),
    )

    def decide(self, ctx: DecisionContext, pressed: int, last_used: int, elapsed: float, level: int) -> int:
        if level >= WAR.Levels.StormsPath:
            if ctx.self_effect_duration(WAR.Buffs.SurgingTempest) > LEGACY_EYE_BUFF_TIME:
                return WAR.StormsPath

        return pressed


class WarriorMythrilTempestCombo(RuleSet):
    descriptor = RuleSetDescriptor(
        RuleSetID.WarriorMythrilTempestCombo,
        WAR.JOB_ID,
        "Mythril Tempest Combo",
        "Replace Mythril Tempest with its combo chain.",
        claims=(WAR.MythrilTempest,),
        order=20,
    )

    def decide(self, ctx: DecisionContext, pressed: int, last_used: int, elapsed: float, level: int) -> int:
        return simple_chain_combo(
            level,
            last_used,
            elapsed,
            (WAR.Levels.Overpower, WAR.Overpower),
            (WAR.Levels.MythrilTempest, WAR.MythrilTempest),
        )


class WarriorPrimalRendFeature(RuleSet):
    descriptor = RuleSetDescriptor(
        RuleSetID.WarriorPrimalRendFeature,
        WAR.JOB_ID,
        "Primal Rend Feature",
        "Replace Berserk and Inner Release with Primal Rend while Primal Rend is ready.",
        claims=(WAR.Berserk, WAR.InnerRelease),
        order=30,
        experimental=True,
    )

    def decide(self, ctx: DecisionContext, pressed: int, last_used: int, elapsed: float, level: int) -> int:
        if level >= WAR.Levels.PrimalRend and ctx.self_has_effect(WAR.Buffs.PrimalRendReady):
            return WAR.PrimalRend

        return pressed


RULESETS = (
    WarriorStunInterruptFeature(),
    WarriorStormsPathCombo(),
    WarriorStormsEyeCombo(),
    WarriorLegacyEyeFeature(),
    WarriorMythrilTempestCombo(),
    WarriorPrimalRendFeature(),
)

FEATURES = (
    RuleSetDescriptor(
        RuleSetID.WarriorSmartStormCombo,
        WAR.JOB_ID,
        "Smart Storm Combo",
        "Finish the Storm's Path combo with Storm's Eye when Surging Tempest is about to run out.",
        parent=RuleSetID.WarriorStormsPathCombo,
        order=3,
    ),
    RuleSetDescriptor(
        RuleSetID.WarriorGaugeSpenderFeature,
        WAR.JOB_ID,
        "Storm's Path Gauge Spender",
        "Replace the Storm's Path combo with Inner Beast/Fell Cleave when the Beast Gauge is high.",
        parent=RuleSetID.WarriorStormsPathCombo,
        order=4,
    ),
)

SETTINGS = (
    DetailSetting(
        RuleSetID.WarriorSmartStormCombo,
        "storm_buff_threshold",
        "Surging Tempest buff threshold",
        "When the Surging Tempest buff only has this many seconds left, finish with Storm's Eye",
        minimum=0,
        maximum=30,
        default=7,
        kind="float",
    ),
    DetailSetting(
        RuleSetID.WarriorGaugeSpenderFeature,
        "beast_gauge_threshold",
        "Minimum Beast Gauge",
        "When you have AT LEAST this much Beast Gauge, the Storm's Path combo becomes Inner Beast",
        minimum=50,
        maximum=100,
        default=90,
        kind="int",
    ),
)
