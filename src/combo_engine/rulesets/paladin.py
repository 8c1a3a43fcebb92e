from __future__ import annotations

from combo_engine.rulesets.base import DecisionContext, RuleSet
from combo_engine.rulesets.descriptor import RuleSetDescriptor
from combo_engine.rulesets.ids import RuleSetID
from combo_engine.rulesets.primitives import pick_by_cooldown, within_range
from combo_engine.rulesets.tank import TNK, StunInterruptCombo


class PLD:
    JOB_ID = 19

    FastBlade = 9
    RiotBlade = 15
    Sentinel = 17
    FightOrFlight = 20
    RageOfHalone = 21
    CircleOfScorn = 23
    ShieldLob = 24
    SpiritsWithin = 29
    GoringBlade = 3538
    RoyalAuthority = 3539
    Sheltron = 3542
    TotalEclipse = 7381
    Requiescat = 7383
    HolySpirit = 7384
    Prominence = 16457
    HolyCircle = 16458
    Confiteor = 16459
    Atonement = 16460
    Intervene = 16461
    Expiacion = 25747
    BladeOfFaith = 25748
    BladeOfTruth = 25749
    BladeOfValor = 25750

    class Buffs:
        FightOrFlight = 76
        Requiescat = 1368
        SwordOath = 1902
        DivineMight = 2673
        ConfiteorReady = 3019

    class Debuffs:
        GoringBlade = 725
        BladeOfValor = 2721

    class Levels:
        FightOrFlight = 2
        RiotBlade = 4
        TotalEclipse = 6
        ShieldLob = 15
        RageOfHalone = 26
        SpiritsWithin = 30
        Sheltron = 35
        Sentinel = 38
        Prominence = 40
        CircleOfScorn = 50
        GoringBlade = 54
        RoyalAuthority = 60
        HolySpirit = 64
        Requiescat = 68
        HolyCircle = 72
        Intervene = 74
        Atonement = 76
        Confiteor = 80
        Expiacion = 86
        BladeOfFaith = 90
        BladeOfTruth = 90
        BladeOfValor = 90


# Gap-closer range: further than melee, within Intervene's reach.
GAP_CLOSE_MIN = 3
GAP_CLOSE_MAX = 20


class PaladinStunInterruptFeature(StunInterruptCombo):
    descriptor = RuleSetDescriptor(
        RuleSetID.PaladinStunInterruptFeature,
        PLD.JOB_ID,
        "Tank Interrupt Feature",
        "Replace Low Blow with Interject when the target's cast can be interrupted.",
        claims=(TNK.LowBlow, TNK.Interject),
        order=1,
    )


class PaladinRoyalAuthorityCombo(RuleSet):
    descriptor = RuleSetDescriptor(
        RuleSetID.PaladinRoyalAuthorityCombo,
        PLD.JOB_ID,
        "Royal Authority Combo",
        "Replace Royal Authority/Rage of Halone with its combo chain.",
        claims=(PLD.RageOfHalone, PLD.RoyalAuthority),
        order=2,
    )

    def decide(self, ctx: DecisionContext, pressed: int, last_used: int, elapsed: float, level: int) -> int:
        if ctx.can_weave(pressed):

            if ctx.is_active(RuleSetID.PaladinRoyalWeaveFightOrFlight) and level >= PLD.Levels.FightOrFlight:
                if ctx.can_use(PLD.FightOrFlight):
                    return PLD.FightOrFlight

            if ctx.is_active(RuleSetID.PaladinRoyalWeaveGoringBlade) and level >= PLD.Levels.GoringBlade:
                if ctx.can_use(PLD.GoringBlade):
                    return PLD.GoringBlade

            if ctx.is_active(RuleSetID.PaladinRoyalWeaveSpiritsWithin) and level >= PLD.Levels.SpiritsWithin:
                actual = ctx.original_hook(PLD.SpiritsWithin)
                if ctx.can_use(actual):
                    return actual

        if ctx.is_active(RuleSetID.PaladinRoyalConfiteor) and level >= PLD.Levels.Confiteor:
            if ctx.self_has_effect(PLD.Buffs.Requiescat):
                return ctx.original_hook(PLD.Confiteor)

        if last_used == PLD.FastBlade:
            if level >= PLD.Levels.RiotBlade:
                return PLD.RiotBlade
        elif last_used == PLD.RiotBlade:
            if level >= PLD.Levels.RageOfHalone:
                return ctx.original_hook(PLD.RageOfHalone)

        if ctx.is_active(RuleSetID.PaladinRoyalAuthorityRangeSwapFeature):
            if level >= PLD.Levels.Intervene:
                if within_range(ctx.target_distance(), GAP_CLOSE_MIN, GAP_CLOSE_MAX):
                    return PLD.Intervene
            elif ctx.is_active(RuleSetID.PaladinInterveneSyncFeature):
                if level >= PLD.Levels.ShieldLob:
                    if within_range(ctx.target_distance(), GAP_CLOSE_MIN, GAP_CLOSE_MAX):
                        return PLD.ShieldLob

        if ctx.is_active(RuleSetID.PaladinAtonementFeature) and level >= PLD.Levels.Atonement:
            if ctx.self_has_effect(PLD.Buffs.SwordOath):
                return PLD.Atonement

        return PLD.FastBlade


class PaladinProminenceCombo(RuleSet):
    descriptor = RuleSetDescriptor(
        RuleSetID.PaladinProminenceCombo,
        PLD.JOB_ID,
        "Prominence Combo",
        "Replace Prominence with its combo chain.",
        claims=(PLD.Prominence,),
        order=10,
    )

    def decide(self, ctx: DecisionContext, pressed: int, last_used: int, elapsed: float, level: int) -> int:
        if ctx.can_weave(pressed):

            if ctx.is_active(RuleSetID.PaladinHolyWeaveFightOrFlight) and level >= PLD.Levels.FightOrFlight:
                if ctx.can_use(PLD.FightOrFlight):
                    return PLD.FightOrFlight

            if ctx.is_active(RuleSetID.PaladinProminenceWeaveCircleOfScorn) and level >= PLD.Levels.CircleOfScorn:
                if ctx.can_use(PLD.CircleOfScorn):
                    return PLD.CircleOfScorn

        if ctx.is_active(RuleSetID.PaladinProminentConfiteor) and level >= PLD.Levels.Confiteor:
            if ctx.self_has_effect(PLD.Buffs.Requiescat):
                return ctx.original_hook(PLD.Confiteor)

        if last_used == PLD.TotalEclipse and level >= PLD.Levels.Prominence:
            return PLD.Prominence

        return PLD.TotalEclipse


class PaladinHolySpiritHolyCircle(RuleSet):
    descriptor = RuleSetDescriptor(
        RuleSetID.PaladinHolyConfiteor,
        PLD.JOB_ID,
        "Holy Confiteor Feature",
        "Replace Holy Spirit and Holy Circle with Confiteor while under Requiescat.",
        claims=(PLD.HolySpirit, PLD.HolyCircle),
        order=20,
    )

    def decide(self, ctx: DecisionContext, pressed: int, last_used: int, elapsed: float, level: int) -> int:
        if level >= PLD.Levels.Confiteor:
            if ctx.self_has_effect(PLD.Buffs.Requiescat):
                return ctx.original_hook(PLD.Confiteor)

        return pressed


class PaladinRequiescat(RuleSet):
    descriptor = RuleSetDescriptor(
        RuleSetID.PaladinRequiescatConfiteor,
        PLD.JOB_ID,
        "Requiescat Confiteor",
        "Replace Requiescat with Confiteor while under the effect of Requiescat.",
        claims=(PLD.Requiescat,),
        order=21,
    )

    def decide(self, ctx: DecisionContext, pressed: int, last_used: int, elapsed: float, level: int) -> int:
        if level >= PLD.Levels.Confiteor:
            if ctx.self_has_effect(PLD.Buffs.Requiescat):
                return ctx.original_hook(PLD.Confiteor)

        return pressed


class PaladinInterveneSyncFeature(RuleSet):
    descriptor = RuleSetDescriptor(
        RuleSetID.PaladinInterveneSyncFeature,
        PLD.JOB_ID,
        "Intervene Level Sync",
        "Replace Intervene with Shield Lob when below Intervene's level.",
        claims=(PLD.Intervene,),
        order=22,
    )

    def decide(self, ctx: DecisionContext, pressed: int, last_used: int, elapsed: float, level: int) -> int:
        if level < PLD.Levels.Intervene:
            return PLD.ShieldLob

        return pressed


class PaladinSheltron(RuleSet):
    descriptor = RuleSetDescriptor(
        RuleSetID.PaladinSheltronSentinel,
        PLD.JOB_ID,
        "Sheltron Sentinel",
        "Replace Sheltron with Sentinel when Sentinel is available.",
        claims=(PLD.Sheltron,),
        order=23,
    )

    def decide(self, ctx: DecisionContext, pressed: int, last_used: int, elapsed: float, level: int) -> int:
        if level > PLD.Levels.Sentinel and ctx.can_use(PLD.Sentinel):
            return PLD.Sentinel

        return pressed


class PaladinScornfulSpirits(RuleSet):
    descriptor = RuleSetDescriptor(
        RuleSetID.PaladinScornfulSpiritsFeature,
        PLD.JOB_ID,
        "Scornful Spirits",
        "Replace Spirits Within and Circle of Scorn with whichever is ready first.",
        claims=(PLD.SpiritsWithin, PLD.CircleOfScorn),
        order=24,
    )

    def decide(self, ctx: DecisionContext, pressed: int, last_used: int, elapsed: float, level: int) -> int:
        if level >= PLD.Levels.CircleOfScorn:
            return pick_by_cooldown(
                ctx.cooldowns,
                ctx.original_hook(pressed),
                ctx.original_hook(PLD.SpiritsWithin),
                PLD.CircleOfScorn,
            )

        return pressed


def _feature(ruleset: RuleSetID, label: str, description: str, parent: RuleSetID, order: int) -> RuleSetDescriptor:
    return RuleSetDescriptor(ruleset, PLD.JOB_ID, label, description, parent=parent, order=order)


RULESETS = (
    PaladinStunInterruptFeature(),
    PaladinRoyalAuthorityCombo(),
    PaladinProminenceCombo(),
    PaladinHolySpiritHolyCircle(),
    PaladinRequiescat(),
    PaladinInterveneSyncFeature(),
    PaladinSheltron(),
    PaladinScornfulSpirits(),
)

FEATURES = (
    _feature(
        RuleSetID.PaladinRoyalWeaveFightOrFlight,
        "Royal Authority Fight or Flight",
        "Weave Fight or Flight into the Royal Authority combo when available.",
        RuleSetID.PaladinRoyalAuthorityCombo,
        3,
    ),
    _feature(
        RuleSetID.PaladinRoyalWeaveGoringBlade,
        "Royal Authority Goring Blade",
        "Weave Goring Blade into the Royal Authority combo when available.",
        RuleSetID.PaladinRoyalAuthorityCombo,
        4,
    ),
    _feature(
        RuleSetID.PaladinRoyalWeaveSpiritsWithin,
        "Royal Authority Spirits Within",
        "Weave Spirits Within/Expiacion into the Royal Authority combo when available.",
        RuleSetID.PaladinRoyalAuthorityCombo,
        5,
    ),
    _feature(
        RuleSetID.PaladinRoyalConfiteor,
        "Royal Authority Confiteor",
        "Replace the Royal Authority combo with Confiteor while under Requiescat.",
        RuleSetID.PaladinRoyalAuthorityCombo,
        6,
    ),
    _feature(
        RuleSetID.PaladinRoyalAuthorityRangeSwapFeature,
        "Royal Authority Ranged Swap",
        "Replace the Royal Authority combo with Intervene when out of melee range.",
        RuleSetID.PaladinRoyalAuthorityCombo,
        7,
    ),
    _feature(
        RuleSetID.PaladinAtonementFeature,
        "Royal Authority Atonement",
        "Replace the Royal Authority combo with Atonement while under Sword Oath.",
        RuleSetID.PaladinRoyalAuthorityCombo,
        8,
    ),
    _feature(
        RuleSetID.PaladinHolyWeaveFightOrFlight,
        "Prominence Fight or Flight",
        "Weave Fight or Flight into the Prominence combo when available.",
        RuleSetID.PaladinProminenceCombo,
        11,
    ),
    _feature(
        RuleSetID.PaladinProminenceWeaveCircleOfScorn,
        "Prominence Circle of Scorn",
        "Weave Circle of Scorn into the Prominence combo when available.",
        RuleSetID.PaladinProminenceCombo,
        12,
    ),
    _feature(
        RuleSetID.PaladinProminentConfiteor,
        "Prominence Confiteor",
        "Replace the Prominence combo with Confiteor while under Requiescat.",
        RuleSetID.PaladinProminenceCombo,
        13,
    ),
)

SETTINGS = ()
