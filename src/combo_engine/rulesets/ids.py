from enum import IntEnum


class RuleSetID(IntEnum):
    """Stable identities of every rule-set and feature toggle.

    Values are persisted by name, never by number. Values below 100 are
    always enabled. Declaration order here is not the display order; see
    ``RuleSetDescriptor.order``.
    """

    # Paladin
    PaladinStunInterruptFeature = 1900
    PaladinRoyalAuthorityCombo = 1901
    PaladinRoyalWeaveFightOrFlight = 1902
    PaladinRoyalWeaveGoringBlade = 1903
    PaladinRoyalWeaveSpiritsWithin = 1904
    PaladinRoyalConfiteor = 1905
    PaladinRoyalAuthorityRangeSwapFeature = 1906
    PaladinAtonementFeature = 1907
    PaladinProminenceCombo = 1908
    PaladinHolyWeaveFightOrFlight = 1909
    PaladinProminenceWeaveCircleOfScorn = 1910
    PaladinProminentConfiteor = 1911
    PaladinHolyConfiteor = 1912
    PaladinRequiescatConfiteor = 1913
    PaladinInterveneSyncFeature = 1914
    PaladinSheltronSentinel = 1915
    PaladinScornfulSpiritsFeature = 1916

    # Warrior
    WarriorStunInterruptFeature = 2100
    WarriorStormsPathCombo = 2101
    WarriorSmartStormCombo = 2102
    WarriorGaugeSpenderFeature = 2103
    WarriorStormsEyeCombo = 2104
    WarriorLegacyEyeFeature = 2105
    WarriorMythrilTempestCombo = 2106
    WarriorPrimalRendFeature = 2107
