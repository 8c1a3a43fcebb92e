from dataclasses import dataclass


@dataclass(slots=True)
class AbilityCooldown:
    """Tracks recast state for one ability id, in seconds.

    Charge-based abilities report ``max_charges`` > 0 and the number of
    charges currently banked in ``charges``.
    """

    ability_id: int
    remaining: float = 0.0
    total: float = 0.0
    charges: int = 0
    max_charges: int = 0
