"""Role actions shared by every tank job."""
from __future__ import annotations

from combo_engine.rulesets.base import DecisionContext, RuleSet


class TNK:
    Interject = 7538
    LowBlow = 7540

    class Levels:
        LowBlow = 12
        Interject = 18


class StunInterruptCombo(RuleSet):
    """Low Blow and Interject share a button: interrupt when the cast allows it, stun otherwise.

    Each tank job subclasses this with its own descriptor.
    """

    def decide(self, ctx: DecisionContext, pressed: int, last_used: int, elapsed: float, level: int) -> int:
        if level >= TNK.Levels.Interject and ctx.target_interruptible() and ctx.can_use(TNK.Interject):
            return TNK.Interject

        if level >= TNK.Levels.LowBlow and ctx.can_use(TNK.LowBlow):
            return TNK.LowBlow

        return pressed
