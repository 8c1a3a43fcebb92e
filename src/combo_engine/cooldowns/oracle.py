from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from combo_engine.utils.combat_state import CombatState


@dataclass(frozen=True, slots=True)
class CooldownState:
    """Read-only recast snapshot for one ability id."""

    ability_id: int
    is_on_cooldown: bool = False
    remaining: float = 0.0
    total: float = 0.0
    charges: int = 0
    max_charges: int = 0

    @property
    def available(self) -> bool:
        """Usable now: off cooldown, or a banked charge is left."""
        return not self.is_on_cooldown or self.charges > 0


class CooldownOracle:
    """Answers cooldown questions for any ability id; never reports 'not found'."""

    def __init__(self, state: CombatState) -> None:
        self.state = state

    def get_cooldown(self, ability_id: int) -> CooldownState:
        cooldown = self.state.cooldown(ability_id)
        if cooldown is None:
            return CooldownState(ability_id=ability_id)
        return cooldown

    def is_on_cooldown(self, ability_id: int) -> bool:
        return self.get_cooldown(ability_id).is_on_cooldown

    def is_off_cooldown(self, ability_id: int) -> bool:
        return not self.get_cooldown(ability_id).is_on_cooldown

    def can_use(self, ability_id: int) -> bool:
        return self.get_cooldown(ability_id).available

    def remaining(self, ability_id: int) -> float:
        return self.get_cooldown(ability_id).remaining
