from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, Mapping

from combo_engine.constants import DEFAULT_WEAVE_TIME
from combo_engine.cooldowns.oracle import CooldownOracle, CooldownState
from combo_engine.effects.lookup import EffectLookup
from combo_engine.rulesets.descriptor import RuleSetDescriptor
from combo_engine.rulesets.ids import RuleSetID

if TYPE_CHECKING:
    from combo_engine.config.engine_config import EngineConfig
    from combo_engine.utils.combat_state import CombatState


@dataclass(slots=True)
class DecisionContext:
    """Everything a rule-set may read while deciding; built once per request."""

    state: CombatState
    config: EngineConfig
    player: int
    effects: EffectLookup = field(init=False)
    cooldowns: CooldownOracle = field(init=False)

    def __post_init__(self) -> None:
        self.effects = EffectLookup(self.state)
        self.cooldowns = CooldownOracle(self.state)

    # --- Configuration ---

    def is_active(self, ruleset: RuleSetID) -> bool:
        return self.config.is_active(ruleset)

    def parameter(self, ruleset: RuleSetID, name: str) -> float:
        return self.config.parameter(ruleset, name)

    # --- Cooldowns ---

    def get_cooldown(self, ability_id: int) -> CooldownState:
        return self.cooldowns.get_cooldown(ability_id)

    def is_on_cooldown(self, ability_id: int) -> bool:
        return self.cooldowns.is_on_cooldown(ability_id)

    def is_off_cooldown(self, ability_id: int) -> bool:
        return self.cooldowns.is_off_cooldown(ability_id)

    def can_use(self, ability_id: int) -> bool:
        return self.cooldowns.can_use(ability_id)

    def can_weave(self, ability_id: int, weave_time: float = DEFAULT_WEAVE_TIME) -> bool:
        return self.state.can_weave(ability_id, weave_time)

    # --- Effects ---

    def self_has_effect(self, effect_id: int) -> bool:
        return self.effects.self_has(effect_id)

    def self_effect_duration(self, effect_id: int) -> float:
        return self.effects.self_duration(effect_id)

    def self_effect_stacks(self, effect_id: int) -> int:
        return self.effects.self_stacks(effect_id)

    def target_has_own_effect(self, effect_id: int) -> bool:
        return self.effects.target_own_has(effect_id)

    def target_own_effect_duration(self, effect_id: int) -> float:
        return self.effects.target_own_duration(effect_id)

    # --- Everything else the provider knows ---

    def original_hook(self, ability_id: int) -> int:
        return self.state.original_hook(ability_id)

    def target_distance(self) -> float | None:
        target = self.state.current_target()
        if target is None:
            return None
        return self.state.distance(self.player, target)

    def target_interruptible(self) -> bool:
        return self.state.target_interruptible()

    def gauge(self, job_id: int) -> Mapping[str, float]:
        return self.state.gauge(job_id)

    def has_condition(self, flag: str) -> bool:
        return self.state.condition(flag)

    def has_pet_present(self) -> bool:
        return self.state.pet_present()


class RuleSet:
    """One independently enableable unit of substitution logic.

    Subclasses set ``descriptor`` and implement ``decide``. Returning the
    pressed id, or ``NO_ACTION``, means "do not substitute".
    """

    descriptor: ClassVar[RuleSetDescriptor]

    @property
    def ruleset(self) -> RuleSetID:
        return self.descriptor.ruleset

    def claims(self, ability_id: int) -> bool:
        return ability_id in self.descriptor.claims

    def decide(self, ctx: DecisionContext, pressed: int, last_used: int, elapsed: float, level: int) -> int:
        raise NotImplementedError
