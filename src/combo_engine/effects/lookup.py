from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from combo_engine.constants import INVALID_OBJECT_ID, UNKNOWN_SOURCE_ID

if TYPE_CHECKING:
    from combo_engine.utils.combat_state import CombatState


@dataclass(frozen=True, slots=True)
class EffectInstance:
    """Read-only snapshot of one buff or debuff on an actor."""

    effect_id: int
    owner: int
    source_id: int = UNKNOWN_SOURCE_ID
    remaining: float = 0.0
    stacks: int = 0


def source_matches(source_id: int, required_source: int | None) -> bool:
    """Unknown or invalid sources count as a match for any required source."""

    if required_source is None:
        return True
    return source_id in (UNKNOWN_SOURCE_ID, INVALID_OBJECT_ID, required_source)


def find_effect(
    state: CombatState,
    effect_id: int,
    actor: int | None,
    required_source: int | None = None,
) -> EffectInstance | None:
    """Return the first effect on ``actor`` with ``effect_id``, if any.

    ``None`` when the actor is absent or cannot carry statuses. When
    ``required_source`` is given, only effects applied by that object (or by
    a source the game could not identify) match.
    """

    if actor is None:
        return None
    effects = state.effects(actor)
    if effects is None:
        return None
    for effect in effects:
        if effect.effect_id == effect_id and source_matches(effect.source_id, required_source):
            return effect
    return None


def has_effect(state: CombatState, effect_id: int, actor: int | None, required_source: int | None = None) -> bool:
    return find_effect(state, effect_id, actor, required_source) is not None


def effect_duration(state: CombatState, effect_id: int, actor: int | None, required_source: int | None = None) -> float:
    effect = find_effect(state, effect_id, actor, required_source)
    return effect.remaining if effect is not None else 0.0


def effect_stacks(state: CombatState, effect_id: int, actor: int | None, required_source: int | None = None) -> int:
    effect = find_effect(state, effect_id, actor, required_source)
    return effect.stacks if effect is not None else 0


class EffectLookup:
    """Effect queries scoped to the local player and the current target.

    ``self_*`` reads the player's own statuses, ``target_any_*`` reads the
    target regardless of who applied the effect, and ``target_own_*`` only
    counts effects the player applied.
    """

    def __init__(self, state: CombatState) -> None:
        self.state = state

    def _player(self) -> int | None:
        return self.state.local_player()

    def _target(self) -> int | None:
        return self.state.current_target()

    def _player_object_id(self) -> int | None:
        player = self._player()
        if player is None:
            return None
        return self.state.object_id(player)

    def self_find(self, effect_id: int) -> EffectInstance | None:
        return find_effect(self.state, effect_id, self._player())

    def self_has(self, effect_id: int) -> bool:
        return self.self_find(effect_id) is not None

    def self_duration(self, effect_id: int) -> float:
        effect = self.self_find(effect_id)
        return effect.remaining if effect is not None else 0.0

    def self_stacks(self, effect_id: int) -> int:
        effect = self.self_find(effect_id)
        return effect.stacks if effect is not None else 0

    def target_any_find(self, effect_id: int) -> EffectInstance | None:
        return find_effect(self.state, effect_id, self._target())

    def target_any_has(self, effect_id: int) -> bool:
        return self.target_any_find(effect_id) is not None

    def target_any_duration(self, effect_id: int) -> float:
        effect = self.target_any_find(effect_id)
        return effect.remaining if effect is not None else 0.0

    def target_any_stacks(self, effect_id: int) -> int:
        effect = self.target_any_find(effect_id)
        return effect.stacks if effect is not None else 0

    def target_own_find(self, effect_id: int) -> EffectInstance | None:
        return find_effect(self.state, effect_id, self._target(), self._player_object_id())

    def target_own_has(self, effect_id: int) -> bool:
        return self.target_own_find(effect_id) is not None

    def target_own_duration(self, effect_id: int) -> float:
        effect = self.target_own_find(effect_id)
        return effect.remaining if effect is not None else 0.0

    def target_own_stacks(self, effect_id: int) -> int:
        effect = self.target_own_find(effect_id)
        return effect.stacks if effect is not None else 0
