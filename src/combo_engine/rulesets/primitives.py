"""Decision building blocks shared by every rule-set."""
from __future__ import annotations

from functools import reduce
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from combo_engine.cooldowns.oracle import CooldownOracle, CooldownState


def _prefer(original: int, left: CooldownState, right: CooldownState) -> CooldownState:
    # Neither on cooldown: keep the original, otherwise the later operand.
    if not left.is_on_cooldown and not right.is_on_cooldown:
        return left if left.ability_id == original else right
    # Both on cooldown: soonest available.
    if left.is_on_cooldown and right.is_on_cooldown:
        return left if left.remaining < right.remaining else right
    return right if left.is_on_cooldown else left


def pick_by_cooldown(cooldowns: CooldownOracle, original: int, *abilities: int) -> int:
    """Pick the ability the player should actually press this tick.

    The candidates are reduced pairwise from left to right, so argument order
    matters whenever two candidates are both off cooldown and neither is
    ``original``.
    """

    if not abilities:
        return original
    states = [cooldowns.get_cooldown(ability_id) for ability_id in abilities]
    return reduce(lambda left, right: _prefer(original, left, right), states).ability_id


def simple_chain_combo(level: int, last_used: int, elapsed: float, *sequence: tuple[int, int]) -> int:
    """Resolve a linear combo chain of ``(min_level, ability_id)`` steps.

    Outside the combo window the chain restarts at its opener. Inside it, the
    latest step whose predecessor was just used and whose level gate is met
    wins; anything else also falls back to the opener.
    """

    if elapsed > 0:
        for index in range(len(sequence) - 1, 0, -1):
            min_level, ability_id = sequence[index]
            if level >= min_level and sequence[index - 1][1] == last_used:
                return ability_id
    return sequence[0][1]


def within_range(distance: float | None, minimum: float, maximum: float) -> bool:
    """True when ``minimum < distance <= maximum``; an unknown distance never is."""

    if distance is None:
        return False
    return minimum < distance <= maximum

