from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from combo_engine.constants import NO_ACTION, job_matches
from combo_engine.rulesets.base import DecisionContext

if TYPE_CHECKING:
    from combo_engine.config.engine_config import EngineConfig
    from combo_engine.rulesets.registry import RuleSetRegistry
    from combo_engine.utils.combat_state import CombatState

log = logging.getLogger("combo.dispatch")


class DispatchResolver:
    """Decides, once per input event, whether the pressed ability is replaced.

    Rule-sets claiming the pressed id are tried in declaration order; the
    first one that produces a different, non-empty id wins. Anything short of
    that, including a rule-set raising, leaves the player's input untouched.
    """

    def __init__(self, registry: RuleSetRegistry, config: EngineConfig, state: CombatState) -> None:
        self.registry = registry
        self.config = config
        self.state = state

    def resolve(self, pressed: int, last_used: int, elapsed: float, level: int) -> int | None:
        """Return the substituted ability id, or ``None`` for "use what was pressed"."""

        if not self.config.active:
            return None
        claimants = self.registry.claimants(pressed)
        if not claimants:
            return None
        player = self.state.local_player()
        if player is None:
            return None

        job = self.state.job_id(player)
        ctx: DecisionContext | None = None
        for ruleset in claimants:
            descriptor = ruleset.descriptor
            if not job_matches(descriptor.job, job):
                continue
            if not self.config.is_active(descriptor.ruleset):
                continue
            if not ruleset.claims(pressed):
                continue
            if ctx is None:
                ctx = DecisionContext(self.state, self.config, player)
            try:
                result = ruleset.decide(ctx, pressed, last_used, elapsed, level)
            except Exception:
                log.warning("Rule-set %s failed on %d; leaving input alone", descriptor.name, pressed, exc_info=True)
                continue
            if result == NO_ACTION or result == pressed:
                continue
            log.debug("%s: %d -> %d", descriptor.name, pressed, result)
            return result
        return None

    def try_invoke(self, pressed: int, last_used: int, elapsed: float, level: int) -> tuple[bool, int]:
        """Entry point for the input hook: ``(True, new_id)`` or ``(False, 0)``."""

        result = self.resolve(pressed, last_used, elapsed, level)
        if result is None:
            return False, NO_ACTION
        return True, result
