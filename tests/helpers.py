from __future__ import annotations

from typing import Iterable

from esper import World

from combo_engine.config.engine_config import EngineConfig
from combo_engine.events.bus import EventBus
from combo_engine.rulesets.ids import RuleSetID
from combo_engine.rulesets.registry import RuleSetRegistry, create_default_registry
from combo_engine.systems.dispatch_system import DispatchResolver
from combo_engine.utils.combat_state import WorldCombatState
from combo_engine.world import create_world


def enable_all(config: EngineConfig, rulesets: Iterable[RuleSetID]) -> None:
    """Enable each rule-set in turn; later entries win any conflicts."""

    for ruleset in rulesets:
        config.enable(ruleset)


def build_resolver(
    enabled: Iterable[RuleSetID] = (),
    *,
    world: World | None = None,
    registry: RuleSetRegistry | None = None,
    job_id: int | None = 19,
    level: int = 90,
) -> tuple[DispatchResolver, World, EngineConfig]:
    """Resolver over a fresh snapshot world with ``enabled`` switched on."""

    if registry is None:
        registry = create_default_registry()
    if world is None:
        world = create_world(job_id=job_id, level=level)
    config = EngineConfig(registry, EventBus())
    enable_all(config, enabled)
    resolver = DispatchResolver(registry, config, WorldCombatState(world))
    return resolver, world, config
