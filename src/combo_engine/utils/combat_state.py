from __future__ import annotations

import math
from typing import Mapping, Protocol, Sequence

from esper import World

from combo_engine.components.ability_cooldown import AbilityCooldown
from combo_engine.components.action_replacements import ActionReplacements
from combo_engine.components.actor import Actor
from combo_engine.components.cast_bar import CastBar
from combo_engine.components.combat_conditions import CombatConditions
from combo_engine.components.current_target import CurrentTarget
from combo_engine.components.effect_list import EffectList
from combo_engine.components.job import Job
from combo_engine.components.job_gauge import JobGauge
from combo_engine.components.local_player import LocalPlayer
from combo_engine.components.pet_buddy import PetBuddy
from combo_engine.components.position import Position
from combo_engine.components.status_effect import StatusEffect
from combo_engine.constants import DEFAULT_WEAVE_TIME
from combo_engine.cooldowns.oracle import CooldownState
from combo_engine.effects.lookup import EffectInstance


class CombatState(Protocol):
    """Read-only combat snapshot consumed by the decision engine.

    Actors are opaque entity handles; ``None`` stands for "absent".
    """

    def local_player(self) -> int | None:
        ...

    def current_target(self) -> int | None:
        ...

    def object_id(self, actor: int) -> int | None:
        ...

    def job_id(self, actor: int) -> int:
        ...

    def job_level(self, actor: int) -> int:
        ...

    def distance(self, actor: int, target: int) -> float | None:
        ...

    def effects(self, actor: int) -> Sequence[EffectInstance] | None:
        """Statuses in game order, or ``None`` when the actor cannot carry any."""
        ...

    def cooldown(self, ability_id: int) -> CooldownState | None:
        ...

    def can_weave(self, ability_id: int, weave_time: float = DEFAULT_WEAVE_TIME) -> bool:
        ...

    def gauge(self, job_id: int) -> Mapping[str, float]:
        ...

    def condition(self, flag: str) -> bool:
        ...

    def pet_present(self) -> bool:
        ...

    def original_hook(self, ability_id: int) -> int:
        ...

    def target_interruptible(self) -> bool:
        ...


class WorldCombatState:
    """CombatState backed by an esper world populated by the host."""

    def __init__(self, world: World) -> None:
        self.world = world

    def local_player(self) -> int | None:
        for entity, _ in self.world.get_component(LocalPlayer):
            return entity
        return None

    def current_target(self) -> int | None:
        player = self.local_player()
        if player is None:
            return None
        targeting = self._component(player, CurrentTarget)
        if targeting is None or targeting.target_entity is None:
            return None
        if not self.world.entity_exists(targeting.target_entity):
            return None
        return targeting.target_entity

    def object_id(self, actor: int) -> int | None:
        info = self._component(actor, Actor)
        return info.object_id if info is not None else None

    def job_id(self, actor: int) -> int:
        job = self._component(actor, Job)
        return job.job_id if job is not None else 0

    def job_level(self, actor: int) -> int:
        job = self._component(actor, Job)
        return job.level if job is not None else 0

    def distance(self, actor: int, target: int) -> float | None:
        origin = self._component(actor, Position)
        destination = self._component(target, Position)
        if origin is None or destination is None:
            return None
        centre = math.hypot(destination.x - origin.x, destination.y - origin.y)
        return max(0.0, centre - origin.hitbox_radius - destination.hitbox_radius)

    def effects(self, actor: int) -> Sequence[EffectInstance] | None:
        info = self._component(actor, Actor)
        if info is None or not info.battle_capable:
            return None
        effect_list = self._component(actor, EffectList)
        if effect_list is None:
            return ()
        snapshots: list[EffectInstance] = []
        for effect_entity in effect_list.effect_entities:
            status = self._component(effect_entity, StatusEffect)
            if status is None:
                continue
            snapshots.append(
                EffectInstance(
                    effect_id=status.effect_id,
                    owner=actor,
                    source_id=status.source_id,
                    remaining=status.remaining,
                    stacks=status.stacks,
                )
            )
        return tuple(snapshots)

    def cooldown(self, ability_id: int) -> CooldownState | None:
        for _, recast in self.world.get_component(AbilityCooldown):
            if recast.ability_id != ability_id:
                continue
            return CooldownState(
                ability_id=ability_id,
                is_on_cooldown=recast.remaining > 0,
                remaining=max(0.0, recast.remaining),
                total=recast.total,
                charges=recast.charges,
                max_charges=recast.max_charges,
            )
        return None

    def can_weave(self, ability_id: int, weave_time: float = DEFAULT_WEAVE_TIME) -> bool:
        recast = self.cooldown(ability_id)
        if recast is None:
            return False
        return recast.remaining > weave_time

    def gauge(self, job_id: int) -> Mapping[str, float]:
        player = self.local_player()
        if player is None:
            return {}
        for _, gauge in self.world.get_component(JobGauge):
            if gauge.job_id == job_id:
                return dict(gauge.values)
        return {}

    def condition(self, flag: str) -> bool:
        for _, conditions in self.world.get_component(CombatConditions):
            return flag in conditions.flags
        return False

    def pet_present(self) -> bool:
        return any(buddy.present for _, buddy in self.world.get_component(PetBuddy))

    def original_hook(self, ability_id: int) -> int:
        for _, replacements in self.world.get_component(ActionReplacements):
            return replacements.mapping.get(ability_id, ability_id)
        return ability_id

    def target_interruptible(self) -> bool:
        target = self.current_target()
        if target is None:
            return False
        cast = self._component(target, CastBar)
        if cast is None:
            return False
        return cast.interruptible and cast.remaining > 0

    def _component(self, entity: int, component_type):
        try:
            return self.world.component_for_entity(entity, component_type)
        except KeyError:
            return None
