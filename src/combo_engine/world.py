from __future__ import annotations

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

PLAYER_OBJECT_ID = 0x1000_0001
TARGET_OBJECT_ID = 0x4000_0001


def create_world(
    *,
    job_id: int | None = 19,
    level: int = 90,
    with_target: bool = True,
    target_distance: float = 0.0,
) -> World:
    """Build a combat snapshot world with a local player and an optional target.

    ``job_id=None`` leaves the world without a local player (logged out).
    ``target_distance`` is measured edge to edge, like the game reports it.
    """

    world = World()

    # Global client state lives on a single entity.
    world.create_entity(CombatConditions(), PetBuddy(), ActionReplacements())

    if job_id is None:
        return world

    player = world.create_entity(
        LocalPlayer(),
        Actor(object_id=PLAYER_OBJECT_ID, name="Player"),
        Job(job_id=job_id, level=level),
        Position(),
        EffectList(),
        CurrentTarget(),
    )
    if with_target:
        target = world.create_entity(
            Actor(object_id=TARGET_OBJECT_ID, name="Striking Dummy"),
            Position(x=target_distance + 1.0),
            EffectList(),
        )
        world.component_for_entity(player, CurrentTarget).target_entity = target
    return world


def local_player(world: World) -> int | None:
    for entity, _ in world.get_component(LocalPlayer):
        return entity
    return None


def current_target(world: World) -> int | None:
    player = local_player(world)
    if player is None:
        return None
    return world.component_for_entity(player, CurrentTarget).target_entity


def apply_status(
    world: World,
    owner_entity: int,
    effect_id: int,
    *,
    remaining: float = 30.0,
    stacks: int = 0,
    source_id: int = 0,
) -> int:
    """Attach a status to ``owner_entity`` and return the status entity."""

    try:
        effect_list = world.component_for_entity(owner_entity, EffectList)
    except KeyError:
        effect_list = EffectList()
        world.add_component(owner_entity, effect_list)
    effect_entity = world.create_entity(
        StatusEffect(
            effect_id=effect_id,
            owner_entity=owner_entity,
            source_id=source_id,
            remaining=remaining,
            stacks=stacks,
        )
    )
    effect_list.effect_entities.append(effect_entity)
    return effect_entity


def remove_status(world: World, owner_entity: int, effect_id: int) -> None:
    try:
        effect_list = world.component_for_entity(owner_entity, EffectList)
    except KeyError:
        return
    for effect_entity in list(effect_list.effect_entities):
        try:
            status = world.component_for_entity(effect_entity, StatusEffect)
        except KeyError:
            effect_list.effect_entities.remove(effect_entity)
            continue
        if status.effect_id != effect_id:
            continue
        effect_list.effect_entities.remove(effect_entity)
        world.delete_entity(effect_entity, immediate=True)


def set_cooldown(
    world: World,
    ability_id: int,
    remaining: float,
    *,
    total: float | None = None,
    charges: int = 0,
    max_charges: int = 0,
) -> AbilityCooldown:
    """Create or update the recast state tracked for ``ability_id``."""

    for _, recast in world.get_component(AbilityCooldown):
        if recast.ability_id == ability_id:
            break
    else:
        recast = AbilityCooldown(ability_id=ability_id)
        world.create_entity(recast)
    recast.remaining = remaining
    recast.total = remaining if total is None else total
    recast.charges = charges
    recast.max_charges = max_charges
    return recast


def set_gauge(world: World, job_id: int, **values: float) -> JobGauge:
    player = local_player(world)
    if player is None:
        raise ValueError("Cannot set a job gauge without a local player")
    for _, gauge in world.get_component(JobGauge):
        if gauge.job_id == job_id:
            gauge.values.update(values)
            return gauge
    gauge = JobGauge(job_id=job_id, values=dict(values))
    world.add_component(player, gauge)
    return gauge


def set_replacement(world: World, ability_id: int, replacement: int) -> None:
    for _, replacements in world.get_component(ActionReplacements):
        replacements.mapping[ability_id] = replacement
        return


def set_condition(world: World, flag: str, value: bool = True) -> None:
    for _, conditions in world.get_component(CombatConditions):
        if value:
            conditions.flags.add(flag)
        else:
            conditions.flags.discard(flag)
        return


def set_pet_present(world: World, present: bool = True) -> None:
    for _, buddy in world.get_component(PetBuddy):
        buddy.present = present
        return


def start_cast(world: World, actor: int, ability_id: int, *, remaining: float = 2.0, interruptible: bool = True) -> None:
    try:
        cast = world.component_for_entity(actor, CastBar)
    except KeyError:
        world.add_component(actor, CastBar(ability_id, remaining, interruptible))
        return
    cast.ability_id = ability_id
    cast.remaining = remaining
    cast.interruptible = interruptible
