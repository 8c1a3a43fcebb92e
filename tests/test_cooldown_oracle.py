from combo_engine.cooldowns.oracle import CooldownOracle, CooldownState
from combo_engine.utils.combat_state import WorldCombatState
from combo_engine.world import create_world, set_cooldown

FIGHT_OR_FLIGHT = 20
INTERVENE = 16461


def _oracle(world):
    return CooldownOracle(WorldCombatState(world))


def test_untracked_ability_is_ready():
    oracle = _oracle(create_world())

    state = oracle.get_cooldown(FIGHT_OR_FLIGHT)
    assert state == CooldownState(ability_id=FIGHT_OR_FLIGHT)
    assert oracle.is_off_cooldown(FIGHT_OR_FLIGHT)
    assert oracle.can_use(FIGHT_OR_FLIGHT)
    assert oracle.remaining(FIGHT_OR_FLIGHT) == 0.0


def test_recasting_ability_cannot_be_used():
    world = create_world()
    set_cooldown(world, FIGHT_OR_FLIGHT, 42.0, total=60.0)
    oracle = _oracle(world)

    assert oracle.is_on_cooldown(FIGHT_OR_FLIGHT)
    assert not oracle.can_use(FIGHT_OR_FLIGHT)
    assert oracle.remaining(FIGHT_OR_FLIGHT) == 42.0
    assert oracle.get_cooldown(FIGHT_OR_FLIGHT).total == 60.0


def test_banked_charge_keeps_ability_usable():
    world = create_world()
    set_cooldown(world, INTERVENE, 12.0, total=30.0, charges=1, max_charges=2)
    oracle = _oracle(world)

    assert oracle.is_on_cooldown(INTERVENE)
    assert oracle.can_use(INTERVENE)


def test_expired_recast_reads_as_off_cooldown():
    world = create_world()
    set_cooldown(world, FIGHT_OR_FLIGHT, 5.0)
    set_cooldown(world, FIGHT_OR_FLIGHT, 0.0, total=60.0)

    assert _oracle(world).is_off_cooldown(FIGHT_OR_FLIGHT)
