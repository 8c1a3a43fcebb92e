from dataclasses import dataclass


@dataclass(slots=True)
class StatusEffect:
    """A buff or debuff currently applied to ``owner_entity``.

    ``source_id`` is the game object id of whoever applied the effect; 0 when
    the game does not know.
    """

    effect_id: int
    owner_entity: int
    source_id: int = 0
    remaining: float = 0.0
    stacks: int = 0
