from dataclasses import dataclass


@dataclass(slots=True)
class Actor:
    """A combatant as the game reports it.

    Fields:
      object_id: Game object id, used to match the source of effects.
      name: Display name.
      battle_capable: False for objects that never carry statuses (NPCs, markers).
    """

    object_id: int
    name: str = ""
    battle_capable: bool = True
