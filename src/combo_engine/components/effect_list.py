from dataclasses import dataclass, field


@dataclass(slots=True)
class EffectList:
    """Holds references to status effect entities on an actor, in game order."""

    effect_entities: list[int] = field(default_factory=list)
