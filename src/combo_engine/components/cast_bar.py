from dataclasses import dataclass


@dataclass(slots=True)
class CastBar:
    ability_id: int = 0
    remaining: float = 0.0
    interruptible: bool = False
