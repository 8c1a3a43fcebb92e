from dataclasses import dataclass


@dataclass(slots=True)
class CurrentTarget:
    target_entity: int | None = None
