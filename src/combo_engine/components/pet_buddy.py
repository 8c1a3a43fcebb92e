from dataclasses import dataclass


@dataclass(slots=True)
class PetBuddy:
    present: bool = False
