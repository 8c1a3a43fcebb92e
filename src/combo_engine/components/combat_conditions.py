from dataclasses import dataclass, field


@dataclass(slots=True)
class CombatConditions:
    """Singleton component holding the client condition flags that are set."""

    flags: set[str] = field(default_factory=set)
