from dataclasses import dataclass, field


@dataclass(slots=True)
class ActionReplacements:
    """The game's own upgrade hook: base ability id -> id it currently becomes.

    Abilities absent from ``mapping`` are not upgraded.
    """

    mapping: dict[int, int] = field(default_factory=dict)
