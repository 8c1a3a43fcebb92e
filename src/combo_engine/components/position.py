from dataclasses import dataclass


@dataclass(slots=True)
class Position:
    """World position on the ground plane (x, y) plus height and hitbox radius."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    hitbox_radius: float = 0.5
