from dataclasses import dataclass


@dataclass(slots=True)
class LocalPlayer:
    """Marker for the entity controlled by this client."""
