from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal

from combo_engine.rulesets.ids import RuleSetID


@dataclass(frozen=True, slots=True)
class DetailSetting:
    """A tunable numeric parameter attached to exactly one rule-set.

    Both bounds are inclusive. ``kind`` decides whether stored values are
    ints or floats; floats are rounded to ``precision`` decimal places.
    """

    ruleset: RuleSetID
    name: str
    label: str
    description: str = ""
    minimum: float = 0
    maximum: float = 0
    default: float = 0
    kind: Literal["int", "float"] = "float"
    precision: int = 1

    def __post_init__(self) -> None:
        if self.minimum > self.maximum:
            raise ValueError(f"Setting '{self.name}' has minimum above maximum")
        if not self.minimum <= self.default <= self.maximum:
            raise ValueError(f"Setting '{self.name}' default is outside its range")

    def coerce(self, value: float) -> int | float:
        """Round to precision and clamp into ``[minimum, maximum]``.

        The bounds win over precision: a value rounded past a bound is
        pulled back onto it.
        """

        number = float(value)
        if math.isnan(number):
            raise ValueError(f"Setting '{self.name}' cannot be NaN")
        # Infinities cannot be rounded; bring them into range first.
        number = min(max(number, self.minimum), self.maximum)
        if self.kind == "int":
            return int(min(max(round(number), math.ceil(self.minimum)), math.floor(self.maximum)))
        return float(min(max(round(number, self.precision), self.minimum), self.maximum))
