from __future__ import annotations

from dataclasses import dataclass

from combo_engine.constants import ALWAYS_ENABLED_BELOW, job_name
from combo_engine.rulesets.ids import RuleSetID


@dataclass(frozen=True, slots=True)
class RuleSetDescriptor:
    """Static description of a rule-set.

    The descriptor names the job that owns the rule-set, the ability ids it
    claims, and how it relates to other rule-sets. ``parent`` must be enabled
    for this rule-set to ever run; ``conflicts`` can never be enabled at the
    same time as this one. Deprecated rule-sets may point at the
    ``alternatives`` that replace them.
    """

    ruleset: RuleSetID
    job: int
    label: str
    description: str = ""
    claims: tuple[int, ...] = ()
    order: int = 0
    parent: RuleSetID | None = None
    conflicts: tuple[RuleSetID, ...] = ()
    deprecated: bool = False
    alternatives: tuple[RuleSetID, ...] = ()
    dangerous: bool = False
    experimental: bool = False

    @property
    def name(self) -> str:
        return self.ruleset.name

    @property
    def job_name(self) -> str:
        return job_name(self.job)

    @property
    def always_enabled(self) -> bool:
        return int(self.ruleset) < ALWAYS_ENABLED_BELOW
