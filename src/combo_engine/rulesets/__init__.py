from combo_engine.rulesets.base import DecisionContext, RuleSet
from combo_engine.rulesets.descriptor import RuleSetDescriptor
from combo_engine.rulesets.ids import RuleSetID

__all__ = [
    "DecisionContext",
    "RuleSet",
    "RuleSetDescriptor",
    "RuleSetID",
]
