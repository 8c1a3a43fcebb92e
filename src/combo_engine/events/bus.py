from typing import Callable, Dict

from blinker import Signal


class EventBus:
    """Named blinker signals shared by the configuration layer and its listeners.

    Handlers receive the bus as ``sender`` plus the event payload as keyword
    arguments.
    """

    def __init__(self) -> None:
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn: Callable[..., None]) -> None:
        sig = self._signals.setdefault(name, Signal(name))
        # Strong reference: systems are often created without being kept in a variable.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn: Callable[..., None]) -> None:
        sig = self._signals.get(name)
        if sig is not None:
            sig.disconnect(fn)

    def emit(self, name: str, /, **payload) -> None:
        sig = self._signals.get(name)
        if sig is not None:
            sig.send(self, **payload)


# ============================================================================
# RULE-SET ENABLEMENT
# ============================================================================
EVENT_RULESET_ENABLED = "ruleset_enabled"      # payload: ruleset=RuleSetID, removed=tuple[RuleSetID], parents=tuple[RuleSetID]
EVENT_RULESET_DISABLED = "ruleset_disabled"    # payload: ruleset=RuleSetID


# ============================================================================
# PARAMETERS & PREFERENCES
# ============================================================================
EVENT_PARAMETER_CHANGED = "parameter_changed"      # payload: ruleset=RuleSetID, name=str, value=int|float
EVENT_PREFERENCE_CHANGED = "preference_changed"    # payload: name=str, value=bool


# ============================================================================
# WHOLE-CONFIGURATION CHANGES
# ============================================================================
EVENT_CONFIG_RESET = "config_reset"                  # payload: (none)
EVENT_CONFIG_SAVED = "config_saved"                  # payload: path=pathlib.Path
EVENT_KILL_SWITCH_CHANGED = "kill_switch_changed"    # payload: active=bool

# Events after which the persisted configuration is stale.
CONFIG_MUTATION_EVENTS = (
    EVENT_RULESET_ENABLED,
    EVENT_RULESET_DISABLED,
    EVENT_PARAMETER_CHANGED,
    EVENT_PREFERENCE_CHANGED,
    EVENT_CONFIG_RESET,
)
