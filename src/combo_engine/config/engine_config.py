from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Iterable, Mapping

from combo_engine.events.bus import (
    EVENT_CONFIG_RESET,
    EVENT_KILL_SWITCH_CHANGED,
    EVENT_PARAMETER_CHANGED,
    EVENT_PREFERENCE_CHANGED,
    EVENT_RULESET_DISABLED,
    EVENT_RULESET_ENABLED,
    EventBus,
)
from combo_engine.rulesets.ids import RuleSetID

if TYPE_CHECKING:
    from combo_engine.rulesets.registry import RuleSetRegistry

log = logging.getLogger("combo.config")

PREFERENCE_DEFAULTS: dict[str, bool] = {
    "hide_disabled_children": False,
    "compact_display": False,
    "show_update_message": True,
}


class EngineConfig:
    """Enabled rule-sets, their parameters, and the global kill-switch.

    Mutations are serialized by a lock and publish fresh immutable snapshots,
    so ``resolve`` can read without locking. Every mutation re-asserts the
    conflict invariant and is announced on the event bus.
    """

    def __init__(self, registry: RuleSetRegistry, event_bus: EventBus | None = None) -> None:
        self.registry = registry
        self.event_bus = event_bus or EventBus()
        self._lock = threading.Lock()
        self._enabled: frozenset[RuleSetID] = frozenset()
        self._parameters: Mapping[tuple[RuleSetID, str], int | float] = {}
        self._preferences: Mapping[str, bool] = dict(PREFERENCE_DEFAULTS)
        # Session only; every launch starts active.
        self._active = True

    # --- Reads ---

    @property
    def active(self) -> bool:
        return self._active

    @active.setter
    def active(self, value: bool) -> None:
        value = bool(value)
        if value == self._active:
            return
        self._active = value
        log.info("Action replacement %s", "enabled" if value else "disabled")
        self.event_bus.emit(EVENT_KILL_SWITCH_CHANGED, active=value)

    def enabled(self) -> frozenset[RuleSetID]:
        return self._enabled

    def is_enabled(self, ruleset: RuleSetID) -> bool:
        if self.registry.get(ruleset).always_enabled:
            return True
        return ruleset in self._enabled

    def is_active(self, ruleset: RuleSetID) -> bool:
        """Enabled, and so is every ancestor in the parent chain."""

        enabled = self._enabled
        for link in (ruleset, *self.registry.ancestors(ruleset)):
            if not self.registry.get(link).always_enabled and link not in enabled:
                return False
        return True

    def parameter(self, ruleset: RuleSetID, name: str) -> int | float:
        setting = self.registry.setting(ruleset, name)
        value = self._parameters.get((ruleset, name))
        if value is None:
            return setting.coerce(setting.default)
        return value

    def parameters(self) -> dict[tuple[RuleSetID, str], int | float]:
        return {
            (setting.ruleset, setting.name): self.parameter(setting.ruleset, setting.name)
            for setting in self.registry.settings()
        }

    def preference(self, name: str) -> bool:
        try:
            return self._preferences[name]
        except KeyError as exc:
            raise KeyError(f"Unknown preference '{name}'") from exc

    def preferences(self) -> dict[str, bool]:
        return dict(self._preferences)

    # --- Mutations ---

    def enable(self, ruleset: RuleSetID) -> frozenset[RuleSetID]:
        """Enable ``ruleset`` and its ancestors, dropping whatever conflicts with them.

        Returns the rule-sets that were disabled as a consequence.
        """

        self.registry.get(ruleset)
        with self._lock:
            enabled = set(self._enabled)
            removed = self._add_with_conflicts(enabled, ruleset)
            parents: list[RuleSetID] = []
            for ancestor in self.registry.ancestors(ruleset):
                if ancestor in enabled:
                    continue
                removed |= self._add_with_conflicts(enabled, ancestor)
                parents.append(ancestor)
            self._enabled = frozenset(enabled)
        log.debug("Enabled %s (parents: %s, removed: %s)", ruleset.name, parents, sorted(removed))
        self.event_bus.emit(
            EVENT_RULESET_ENABLED,
            ruleset=ruleset,
            removed=tuple(sorted(removed)),
            parents=tuple(parents),
        )
        return frozenset(removed)

    def _add_with_conflicts(self, enabled: set[RuleSetID], ruleset: RuleSetID) -> set[RuleSetID]:
        conflicts = self.registry.conflicts_of(ruleset)
        removed = enabled & conflicts
        enabled -= conflicts
        enabled.add(ruleset)
        return removed

    def disable(self, ruleset: RuleSetID) -> None:
        """Disable ``ruleset`` only; descendants keep their own stored state."""

        self.registry.get(ruleset)
        with self._lock:
            self._enabled = self._enabled - {ruleset}
        log.debug("Disabled %s", ruleset.name)
        self.event_bus.emit(EVENT_RULESET_DISABLED, ruleset=ruleset)

    def set_enabled(self, ruleset: RuleSetID, value: bool) -> None:
        if value:
            self.enable(ruleset)
        else:
            self.disable(ruleset)

    def set_parameter(self, ruleset: RuleSetID, name: str, value: float) -> int | float:
        """Store ``value`` clamped to the setting's range; returns what was stored."""

        setting = self.registry.setting(ruleset, name)
        coerced = setting.coerce(value)
        with self._lock:
            parameters = dict(self._parameters)
            parameters[(ruleset, name)] = coerced
            self._parameters = parameters
        if coerced != value:
            log.debug("Clamped %s.%s from %r to %r", ruleset.name, name, value, coerced)
        self.event_bus.emit(EVENT_PARAMETER_CHANGED, ruleset=ruleset, name=name, value=coerced)
        return coerced

    def set_preference(self, name: str, value: bool) -> None:
        if name not in PREFERENCE_DEFAULTS:
            raise KeyError(f"Unknown preference '{name}'")
        with self._lock:
            preferences = dict(self._preferences)
            preferences[name] = bool(value)
            self._preferences = preferences
        self.event_bus.emit(EVENT_PREFERENCE_CHANGED, name=name, value=bool(value))

    def reset(self) -> None:
        """Back to defaults: nothing enabled, default parameters and preferences."""

        with self._lock:
            self._enabled = frozenset()
            self._parameters = {}
            self._preferences = dict(PREFERENCE_DEFAULTS)
        log.info("Configuration reset to defaults")
        self.event_bus.emit(EVENT_CONFIG_RESET)

    def restore(
        self,
        enabled: Iterable[RuleSetID],
        parameters: Mapping[tuple[RuleSetID, str], float] | None = None,
        preferences: Mapping[str, bool] | None = None,
    ) -> None:
        """Install persisted state without announcing it.

        Stored rule-sets are taken in order; one that conflicts with an
        earlier entry is dropped. Parameters are clamped into range.
        """

        accepted: set[RuleSetID] = set()
        for ruleset in enabled:
            clash = accepted & self.registry.conflicts_of(ruleset)
            if clash:
                log.warning(
                    "Dropping %s: conflicts with %s",
                    ruleset.name,
                    ", ".join(sorted(other.name for other in clash)),
                )
                continue
            accepted.add(ruleset)

        coerced: dict[tuple[RuleSetID, str], int | float] = {}
        for (ruleset, name), value in (parameters or {}).items():
            coerced[(ruleset, name)] = self.registry.setting(ruleset, name).coerce(value)

        merged = dict(PREFERENCE_DEFAULTS)
        for name, value in (preferences or {}).items():
            if name in merged:
                merged[name] = bool(value)

        with self._lock:
            self._enabled = frozenset(accepted)
            self._parameters = coerced
            self._preferences = merged
