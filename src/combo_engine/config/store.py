from __future__ import annotations

import json
import logging
import math
import os
import tempfile
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Any

from combo_engine.config.engine_config import EngineConfig
from combo_engine.constants import CONFIG_VERSION
from combo_engine.events.bus import EVENT_CONFIG_SAVED, EventBus

if TYPE_CHECKING:
    from combo_engine.rulesets.ids import RuleSetID
    from combo_engine.rulesets.registry import RuleSetRegistry

log = logging.getLogger("combo.store")


class ConfigLoadError(ValueError):
    """The configuration file exists but cannot be understood."""


def _section(document: dict[str, Any], key: str, kind: type, default: Any) -> Any:
    value = document.get(key)
    if value is None:
        return default
    if not isinstance(value, kind):
        raise ConfigLoadError(f"Configuration entry '{key}' must be a {kind.__name__}, not {type(value).__name__}")
    return value


class ConfigStore:
    """Reads and writes an ``EngineConfig`` as a JSON document.

    Rule-sets and parameters are stored by name so renumbering ids never
    corrupts a saved file. Entries the registry no longer knows are skipped
    with a warning. Saves are serialized; each one stages into its own
    temporary file before replacing the target.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._save_lock = threading.Lock()

    def load(self, registry: RuleSetRegistry, event_bus: EventBus | None = None) -> EngineConfig:
        config = EngineConfig(registry, event_bus)
        if not self.path.exists():
            log.info("No configuration at %s, using defaults", self.path)
            return config
        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigLoadError(f"Cannot read configuration {self.path}: {exc}") from exc
        if not isinstance(document, dict):
            raise ConfigLoadError(f"Configuration {self.path} is not a JSON object")
        self.apply(config, document)
        log.info("Loaded configuration from %s (%d enabled)", self.path, len(config.enabled()))
        return config

    def apply(self, config: EngineConfig, document: dict[str, Any]) -> None:
        version = document.get("version", CONFIG_VERSION)
        if version != CONFIG_VERSION:
            log.warning("Configuration version %s differs from %s; reading what is recognisable", version, CONFIG_VERSION)

        enabled_names = _section(document, "enabled", list, [])
        parameter_groups = _section(document, "parameters", dict, {})
        preferences = _section(document, "preferences", dict, {})

        registry = config.registry
        enabled: list[RuleSetID] = []
        for name in enabled_names:
            if not isinstance(name, str):
                log.warning("Ignoring non-string rule-set entry %r", name)
                continue
            try:
                enabled.append(registry.by_name(name))
            except KeyError:
                log.warning("Ignoring unknown rule-set '%s'", name)

        parameters: dict[tuple[RuleSetID, str], float] = {}
        for ruleset_name, values in parameter_groups.items():
            try:
                ruleset = registry.by_name(ruleset_name)
            except KeyError:
                log.warning("Ignoring parameters for unknown rule-set '%s'", ruleset_name)
                continue
            if not isinstance(values, dict):
                log.warning("Ignoring parameters for '%s': expected an object", ruleset_name)
                continue
            for name, value in values.items():
                try:
                    registry.setting(ruleset, name)
                except KeyError:
                    log.warning("Ignoring unknown parameter '%s.%s'", ruleset_name, name)
                    continue
                if not isinstance(value, (int, float)) or isinstance(value, bool) or math.isnan(value):
                    log.warning("Ignoring non-numeric parameter '%s.%s'", ruleset_name, name)
                    continue
                parameters[(ruleset, name)] = value

        config.restore(enabled, parameters, preferences)

    def dump(self, config: EngineConfig) -> dict[str, Any]:
        parameters: dict[str, dict[str, int | float]] = {}
        for (ruleset, name), value in config.parameters().items():
            parameters.setdefault(ruleset.name, {})[name] = value
        return {
            "version": CONFIG_VERSION,
            "enabled": [ruleset.name for ruleset in sorted(config.enabled())],
            "parameters": parameters,
            "preferences": config.preferences(),
        }

    def save(self, config: EngineConfig) -> None:
        with self._save_lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as staging:
                json.dump(self.dump(config), staging, indent=2)
            try:
                os.replace(staging.name, self.path)
            except OSError:
                os.unlink(staging.name)
                raise
        log.info("Saved configuration to %s", self.path)
        config.event_bus.emit(EVENT_CONFIG_SAVED, path=self.path)
