from __future__ import annotations

from combo_engine.config.engine_config import EngineConfig
from combo_engine.config.store import ConfigStore
from combo_engine.events.bus import CONFIG_MUTATION_EVENTS, EventBus


class ConfigPersistenceSystem:
    """Saves the configuration after every enable/disable/parameter/preference change.

    The kill-switch is not among the watched events; it lasts for the
    session only.
    """

    def __init__(self, config: EngineConfig, event_bus: EventBus, store: ConfigStore) -> None:
        self.config = config
        self.event_bus = event_bus
        self.store = store
        for name in CONFIG_MUTATION_EVENTS:
            event_bus.subscribe(name, self.on_config_changed)

    def on_config_changed(self, sender, **payload) -> None:
        self.store.save(self.config)

    def close(self) -> None:
        for name in CONFIG_MUTATION_EVENTS:
            self.event_bus.unsubscribe(name, self.on_config_changed)
