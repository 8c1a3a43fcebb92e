from __future__ import annotations

import logging
from importlib import metadata
from typing import Dict, Iterable

from combo_engine.config.settings import DetailSetting
from combo_engine.constants import ROLE_GROUP_PREFIX
from combo_engine.rulesets.base import RuleSet
from combo_engine.rulesets.descriptor import RuleSetDescriptor
from combo_engine.rulesets.ids import RuleSetID

log = logging.getLogger("combo.registry")

_PLUGIN_GROUP = "combo_engine.rulesets"


class RuleSetRegistry:
    """Catalog of rule-set descriptors, their decision units and parameters.

    Populated once, then frozen by ``validate``; after that every query is
    read-only and safe to share between threads.
    """

    def __init__(self) -> None:
        self._descriptors: dict[RuleSetID, RuleSetDescriptor] = {}
        self._rulesets: list[RuleSet] = []
        self._settings: dict[tuple[RuleSetID, str], DetailSetting] = {}
        self._claimants: dict[int, tuple[RuleSet, ...]] = {}
        self._children: dict[RuleSetID, tuple[RuleSetID, ...]] = {}
        self._conflicts: dict[RuleSetID, frozenset[RuleSetID]] = {}
        self._frozen = False

    # --- Registration ---

    def register(self, descriptor: RuleSetDescriptor) -> None:
        self._ensure_mutable()
        if descriptor.ruleset in self._descriptors:
            raise ValueError(f"Rule-set '{descriptor.name}' already registered")
        self._descriptors[descriptor.ruleset] = descriptor

    def register_ruleset(self, ruleset: RuleSet) -> None:
        """Register a decision unit together with its descriptor."""

        self.register(ruleset.descriptor)
        self._rulesets.append(ruleset)

    def register_setting(self, setting: DetailSetting) -> None:
        self._ensure_mutable()
        key = (setting.ruleset, setting.name)
        if key in self._settings:
            raise ValueError(f"Setting '{setting.name}' already registered for '{setting.ruleset.name}'")
        self._settings[key] = setting

    def validate(self) -> None:
        """Check every cross-reference and freeze the registry."""

        for descriptor in self._descriptors.values():
            related = [descriptor.parent] if descriptor.parent is not None else []
            related.extend(descriptor.conflicts)
            related.extend(descriptor.alternatives)
            for other in related:
                if other not in self._descriptors:
                    raise ValueError(f"Rule-set '{descriptor.name}' refers to unknown rule-set '{other!r}'")
            self._check_parent_chain(descriptor)
        for ruleset, name in self._settings:
            if ruleset not in self._descriptors:
                raise ValueError(f"Setting '{name}' refers to unknown rule-set '{ruleset!r}'")

        conflicts: dict[RuleSetID, set[RuleSetID]] = {ruleset: set() for ruleset in self._descriptors}
        for descriptor in self._descriptors.values():
            for other in descriptor.conflicts:
                conflicts[descriptor.ruleset].add(other)
                conflicts[other].add(descriptor.ruleset)
        for ruleset, others in conflicts.items():
            lineage = set(self._lineage(ruleset))
            for other in others:
                if other in lineage or ruleset in self._lineage(other):
                    raise ValueError(
                        f"Rule-set '{ruleset.name}' cannot conflict with its own ancestor or descendant '{other.name}'"
                    )
        self._conflicts = {ruleset: frozenset(others) for ruleset, others in conflicts.items()}

        children: dict[RuleSetID, list[RuleSetDescriptor]] = {}
        for descriptor in self._descriptors.values():
            if descriptor.parent is not None:
                children.setdefault(descriptor.parent, []).append(descriptor)
        self._children = {
            parent: tuple(child.ruleset for child in sorted(kids, key=lambda d: d.order))
            for parent, kids in children.items()
        }

        claimants: dict[int, list[RuleSet]] = {}
        for ruleset in self._rulesets:
            for ability_id in ruleset.descriptor.claims:
                claimants.setdefault(ability_id, []).append(ruleset)
        self._claimants = {ability_id: tuple(found) for ability_id, found in claimants.items()}
        self._frozen = True

    def _check_parent_chain(self, descriptor: RuleSetDescriptor) -> None:
        seen = {descriptor.ruleset}
        parent = descriptor.parent
        while parent is not None:
            if parent in seen:
                raise ValueError(f"Rule-set '{descriptor.name}' has a cyclic parent chain")
            seen.add(parent)
            parent = self._descriptors[parent].parent

    def _ensure_mutable(self) -> None:
        if self._frozen:
            raise RuntimeError("Rule-set registry is frozen")

    # --- Queries ---

    def get(self, ruleset: RuleSetID) -> RuleSetDescriptor:
        try:
            return self._descriptors[ruleset]
        except KeyError as exc:
            raise KeyError(f"Rule-set '{ruleset!r}' is not registered") from exc

    def has(self, ruleset: RuleSetID) -> bool:
        return ruleset in self._descriptors

    def by_name(self, name: str) -> RuleSetID:
        for ruleset in self._descriptors:
            if ruleset.name == name:
                return ruleset
        raise KeyError(f"Rule-set '{name}' is not registered")

    def descriptors(self) -> tuple[RuleSetDescriptor, ...]:
        return tuple(self._descriptors.values())

    def rulesets(self) -> tuple[RuleSet, ...]:
        """Decision units in declaration order."""
        return tuple(self._rulesets)

    def claimants(self, ability_id: int) -> tuple[RuleSet, ...]:
        """Decision units claiming ``ability_id``, in declaration order."""
        return self._claimants.get(ability_id, ())

    def parent_of(self, ruleset: RuleSetID) -> RuleSetID | None:
        return self.get(ruleset).parent

    def ancestors(self, ruleset: RuleSetID) -> tuple[RuleSetID, ...]:
        return self._lineage(ruleset)[1:]

    def _lineage(self, ruleset: RuleSetID) -> tuple[RuleSetID, ...]:
        chain = [ruleset]
        parent = self._descriptors[ruleset].parent
        while parent is not None:
            chain.append(parent)
            parent = self._descriptors[parent].parent
        return tuple(chain)

    def children_of(self, ruleset: RuleSetID) -> tuple[RuleSetID, ...]:
        return self._children.get(ruleset, ())

    def conflicts_of(self, ruleset: RuleSetID) -> frozenset[RuleSetID]:
        return self._conflicts.get(ruleset, frozenset())

    def settings_for(self, ruleset: RuleSetID) -> tuple[DetailSetting, ...]:
        found = [setting for (owner, _), setting in self._settings.items() if owner == ruleset]
        return tuple(sorted(found, key=lambda setting: setting.label))

    def settings(self) -> tuple[DetailSetting, ...]:
        return tuple(self._settings.values())

    def setting(self, ruleset: RuleSetID, name: str) -> DetailSetting:
        try:
            return self._settings[(ruleset, name)]
        except KeyError as exc:
            raise KeyError(f"Rule-set '{ruleset!r}' has no setting '{name}'") from exc

    # --- Display ---

    def grouped_by_job(self) -> Dict[str, list[RuleSetDescriptor]]:
        """Visible descriptors grouped by job name, jobs first and role groups last."""

        groups: dict[str, list[RuleSetDescriptor]] = {}
        for descriptor in self._descriptors.values():
            if descriptor.always_enabled:
                continue
            groups.setdefault(descriptor.job_name, []).append(descriptor)
        jobs = sorted(name for name in groups if not name.startswith(ROLE_GROUP_PREFIX))
        roles = sorted(name for name in groups if name.startswith(ROLE_GROUP_PREFIX))
        return {name: sorted(groups[name], key=lambda d: d.order) for name in jobs + roles}

    def display_ordinals(self) -> dict[RuleSetID, int]:
        """Number every visible rule-set, each parent directly followed by its subtree."""

        ordinals: dict[RuleSetID, int] = {}

        def _visit(ruleset: RuleSetID) -> None:
            if ruleset not in ordinals:
                ordinals[ruleset] = len(ordinals) + 1
                log.debug("Indexed %s as %d", ruleset.name, ordinals[ruleset])
            for child in self.children_of(ruleset):
                _visit(child)

        for descriptors in self.grouped_by_job().values():
            for descriptor in descriptors:
                if descriptor.parent is not None:
                    continue
                _visit(descriptor.ruleset)
        return ordinals


def _builtin_registry_entries() -> tuple[Iterable[RuleSet], Iterable[RuleSetDescriptor], Iterable[DetailSetting]]:
    from combo_engine.rulesets import paladin, warrior

    rulesets = [*paladin.RULESETS, *warrior.RULESETS]
    features = [*paladin.FEATURES, *warrior.FEATURES]
    settings = [*paladin.SETTINGS, *warrior.SETTINGS]
    return rulesets, features, settings


def _populate(
    registry: RuleSetRegistry,
    rulesets: Iterable[RuleSet],
    features: Iterable[RuleSetDescriptor],
    settings: Iterable[DetailSetting],
) -> None:
    for ruleset in rulesets:
        registry.register_ruleset(ruleset)
    for descriptor in features:
        registry.register(descriptor)
    for setting in settings:
        registry.register_setting(setting)


def _load_entry_point_packs(registry: RuleSetRegistry) -> None:
    try:
        entry_points = metadata.entry_points()
    except Exception:
        log.warning("Could not enumerate rule-set plugins", exc_info=True)
        return
    for entry_point in entry_points.select(group=_PLUGIN_GROUP):
        try:
            pack = entry_point.load()
        except Exception:
            log.warning("Skipping rule-set plugin %s", entry_point.name, exc_info=True)
            continue
        if callable(pack):
            pack = pack()
        _populate(
            registry,
            getattr(pack, "RULESETS", ()),
            getattr(pack, "FEATURES", ()),
            getattr(pack, "SETTINGS", ()),
        )
        log.info("Loaded rule-set plugin %s", entry_point.name)


def create_registry(
    rulesets: Iterable[RuleSet] = (),
    features: Iterable[RuleSetDescriptor] = (),
    settings: Iterable[DetailSetting] = (),
) -> RuleSetRegistry:
    """Build and freeze a registry from explicit entries."""

    registry = RuleSetRegistry()
    _populate(registry, rulesets, features, settings)
    registry.validate()
    return registry


def create_default_registry(*, load_plugins: bool = False) -> RuleSetRegistry:
    """Built-in job rule-sets, optionally extended by installed plugin packs."""

    registry = RuleSetRegistry()
    _populate(registry, *_builtin_registry_entries())
    if load_plugins:
        _load_entry_point_packs(registry)
    registry.validate()
    return registry


__all__ = [
    "RuleSetRegistry",
    "create_default_registry",
    "create_registry",
]
