"""Command-line settings editor for combo-engine.

Edits a JSON configuration file the same way the settings window would:
every change goes through ``EngineConfig`` and is saved by the persistence
system. ``try`` runs a single substitution against a synthetic combat
snapshot.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from combo_engine.config.engine_config import EngineConfig
from combo_engine.config.store import ConfigLoadError, ConfigStore
from combo_engine.events.bus import EventBus
from combo_engine.rulesets.registry import RuleSetRegistry, create_default_registry
from combo_engine.systems.config_persistence_system import ConfigPersistenceSystem
from combo_engine.systems.dispatch_system import DispatchResolver
from combo_engine.utils.combat_state import WorldCombatState
from combo_engine.world import apply_status, create_world, local_player, set_cooldown

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "combo-engine" / "config.json"

log = logging.getLogger("combo.cli")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="combo-engine", description="Manage combo rule-sets")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH,
                   metavar="FILE", help=f"Configuration file (default: {DEFAULT_CONFIG_PATH})")
    p.add_argument("--plugins", action="store_true", help="Also load installed rule-set plugin packs")
    p.add_argument("-v", "--verbose", action="store_true", help="Log debug messages")
    sub = p.add_subparsers(dest="command", required=True)

    listing = sub.add_parser("list", help="Show every rule-set grouped by job")
    listing.add_argument("--job", help="Only show this job")

    enable = sub.add_parser("enable", help="Enable a rule-set (and its parents)")
    enable.add_argument("name")

    disable = sub.add_parser("disable", help="Disable a rule-set")
    disable.add_argument("name")

    setter = sub.add_parser("set", help="Set a rule-set parameter")
    setter.add_argument("name")
    setter.add_argument("parameter")
    setter.add_argument("value", type=float)

    sub.add_parser("reset", help="Reset the whole configuration to defaults")

    attempt = sub.add_parser("try", help="Resolve one button press against a synthetic snapshot")
    attempt.add_argument("--job", type=int, required=True, help="Job id of the local player")
    attempt.add_argument("--level", type=int, required=True)
    attempt.add_argument("--pressed", type=int, required=True, help="Ability id on the button")
    attempt.add_argument("--last", type=int, default=0, help="Last ability id used in the combo")
    attempt.add_argument("--elapsed", type=float, default=0.0, help="Seconds into the combo window")
    attempt.add_argument("--distance", type=float, default=0.0, help="Distance to the target")
    attempt.add_argument("--buff", type=int, action="append", default=[], metavar="EFFECT_ID")
    attempt.add_argument("--cooldown", action="append", default=[], metavar="ABILITY_ID=SECONDS")
    return p.parse_args(argv)


def _format_listing(registry: RuleSetRegistry, config: EngineConfig, job: str | None) -> list[str]:
    ordinals = registry.display_ordinals()
    lines: list[str] = []
    for job_name, descriptors in registry.grouped_by_job().items():
        if job is not None and job_name.lower() != job.lower():
            continue
        lines.append(f"== {job_name}")
        for descriptor in descriptors:
            if descriptor.parent is not None:
                continue
            _format_subtree(registry, config, descriptor.ruleset, ordinals, 0, lines)
    return lines


def _format_subtree(registry, config, ruleset, ordinals, depth, lines) -> None:
    descriptor = registry.get(ruleset)
    mark = "x" if config.is_enabled(ruleset) else " "
    flags = []
    if descriptor.dangerous:
        flags.append("UNSAFE")
    elif descriptor.experimental:
        flags.append("EXPERIMENTAL")
    elif descriptor.deprecated:
        flags.append("DEPRECATED")
    suffix = f" ({', '.join(flags)})" if flags else ""
    indent = "    " * depth
    lines.append(f"{indent}[{mark}] {ordinals[ruleset]}: {descriptor.label} <{descriptor.name}>{suffix}")
    conflicts = registry.conflicts_of(ruleset)
    if conflicts:
        names = ", ".join(registry.get(other).label for other in sorted(conflicts))
        lines.append(f"{indent}      Conflicts with: {names}")
    if descriptor.deprecated and descriptor.alternatives:
        names = ", ".join(f"#{ordinals[other]} {registry.get(other).label}" for other in descriptor.alternatives)
        lines.append(f"{indent}      Suggested replacement: {names}")
    for setting in registry.settings_for(ruleset):
        value = config.parameter(ruleset, setting.name)
        lines.append(
            f"{indent}      {setting.name} = {value} [{setting.minimum}, {setting.maximum}] {setting.label}"
        )
    hide_children = config.preference("hide_disabled_children")
    if hide_children and not config.is_enabled(ruleset):
        if registry.children_of(ruleset):
            lines.append(f"{indent}      This preset has one or more children.")
        return
    for child in registry.children_of(ruleset):
        _format_subtree(registry, config, child, ordinals, depth + 1, lines)


def _try_press(args: argparse.Namespace, registry: RuleSetRegistry, config: EngineConfig) -> str:
    world = create_world(job_id=args.job, level=args.level, target_distance=args.distance)
    player = local_player(world)
    for effect_id in args.buff:
        apply_status(world, player, effect_id)
    for entry in args.cooldown:
        ability, _, seconds = entry.partition("=")
        set_cooldown(world, int(ability), float(seconds or 0))
    resolver = DispatchResolver(registry, config, WorldCombatState(world))
    substituted, new_id = resolver.try_invoke(args.pressed, args.last, args.elapsed, args.level)
    if not substituted:
        return f"{args.pressed} (unchanged)"
    return f"{args.pressed} -> {new_id}"


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    registry = create_default_registry(load_plugins=args.plugins)
    event_bus = EventBus()
    store = ConfigStore(args.config)
    try:
        config = store.load(registry, event_bus)
    except ConfigLoadError as exc:
        log.error("%s", exc)
        return 2
    ConfigPersistenceSystem(config, event_bus, store)

    try:
        if args.command == "list":
            print("\n".join(_format_listing(registry, config, args.job)))
        elif args.command == "enable":
            removed = config.enable(registry.by_name(args.name))
            for other in sorted(removed):
                print(f"Disabled conflicting {other.name}")
        elif args.command == "disable":
            config.disable(registry.by_name(args.name))
        elif args.command == "set":
            stored = config.set_parameter(registry.by_name(args.name), args.parameter, args.value)
            print(f"{args.name}.{args.parameter} = {stored}")
        elif args.command == "reset":
            config.reset()
        elif args.command == "try":
            print(_try_press(args, registry, config))
    except (KeyError, ValueError) as exc:
        log.error("%s", exc.args[0] if exc.args else exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
