"""
Main entry point for the DPR calculator.

Resolves a class kit with a set of effects against a target AC, prints the
analytic damage per round, checks it with a Monte Carlo run and shows how
the damage falls off as the target AC rises.
"""

import argparse
import logging
import random
import sys
from collections.abc import Sequence

from rich.markup import escape

from dprcalc import api
from dprcalc.combat.damage import parse_damage_expression
from dprcalc.core import constants
from dprcalc.core.constants import StatType
from dprcalc.core.errors import DprError, InvalidAbility
from dprcalc.core.logging import log_error, setup_logging
from dprcalc.core.sheets import (
    print_dpr_curve,
    print_effect_catalog,
    print_kit_sheet,
    print_profile_sheet,
    print_result_sheet,
    print_simulation_sheet,
)
from dprcalc.core.utils import cprint, crule, get_stat_modifier, normalize_ability
from dprcalc.effects.catalog import list_effects
from dprcalc.kits.resolver import get_kit, list_kits


def _build_argparser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="dprcalc",
        description="Expected and simulated damage per round of a class kit attack",
    )
    ap.add_argument("--kit", default="fighter", help="kit id (default: fighter)")
    ap.add_argument("--level", type=int, default=None, help="character level (default: kit level)")
    ap.add_argument(
        "--effect",
        dest="effects",
        action="append",
        default=[],
        help="effect id to enable, repeatable",
    )
    ap.add_argument("--attack", default=None, help="kit attack id (default: the kit's first attack)")
    ap.add_argument("--ac", type=int, default=15, help="target AC (default: 15)")
    ap.add_argument(
        "--ability-score",
        default=None,
        metavar="[ABILITY=]SCORE",
        help="score of the attacking ability (e.g. 18 or cha=18), for effects adding its modifier",
    )
    ap.add_argument(
        "--extra-damage",
        action="append",
        default=[],
        metavar="DICE",
        help="extra damage in dice notation (e.g. 1d6 or 2d8+2), repeatable",
    )
    ap.add_argument(
        "--trials",
        type=int,
        default=constants.DEFAULT_TRIALS,
        help="number of Monte Carlo trials (0 to skip)",
    )
    ap.add_argument("--seed", type=int, default=None, help="random seed")
    ap.add_argument("--list", action="store_true", help="list kits and effects and exit")
    ap.add_argument("-v", "--verbose", action="count", default=0, help="more output, repeatable")
    return ap


def _parse_ability_score(text: str) -> tuple[StatType | None, int]:
    """
    Parses "18" or "cha=18" into an optional ability and its score.

    Raises:
        InvalidAbility: If the ability name or the score is invalid.

    """
    name, _, score = text.rpartition("=")
    ability = normalize_ability(name) if name else None
    try:
        return ability, int(score)
    except ValueError as e:
        raise InvalidAbility(
            "Ability score must be a whole number.", {"ability_score": text}
        ) from e


def _print_catalogs() -> None:
    crule("Kits", style="bold green")
    for kit in list_kits():
        print_kit_sheet(kit)
    crule("Effects", style="bold green")
    print_effect_catalog(list_effects())


def run(args: argparse.Namespace) -> None:
    """Runs the calculator for parsed command line arguments."""
    if args.list:
        _print_catalogs()
        return

    kit = get_kit(args.kit)
    attack = kit.default_attack if args.attack is None else kit.get_attack(args.attack)
    level = args.level if args.level is not None else kit.default_level
    ability_modifier = None
    if args.ability_score is not None:
        ability, score = _parse_ability_score(args.ability_score)
        ability_modifier = get_stat_modifier(score)
        label = ability.short_name if ability else "Ability"
        cprint(f"{label} {score} ({ability_modifier:+d})")

    build = api.build_from_kit(
        kit.id, level, args.effects, args.ac, ability_modifier, attack_id=args.attack
    )
    profile, result = build.profile, build.result
    for text in args.extra_damage:
        profile = profile.with_extra_damage(parse_damage_expression(text))
    if args.extra_damage:
        result = api.calculate_profile(profile)

    crule(f"{kit.label} level {level}", style="bold green")
    if constants.GLOBAL_VERBOSE_LEVEL >= 1:
        cprint("Base attack:")
        print_profile_sheet(attack.profile)
    applied = ", ".join(build.applied_effects) or "none"
    cprint(f"Effects applied: [cyan]{applied}[/]")
    print_profile_sheet(profile)
    print_result_sheet(result)
    if build.requires_simulation:
        cprint("[yellow]Some effects are only approximated analytically.[/]")

    if args.trials > 0:
        trials = api.clamp_trials(args.trials)
        rng = random.Random(args.seed) if args.seed is not None else None
        sim = api.simulate_profile(profile, trials, rng=rng)
        print_simulation_sheet(sim, trials)

    if constants.GLOBAL_VERBOSE_LEVEL >= 2:
        points = api.dpr_vs_ac(profile)
        print_dpr_curve([(p.ac, p.dpr) for p in points])


def main(argv: Sequence[str] | None = None) -> int:
    """Command line entry point, returns the process exit code."""
    args = _build_argparser().parse_args(argv)
    constants.GLOBAL_VERBOSE_LEVEL = args.verbose
    setup_logging(logging.DEBUG if args.verbose >= 2 else logging.WARNING)
    try:
        run(args)
    except DprError as e:
        log_error("Command failed", {"error": type(e).__name__, **e.context})
        cprint(f"[bold red]Error:[/] {escape(str(e))}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
