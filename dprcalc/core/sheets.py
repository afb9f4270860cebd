"""
Module for printing attack profiles, results and catalogs in a formatted way.
"""

from collections.abc import Sequence

from rich.padding import Padding
from rich.table import Table

from dprcalc.combat.attack_profile import AttackProfile
from dprcalc.combat.damage import average_damage, get_damage_expr
from dprcalc.combat.expected import CalcResult
from dprcalc.combat.simulation import SimResult
from dprcalc.core.utils import cprint, make_bar
from dprcalc.effects.effect import Effect
from dprcalc.kits.kit import ClassKit


def percent(value: float) -> str:
    """Formats a probability as a percentage with two decimals."""
    return f"{value * 100:.2f}%"


def print_profile_sheet(profile: AttackProfile, padding: int = 2) -> None:
    """
    Prints the details of an attack profile in a formatted way.

    Args:
        profile (AttackProfile): The profile to display.
        padding (int): Left padding for the output. Defaults to 2.

    """
    sheet: str = f"[bold]{profile.attack_bonus:+d}[/] to hit "
    sheet += f"vs AC [bold]{profile.target_ac}[/], "
    sheet += f"crit {profile.effective_crit_range}-20, "
    sheet += f"{profile.roll_mode.colored_name}"
    cprint(Padding(sheet, (0, padding)))
    sheet = f"Damage: [red]{get_damage_expr(profile.damage)}[/] "
    sheet += f"(avg {average_damage(profile.damage, False):.2f}, "
    sheet += f"crit {average_damage(profile.damage, True):.2f})"
    cprint(Padding(sheet, (0, padding)))
    if profile.tags:
        tags = ", ".join(sorted(profile.tags))
        cprint(Padding(f"[dim]Tags: {tags}[/]", (0, padding)))


def print_result_sheet(result: CalcResult, padding: int = 2) -> None:
    """Prints the analytic figures of an attack."""
    sheet: str = f"Hit {percent(result.hit_chance)} "
    sheet += f"{make_bar(result.hit_chance, color='green')}  "
    sheet += f"Crit {percent(result.critical_chance)}  "
    sheet += f"DPR [bold yellow]{result.expected_damage:.2f}[/]"
    cprint(Padding(sheet, (0, padding)))


def print_simulation_sheet(result: SimResult, trials: int, padding: int = 2) -> None:
    """Prints the outcome of a simulation run."""
    sheet: str = f"Simulated {trials} attacks: "
    sheet += f"mean [bold yellow]{result.mean:.3f}[/] "
    sheet += f"± {result.half_width:.3f} "
    sheet += f"[dim](95% CI {result.ci_low:.3f} - {result.ci_high:.3f})[/]"
    cprint(Padding(sheet, (0, padding)))


def print_kit_sheet(kit: ClassKit) -> None:
    """Prints a kit, its attacks and its available effects."""
    cprint(f"[blue]{kit.label}[/] ({kit.id}), default level {kit.default_level}")
    for attack in kit.attacks:
        cprint(Padding(f"[bold]{attack.label}[/] ({attack.id})", (0, 2)))
        print_profile_sheet(attack.profile, padding=4)
    if kit.available_effects:
        cprint(Padding(f"Effects: {', '.join(kit.available_effects)}", (0, 2)))


def print_effect_catalog(effects: Sequence[Effect]) -> None:
    """Prints a table of effects."""
    table = Table(title="Effects", pad_edge=False)
    table.add_column("Id", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Source", style="magenta")
    table.add_column("Tags")
    table.add_column("Sim", justify="center")
    for effect in effects:
        table.add_row(
            effect.id,
            effect.label,
            effect.source or "",
            ", ".join(f"{tag.emoji} {tag.colored_name}" for tag in effect.tags),
            "✔" if effect.requires_simulation else "",
        )
    cprint(table)


def print_dpr_curve(points: Sequence[tuple[int, float]]) -> None:
    """
    Prints expected damage against a range of target ACs.

    Args:
        points (Sequence[tuple[int, float]]): (AC, DPR) pairs.

    """
    table = Table(title="DPR vs Target AC", pad_edge=False)
    table.add_column("AC", style="cyan", justify="right")
    table.add_column("DPR", style="bold yellow", justify="right")
    table.add_column("")
    top = max((dpr for _, dpr in points), default=0.0) or 1.0
    for ac, dpr in points:
        table.add_row(str(ac), f"{dpr:.2f}", make_bar(dpr / top, color="yellow"))
    cprint(table)
