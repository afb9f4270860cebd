"""High-level entry points used by the UI and transport callers."""

from __future__ import annotations

import math
import random
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from dprcalc.combat.attack_profile import as_attack_profile
from dprcalc.combat.expected import CalcResult, calculate_profile, expected_damage
from dprcalc.combat.probability import critical_probability, hit_probability
from dprcalc.combat.simulation import (
    SimResult,
    as_simulation_params,
    params_from_profile,
    simulate,
)
from dprcalc.core.constants import (
    DEFAULT_SWEEP_AC_MAX,
    DEFAULT_SWEEP_AC_MIN,
    MAX_CRIT_RANGE,
    MAX_TRIALS,
    MIN_TRIALS,
)
from dprcalc.core.errors import InvalidCalcInput, InvalidSimulationInput
from dprcalc.core.utils import is_finite_number
from dprcalc.effects.catalog import list_effects
from dprcalc.kits.resolver import KitBuild, build_from_kit, list_kits

__all__ = [
    "DprPoint",
    "build_from_kit",
    "calculate",
    "calculate_profile",
    "clamp_trials",
    "dpr_vs_ac",
    "effects",
    "kits",
    "simulate_params",
    "simulate_profile",
    "KitBuild",
]


class DprPoint(BaseModel):
    """One point of a DPR-vs-AC sweep."""

    model_config = ConfigDict(frozen=True)

    ac: int = Field(description="Target Armor Class.")
    dpr: float = Field(description="Expected damage against that AC.")


def calculate(
    attack_bonus: float,
    target_ac: float,
    avg_on_hit: float,
    avg_on_crit: float,
    crit_range: Optional[float] = MAX_CRIT_RANGE,
    advantage: bool = False,
    disadvantage: bool = False,
) -> CalcResult:
    """Quick calculation from scalar inputs.

    Parameters
    ----------
    attack_bonus:
        Bonus added to the d20.
    target_ac:
        Armor Class of the target, at least 1.
    avg_on_hit, avg_on_crit:
        Average damage of a normal and of a critical hit, non-negative.
    crit_range:
        Lowest natural roll that crits, clamped to [2, 20]; None means 20.
    advantage, disadvantage:
        Roll mode flags; both set cancel out.

    Raises
    ------
    InvalidCalcInput
        If a value is non-finite or out of range.
    """

    if crit_range is None:
        crit_range = MAX_CRIT_RANGE
    for name, value in (
        ("attack_bonus", attack_bonus),
        ("target_ac", target_ac),
        ("avg_on_hit", avg_on_hit),
        ("avg_on_crit", avg_on_crit),
        ("crit_range", crit_range),
    ):
        if not is_finite_number(value):
            raise InvalidCalcInput(f"{name} must be a finite number.", {name: value})
    if target_ac < 1:
        raise InvalidCalcInput(
            "Target's AC must be greater than 0.", {"target_ac": target_ac}
        )
    if avg_on_hit < 0 or avg_on_crit < 0:
        raise InvalidCalcInput(
            "Average damage must be non-negative.",
            {"avg_on_hit": avg_on_hit, "avg_on_crit": avg_on_crit},
        )

    hc = hit_probability(attack_bonus, target_ac, advantage, disadvantage)
    cc = critical_probability(crit_range, advantage, disadvantage)
    return CalcResult(
        hit_chance=hc,
        critical_chance=cc,
        expected_damage=expected_damage(hc, cc, avg_on_hit, avg_on_crit),
    )


def clamp_trials(trials: Any) -> int:
    """Clamp a requested number of trials to the supported range."""

    if not is_finite_number(trials):
        raise InvalidSimulationInput("trials must be a number.", {"trials": trials})
    return max(MIN_TRIALS, min(MAX_TRIALS, math.floor(trials)))


def simulate_params(
    params: Any,
    trials: Any,
    rng: Optional[random.Random] = None,
) -> SimResult:
    """Simulate scalar parameters with the trial count clamped."""

    params = as_simulation_params(params)
    return simulate(clamp_trials(trials), params, rng=rng)


def simulate_profile(
    profile: Any,
    trials: Any,
    rng: Optional[random.Random] = None,
) -> SimResult:
    """Simulate an attack profile with the trial count clamped."""

    params = params_from_profile(profile)
    return simulate(clamp_trials(trials), params, rng=rng)


def dpr_vs_ac(
    profile: Any,
    ac_min: int = DEFAULT_SWEEP_AC_MIN,
    ac_max: int = DEFAULT_SWEEP_AC_MAX,
) -> list[DprPoint]:
    """Expected damage of a profile against every AC in [ac_min, ac_max].

    Raises
    ------
    InvalidCalcInput
        If the range is empty or starts below 1.
    """

    if ac_min < 1 or ac_max < ac_min:
        raise InvalidCalcInput(
            "AC range must be non-empty and start at 1 or more.",
            {"ac_min": ac_min, "ac_max": ac_max},
        )
    profile = as_attack_profile(profile)
    return [
        DprPoint(
            ac=ac,
            dpr=calculate_profile(profile.with_changes(target_ac=ac)).expected_damage,
        )
        for ac in range(ac_min, ac_max + 1)
    ]


def kits() -> list[dict[str, Any]]:
    """Summaries of every registered kit."""

    return [kit.summary() for kit in list_kits()]


def effects() -> list[dict[str, Any]]:
    """Summaries of every catalog effect, without their functions."""

    return [effect.summary() for effect in list_effects()]
