"""
Monte Carlo module for the calculator.

Estimates damage per round by sampling the outcome class of each attack
(critical hit, normal hit or miss) and streaming the damage into a running
mean and variance, so memory stays constant whatever the number of trials.

The sampler draws outcome classes, not dice faces: each outcome deals the
already-averaged damage of its class.
"""

import math
import random
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dprcalc.combat.attack_profile import as_attack_profile
from dprcalc.combat.damage import average_damage
from dprcalc.combat.probability import critical_probability, hit_probability
from dprcalc.core.constants import MAX_CRIT_RANGE, Z_95
from dprcalc.core.errors import InvalidSimulationInput
from dprcalc.core.logging import log_debug
from dprcalc.core.utils import clamp, is_finite_number

_NUMERIC_FIELDS = ("attack_bonus", "target_ac", "crit_range", "avg_on_hit", "avg_on_crit")


class SimulationParams(BaseModel):
    """Scalar inputs of a simulation run."""

    model_config = ConfigDict(frozen=True)

    attack_bonus: float = Field(
        description="Bonus added to the d20 attack roll.",
    )
    target_ac: float = Field(
        description="Armor Class of the target (>= 1).",
    )
    crit_range: float = Field(
        default=MAX_CRIT_RANGE,
        description="Lowest natural roll that is a critical hit.",
    )
    avg_on_hit: float = Field(
        description="Average damage of a normal hit (>= 0).",
    )
    avg_on_crit: float = Field(
        description="Average damage of a critical hit (>= 0).",
    )
    advantage: bool = Field(
        default=False,
        description="Whether the attack roll has advantage.",
    )
    disadvantage: bool = Field(
        default=False,
        description="Whether the attack roll has disadvantage.",
    )

    @model_validator(mode="before")
    @classmethod
    def _check_raw_values(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            data = {k: v for k, v in data.items() if v is not None}
            for name in _NUMERIC_FIELDS:
                if name == "crit_range" and name not in data:
                    continue
                if not is_finite_number(data.get(name)):
                    raise InvalidSimulationInput(
                        f"{name} must be a finite number.", {name: data.get(name)}
                    )
            if data["avg_on_hit"] < 0 or data["avg_on_crit"] < 0:
                raise InvalidSimulationInput(
                    "Average damage must be non-negative.",
                    {
                        "avg_on_hit": data["avg_on_hit"],
                        "avg_on_crit": data["avg_on_crit"],
                    },
                )
            if data["target_ac"] < 1:
                raise InvalidSimulationInput(
                    "Target AC must be at least 1.", {"target_ac": data["target_ac"]}
                )
        return data


class SimResult(BaseModel):
    """Mean damage of a simulation run with its 95% confidence interval."""

    model_config = ConfigDict(frozen=True)

    mean: float = Field(description="Sample mean of the damage.")
    ci_low: float = Field(description="Lower bound of the 95% interval.")
    ci_high: float = Field(description="Upper bound of the 95% interval.")

    @property
    def half_width(self) -> float:
        return (self.ci_high - self.ci_low) / 2


def as_simulation_params(params: Any) -> SimulationParams:
    """
    Turns parameters or a plain mapping into validated SimulationParams.

    Raises:
        InvalidSimulationInput: If a value is non-finite or out of range.

    """
    if isinstance(params, SimulationParams):
        return SimulationParams.model_validate(params.model_dump())
    if isinstance(params, Mapping):
        return SimulationParams.model_validate(params)
    raise InvalidSimulationInput(
        "Simulation parameters must be SimulationParams or a mapping.",
        {"params": params},
    )


def params_from_profile(profile: Any) -> SimulationParams:
    """
    Builds simulation parameters from an attack profile.

    Args:
        profile (Any): An AttackProfile or a mapping of its fields.

    Returns:
        SimulationParams: The profile's bonuses and averaged damage.

    """
    profile = as_attack_profile(profile)
    return SimulationParams(
        attack_bonus=profile.attack_bonus,
        target_ac=profile.target_ac,
        crit_range=profile.crit_range,
        avg_on_hit=average_damage(profile.damage, False),
        avg_on_crit=average_damage(profile.damage, True),
        advantage=profile.advantage,
        disadvantage=profile.disadvantage,
    )


def simulate(
    trials: int,
    params: Any,
    rng: Optional[random.Random] = None,
) -> SimResult:
    """
    Runs a Monte Carlo estimate of the damage per round.

    Args:
        trials (int):
            Number of attacks to sample; 0 or less returns a zero result without
            validating or sampling.
        params (Any):
            SimulationParams or a mapping of its fields.
        rng (Optional[random.Random]):
            Random source; defaults to the process-wide `random` module.

    Returns:
        SimResult: The sample mean and its 95% normal-approximation interval.

    Raises:
        InvalidSimulationInput: If a parameter is non-finite or out of range.

    """
    if trials <= 0:
        return SimResult(mean=0.0, ci_low=0.0, ci_high=0.0)
    params = as_simulation_params(params)

    draw = rng.random if rng is not None else random.random

    p_crit = clamp(
        critical_probability(params.crit_range, params.advantage, params.disadvantage),
        0.0,
        1.0,
    )
    p_hit_not_crit = clamp(
        hit_probability(
            params.attack_bonus,
            params.target_ac,
            params.advantage,
            params.disadvantage,
        )
        - p_crit,
        0.0,
        1.0 - p_crit,
    )
    hit_threshold = p_crit + p_hit_not_crit

    # Welford's online mean and sum of squared deviations.
    n = 0
    mean = 0.0
    sum_sq_dev = 0.0
    for _ in range(trials):
        n += 1
        u = draw()
        if u < p_crit:
            damage = params.avg_on_crit
        elif u < hit_threshold:
            damage = params.avg_on_hit
        else:
            damage = 0.0
        delta = damage - mean
        mean += delta / n
        sum_sq_dev += delta * (damage - mean)

    variance = sum_sq_dev / (n - 1) if n >= 2 else 0.0
    variance = max(0.0, variance)
    se = math.sqrt(variance / n)

    log_debug(
        "Simulation finished",
        {"trials": n, "mean": round(mean, 4), "se": round(se, 4)},
    )
    return SimResult(mean=mean, ci_low=mean - Z_95 * se, ci_high=mean + Z_95 * se)
