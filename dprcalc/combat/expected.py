"""
Expected value module for the calculator.

Combines hit and critical probabilities with the average damage on a hit
and on a critical hit into expected damage per round.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from dprcalc.combat.attack_profile import as_attack_profile
from dprcalc.combat.damage import average_damage
from dprcalc.combat.probability import critical_probability, hit_probability


class CalcResult(BaseModel):
    """Analytic figures of one attack."""

    model_config = ConfigDict(frozen=True)

    hit_chance: float = Field(
        description="Probability that the attack hits (crits included).",
    )
    critical_chance: float = Field(
        description="Probability that the attack is a critical hit.",
    )
    expected_damage: float = Field(
        description="Expected damage per attack.",
    )


def expected_damage(
    hit_chance: float,
    critical_chance: float,
    avg_on_hit: float,
    avg_on_crit: float,
) -> float:
    """
    Expected damage of an attack.

    The non-critical share of the hit chance is floored at 0 so that a crit
    chance above the hit chance never counts negative damage.

    Args:
        hit_chance (float): Probability of a hit, crits included.
        critical_chance (float): Probability of a critical hit.
        avg_on_hit (float): Average damage of a normal hit.
        avg_on_crit (float): Average damage of a critical hit.

    Returns:
        float: The expected damage.

    """
    non_crit = max(0.0, hit_chance - critical_chance)
    return non_crit * avg_on_hit + critical_chance * avg_on_crit


def calculate_profile(profile: Any) -> CalcResult:
    """
    Computes hit chance, crit chance and expected damage of a profile.

    Args:
        profile (Any): An AttackProfile or a mapping of its fields.

    Returns:
        CalcResult: The analytic figures.

    Raises:
        InvalidProfile: If the attack bonus or target AC are not integers.
        EmptyDamageList, InvalidDamageComponent, InvalidDiceTerm,
        InvalidDamageBonus: If the damage list is malformed.

    """
    profile = as_attack_profile(profile)
    hc = hit_probability(
        profile.attack_bonus,
        profile.target_ac,
        profile.advantage,
        profile.disadvantage,
    )
    cc = critical_probability(
        profile.crit_range,
        profile.advantage,
        profile.disadvantage,
    )
    ed = expected_damage(
        hc,
        cc,
        average_damage(profile.damage, False),
        average_damage(profile.damage, True),
    )
    return CalcResult(hit_chance=hc, critical_chance=cc, expected_damage=ed)


def expected_damage_from_profile(profile: Any) -> float:
    """
    Expected damage of an attack profile.

    Args:
        profile (Any): An AttackProfile or a mapping of its fields.

    Returns:
        float: The expected damage.

    """
    return calculate_profile(profile).expected_damage
