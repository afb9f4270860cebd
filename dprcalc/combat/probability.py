"""
Probability module for the calculator.

Computes the chance that a single d20 attack roll hits and the chance that
it is a critical hit, under advantage, disadvantage or a normal roll.
"""

from dprcalc.core.constants import D20_FACES, MAX_CRIT_RANGE, MIN_CRIT_RANGE
from dprcalc.core.utils import clamp


def combine_rolls(p: float, advantage: bool = False, disadvantage: bool = False) -> float:
    """
    Applies advantage or disadvantage to a single-roll success probability.

    Args:
        p (float): Probability that one roll succeeds.
        advantage (bool): Roll twice and keep the better result.
        disadvantage (bool): Roll twice and keep the worse result.

    Returns:
        float:
            1 - (1 - p)^2 with advantage, p^2 with disadvantage, p when
            neither or both are set.

    """
    if advantage and disadvantage:
        return p
    if advantage:
        return 1 - (1 - p) ** 2
    if disadvantage:
        return p**2
    return p


def hit_probability(
    attack_bonus: float,
    target_ac: float,
    advantage: bool = False,
    disadvantage: bool = False,
) -> float:
    """
    Probability that an attack roll hits the target.

    A natural 20 always hits and a natural 1 always misses, so the result
    is strictly between 0 and 1.

    Args:
        attack_bonus (float): Bonus added to the d20.
        target_ac (float): Armor Class of the target.
        advantage (bool): Whether the roll has advantage.
        disadvantage (bool): Whether the roll has disadvantage.

    Returns:
        float: The probability of a hit.

    """
    successes = 0
    for face in range(1, D20_FACES + 1):
        if face == D20_FACES:
            successes += 1
        elif face == 1:
            continue
        elif face + attack_bonus >= target_ac:
            successes += 1
    return combine_rolls(successes / D20_FACES, advantage, disadvantage)


def critical_probability(
    crit_range: float | None = MAX_CRIT_RANGE,
    advantage: bool = False,
    disadvantage: bool = False,
) -> float:
    """
    Probability that an attack roll is a critical hit.

    Args:
        crit_range (float | None):
            Lowest natural roll that crits, clamped to [2, 20]. None and the
            default both mean 20.
        advantage (bool): Whether the roll has advantage.
        disadvantage (bool): Whether the roll has disadvantage.

    Returns:
        float: The probability of a critical hit, 0.05..0.95 for a normal roll.

    """
    if crit_range is None:
        crit_range = MAX_CRIT_RANGE
    cr = clamp(crit_range, MIN_CRIT_RANGE, MAX_CRIT_RANGE)
    p = (D20_FACES + 1 - cr) / D20_FACES
    return combine_rolls(p, advantage, disadvantage)
