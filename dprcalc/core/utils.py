"""
Utilities module for the calculator.

Provides common utility functions and helpers, including console printing
with rich formatting, the singleton pattern, number checks and the small
D&D rule helpers shared by effects and kits.
"""

from __future__ import annotations

import math
from typing import Any, Generic

from rich.console import Console
from rich.rule import Rule
from typing_extensions import TypeVar

from dprcalc.core.constants import StatType
from dprcalc.core.errors import InvalidAbility

# Initialize the rich console.
_console = Console(markup=True, width=120, force_jupyter=False)


def cprint(*args: Any, **kwargs: Any) -> None:
    """
    Custom print function to handle colored output.

    Args:
        *args: Arguments to pass to the console print function.
        **kwargs: Keyword arguments to pass to the console print function.

    """
    _console.print(*args, **kwargs)


def crule(*args: Any, **kwargs: Any) -> None:
    """
    Custom print function to handle colored output with a rule.

    Args:
        *args: Arguments to pass to the Rule constructor.
        **kwargs: Keyword arguments to pass to the Rule constructor.

    """
    _console.print(Rule(*args, **kwargs))


# ---- Singleton Metaclass ----


_T = TypeVar("_T")


class Singleton(type, Generic[_T]):
    """Metaclass that returns the same instance every time."""

    _instances: dict[Singleton[_T], _T] = {}

    def __call__(cls, *args: Any, **kwargs: Any) -> _T:
        if cls not in cls._instances:
            cls._instances[cls] = super().__call__(*args, **kwargs)
        elif args or kwargs:
            # Explicit arguments re-initialise the existing instance.
            cls._instances[cls].__init__(*args, **kwargs)
        return cls._instances[cls]


# ---- Numbers ----


def is_integer(value: Any) -> bool:
    """
    Checks whether a value is a whole number.

    Booleans are rejected even though they subclass int, floats are accepted
    when they carry no fractional part (JSON decoders produce 7.0 for 7).

    Args:
        value (Any): The value to check.

    Returns:
        bool: True if the value is an integral number.

    """
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value) and value.is_integer()


def is_finite_number(value: Any) -> bool:
    """Checks whether a value is a real, finite number (booleans excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def clamp(value: float, low: float, high: float) -> float:
    """Clamps a value into the closed interval [low, high]."""
    return max(low, min(high, value))


# ---- Rule helpers ----


def get_stat_modifier(score: int) -> int:
    """
    Calculates the D&D ability score modifier.

    Args:
        score (int): The ability score.

    Returns:
        int: The modifier for the given ability score.

    """
    return (score - 10) // 2


def normalize_ability(name: str | StatType) -> StatType:
    """
    Resolves an ability name to its stat type.

    Accepts the short ("dex") or full ("Dexterity") name in any case, with
    surrounding whitespace ignored.

    Args:
        name (str | StatType): The ability name.

    Returns:
        StatType: The matching stat.

    Raises:
        InvalidAbility: If the name matches none of the six abilities.

    """
    if isinstance(name, StatType):
        return name
    key = name.strip().upper() if isinstance(name, str) else ""
    for stat in StatType:
        if key in (stat.value, stat.short_name):
            return stat
    raise InvalidAbility(
        f"Invalid ability '{name}'. Use one of str, dex, con, int, wis, cha.",
        {"ability": name},
    )


def proficiency_bonus(level: int | None) -> int:
    """
    Returns the proficiency bonus granted at a character level.

    Args:
        level (int | None): The character level, None counts as level 1.

    Returns:
        int: The proficiency bonus, from +2 at level 1 to +6 at level 17.

    """
    if not level or level < 5:
        return 2
    if level >= 17:
        return 6
    if level >= 13:
        return 5
    if level >= 9:
        return 4
    return 3


def make_bar(fraction: float, length: int = 20, color: str = "white") -> str:
    """
    Creates a visual progress bar representation.

    Args:
        fraction (float): The filled fraction, clamped to [0, 1].
        length (int): The length of the bar in characters. Defaults to 20.
        color (str): The color for the filled portion. Defaults to "white".

    Returns:
        str: A formatted progress bar string.

    """
    filled = int(round(clamp(fraction, 0.0, 1.0) * length))
    empty = length - filled
    bar = f"[{color}]" + "▮" * filled
    if empty > 0:
        bar += "[dim white]" + "▯" * empty + "[/]"
    bar += "[/]"
    return bar
