"""
Constants and enumerations for the calculator.

Defines global constants, bounds for the probability model and the Monte
Carlo sampler, and enumerations for abilities, roll modes and effect tags
used throughout the calculator.
"""

from enum import Enum
from pathlib import Path

# Global verbose level for command line output:
# 0 - Minimal (e.g., only final results)
# 1 - Moderate (e.g., show the resolved profile)
# 2 - Full detail (e.g., effect catalog, DPR curve)
GLOBAL_VERBOSE_LEVEL = 0

# Dice that may appear in a damage expression.
VALID_DIE_SIDES: frozenset[int] = frozenset({4, 6, 8, 10, 12, 20})

# Faces of the d20 used for attack rolls.
D20_FACES = 20

# Crit range is clamped to this interval when consumed.
MIN_CRIT_RANGE = 2
MAX_CRIT_RANGE = 20

# Character levels.
MIN_LEVEL = 1
MAX_LEVEL = 20

# Trials accepted by the calculator facade.
MIN_TRIALS = 1_000
MAX_TRIALS = 200_000
DEFAULT_TRIALS = 20_000

# Two-sided 95% normal quantile.
Z_95 = 1.96

# Default target AC range of a DPR sweep (inclusive).
DEFAULT_SWEEP_AC_MIN = 10
DEFAULT_SWEEP_AC_MAX = 25

# Directory holding the packaged kit data.
DATA_DIR = Path(__file__).resolve().parent.parent / "data"


class NiceEnum(Enum):
    """An enumeration that provides a nicer string representation."""

    def __str__(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return self.name.lower().replace("_", " ").capitalize()


class StatType(NiceEnum):
    """Defines the six stat types in D&D."""

    STRENGTH = "STRENGTH"
    DEXTERITY = "DEXTERITY"
    CONSTITUTION = "CONSTITUTION"
    INTELLIGENCE = "INTELLIGENCE"
    WISDOM = "WISDOM"
    CHARISMA = "CHARISMA"

    @property
    def short_name(self) -> str:
        """Returns the 3-letter abbreviation for the stat."""
        return self.value[:3]


class RollMode(NiceEnum):
    """How the d20 of an attack roll is rolled."""

    NORMAL = "NORMAL"
    ADVANTAGE = "ADVANTAGE"
    DISADVANTAGE = "DISADVANTAGE"

    @staticmethod
    def from_flags(advantage: bool, disadvantage: bool) -> "RollMode":
        """
        Resolves the advantage/disadvantage flags into a single roll mode.

        Args:
            advantage (bool): Whether the attack has advantage.
            disadvantage (bool): Whether the attack has disadvantage.

        Returns:
            RollMode: The effective roll mode, both flags cancel out.

        """
        if advantage and not disadvantage:
            return RollMode.ADVANTAGE
        if disadvantage and not advantage:
            return RollMode.DISADVANTAGE
        return RollMode.NORMAL

    @property
    def color(self) -> str:
        """Returns the color string associated with this roll mode."""
        return {
            RollMode.ADVANTAGE: "bold green",
            RollMode.DISADVANTAGE: "bold red",
        }.get(self, "bold white")

    @property
    def colored_name(self) -> str:
        return self.colorize(self.display_name)

    def colorize(self, message: str) -> str:
        """Applies roll mode color formatting to a message."""
        return f"[{self.color}]{message}[/]"


class EffectTag(NiceEnum):
    """Defines what part of an attack profile an effect touches."""

    TO_HIT_BONUS = "to-hit-bonus"
    TO_HIT_DICE = "to-hit-dice"
    DAMAGE_BONUS = "damage-bonus"
    DAMAGE_DICE = "damage-dice"
    CRIT_RANGE = "crit-range"
    ADVANTAGE = "advantage"
    REROLL = "reroll"
    OTHER = "other"

    @property
    def emoji(self) -> str:
        """Returns the emoji associated with this effect tag."""
        return {
            EffectTag.TO_HIT_BONUS: "🎯",
            EffectTag.TO_HIT_DICE: "🎲",
            EffectTag.DAMAGE_BONUS: "➕",
            EffectTag.DAMAGE_DICE: "💥",
            EffectTag.CRIT_RANGE: "⭐",
            EffectTag.ADVANTAGE: "⬆️",
            EffectTag.REROLL: "🔁",
        }.get(self, "❔")

    @property
    def color(self) -> str:
        """Returns the color string associated with this effect tag."""
        return {
            EffectTag.TO_HIT_BONUS: "bold cyan",
            EffectTag.TO_HIT_DICE: "cyan",
            EffectTag.DAMAGE_BONUS: "bold yellow",
            EffectTag.DAMAGE_DICE: "bold red",
            EffectTag.CRIT_RANGE: "bold magenta",
            EffectTag.ADVANTAGE: "bold green",
            EffectTag.REROLL: "bold blue",
        }.get(self, "dim white")

    @property
    def colored_name(self) -> str:
        return self.colorize(self.value)

    def colorize(self, message: str) -> str:
        """Applies effect tag color formatting to a message."""
        return f"[{self.color}]{message}[/]"
