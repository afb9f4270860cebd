"""
Core module for the DPR calculator.

This module holds the shared constants, errors, dice handling, logging and
console utilities used by the rest of the package.
"""

from .constants import EffectTag, RollMode
from .dice import DiceTerm, format_dice_expression, parse_dice_expression
from .errors import DprError

__all__ = [
    # Import from constants.py
    "EffectTag",
    "RollMode",
    # Import from dice.py
    "DiceTerm",
    "format_dice_expression",
    "parse_dice_expression",
    # Import from errors.py
    "DprError",
]
