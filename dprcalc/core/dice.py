"""
Dice module for the calculator.

Provides the DiceTerm value, the average of a dice expression and a safe
parser for dice notation such as "2d6+3" or "1d8 + 1d4+2".
"""

import re
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dprcalc.core.constants import VALID_DIE_SIDES
from dprcalc.core.errors import InvalidDice
from dprcalc.core.utils import is_integer


def check_dice_values(count: Any, sides: Any, plus: Any = None) -> None:
    """
    Validates the raw values of a dice term.

    Args:
        count (Any): Number of dice, must be a whole number >= 1.
        sides (Any): Sides of each die, must be one of 4, 6, 8, 10, 12, 20.
        plus (Any): Optional flat modifier, a whole number >= 0 when present.

    Raises:
        InvalidDice: If any of the values is invalid.

    """
    if not is_integer(count) or count < 1:
        raise InvalidDice(
            "There must be at least one whole number die rolled.",
            {"count": count},
        )
    if not is_integer(sides) or int(sides) not in VALID_DIE_SIDES:
        raise InvalidDice(
            "Dice must have 4, 6, 8, 10, 12 or 20 sides.",
            {"sides": sides},
        )
    if plus is not None and (not is_integer(plus) or plus < 0):
        raise InvalidDice(
            "Flat modifiers must be non-negative integers.",
            {"plus": plus},
        )


class DiceTerm(BaseModel):
    """A homogeneous group of dice with an optional flat modifier, e.g. 2d6+3."""

    model_config = ConfigDict(frozen=True)

    count: int = Field(
        description="Number of dice rolled (>= 1).",
    )
    sides: int = Field(
        description="Sides of each die (4, 6, 8, 10, 12 or 20).",
    )
    plus: int = Field(
        0,
        description="Flat modifier added to the dice (>= 0).",
    )

    @model_validator(mode="before")
    @classmethod
    def _check_raw_values(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            check_dice_values(data.get("count"), data.get("sides"), data.get("plus"))
            if data.get("plus") is None:
                data = {**data, "plus": 0}
        return data

    @property
    def average(self) -> float:
        """Average value of the term: count * (sides + 1) / 2 + plus."""
        return self.count * (self.sides + 1) / 2 + self.plus

    def __str__(self) -> str:
        if self.plus:
            return f"{self.count}d{self.sides}+{self.plus}"
        return f"{self.count}d{self.sides}"


def as_dice_term(term: Any) -> DiceTerm:
    """
    Turns a term or a plain mapping into a validated DiceTerm.

    Args:
        term (Any): A DiceTerm or a mapping with count, sides and plus.

    Returns:
        DiceTerm: The validated term.

    Raises:
        InvalidDice: If the term is malformed.

    """
    if isinstance(term, DiceTerm):
        # Terms built with model_construct() skip validation.
        check_dice_values(term.count, term.sides, term.plus)
        return term
    if isinstance(term, Mapping):
        return DiceTerm.model_validate(term)
    raise InvalidDice(
        "A dice term must be a DiceTerm or a mapping.",
        {"term": term},
    )


def average_dice(expr: Sequence[Any] | None) -> float:
    """
    Computes the average value of a dice expression.

    Args:
        expr (Sequence[Any] | None): Dice terms (DiceTerm or mappings).

    Returns:
        float: The sum of the term averages, 0 for an empty expression.

    Raises:
        InvalidDice: If any term is malformed.

    """
    if not expr:
        return 0.0
    return sum(as_dice_term(term).average for term in expr)


# ---- Dice notation ----


_EXPRESSION_PATTERN = re.compile(
    r"^[+-]?(\d*d\d+|\d+)([+-](\d*d\d+|\d+))*$", re.IGNORECASE
)
_TOKEN_PATTERN = re.compile(r"([+-]?)(?:(\d*)d(\d+)|(\d+))", re.IGNORECASE)


def tokenize_dice_expression(text: str) -> list[tuple[int, int, int]]:
    """
    Splits dice notation into signed tokens.

    Args:
        text (str): Dice notation, e.g. "2d6 + 1d4 + 3".

    Returns:
        list[tuple[int, int, int]]:
            One (sign, count, sides) tuple per token; constants are returned
            with sides 0 and the constant as count.

    Raises:
        InvalidDice: If the text is not valid dice notation.

    """
    if not isinstance(text, str):
        raise InvalidDice("Dice expression must be a string.", {"expression": text})
    expr = re.sub(r"\s+", "", text).lower()
    if not expr or not _EXPRESSION_PATTERN.match(expr):
        raise InvalidDice("Invalid dice expression.", {"expression": text})
    tokens: list[tuple[int, int, int]] = []
    for match in _TOKEN_PATTERN.finditer(expr):
        sign = -1 if match.group(1) == "-" else 1
        if match.group(3) is not None:
            count = int(match.group(2)) if match.group(2) else 1
            tokens.append((sign, count, int(match.group(3))))
        else:
            tokens.append((sign, int(match.group(4)), 0))
    return tokens


def parse_dice_expression(text: str) -> tuple[DiceTerm, ...]:
    """
    Parses dice notation into dice terms.

    Constants attach to the dice term that precedes them, so "1d8+1d4+2"
    yields (1d8, 1d4+2).

    Args:
        text (str): Dice notation.

    Returns:
        tuple[DiceTerm, ...]: The parsed terms.

    Raises:
        InvalidDice: If the text is malformed, subtracts anything, or starts
            with a constant.

    """
    terms: list[dict[str, int]] = []
    for sign, count, sides in tokenize_dice_expression(text):
        if sign < 0:
            raise InvalidDice(
                "Dice expressions cannot subtract dice or modifiers.",
                {"expression": text},
            )
        if sides:
            terms.append({"count": count, "sides": sides, "plus": 0})
        elif terms:
            terms[-1]["plus"] += count
        else:
            raise InvalidDice(
                "A flat modifier must follow a dice term.",
                {"expression": text},
            )
    return tuple(DiceTerm.model_validate(term) for term in terms)


def format_dice_expression(expr: Sequence[DiceTerm]) -> str:
    """Renders dice terms back into notation, "0" for an empty expression."""
    if not expr:
        return "0"
    return " + ".join(str(term) for term in expr)
