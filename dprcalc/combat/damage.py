"""
Damage module for the calculator.

Handles damage components and their averages, with and without critical
doubling, and validates damage lists before they reach the probability
model.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dprcalc.core.dice import (
    DiceTerm,
    as_dice_term,
    average_dice,
    format_dice_expression,
    parse_dice_expression,
    tokenize_dice_expression,
)
from dprcalc.core.errors import (
    EmptyDamageList,
    InvalidDamageBonus,
    InvalidDamageComponent,
    InvalidDice,
    InvalidDiceTerm,
)
from dprcalc.core.utils import is_integer


class DamageComponent(BaseModel):
    """Represents a single component of damage: dice, a flat bonus, or both.

    A component must carry at least one dice term or a bonus. The bonus is
    never doubled on a critical hit, the dice are doubled unless
    crit_doubles_dice is False (e.g. Rage or Great Weapon Master damage).

    Components also accept dice notation: a whole string such as "2d6+4"
    (dice plus a flat bonus) or a string "expr" such as "1d8+1d4".
    """

    model_config = ConfigDict(frozen=True)

    expr: tuple[DiceTerm, ...] = Field(
        default=(),
        description="The dice terms of the component (may be empty).",
    )
    bonus: int | None = Field(
        default=None,
        description="Flat damage added once, None when absent.",
    )
    crit_doubles_dice: bool = Field(
        default=True,
        description="Whether the dice are doubled on a critical hit.",
    )

    @model_validator(mode="before")
    @classmethod
    def _check_raw_values(cls, data: Any) -> Any:
        data = _component_data(data)
        if isinstance(data, Mapping):
            bonus = data.get("bonus")
            if bonus is not None and not is_integer(bonus):
                raise InvalidDamageBonus(
                    "Damage bonus must be an integer.", {"bonus": bonus}
                )
            if not data.get("expr") and bonus is None:
                raise InvalidDamageComponent(
                    "A damage component needs at least one dice term or a bonus."
                )
            # Explicit nulls from JSON fall back to the field defaults.
            data = {k: v for k, v in data.items() if v is not None}
        return data

    def average(self, is_crit: bool = False) -> float:
        """
        Average damage of this component.

        Args:
            is_crit (bool): Whether the hit is a critical hit.

        Returns:
            float: The dice average (doubled on crits when allowed) plus bonus.

        """
        dice_avg = average_dice(self.expr)
        if is_crit and self.crit_doubles_dice:
            dice_avg *= 2
        return dice_avg + (self.bonus or 0)

    def __str__(self) -> str:
        parts = [format_dice_expression(self.expr)] if self.expr else []
        if self.bonus:
            parts.append(str(self.bonus))
        elif not parts:
            parts.append("0")
        expr = " + ".join(parts).replace("+ -", "- ")
        if self.expr and not self.crit_doubles_dice:
            expr += " (no crit dice)"
        return expr


def as_damage_component(component: Any) -> DamageComponent:
    """
    Turns a component or a plain mapping into a validated DamageComponent.

    Args:
        component (Any): A DamageComponent, a mapping of its fields or dice
            notation.

    Returns:
        DamageComponent: The validated component.

    """
    if isinstance(component, DamageComponent):
        if component.bonus is not None and not is_integer(component.bonus):
            raise InvalidDamageBonus(
                "Damage bonus must be an integer.", {"bonus": component.bonus}
            )
        return component
    if isinstance(component, (str, Mapping)):
        return DamageComponent.model_validate(component)
    raise InvalidDamageComponent(
        "A damage component must be a DamageComponent, a mapping or dice notation.",
        context={"component": component},
    )


def average_damage(components: Sequence[Any] | None, is_crit: bool) -> float:
    """
    Computes the average damage of a list of damage components.

    Args:
        components (Sequence[Any] | None):
            The damage components (DamageComponent or mappings).
        is_crit (bool):
            Whether the hit is a critical hit.

    Returns:
        float: The summed average, 0 for an empty or missing list.

    Raises:
        InvalidDamageBonus: If a component carries a non-integer bonus.
        InvalidDice: If a dice term is malformed.

    """
    if not components:
        return 0.0
    return sum(as_damage_component(c).average(is_crit) for c in components)


def validate_components(components: Sequence[Any] | None) -> tuple[DamageComponent, ...]:
    """
    Validates a damage list, reporting the index of the offending entry.

    Args:
        components (Sequence[Any] | None):
            The damage components (DamageComponent, mappings or dice
            notation strings).

    Returns:
        tuple[DamageComponent, ...]: The validated components.

    Raises:
        EmptyDamageList: If the list is empty or missing.
        InvalidDiceTerm: If a dice term is malformed.
        InvalidDamageComponent: If a notation string is malformed, or a
            component has no dice and no integer bonus.
        InvalidDamageBonus: If a component with dice has a non-integer bonus.

    """
    if not components:
        raise EmptyDamageList("An attack needs at least one damage component.")

    validated: list[DamageComponent] = []
    for i, component in enumerate(components):
        if isinstance(component, DamageComponent):
            expr, bonus = component.expr, component.bonus
        elif isinstance(component, (str, Mapping)):
            try:
                component = _component_data(component)
            except InvalidDice as e:
                raise InvalidDamageComponent(
                    e.message, component_index=i, context=e.context
                ) from e
            expr, bonus = component.get("expr") or (), component.get("bonus")
        else:
            raise InvalidDamageComponent(
                "A damage component must be a DamageComponent, a mapping or dice notation.",
                component_index=i,
            )
        for j, term in enumerate(expr):
            try:
                as_dice_term(term)
            except InvalidDice as e:
                raise InvalidDiceTerm(e.message, i, j, e.context) from e
        if not expr and (bonus is None or not is_integer(bonus)):
            raise InvalidDamageComponent(
                "A damage component needs at least one dice term or an integer bonus.",
                component_index=i,
            )
        if bonus is not None and not is_integer(bonus):
            raise InvalidDamageBonus(
                "Damage bonus must be an integer.",
                {"component_index": i, "bonus": bonus},
            )
        validated.append(as_damage_component(component))
    return tuple(validated)


def get_damage_expr(components: Sequence[DamageComponent]) -> str:
    """
    Returns a readable expression for a list of damage components.

    Args:
        components (Sequence[DamageComponent]): The damage components.

    Returns:
        str: The components joined with " + ", "0" for an empty list.

    """
    if not components:
        return "0"
    return " + ".join(str(component) for component in components)


def _notation_fields(text: str) -> dict[str, Any]:
    terms: list[DiceTerm] = []
    bonus: int | None = None
    for sign, count, sides in tokenize_dice_expression(text):
        if sides:
            if sign < 0:
                raise InvalidDice("Dice cannot be subtracted.", {"expression": text})
            terms.append(DiceTerm(count=count, sides=sides))
        else:
            bonus = (bonus or 0) + sign * count
    return {"expr": tuple(terms), "bonus": bonus}


def _component_data(data: Any) -> Any:
    """Expands dice notation in raw component data, other values pass through."""
    if isinstance(data, str):
        return _notation_fields(data)
    if isinstance(data, Mapping) and isinstance(data.get("expr"), str):
        return {**data, "expr": parse_dice_expression(data["expr"])}
    return data


def parse_damage_expression(text: str, crit_doubles_dice: bool = True) -> DamageComponent:
    """
    Parses dice notation into a single damage component.

    Dice become the component's terms and every constant (added or
    subtracted) is summed into its bonus, so "2d6 + 4" yields dice 2d6 with
    bonus 4 and "5" yields a flat bonus of 5.

    Args:
        text (str): Dice notation.
        crit_doubles_dice (bool): Whether the dice double on crits.

    Returns:
        DamageComponent: The parsed component.

    Raises:
        InvalidDice: If the notation is malformed or subtracts dice.

    """
    return DamageComponent.model_validate(
        {**_notation_fields(text), "crit_doubles_dice": crit_doubles_dice}
    )
