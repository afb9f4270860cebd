"""
Error taxonomy for the calculator.

Every failure raised by the calculator derives from DprError and carries a
context dictionary (offending values, component and term indices) so that
callers can present it without parsing the message.

DprError derives from Exception, not ValueError: pydantic re-raises it from
validators unchanged instead of wrapping it in a ValidationError.
"""

from typing import Any, Optional


class DprError(Exception):
    """Base class of every error raised by the calculator."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = context or {}

    def __str__(self) -> str:
        if not self.context:
            return self.message
        context_str = " ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"{self.message} [{context_str}]"


# ---- Dice ----


class InvalidDice(DprError):
    """A dice term has a bad count, number of sides or flat modifier."""


class InvalidDiceTerm(InvalidDice):
    """A dice term inside a damage component is malformed."""

    def __init__(
        self,
        message: str,
        component_index: int,
        term_index: int,
        context: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message,
            {
                "component_index": component_index,
                "term_index": term_index,
                **(context or {}),
            },
        )
        self.component_index = component_index
        self.term_index = term_index


# ---- Damage ----


class InvalidDamageComponent(DprError):
    """A damage component has neither dice nor an integer bonus."""

    def __init__(
        self,
        message: str,
        component_index: Optional[int] = None,
        context: Optional[dict[str, Any]] = None,
    ):
        ctx = dict(context or {})
        if component_index is not None:
            ctx["component_index"] = component_index
        super().__init__(message, ctx)
        self.component_index = component_index


class InvalidDamageBonus(DprError):
    """A damage component carries a non-integer bonus."""


class EmptyDamageList(DprError):
    """An attack profile declares no damage components."""


# ---- Profiles and simulation ----


class InvalidProfile(DprError):
    """An attack profile has a non-integer attack bonus or target AC."""


class InvalidSimulationInput(DprError):
    """Simulation parameters are non-finite or out of range."""


class InvalidCalcInput(DprError):
    """Scalar inputs of a quick calculation are out of range."""


# ---- Kits and effects ----


class InvalidLevel(DprError):
    """A character level outside 1..20."""


class InvalidTargetAC(DprError):
    """A target AC that is not a positive integer."""


class KitNotFound(DprError):
    """No registered kit matches the requested id."""


class AttackNotFound(DprError):
    """A kit has no preset attack with the requested id."""


class InvalidEffectIds(DprError):
    """Effect ids were not given as a collection of strings."""


class InvalidAbility(DprError):
    """An ability name that is not one of the six D&D abilities."""


class EffectNotFound(DprError):
    """No catalog effect matches the requested id."""


class InvalidEffect(DprError):
    """An effect transform returned something other than an attack profile."""


class ContentError(DprError):
    """A kit data file is missing or malformed."""
