"""
Effect module for the calculator.

Defines effects, the conditional rules that transform an attack profile,
and the pipeline that folds an ordered list of effects over a base profile.
"""

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dprcalc.combat.attack_profile import AttackProfile, as_attack_profile
from dprcalc.core.constants import MAX_LEVEL, MIN_LEVEL, EffectTag
from dprcalc.core.errors import InvalidEffect, InvalidLevel
from dprcalc.core.logging import log_debug
from dprcalc.core.utils import is_integer


def check_level(level: Any) -> int:
    """
    Validates a character level.

    Args:
        level (Any): The level to check.

    Returns:
        int: The level as an integer.

    Raises:
        InvalidLevel: If the level is not a whole number in [1, 20].

    """
    if not is_integer(level) or not MIN_LEVEL <= level <= MAX_LEVEL:
        raise InvalidLevel(
            f"Character level must be between {MIN_LEVEL} and {MAX_LEVEL}.",
            {"level": level},
        )
    return int(level)


class EffectContext(BaseModel):
    """Supplemental state that effects may read while transforming a profile."""

    model_config = ConfigDict(frozen=True)

    level: int | None = Field(
        default=None,
        description="Character level (1-20), None when unknown.",
    )
    ability_modifier: int | None = Field(
        default=None,
        description="Modifier of the attacking ability, None when unknown.",
    )

    @model_validator(mode="before")
    @classmethod
    def _check_raw_values(cls, data: Any) -> Any:
        if isinstance(data, Mapping) and data.get("level") is not None:
            check_level(data["level"])
        return data


ProfilePredicate = Callable[[AttackProfile, EffectContext], bool]
ProfileTransform = Callable[[AttackProfile, EffectContext], AttackProfile]


class Effect(BaseModel):
    """
    A composable rule that conditionally transforms an attack profile.

    An effect is a data record holding two functions: an optional `applies`
    predicate and a required `apply` transform. Both are pure; `apply`
    returns a new profile and never mutates its input.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        description="Unique identifier of the effect.",
    )
    label: str = Field(
        description="Human readable name of the effect.",
    )
    source: str | None = Field(
        default=None,
        description="Class feature, feat or spell granting the effect.",
    )
    tags: tuple[EffectTag, ...] = Field(
        default=(),
        description="What part of the profile the effect touches.",
    )
    requires_simulation: bool = Field(
        default=False,
        description="Whether the effect can only be evaluated by simulation.",
    )
    applies: ProfilePredicate | None = Field(
        default=None,
        exclude=True,
        description="Optional predicate, the effect is skipped when it returns False.",
    )
    apply: ProfileTransform = Field(
        exclude=True,
        description="Pure transform returning the modified profile.",
    )

    def is_applicable(self, profile: AttackProfile, ctx: EffectContext) -> bool:
        """Check whether the effect applies to a profile (True without predicate)."""
        return self.applies is None or bool(self.applies(profile, ctx))

    def summary(self) -> dict[str, Any]:
        """Plain description of the effect, without its functions."""
        return {
            "id": self.id,
            "label": self.label,
            "source": self.source,
            "tags": [tag.value for tag in self.tags],
            "requires_simulation": self.requires_simulation,
        }


class EffectResolution(BaseModel):
    """Outcome of folding effects over a base profile."""

    model_config = ConfigDict(frozen=True)

    profile: AttackProfile = Field(
        description="The fully resolved profile.",
    )
    requires_simulation: bool = Field(
        default=False,
        description="True when any applied effect requires simulation.",
    )
    applied: tuple[str, ...] = Field(
        default=(),
        description="Ids of the effects that applied, in order.",
    )


def as_effect_context(ctx: Any) -> EffectContext:
    """Turns None, a mapping or a context into a validated EffectContext."""
    if ctx is None:
        return EffectContext()
    if isinstance(ctx, EffectContext):
        return ctx
    return EffectContext.model_validate(ctx)


def apply_effects(
    base: Any,
    effects: Sequence[Effect],
    ctx: Any = None,
) -> EffectResolution:
    """
    Folds effects, in the given order, over a base profile.

    Each effect sees the profile produced by the effects before it, so the
    order is significant: an effect whose predicate returns False for the
    current profile is skipped and contributes nothing, not even its
    simulation flag.

    Args:
        base (Any): The base AttackProfile (or mapping of its fields).
        effects (Sequence[Effect]): The effects to fold, in order.
        ctx (Any): An EffectContext, a mapping of its fields, or None.

    Returns:
        EffectResolution: The resolved profile and the aggregate flag.

    Raises:
        InvalidEffect: If a transform does not return an AttackProfile.

    """
    profile = as_attack_profile(base)
    context = as_effect_context(ctx)
    requires_simulation = False
    applied: list[str] = []

    for effect in effects:
        if not effect.is_applicable(profile, context):
            log_debug("Effect skipped", {"effect": effect.id})
            continue
        result = effect.apply(profile, context)
        if not isinstance(result, AttackProfile):
            raise InvalidEffect(
                f"Effect '{effect.id}' did not return an attack profile.",
                {"effect": effect.id, "returned": type(result).__name__},
            )
        profile = result
        applied.append(effect.id)
        if effect.requires_simulation:
            requires_simulation = True
        log_debug("Effect applied", {"effect": effect.id})

    return EffectResolution(
        profile=profile,
        requires_simulation=requires_simulation,
        applied=tuple(applied),
    )
