"""
Attack profile module for the calculator.

Defines the immutable description of a single attack: bonuses, target,
critical range, damage composition, roll mode and descriptive tags.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dprcalc.combat.damage import DamageComponent, validate_components
from dprcalc.core.constants import MAX_CRIT_RANGE, MIN_CRIT_RANGE, RollMode
from dprcalc.core.errors import InvalidProfile
from dprcalc.core.utils import clamp, is_integer


def _check_profile_numbers(attack_bonus: Any, target_ac: Any, crit_range: Any) -> None:
    if not is_integer(attack_bonus):
        raise InvalidProfile(
            "Attack bonus must be an integer.", {"attack_bonus": attack_bonus}
        )
    if not is_integer(target_ac):
        raise InvalidProfile("Target AC must be an integer.", {"target_ac": target_ac})
    if crit_range is not None and not is_integer(crit_range):
        raise InvalidProfile(
            "Crit range must be an integer.", {"crit_range": crit_range}
        )


class AttackProfile(BaseModel):
    """
    Structured description of one attack.

    Profiles are immutable: effects and callers derive new profiles with
    with_changes() or with_extra_damage() and never modify an existing one.
    """

    model_config = ConfigDict(frozen=True)

    attack_bonus: int = Field(
        description="Bonus added to the d20 attack roll.",
    )
    target_ac: int = Field(
        description="Armor Class of the target.",
    )
    crit_range: int = Field(
        default=MAX_CRIT_RANGE,
        description="Lowest natural roll that is a critical hit.",
    )
    damage: tuple[DamageComponent, ...] = Field(
        description="The damage components dealt on a hit (non-empty).",
    )
    advantage: bool = Field(
        default=False,
        description="Whether the attack roll has advantage.",
    )
    disadvantage: bool = Field(
        default=False,
        description="Whether the attack roll has disadvantage.",
    )
    tags: frozenset[str] = Field(
        default_factory=frozenset,
        description="Descriptive tags (melee, ranged, heavy, spell, ...).",
    )

    @model_validator(mode="before")
    @classmethod
    def _check_raw_values(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            _check_profile_numbers(
                data.get("attack_bonus"),
                data.get("target_ac"),
                data.get("crit_range"),
            )
            # Explicit nulls from JSON fall back to the field defaults.
            data = {k: v for k, v in data.items() if v is not None}
            data["damage"] = validate_components(data.get("damage"))
        return data

    @property
    def effective_crit_range(self) -> int:
        """The crit range clamped to [2, 20], as consumed by the probability model."""
        return int(clamp(self.crit_range, MIN_CRIT_RANGE, MAX_CRIT_RANGE))

    @property
    def roll_mode(self) -> RollMode:
        """The effective roll mode after advantage and disadvantage cancel."""
        return RollMode.from_flags(self.advantage, self.disadvantage)

    def has_tag(self, tag: str) -> bool:
        """Check whether the profile carries a tag."""
        return tag in self.tags

    def with_changes(self, **changes: Any) -> "AttackProfile":
        """
        Returns a new, re-validated profile with some fields replaced.

        Args:
            **changes: Field values to replace.

        Returns:
            AttackProfile: The new profile, this one is left untouched.

        """
        data = self.model_dump()
        data.update(changes)
        return AttackProfile.model_validate(data)

    def with_extra_damage(self, component: DamageComponent) -> "AttackProfile":
        """
        Returns a new profile with one more damage component appended.

        Args:
            component (DamageComponent): The component to append.

        Returns:
            AttackProfile: The new profile.

        """
        return self.with_changes(damage=(*self.damage, component))


def as_attack_profile(profile: Any) -> AttackProfile:
    """
    Turns a profile or a plain mapping into a validated AttackProfile.

    Args:
        profile (Any): An AttackProfile or a mapping of its fields.

    Returns:
        AttackProfile: The validated profile.

    Raises:
        InvalidProfile: If the attack bonus or target AC are not integers.
        EmptyDamageList, InvalidDamageComponent, InvalidDiceTerm,
        InvalidDamageBonus: If the damage list is malformed.

    """
    if isinstance(profile, AttackProfile):
        # Profiles built with model_construct() skip validation.
        _check_profile_numbers(
            profile.attack_bonus, profile.target_ac, profile.crit_range
        )
        validate_components(profile.damage)
        return profile
    if isinstance(profile, Mapping):
        return AttackProfile.model_validate(profile)
    raise InvalidProfile(
        "An attack profile must be an AttackProfile or a mapping.",
        {"profile": profile},
    )
