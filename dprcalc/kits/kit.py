"""
Class kit module for the calculator.

A kit bundles the preset attacks of a character archetype with the effects
that archetype may enable.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from dprcalc.combat.attack_profile import AttackProfile


class AttackOption(BaseModel):
    """A named preset attack of a kit."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        description="Unique identifier of the attack.",
    )
    label: str = Field(
        description="Human readable name of the attack.",
    )
    profile: AttackProfile = Field(
        description="The base attack profile.",
    )


class ClassKit(BaseModel):
    """
    Represents a character class kit with its preset attacks and the effects
    available to it.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        description="Unique identifier of the kit (e.g. 'fighter').",
    )
    label: str = Field(
        description="Human readable name of the kit.",
    )
    default_level: int = Field(
        ge=1,
        le=20,
        description="Level suggested when the caller does not choose one.",
    )
    attacks: tuple[AttackOption, ...] = Field(
        min_length=1,
        description="Preset attacks, the first one is the default.",
    )
    available_effects: tuple[str, ...] = Field(
        default=(),
        description="Ids of the catalog effects this kit may enable.",
    )

    @property
    def default_attack(self) -> AttackOption:
        """The first declared attack."""
        return self.attacks[0]

    def get_attack(self, attack_id: str) -> AttackOption | None:
        """Get a preset attack by id, or None if not found."""
        return next((a for a in self.attacks if a.id == attack_id), None)

    def summary(self) -> dict[str, Any]:
        """Plain description of the kit."""
        return {
            "id": self.id,
            "label": self.label,
            "default_level": self.default_level,
            "attacks": [{"id": a.id, "label": a.label} for a in self.attacks],
            "available_effects": list(self.available_effects),
        }
