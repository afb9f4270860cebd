"""
Kit resolver module for the calculator.

Builds a fully resolved attack profile from a class kit, a level, a set of
effect ids and a target AC, and evaluates it analytically.
"""

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field

from dprcalc.combat.attack_profile import AttackProfile
from dprcalc.combat.expected import CalcResult, calculate_profile
from dprcalc.core.content import KitRepository
from dprcalc.core.errors import AttackNotFound, InvalidTargetAC, KitNotFound
from dprcalc.core.utils import is_integer
from dprcalc.effects.catalog import resolve_effects
from dprcalc.effects.effect import EffectContext, apply_effects, check_level
from dprcalc.kits.kit import ClassKit


class KitBuild(BaseModel):
    """Analytic result of a kit build together with its resolved profile."""

    model_config = ConfigDict(frozen=True)

    result: CalcResult = Field(
        description="Hit chance, crit chance and expected damage.",
    )
    profile: AttackProfile = Field(
        description="The resolved profile, ready to be simulated.",
    )
    requires_simulation: bool = Field(
        default=False,
        description="True when an applied effect requires simulation.",
    )
    applied_effects: tuple[str, ...] = Field(
        default=(),
        description="Ids of the effects that applied, in order.",
    )


def get_kit(kit_id: str) -> ClassKit:
    """
    Get a registered kit by id.

    Raises:
        KitNotFound: If no kit has that id.

    """
    kit = KitRepository().get_kit(kit_id) if isinstance(kit_id, str) else None
    if kit is None:
        raise KitNotFound(f"Class kit '{kit_id}' not found.", {"kit_id": kit_id})
    return kit


def list_kits() -> list[ClassKit]:
    """All registered kits."""
    return KitRepository().list_kits()


def build_from_kit(
    kit_id: str,
    level: int,
    effect_ids: Iterable[str],
    target_ac: int,
    ability_modifier: int | None = None,
    attack_id: str | None = None,
) -> KitBuild:
    """
    Resolves one of a kit's attacks with the requested effects.

    The chosen attack (the kit's first one by default) is used with its
    target AC replaced. Effects are taken from the catalog in catalog
    order; ids missing from the catalog are ignored.

    Args:
        kit_id (str): Id of the kit.
        level (int): Character level (1-20), passed to the effects.
        effect_ids (Iterable[str]): Ids of the effects to enable.
        target_ac (int): Armor Class of the target (>= 1).
        ability_modifier (int | None): Modifier of the attacking ability,
            for effects that add it to damage.
        attack_id (str | None): Id of the kit attack to use, None for the
            default attack.

    Returns:
        KitBuild: The analytic result and the resolved profile.

    Raises:
        KitNotFound: If the kit does not exist.
        AttackNotFound: If the kit has no attack with that id.
        InvalidLevel: If the level is outside 1..20.
        InvalidTargetAC: If the target AC is not a positive integer.
        InvalidEffectIds: If the effect ids are not a list of strings.

    """
    kit = get_kit(kit_id)
    attack = kit.default_attack if attack_id is None else kit.get_attack(attack_id)
    if attack is None:
        raise AttackNotFound(
            f"Kit '{kit.id}' has no attack '{attack_id}'.",
            {"kit_id": kit.id, "attack_id": attack_id},
        )
    level = check_level(level)
    if not is_integer(target_ac) or target_ac < 1:
        raise InvalidTargetAC(
            "Target's AC must be an integer greater than 0.",
            {"target_ac": target_ac},
        )

    base = attack.profile.with_changes(target_ac=int(target_ac))
    resolution = apply_effects(
        base,
        resolve_effects(effect_ids),
        EffectContext(level=level, ability_modifier=ability_modifier),
    )
    return KitBuild(
        result=calculate_profile(resolution.profile),
        profile=resolution.profile,
        requires_simulation=resolution.requires_simulation,
        applied_effects=resolution.applied,
    )
