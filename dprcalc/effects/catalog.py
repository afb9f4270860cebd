"""
Effect catalog module for the calculator.

Holds every effect a kit may reference. The catalog is built once at import
time and exposed as a read-only mapping from effect id to Effect.
"""

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from catchery import log_warning

from dprcalc.combat.attack_profile import AttackProfile
from dprcalc.combat.damage import DamageComponent
from dprcalc.core.constants import EffectTag
from dprcalc.core.dice import DiceTerm
from dprcalc.core.errors import EffectNotFound, InvalidEffectIds
from dprcalc.core.utils import proficiency_bonus

from .effect import Effect, EffectContext

# ---- Helpers ----


def rage_bonus(level: int | None) -> int:
    """Rage damage: +2, +3 from level 9, +4 from level 16."""
    if not level:
        return 2
    if level >= 16:
        return 4
    if level >= 9:
        return 3
    return 2


def improved_critical_range(level: int | None) -> int:
    """Champion crit range: 19 (Improved Critical), 18 from level 15."""
    if level and level >= 15:
        return 18
    return 19


def ability_modifier(profile: AttackProfile, ctx: EffectContext) -> int:
    """
    Modifier of the attacking ability.

    Falls back to the attack bonus minus the proficiency bonus when the
    context does not carry it.
    """
    if ctx.ability_modifier is not None:
        return ctx.ability_modifier
    return max(0, profile.attack_bonus - proficiency_bonus(ctx.level))


def _flat_damage(bonus: int) -> DamageComponent:
    return DamageComponent(expr=(), bonus=bonus, crit_doubles_dice=False)


def _is_melee_weapon(profile: AttackProfile) -> bool:
    return profile.has_tag("melee") and profile.has_tag("weapon")


# ---- Effects ----

ARCHERY = Effect(
    id="archery",
    label="Archery Fighting Style",
    source="Fighting Style",
    tags=(EffectTag.TO_HIT_BONUS,),
    applies=lambda profile, ctx: profile.has_tag("ranged"),
    apply=lambda profile, ctx: profile.with_changes(
        attack_bonus=profile.attack_bonus + 2
    ),
)

DUELING = Effect(
    id="dueling",
    label="Dueling Fighting Style",
    source="Fighting Style",
    tags=(EffectTag.DAMAGE_BONUS,),
    applies=lambda profile, ctx: (
        _is_melee_weapon(profile) and not profile.has_tag("two-handed")
    ),
    apply=lambda profile, ctx: profile.with_extra_damage(_flat_damage(2)),
)

GREAT_WEAPON_MASTER = Effect(
    id="gwm",
    label="Great Weapon Master",
    source="Feat",
    tags=(EffectTag.DAMAGE_BONUS,),
    applies=lambda profile, ctx: (
        profile.has_tag("heavy") and profile.has_tag("weapon")
    ),
    apply=lambda profile, ctx: profile.with_extra_damage(
        _flat_damage(proficiency_bonus(ctx.level))
    ),
)

CHAMPION_CRIT = Effect(
    id="champion-crit",
    label="Improved Critical",
    source="Champion",
    tags=(EffectTag.CRIT_RANGE,),
    applies=lambda profile, ctx: profile.has_tag("weapon"),
    apply=lambda profile, ctx: profile.with_changes(
        crit_range=min(profile.crit_range, improved_critical_range(ctx.level))
    ),
)

RAGE = Effect(
    id="rage",
    label="Rage",
    source="Barbarian",
    tags=(EffectTag.DAMAGE_BONUS,),
    apply=lambda profile, ctx: profile.with_extra_damage(
        _flat_damage(rage_bonus(ctx.level))
    ),
)

HEX = Effect(
    id="hex",
    label="Hex",
    source="Warlock",
    tags=(EffectTag.DAMAGE_DICE,),
    applies=lambda profile, ctx: profile.has_tag("spell"),
    apply=lambda profile, ctx: profile.with_extra_damage(
        DamageComponent(expr=(DiceTerm(count=1, sides=6),), crit_doubles_dice=True)
    ),
)

HUNTERS_MARK = Effect(
    id="hunters-mark",
    label="Hunter's Mark",
    source="Ranger",
    tags=(EffectTag.DAMAGE_DICE,),
    applies=lambda profile, ctx: (
        profile.has_tag("weapon") or profile.has_tag("spell")
    ),
    apply=lambda profile, ctx: profile.with_extra_damage(
        DamageComponent(expr=(DiceTerm(count=1, sides=6),), crit_doubles_dice=True)
    ),
)

AGONIZING_BLAST = Effect(
    id="agonizing-blast",
    label="Agonizing Blast",
    source="Eldritch Invocation",
    tags=(EffectTag.DAMAGE_BONUS,),
    applies=lambda profile, ctx: profile.has_tag("eldritch-blast"),
    apply=lambda profile, ctx: profile.with_extra_damage(
        _flat_damage(ability_modifier(profile, ctx))
    ),
)

SHADOW_ARTS_DARKNESS = Effect(
    id="shadow-arts-darkness",
    label="Shadow Arts Darkness",
    source="Way of Shadow",
    tags=(EffectTag.ADVANTAGE,),
    apply=lambda profile, ctx: profile.with_changes(advantage=True),
)

INNATE_SORCERY_ATTACK = Effect(
    id="innate-sorcery-attack",
    label="Innate Sorcery",
    source="Sorcerer",
    tags=(EffectTag.ADVANTAGE,),
    applies=lambda profile, ctx: profile.has_tag("spell-attack"),
    apply=lambda profile, ctx: profile.with_changes(advantage=True),
)

# ---- Catalog ----

EFFECT_CATALOG: MappingProxyType[str, Effect] = MappingProxyType(
    {
        effect.id: effect
        for effect in (
            ARCHERY,
            DUELING,
            GREAT_WEAPON_MASTER,
            CHAMPION_CRIT,
            RAGE,
            HEX,
            HUNTERS_MARK,
            AGONIZING_BLAST,
            SHADOW_ARTS_DARKNESS,
            INNATE_SORCERY_ATTACK,
        )
    }
)


def get_effect(effect_id: str) -> Effect:
    """
    Get an effect by id.

    Raises:
        EffectNotFound: If no effect has that id.

    """
    try:
        return EFFECT_CATALOG[effect_id]
    except KeyError as e:
        raise EffectNotFound(
            f"Effect '{effect_id}' not found.", {"effect_id": effect_id}
        ) from e


def list_effects() -> list[Effect]:
    """All catalog effects, in catalog order."""
    return list(EFFECT_CATALOG.values())


def resolve_effects(effect_ids: Iterable[str]) -> list[Effect]:
    """
    Selects the catalog effects whose id is requested.

    Effects are returned in catalog order. Unknown ids are ignored and
    reported with a warning.

    Args:
        effect_ids (Iterable[str]): The requested effect ids.

    Returns:
        list[Effect]: The matching effects.

    Raises:
        InvalidEffectIds: If the ids are a single string, a mapping, not
            iterable, or contain something other than strings.

    """
    if isinstance(effect_ids, (str, bytes, Mapping)) or not isinstance(
        effect_ids, Iterable
    ):
        raise InvalidEffectIds(
            "Effect ids must be a list of strings.", {"effect_ids": effect_ids}
        )
    requested = list(effect_ids)
    if not all(isinstance(eid, str) for eid in requested):
        raise InvalidEffectIds(
            "Effect ids must be a list of strings.", {"effect_ids": requested}
        )
    unknown = [eid for eid in requested if eid not in EFFECT_CATALOG]
    if unknown:
        log_warning(
            "Ignoring unknown effect ids.",
            {"unknown": unknown, "known": list(EFFECT_CATALOG)},
        )
    return [effect for effect in EFFECT_CATALOG.values() if effect.id in requested]
