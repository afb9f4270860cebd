"""
Tests for attack profiles.
"""

import pytest

from dprcalc.combat.attack_profile import AttackProfile, as_attack_profile
from dprcalc.combat.damage import DamageComponent
from dprcalc.core.constants import RollMode
from dprcalc.core.errors import EmptyDamageList, InvalidDiceTerm, InvalidProfile


@pytest.fixture
def profile_data():
    return {
        "attack_bonus": 7,
        "target_ac": 15,
        "damage": [{"expr": [{"count": 2, "sides": 6}], "bonus": 3}],
        "tags": ["melee", "weapon"],
    }


@pytest.fixture
def profile(profile_data):
    return AttackProfile.model_validate(profile_data)


def test_profile_defaults(profile):
    assert profile.crit_range == 20
    assert profile.advantage is False
    assert profile.disadvantage is False
    assert profile.tags == frozenset({"melee", "weapon"})
    assert isinstance(profile.damage[0], DamageComponent)


def test_profile_accepts_integral_floats(profile_data):
    profile_data["attack_bonus"] = 7.0
    assert AttackProfile.model_validate(profile_data).attack_bonus == 7


@pytest.mark.parametrize(
    "field, value",
    [("attack_bonus", 7.5), ("attack_bonus", "7"), ("target_ac", None), ("crit_range", 19.5)],
)
def test_profile_rejects_non_integers(profile_data, field, value):
    profile_data[field] = value
    with pytest.raises(InvalidProfile):
        AttackProfile.model_validate(profile_data)


def test_profile_requires_damage(profile_data):
    profile_data["damage"] = []
    with pytest.raises(EmptyDamageList):
        AttackProfile.model_validate(profile_data)


def test_profile_reports_bad_dice(profile_data):
    profile_data["damage"] = [{"expr": [{"count": 0, "sides": 6}]}]
    with pytest.raises(InvalidDiceTerm) as exc_info:
        AttackProfile.model_validate(profile_data)
    assert exc_info.value.component_index == 0
    assert exc_info.value.term_index == 0


def test_effective_crit_range_is_clamped(profile):
    assert profile.with_changes(crit_range=1).effective_crit_range == 2
    assert profile.with_changes(crit_range=25).effective_crit_range == 20
    assert profile.with_changes(crit_range=19).effective_crit_range == 19


def test_roll_mode(profile):
    assert profile.roll_mode is RollMode.NORMAL
    assert profile.with_changes(advantage=True).roll_mode is RollMode.ADVANTAGE
    both = profile.with_changes(advantage=True, disadvantage=True)
    assert both.roll_mode is RollMode.NORMAL


def test_with_changes_leaves_original_untouched(profile):
    changed = profile.with_changes(attack_bonus=9)
    assert changed.attack_bonus == 9
    assert profile.attack_bonus == 7
    assert changed.damage == profile.damage


def test_with_changes_revalidates(profile):
    with pytest.raises(InvalidProfile):
        profile.with_changes(target_ac=14.5)


def test_with_extra_damage(profile):
    extra = DamageComponent(bonus=2, crit_doubles_dice=False)
    changed = profile.with_extra_damage(extra)
    assert len(changed.damage) == 2
    assert changed.damage[-1] == extra
    assert len(profile.damage) == 1


def test_profile_is_frozen(profile):
    with pytest.raises(Exception):
        profile.attack_bonus = 10


def test_has_tag(profile):
    assert profile.has_tag("melee")
    assert not profile.has_tag("spell")


def test_as_attack_profile(profile, profile_data):
    assert as_attack_profile(profile) is profile
    assert as_attack_profile(profile_data) == profile
    with pytest.raises(InvalidProfile):
        as_attack_profile("greatsword")


def test_as_attack_profile_checks_constructed_profiles(profile):
    unchecked = AttackProfile.model_construct(
        attack_bonus=7, target_ac=15, crit_range=20, damage=(),
        advantage=False, disadvantage=False, tags=frozenset(),
    )
    with pytest.raises(EmptyDamageList):
        as_attack_profile(unchecked)
