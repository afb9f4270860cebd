"""
Tests for the analytic expected damage.
"""

import pytest

from dprcalc.combat.attack_profile import AttackProfile
from dprcalc.combat.expected import (
    CalcResult,
    calculate_profile,
    expected_damage,
    expected_damage_from_profile,
)
from dprcalc.core.errors import EmptyDamageList, InvalidProfile


@pytest.fixture
def profile():
    return AttackProfile.model_validate(
        {
            "attack_bonus": 7,
            "target_ac": 15,
            "damage": [{"expr": [{"count": 2, "sides": 6}], "bonus": 3}],
        }
    )


def test_expected_damage_formula():
    assert expected_damage(0.65, 0.05, 10, 17) == pytest.approx(0.6 * 10 + 0.05 * 17)


def test_expected_damage_floors_non_crit_share():
    # A crit chance above the hit chance only counts crit damage.
    assert expected_damage(0.05, 0.10, 10, 20) == pytest.approx(2.0)


def test_calculate_profile(profile):
    result = calculate_profile(profile)
    assert isinstance(result, CalcResult)
    assert result.hit_chance == pytest.approx(0.65)
    assert result.critical_chance == pytest.approx(0.05)
    assert result.expected_damage == pytest.approx(6.85)


def test_calculate_profile_advantage(profile):
    result = calculate_profile(profile.with_changes(advantage=True))
    assert result.hit_chance == pytest.approx(0.8775)
    assert result.critical_chance == pytest.approx(0.0975)
    assert result.expected_damage == pytest.approx(9.4575)


def test_calculate_profile_disadvantage(profile):
    result = calculate_profile(profile.with_changes(disadvantage=True))
    assert result.hit_chance == pytest.approx(0.4225)
    assert result.critical_chance == pytest.approx(0.0025)
    assert result.expected_damage == pytest.approx(4.2425)


def test_wider_crit_range_increases_damage(profile):
    normal = calculate_profile(profile).expected_damage
    improved = calculate_profile(profile.with_changes(crit_range=19)).expected_damage
    # One more crit face trades 10 average damage for 17.
    assert improved - normal == pytest.approx(0.05 * 7)


def test_calculate_profile_from_mapping(profile):
    assert calculate_profile(profile.model_dump()) == calculate_profile(profile)


def test_calculate_profile_errors(profile):
    data = profile.model_dump()
    data["damage"] = []
    with pytest.raises(EmptyDamageList):
        calculate_profile(data)
    data = profile.model_dump()
    data["attack_bonus"] = 1.5
    with pytest.raises(InvalidProfile):
        calculate_profile(data)


def test_expected_damage_from_profile(profile):
    assert expected_damage_from_profile(profile) == pytest.approx(6.85)
