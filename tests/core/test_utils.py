"""
Tests for the shared utilities: number checks, rule helpers and console output.
"""

import math

import pytest

from dprcalc.core.constants import EffectTag, RollMode, StatType
from dprcalc.core.errors import InvalidAbility
from dprcalc.core.utils import (
    Singleton,
    clamp,
    get_stat_modifier,
    is_finite_number,
    is_integer,
    make_bar,
    normalize_ability,
    proficiency_bonus,
)


@pytest.mark.parametrize(
    "value, expected",
    [(3, True), (-2, True), (7.0, True), (7.5, False), (True, False), ("3", False),
     (None, False), (math.inf, False), (math.nan, False)],
)
def test_is_integer(value, expected):
    assert is_integer(value) is expected


@pytest.mark.parametrize(
    "value, expected",
    [(3, True), (2.5, True), (False, False), (math.inf, False), (math.nan, False),
     ("1", False)],
)
def test_is_finite_number(value, expected):
    assert is_finite_number(value) is expected


def test_clamp():
    assert clamp(25, 2, 20) == 20
    assert clamp(1, 2, 20) == 2
    assert clamp(19, 2, 20) == 19


@pytest.mark.parametrize("score, modifier", [(10, 0), (11, 0), (8, -1), (18, 4), (1, -5)])
def test_get_stat_modifier(score, modifier):
    assert get_stat_modifier(score) == modifier


@pytest.mark.parametrize(
    "level, bonus",
    [(None, 2), (1, 2), (4, 2), (5, 3), (8, 3), (9, 4), (13, 5), (16, 5), (17, 6), (20, 6)],
)
def test_proficiency_bonus(level, bonus):
    assert proficiency_bonus(level) == bonus


def test_make_bar_lengths():
    assert make_bar(1.0, length=4).count("▮") == 4
    assert make_bar(0.5, length=4).count("▯") == 2
    # Fractions outside [0, 1] are clamped.
    assert make_bar(2.0, length=4).count("▮") == 4
    assert make_bar(-1.0, length=4).count("▯") == 4


def test_singleton_returns_same_instance():
    class Registry(metaclass=Singleton):
        def __init__(self, value=0):
            self.value = value

    first = Registry(1)
    assert Registry() is first
    assert first.value == 1
    # Explicit arguments re-initialise the shared instance.
    assert Registry(5) is first
    assert first.value == 5


def test_roll_mode_from_flags():
    assert RollMode.from_flags(False, False) is RollMode.NORMAL
    assert RollMode.from_flags(True, False) is RollMode.ADVANTAGE
    assert RollMode.from_flags(False, True) is RollMode.DISADVANTAGE
    assert RollMode.from_flags(True, True) is RollMode.NORMAL


def test_enum_display_helpers():
    assert RollMode.ADVANTAGE.display_name == "Advantage"
    assert RollMode.ADVANTAGE.colored_name == "[bold green]Advantage[/]"
    assert EffectTag.CRIT_RANGE.colored_name == "[bold magenta]crit-range[/]"
    assert EffectTag.OTHER.emoji == "❔"
    assert str(EffectTag.DAMAGE_DICE) == "DAMAGE_DICE"


@pytest.mark.parametrize(
    "name, expected",
    [(" Dex ", StatType.DEXTERITY), ("strength", StatType.STRENGTH),
     ("CHA", StatType.CHARISMA), ("Wisdom", StatType.WISDOM),
     (StatType.INTELLIGENCE, StatType.INTELLIGENCE)],
)
def test_normalize_ability(name, expected):
    assert normalize_ability(name) is expected


@pytest.mark.parametrize("name", ["luck", "", "st", None, 3])
def test_normalize_ability_rejects(name):
    with pytest.raises(InvalidAbility):
        normalize_ability(name)


def test_stat_type_short_name():
    assert [s.short_name for s in StatType] == ["STR", "DEX", "CON", "INT", "WIS", "CHA"]
