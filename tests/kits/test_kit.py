"""
Tests for the class kit model.
"""

import pytest
from pydantic import ValidationError

from dprcalc.kits.kit import AttackOption, ClassKit


@pytest.fixture
def kit_data():
    return {
        "id": "rogue",
        "label": "Rogue",
        "default_level": 3,
        "attacks": [
            {
                "id": "rogue-rapier",
                "label": "Rapier",
                "profile": {
                    "attack_bonus": 5,
                    "target_ac": 14,
                    "damage": [{"expr": [{"count": 1, "sides": 8}], "bonus": 3}],
                    "tags": ["melee", "weapon", "finesse"],
                },
            },
            {
                "id": "rogue-shortbow",
                "label": "Shortbow",
                "profile": {
                    "attack_bonus": 5,
                    "target_ac": 14,
                    "damage": [{"expr": [{"count": 1, "sides": 6}], "bonus": 3}],
                    "tags": ["ranged", "weapon"],
                },
            },
        ],
        "available_effects": ["archery"],
    }


def test_kit_from_data(kit_data):
    kit = ClassKit.model_validate(kit_data)
    assert kit.default_attack.id == "rogue-rapier"
    assert isinstance(kit.get_attack("rogue-shortbow"), AttackOption)
    assert kit.get_attack("rogue-club") is None


def test_kit_summary(kit_data):
    assert ClassKit.model_validate(kit_data).summary() == {
        "id": "rogue",
        "label": "Rogue",
        "default_level": 3,
        "attacks": [
            {"id": "rogue-rapier", "label": "Rapier"},
            {"id": "rogue-shortbow", "label": "Shortbow"},
        ],
        "available_effects": ["archery"],
    }


def test_kit_needs_an_attack(kit_data):
    kit_data["attacks"] = []
    with pytest.raises(ValidationError):
        ClassKit.model_validate(kit_data)


@pytest.mark.parametrize("level", [0, 21])
def test_kit_default_level_bounds(kit_data, level):
    kit_data["default_level"] = level
    with pytest.raises(ValidationError):
        ClassKit.model_validate(kit_data)
