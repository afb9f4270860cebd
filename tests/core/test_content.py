"""
Tests for loading class kits from JSON data.
"""

import json

import pytest

from dprcalc.core.constants import DATA_DIR
from dprcalc.core.content import KitRepository
from dprcalc.core.errors import ContentError
from dprcalc.kits.kit import ClassKit


def _kit_data(kit_id="tester", effects=()):
    return {
        "id": kit_id,
        "label": "Tester",
        "default_level": 3,
        "attacks": [
            {
                "id": "tester-dagger",
                "label": "Dagger",
                "profile": {
                    "attack_bonus": 5,
                    "target_ac": 13,
                    "damage": [{"expr": [{"count": 1, "sides": 4}], "bonus": 3}],
                    "tags": ["melee", "weapon"],
                },
            }
        ],
        "available_effects": list(effects),
    }


@pytest.fixture
def repository():
    repo = KitRepository()
    yield repo
    repo.reload(DATA_DIR)


def _write(tmp_path, payload):
    (tmp_path / "kits.json").write_text(
        payload if isinstance(payload, str) else json.dumps(payload),
        encoding="utf-8",
    )
    return tmp_path


def test_packaged_kits_are_loaded(repository):
    ids = [kit.id for kit in repository.list_kits()]
    assert ids == ["fighter", "monk", "paladin", "sorcerer", "warlock"]
    assert all(isinstance(kit, ClassKit) for kit in repository.list_kits())


def test_repository_is_a_singleton(repository):
    assert KitRepository() is repository


def test_get_kit(repository):
    fighter = repository.get_kit("fighter")
    assert fighter.default_attack.id == "fighter-greatsword"
    assert fighter.default_attack.profile.has_tag("heavy")
    assert repository.get_kit("bard") is None


def test_reload_from_directory(repository, tmp_path):
    repository.reload(_write(tmp_path, [_kit_data()]))
    assert [kit.id for kit in repository.list_kits()] == ["tester"]
    kit = repository.get_kit("tester")
    assert kit.default_attack.profile.damage[0].bonus == 3


def test_duplicate_kit_ids(repository, tmp_path):
    with pytest.raises(ContentError, match="Duplicate kit id"):
        repository.reload(_write(tmp_path, [_kit_data(), _kit_data()]))


def test_missing_file(repository, tmp_path):
    with pytest.raises(ContentError, match="File not found"):
        repository.reload(tmp_path)


def test_empty_list(repository, tmp_path):
    with pytest.raises(ContentError, match="Empty data list"):
        repository.reload(_write(tmp_path, []))


def test_not_a_list(repository, tmp_path):
    with pytest.raises(ContentError, match="Expected list"):
        repository.reload(_write(tmp_path, {"id": "tester"}))


def test_malformed_json(repository, tmp_path):
    with pytest.raises(ContentError):
        repository.reload(_write(tmp_path, "[{"))


def test_invalid_kit_is_wrapped(repository, tmp_path):
    data = _kit_data()
    data["attacks"][0]["profile"]["damage"] = []
    with pytest.raises(ContentError, match="raised an error"):
        repository.reload(_write(tmp_path, [data]))


def test_unknown_effects_are_reported(repository, tmp_path, mocker):
    mock_warning = mocker.patch("dprcalc.core.content.log_warning")
    repository.reload(_write(tmp_path, [_kit_data(effects=["archery", "smite"])]))
    mock_warning.assert_called_once()
    _, context = mock_warning.call_args.args
    assert context["unknown"] == ["smite"]


def test_damage_in_dice_notation(repository, tmp_path):
    data = _kit_data()
    data["attacks"][0]["profile"]["damage"] = ["1d4+3", {"expr": "1d6", "crit_doubles_dice": False}]
    repository.reload(_write(tmp_path, [data]))
    damage = repository.get_kit("tester").default_attack.profile.damage
    assert damage[0].bonus == 3
    assert damage[1].crit_doubles_dice is False


def test_bad_dice_notation_is_wrapped(repository, tmp_path):
    data = _kit_data()
    data["attacks"][0]["profile"]["damage"] = ["1d7"]
    with pytest.raises(ContentError, match="raised an error"):
        repository.reload(_write(tmp_path, [data]))


def test_packaged_fighter_damage(repository):
    longbow = repository.get_kit("fighter").get_attack("fighter-longbow")
    assert str(longbow.profile.damage[0]) == "1d8 + 3"
