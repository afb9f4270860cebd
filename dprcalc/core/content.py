"""
Content module for the calculator.

Loads the class kits from the JSON data directory once and serves them by id.
"""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

from catchery import log_warning
from pydantic import ValidationError

from dprcalc.core.constants import DATA_DIR
from dprcalc.core.errors import ContentError, DprError
from dprcalc.core.logging import log_debug, log_info
from dprcalc.core.utils import Singleton
from dprcalc.effects.catalog import EFFECT_CATALOG
from dprcalc.kits.kit import ClassKit


class KitRepository(metaclass=Singleton):
    """
    Registry of every class kit, with fast by-id access.

    The repository is loaded once and treated as read-only afterwards.
    """

    kits: dict[str, ClassKit]

    def __init__(self, data_dir: Path | None = None) -> None:
        """
        Initialize the KitRepository.

        Args:
            data_dir (Path | None):
                The directory containing the kit data. The packaged data is
                used on first use when no directory is given.

        """
        if data_dir:
            self.reload(data_dir)
        elif not hasattr(self, "kits"):
            self.reload(DATA_DIR)

    def reload(self, root: Path) -> None:
        """
        (Re)load the kits from disk.

        Args:
            root (Path):
                The directory containing kits.json.

        """
        self.kits = _load_json_file(
            Path(root) / "kits.json",
            self._load_kits,
            "class kits",
        )
        self.data_dir = Path(root)
        log_info("Loaded class kits", {"count": len(self.kits), "path": self.data_dir})

    def get_kit(self, kit_id: str) -> ClassKit | None:
        """Get a kit by id, or None if not found."""
        return self.kits.get(kit_id)

    def list_kits(self) -> list[ClassKit]:
        """All kits, in file order."""
        return list(self.kits.values())

    @staticmethod
    def _load_kits(data: list[dict]) -> dict[str, ClassKit]:
        """
        Load class kits from JSON data.

        Args:
            data (list[dict]): List of kit data dictionaries.

        Returns:
            dict[str, ClassKit]: Dictionary mapping kit ids to ClassKit objects.

        Raises:
            ContentError: If duplicate kit ids are found.

        """
        kits: dict[str, ClassKit] = {}
        for kit_data in data:
            kit = ClassKit.model_validate(kit_data)
            if kit.id in kits:
                raise ContentError(f"Duplicate kit id: {kit.id}", {"kit_id": kit.id})
            unknown = [e for e in kit.available_effects if e not in EFFECT_CATALOG]
            if unknown:
                log_warning(
                    f"Kit '{kit.id}' lists effects missing from the catalog.",
                    {"kit_id": kit.id, "unknown": unknown},
                )
            kits[kit.id] = kit
        return kits


def _load_json_file(
    filepath: Path,
    loader_func: Callable[[list[dict]], dict[str, Any]],
    description: str,
) -> dict[str, Any]:
    """Helper to load and validate JSON files"""
    log_debug(f"Loading {description}", {"path": filepath})
    try:
        if not filepath.is_file():
            raise ContentError(f"File not found: {filepath}")
        with open(filepath, encoding="utf-8") as f:
            data = json.load(f)
        if not data:
            raise ContentError(f"Empty data list in {filepath}")
        if not isinstance(data, list):
            raise ContentError(
                f"Expected list in {filepath}, got {type(data).__name__}"
            )
        return loader_func(data)
    except ContentError:
        raise
    except (json.JSONDecodeError, ValidationError, DprError) as e:
        raise ContentError(
            f"File {filepath} raised an error: {e}", {"path": str(filepath)}
        ) from e
