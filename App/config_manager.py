"""Settings persistence for the halftone studio.

This module handles loading and saving of halftone and animation settings
to/from a JSON file.
"""

import json
from dataclasses import asdict, fields
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

from models import CONFIG_FILE, AnimationSettings, HalftoneSettings


def _to_json(settings) -> dict:
    """Dataclass to a JSON-ready dict, with enums stored by value."""
    return {
        key: value.value if isinstance(value, Enum) else value
        for key, value in asdict(settings).items()
    }


def _merge(defaults, data: dict):
    """Build a settings object from known keys in data, falling back to defaults."""
    known = {f.name for f in fields(defaults)}
    values = {key: value for key, value in data.items() if key in known}
    return type(defaults)(**{**asdict(defaults), **values})


class SettingsManager:
    """Handles loading and saving of halftone settings."""

    def __init__(self, config_path: Path = CONFIG_FILE):
        """Initialize settings manager.

        Args:
            config_path: Path to configuration file (defaults to ~/.halftone_config.json)
        """
        self.config_path = config_path

    def load(self) -> Tuple[HalftoneSettings, AnimationSettings]:
        """Load settings from file, returning defaults if not found.

        Returns:
            Tuple of (HalftoneSettings, AnimationSettings) with loaded or default values
        """
        settings = HalftoneSettings()
        animation = AnimationSettings()

        try:
            if self.config_path.exists():
                with open(self.config_path, "r") as f:
                    data = json.load(f)
                settings = _merge(settings, data.get("halftone", {}))
                animation = _merge(animation, data.get("animation", {}))
                print(f"✓ Loaded settings from {self.config_path}")
        except Exception as e:
            print(f"Warning: Could not load settings file: {e}")
            settings = HalftoneSettings()
            animation = AnimationSettings()

        return settings, animation

    def save(
        self, settings: HalftoneSettings, animation: AnimationSettings
    ) -> Tuple[bool, Optional[str]]:
        """Save settings to file.

        Args:
            settings: HalftoneSettings to save
            animation: AnimationSettings to save

        Returns:
            Tuple of (success: bool, error_message: Optional[str])
        """
        try:
            with open(self.config_path, "w") as f:
                json.dump(
                    {"halftone": _to_json(settings), "animation": _to_json(animation)},
                    f,
                    indent=2,
                )
            return True, None
        except Exception as e:
            return False, str(e)
