"""
Settings management for uigen
"""

import copy
import json
import os
from pathlib import Path
from typing import Any

from uigen.constants import DEFAULT_AUTHOR_EMAIL, DEFAULT_AUTHOR_NAME, DEFAULT_HISTORY_LIMIT


class Settings:
    """Manages engine settings"""

    DEFAULT_SETTINGS: dict[str, Any] = {
        "vfs": {
            "history_limit": DEFAULT_HISTORY_LIMIT,  # Undo depth per file
            "strict_create": False,  # True: create fails on an existing path
        },
        "preview": {
            "url": "",  # Bundler endpoint; empty disables the HTTP sink
            "directory": "",  # Directory to mirror snapshots into; empty disables
            "timeout": 10,  # Seconds per request
            "max_retries": 3,
        },
        "export": {
            "author_name": DEFAULT_AUTHOR_NAME,
            "author_email": DEFAULT_AUTHOR_EMAIL,
        },
    }

    def __init__(self, config_path: Path | None = None) -> None:
        """Initialize settings"""
        if config_path is None:
            config_path = Path.home() / ".config" / "uigen" / "settings.json"

        self.config_path = config_path
        self.settings = copy.deepcopy(self.DEFAULT_SETTINGS)
        self.load()

    def load(self) -> None:
        """Load settings from file"""
        if self.config_path.exists():
            with open(self.config_path) as f:
                loaded = json.load(f)
                # Merge with defaults to handle new settings
                self._merge_settings(self.settings, loaded)

    def save(self) -> None:
        """Save settings to file"""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "w") as f:
            json.dump(self.settings, f, indent=2)

    def _merge_settings(self, base: dict[str, Any], updates: dict[str, Any]) -> None:
        """Recursively merge settings dictionaries"""
        for key, value in updates.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                base_dict: dict[str, Any] = base[key]
                value_dict: dict[str, Any] = value
                self._merge_settings(base_dict, value_dict)
            else:
                base[key] = value

    def get(self, path: str, default: Any = None) -> Any:
        """Get a setting by dot-separated path (e.g., 'vfs.history_limit')"""
        parts = path.split(".")
        value: Any = self.settings

        for part in parts:
            if isinstance(value, dict):
                value_dict: dict[str, Any] = value
                if part in value_dict:
                    value = value_dict[part]
                else:
                    return default
            else:
                return default

        return value

    def set(self, path: str, value: Any) -> None:
        """Set a setting by dot-separated path"""
        parts = path.split(".")
        target: Any = self.settings

        for part in parts[:-1]:
            if part not in target:
                target[part] = {}
            target = target[part]

        target[parts[-1]] = value

    def get_history_limit(self) -> int | None:
        """Get the per-file undo depth.

        0 or a negative value means unbounded.
        """
        limit = int(self.get("vfs.history_limit", DEFAULT_HISTORY_LIMIT))
        return limit if limit > 0 else None

    def get_preview_url(self) -> str:
        """Get the bundler endpoint from settings or environment"""
        url: str = str(self.get("preview.url", ""))
        if not url:
            url = os.environ.get("UIGEN_PREVIEW_URL", "")
        return url

    def get_preview_timeout(self) -> float:
        timeout = float(self.get("preview.timeout", 10))
        return max(0.1, timeout)

    def get_preview_max_retries(self) -> int:
        retries = int(self.get("preview.max_retries", 3))
        return max(1, retries)  # At least one attempt
