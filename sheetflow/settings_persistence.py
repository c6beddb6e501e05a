"""Settings persistence for per-document preferences.

Stores the document title, the autosave toggle and the page metrics, indexed
by the absolute path of the document. Settings live in a JSON file in the
OS-appropriate config directory and survive application restarts.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .config import ConfigError, PageConfig

logger = logging.getLogger(__name__)

STRING_SETTINGS = ('title',)
BOOLEAN_SETTINGS = ('autosave',)
LENGTH_SETTINGS = ('usable_page_height', 'margin', 'gap')


class SettingsPersistence:
    """Manages persistent storage of per-document settings."""

    def __init__(self, config_dir: Optional[Path] = None):
        self._config_dir = config_dir or Path(platformdirs.user_config_dir("sheetflow"))
        self._settings_file = self._config_dir / "settings.json"
        self._settings_cache: Optional[Dict[str, Dict[str, Any]]] = None

    def _load_all_settings(self) -> Dict[str, Dict[str, Any]]:
        """Load all settings from disk, or an empty dict if unreadable."""
        if self._settings_cache is not None:
            return self._settings_cache

        data: Any = {}
        if self._settings_file.exists():
            try:
                with open(self._settings_file, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (json.JSONDecodeError, OSError) as e:
                logger.warning(f"Could not load settings from {self._settings_file}: {e}")
                data = {}
        if not isinstance(data, dict):
            logger.warning("Settings file has invalid format (not a dict), ignoring")
            data = {}
        self._settings_cache = data
        return data

    def _save_all_settings(self, settings: Dict[str, Dict[str, Any]]) -> bool:
        """Save all settings atomically (temp file + rename)."""
        temp_file = self._settings_file.with_suffix('.tmp')
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(settings, f, indent=2)
            temp_file.replace(self._settings_file)
            self._settings_cache = settings
            return True
        except OSError as e:
            logger.warning(f"Could not save settings to {self._settings_file}: {e}")
            try:
                if temp_file.exists():
                    temp_file.unlink()
            except OSError:
                pass
            return False

    def load_settings(self, document_path: Optional[str]) -> Dict[str, Any]:
        """Load valid settings for a document; empty dict if there are none."""
        if document_path is None:
            return {}
        abs_path = os.path.abspath(document_path)
        doc_settings = self._load_all_settings().get(abs_path, {})
        if not isinstance(doc_settings, dict):
            logger.warning(f"Settings for {abs_path} are not a dict, ignoring")
            return {}
        valid = {}
        for key, value in doc_settings.items():
            if self.validate_setting(key, value):
                valid[key] = value
            else:
                logger.warning(f"Ignoring invalid setting {key}={value!r} for {abs_path}")
        return valid

    def save_settings(self, document_path: Optional[str], settings: Dict[str, Any]) -> bool:
        """Merge ``settings`` into the stored settings of a document."""
        if document_path is None:
            return False
        abs_path = os.path.abspath(document_path)
        all_settings = dict(self._load_all_settings())
        merged = dict(all_settings.get(abs_path) or {})
        merged.update(settings)
        all_settings[abs_path] = merged
        return self._save_all_settings(all_settings)

    def load_page_config(self, document_path: Optional[str]) -> PageConfig:
        """Return the document's page metrics, falling back to defaults."""
        settings = self.load_settings(document_path)
        try:
            return PageConfig.from_settings(settings)
        except ConfigError as e:
            logger.warning(f"Invalid page metrics for {document_path}: {e}")
            return PageConfig()

    @staticmethod
    def validate_setting(key: str, value: Any) -> bool:
        if value is None:
            return True
        if key in STRING_SETTINGS:
            return isinstance(value, str)
        if key in BOOLEAN_SETTINGS:
            return isinstance(value, bool)
        if key in LENGTH_SETTINGS:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return False
            return value > 0 if key == 'usable_page_height' else value >= 0
        # Unknown settings are kept for forward compatibility
        return True

    def clear_cache(self) -> None:
        self._settings_cache = None


_persistence: Optional[SettingsPersistence] = None


def get_persistence() -> SettingsPersistence:
    """Return the shared settings persistence instance."""
    global _persistence
    if _persistence is None:
        _persistence = SettingsPersistence()
    return _persistence
