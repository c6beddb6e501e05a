"""Unit tests for settings persistence and page configuration."""

import json
import os
import shutil
import tempfile
import unittest
from pathlib import Path

import pytest

from sheetflow.config import ConfigError, PageConfig
from sheetflow.settings_persistence import SettingsPersistence, get_persistence


class TestSettingsPersistence(unittest.TestCase):
    """Test settings persistence functionality."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.persistence = SettingsPersistence(config_dir=Path(self.temp_dir))
        self.test_doc_path = os.path.join(self.temp_dir, "letter.txt")

    def tearDown(self):
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def test_save_and_load_settings(self):
        settings = {"title": "Cover Letter", "autosave": False, "margin": 72}

        self.assertTrue(self.persistence.save_settings(self.test_doc_path, settings))
        self.persistence.clear_cache()

        self.assertEqual(self.persistence.load_settings(self.test_doc_path), settings)

    def test_save_merges_with_existing(self):
        self.persistence.save_settings(self.test_doc_path, {"title": "A"})
        self.persistence.save_settings(self.test_doc_path, {"autosave": True})

        loaded = self.persistence.load_settings(self.test_doc_path)
        self.assertEqual(loaded, {"title": "A", "autosave": True})

    def test_none_document_path(self):
        self.assertFalse(self.persistence.save_settings(None, {"title": "x"}))
        self.assertEqual(self.persistence.load_settings(None), {})

    def test_load_nonexistent_document(self):
        self.assertEqual(self.persistence.load_settings("/nonexistent/doc.txt"), {})

    def test_corrupt_file_is_ignored(self):
        settings_file = Path(self.temp_dir) / "settings.json"
        settings_file.write_text("{not json", encoding="utf-8")

        self.assertEqual(self.persistence.load_settings(self.test_doc_path), {})

    def test_invalid_values_are_dropped(self):
        settings_file = Path(self.temp_dir) / "settings.json"
        settings_file.write_text(json.dumps({
            os.path.abspath(self.test_doc_path): {
                "title": 12,
                "autosave": "yes",
                "gap": -4,
                "usable_page_height": 700,
            }
        }), encoding="utf-8")

        loaded = self.persistence.load_settings(self.test_doc_path)
        self.assertEqual(loaded, {"usable_page_height": 700})

    def test_load_page_config(self):
        self.persistence.save_settings(self.test_doc_path, {"usable_page_height": 600, "gap": 40})

        config = self.persistence.load_page_config(self.test_doc_path)

        self.assertEqual(config, PageConfig(usable_page_height=600, margin=96, gap=40))

    def test_validate_setting(self):
        validate = SettingsPersistence.validate_setting
        self.assertTrue(validate("title", "Letter"))
        self.assertTrue(validate("autosave", None))
        self.assertFalse(validate("autosave", 1))
        self.assertFalse(validate("margin", True))
        self.assertTrue(validate("margin", 0))
        self.assertFalse(validate("usable_page_height", 0))
        self.assertTrue(validate("future_setting", object()))

    def test_get_persistence_is_shared(self):
        self.assertIs(get_persistence(), get_persistence())


def test_page_config_defaults():
    config = PageConfig()
    assert config.usable_page_height == 864
    assert config.margin == 96
    assert config.gap == 32
    assert config.break_overhead == 224
    assert config.sheet_pitch == 1088


@pytest.mark.parametrize("kwargs", [
    {"usable_page_height": 0},
    {"margin": -1},
    {"gap": -0.5},
])
def test_page_config_rejects_invalid_metrics(kwargs):
    with pytest.raises(ConfigError):
        PageConfig(**kwargs)


def test_page_config_from_settings_ignores_none():
    config = PageConfig.from_settings({"margin": None, "gap": 40, "title": "x"})
    assert config == PageConfig(gap=40)
    assert PageConfig.from_settings(config.to_settings()) == config
