import json

import pytest

from Graphwars import config_manager


@pytest.fixture
def config_files(monkeypatch, tmp_path):
    config_path = tmp_path / "config.json"
    strings_path = tmp_path / "ui_strings.json"
    monkeypatch.setattr(config_manager, "config_json", config_path)
    monkeypatch.setattr(config_manager, "ui_strings", strings_path)
    return config_path, strings_path


class TestSettings:
    def test_missing_file_gives_defaults(self, config_files):
        assert config_manager.load_setting_value("all") == config_manager.DEFAULT_SETTINGS
        assert config_manager.load_setting_value("graph_res") == 0.01

    def test_unknown_key(self, config_files):
        assert config_manager.load_setting_value("no_such_setting") == 0

    def test_save_and_load(self, config_files):
        config_path, _ = config_files
        settings = dict(config_manager.DEFAULT_SETTINGS, darkmode=True, graph_res=0.05)
        assert config_manager.save_setting(settings) == settings
        assert json.loads(config_path.read_text(encoding="utf-8"))["graph_res"] == 0.05
        assert config_manager.load_setting_value("darkmode") is True
        assert config_manager.load_setting_value("graph_res") == 0.05

    def test_partial_file_is_merged_over_defaults(self, config_files):
        config_path, _ = config_files
        config_path.write_text('{"start_x": 2.5}', encoding="utf-8")
        settings = config_manager.load_setting_value("all")
        assert settings["start_x"] == 2.5
        assert settings["graph_bound"] == config_manager.DEFAULT_SETTINGS["graph_bound"]

    def test_corrupt_file_gives_defaults(self, config_files):
        config_path, _ = config_files
        config_path.write_text("{not json", encoding="utf-8")
        assert config_manager.load_setting_value("all") == config_manager.DEFAULT_SETTINGS

    def test_save_into_missing_directory(self, monkeypatch, tmp_path):
        monkeypatch.setattr(config_manager, "config_json", tmp_path / "missing" / "config.json")
        assert config_manager.save_setting({"darkmode": True}) == {}


class TestDescriptions:
    def test_missing_file(self, config_files):
        assert config_manager.load_setting_description("all") == {}

    def test_lookup(self, config_files):
        _, strings_path = config_files
        strings_path.write_text('{"darkmode": "Dark mode"}', encoding="utf-8")
        assert config_manager.load_setting_description("darkmode") == "Dark mode"
        assert config_manager.load_setting_description("graph_res") == "graph_res"

    def test_shipped_strings_cover_every_setting(self):
        descriptions = config_manager.load_setting_description("all")
        assert set(config_manager.DEFAULT_SETTINGS) <= set(descriptions)
