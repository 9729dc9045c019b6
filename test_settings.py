import json

from settings import SETTINGS_ENV, default_settings, load_settings, save_settings, settings_path


def test_defaults_when_file_missing(tmp_path):
    settings = load_settings(str(tmp_path / "missing.json"))
    assert settings == default_settings()
    assert (settings["default_width"], settings["default_height"]) == (1170, 2532)


def test_only_well_typed_keys_override(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({
        "port": 9000,
        "default_width": "wide",
        "default_height": -3,
        "max_dimension": True,
        "host": "0.0.0.0",
        "font_regular": "/fonts/Inter-Regular.ttf",
        "font_italic": 42,
        "timezone": "Europe/Zurich",
        "unknown": 1,
    }), encoding="utf-8")

    settings = load_settings(str(path))
    assert settings["port"] == 9000
    assert settings["default_width"] == 1170
    assert settings["default_height"] == 2532
    assert settings["max_dimension"] == 10000
    assert settings["host"] == "0.0.0.0"
    assert settings["font_regular"] == "/fonts/Inter-Regular.ttf"
    assert settings["font_italic"] is None
    assert settings["timezone"] == "Europe/Zurich"
    assert "unknown" not in settings


def test_corrupt_file_gives_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_settings(str(path)) == default_settings()

    path.write_text("[1, 2]", encoding="utf-8")
    assert load_settings(str(path)) == default_settings()


def test_unknown_timezone_is_dropped(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"timezone": "Mars/Olympus_Mons"}), encoding="utf-8")
    assert load_settings(str(path))["timezone"] is None


def test_save_and_reload(tmp_path):
    path = str(tmp_path / "settings.json")
    settings = default_settings()
    settings["port"] = 8123
    settings["timezone"] = "UTC"
    save_settings(settings, path)
    assert load_settings(path) == settings


def test_path_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "env.json"
    path.write_text(json.dumps({"port": 7000}), encoding="utf-8")
    monkeypatch.setenv(SETTINGS_ENV, str(path))
    assert settings_path() == str(path)
    assert load_settings()["port"] == 7000
