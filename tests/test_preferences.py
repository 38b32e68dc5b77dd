import json
from unittest.mock import patch

from pratik_blog.preferences import ThemePreference, system_prefers_dark


def test_unset_preference_follows_system_default(tmp_path):
    pref = ThemePreference(tmp_path / "prefs.json")

    assert pref.load(system_default=lambda: True) is True
    assert pref.load(system_default=lambda: False) is False


def test_saved_preference_overrides_system_default(tmp_path):
    pref = ThemePreference(tmp_path / "prefs.json")

    pref.save(is_dark=False)

    assert pref.load(system_default=lambda: True) is False
    assert json.loads((tmp_path / "prefs.json").read_text()) == {"theme": "light"}


def test_toggle_flips_and_persists(tmp_path):
    pref = ThemePreference(tmp_path / "prefs.json")

    assert pref.toggle(system_default=lambda: False) is True
    assert ThemePreference(tmp_path / "prefs.json").load(system_default=lambda: False) is True
    assert pref.toggle(system_default=lambda: False) is False


def test_save_keeps_unrelated_keys(tmp_path):
    path = tmp_path / "prefs.json"
    path.write_text(json.dumps({"other": 1}))

    ThemePreference(path).save(is_dark=True)

    assert json.loads(path.read_text()) == {"other": 1, "theme": "dark"}


def test_corrupt_file_falls_back_to_system_default(tmp_path):
    path = tmp_path / "prefs.json"
    path.write_text("{not json")

    assert ThemePreference(path).load(system_default=lambda: True) is True


def test_system_default_reads_settings():
    with patch("pratik_blog.preferences.settings") as mock_settings:
        mock_settings.prefers_color_scheme = "Dark"
        assert system_prefers_dark() is True
        mock_settings.prefers_color_scheme = "light"
        assert system_prefers_dark() is False
