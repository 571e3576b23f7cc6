import json

from xml_field_analyzer.config import DEFAULT_SETTINGS, get_setting, load_settings


def test_defaults_without_file(monkeypatch):
    monkeypatch.delenv("XML_FIELD_ANALYZER_SETTINGS", raising=False)
    assert load_settings() == DEFAULT_SETTINGS


def test_file_overrides_are_layered(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"analysis": {"text_sample_length": 20}}))
    settings = load_settings(str(path))
    assert settings["analysis"]["text_sample_length"] == 20
    assert settings["analysis"]["tree_text_sample_length"] == 50
    assert settings["loading"]["max_workers"] == 4


def test_env_var_points_at_file(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"display": {"namespace_prefix": "ns0:"}}))
    monkeypatch.setenv("XML_FIELD_ANALYZER_SETTINGS", str(path))
    assert load_settings()["display"]["namespace_prefix"] == "ns0:"


def test_missing_or_invalid_file_falls_back(tmp_path):
    assert load_settings(str(tmp_path / "absent.json")) == DEFAULT_SETTINGS
    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    assert load_settings(str(bad)) == DEFAULT_SETTINGS


def test_get_setting_dotted_lookup():
    settings = {"a": {"b": {"c": 3}}, "flat": 1}
    assert get_setting("a.b.c", settings=settings) == 3
    assert get_setting("a.missing", "fallback", settings=settings) == "fallback"
    assert get_setting("flat.deeper", "fallback", settings=settings) == "fallback"
