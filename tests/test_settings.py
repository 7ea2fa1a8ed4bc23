import logging
from pathlib import Path

from core.settings import DEFAULT_AVOID_N, DEFAULT_TOP_N, configure_logging, load_settings
from ingestion.catalogs import ARCHETYPES_PATH, QUESTIONS_PATH


def _clear(monkeypatch):
    for name in (
        "ADOPTMATCH_QUESTIONS_PATH",
        "ADOPTMATCH_ARCHETYPES_PATH",
        "ADOPTMATCH_TOP_N",
        "ADOPTMATCH_AVOID_N",
        "ADOPTMATCH_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults_point_at_bundled_data(monkeypatch, tmp_path):
    _clear(monkeypatch)
    monkeypatch.chdir(tmp_path)
    settings = load_settings()
    assert settings.questions_path == QUESTIONS_PATH
    assert settings.archetypes_path == ARCHETYPES_PATH
    assert settings.top_n == DEFAULT_TOP_N
    assert settings.avoid_n == DEFAULT_AVOID_N
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch, tmp_path):
    _clear(monkeypatch)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ADOPTMATCH_ARCHETYPES_PATH", str(tmp_path / "a.json"))
    monkeypatch.setenv("ADOPTMATCH_TOP_N", "3")
    monkeypatch.setenv("ADOPTMATCH_LOG_LEVEL", "debug")
    settings = load_settings()
    assert settings.archetypes_path == Path(tmp_path / "a.json")
    assert settings.top_n == 3
    assert settings.log_level == "DEBUG"


def test_invalid_integers_fall_back(monkeypatch, tmp_path, caplog):
    _clear(monkeypatch)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ADOPTMATCH_TOP_N", "lots")
    monkeypatch.setenv("ADOPTMATCH_AVOID_N", "-2")
    with caplog.at_level(logging.WARNING, logger="core.settings"):
        settings = load_settings()
    assert settings.top_n == DEFAULT_TOP_N
    assert settings.avoid_n == DEFAULT_AVOID_N
    assert "ADOPTMATCH_TOP_N" in caplog.text


def test_unknown_log_level_falls_back(monkeypatch, tmp_path, caplog):
    _clear(monkeypatch)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ADOPTMATCH_LOG_LEVEL", "verbose")
    with caplog.at_level(logging.WARNING, logger="core.settings"):
        settings = load_settings()
    assert settings.log_level == "INFO"
    assert "ADOPTMATCH_LOG_LEVEL" in caplog.text


def test_configure_logging_sets_level():
    root = logging.getLogger()
    previous = root.level
    try:
        configure_logging("WARNING")
        assert root.level == logging.WARNING
    finally:
        root.setLevel(previous)
