from pathlib import Path

import pytest

from protimer.config import Settings, ensure_app_dirs, load_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("PROTIMER_DATA_DIR", "PROTIMER_PAUSE_ON_EDIT", "PROTIMER_CATCH_UP", "PROTIMER_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = load_settings()
    assert settings.pause_on_edit is True
    assert settings.catch_up is False
    assert settings.log_level == "INFO"


def test_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("PROTIMER_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("PROTIMER_PAUSE_ON_EDIT", "no")
    monkeypatch.setenv("PROTIMER_CATCH_UP", "1")
    monkeypatch.setenv("PROTIMER_LOG_LEVEL", "debug")
    settings = load_settings()
    assert settings.data_dir == tmp_path
    assert settings.pause_on_edit is False
    assert settings.catch_up is True
    assert settings.log_level == "DEBUG"


def test_overrides_win_over_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("PROTIMER_CATCH_UP", "true")
    settings = load_settings(catch_up=False, data_dir=str(tmp_path), pause_on_edit=None)
    assert settings.catch_up is False
    assert settings.data_dir == Path(tmp_path)
    assert settings.pause_on_edit is True


def test_bad_flag_rejected(monkeypatch):
    monkeypatch.setenv("PROTIMER_CATCH_UP", "maybe")
    with pytest.raises(ValueError, match="PROTIMER_CATCH_UP"):
        load_settings()


def test_unknown_override_rejected():
    with pytest.raises(TypeError):
        load_settings(colour="red")


def test_ensure_app_dirs(tmp_path):
    settings = Settings(data_dir=tmp_path / "app")
    ensure_app_dirs(settings)
    assert settings.data_dir.is_dir()
    assert settings.log_dir.is_dir()
