import pytest

from finanomaly.adapters.config.settings_loader import configure_logging, load_settings
from finanomaly.core.domain.settings import SystemSettings


def test_system_settings_defaults():
    settings = SystemSettings()
    assert settings.default_period == 12
    assert settings.default_threshold == 3.5
    assert settings.default_persistence == 1
    assert settings.robust is True
    assert settings.profiles_file == "profiles.yaml"


def test_scoring_config_from_settings():
    settings = SystemSettings(default_threshold=4.0, default_persistence=2)

    config = settings.scoring_config()
    assert config.period == 12
    assert config.threshold == 4.0
    assert config.persistence == 2

    assert settings.scoring_config(period=7).period == 7
    assert settings.decomposition_config().robust is True
    assert SystemSettings(robust=False).decomposition_config().robust is False


def test_load_settings_from_env(monkeypatch):
    monkeypatch.setenv("FA_DEFAULT_THRESHOLD", "4.5")
    monkeypatch.setenv("FA_DEFAULT_PERIOD", "7")

    settings = load_settings(path="non_existent.yaml")

    assert settings.default_threshold == 4.5
    assert settings.default_period == 7


def test_load_settings_from_file(tmp_path):
    config_file = tmp_path / "test_config.yaml"
    config_file.write_text("""
default_persistence: 3
profiles_file: "custom_profiles.yaml"
    """)

    settings = load_settings(path=str(config_file))

    assert settings.default_persistence == 3
    assert settings.profiles_file == "custom_profiles.yaml"
    # Defaults preserved
    assert settings.default_threshold == 3.5


def test_load_settings_env_overrides_file(tmp_path, monkeypatch):
    config_file = tmp_path / "test_config.yaml"
    config_file.write_text("log_level: DEBUG")

    monkeypatch.setenv("FA_LOG_LEVEL", "WARNING")

    settings = load_settings(path=str(config_file))

    assert settings.log_level == "WARNING"


def test_load_settings_path_from_env(tmp_path, monkeypatch):
    config_file = tmp_path / "other.yaml"
    config_file.write_text("default_period: 4")
    monkeypatch.setenv("FA_CONFIG_FILE", str(config_file))

    assert load_settings().default_period == 4


def test_load_settings_corrupt_file(tmp_path):
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("default_period: [unclosed")

    with pytest.raises(RuntimeError):
        load_settings(path=str(config_file))


def test_configure_logging(monkeypatch):
    calls = {}
    monkeypatch.setattr("logging.basicConfig", lambda **kwargs: calls.update(kwargs))

    configure_logging(SystemSettings(log_level="debug"))

    assert calls["level"] == "DEBUG"


def test_load_settings_robust_from_env(monkeypatch):
    monkeypatch.setenv("FA_ROBUST", "false")

    settings = load_settings(path="non_existent.yaml")

    assert settings.robust is False
    assert settings.decomposition_config().robust is False
