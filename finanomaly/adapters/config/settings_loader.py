import logging
import os

import yaml

from finanomaly.core.domain.settings import SystemSettings

# Environment variable -> settings field
ENV_OVERRIDES = {
    "FA_DEFAULT_PERIOD": "default_period",
    "FA_DEFAULT_THRESHOLD": "default_threshold",
    "FA_DEFAULT_PERSISTENCE": "default_persistence",
    "FA_ROBUST": "robust",
    "FA_LOG_LEVEL": "log_level",
    "FA_PROFILES_FILE": "profiles_file",
}


def load_settings(path: str | None = None) -> SystemSettings:
    """
    Load system settings from a YAML file.
    Environment variables take precedence over the file, the file over defaults.

    Args:
        path: Path to config.yaml. Defaults to FA_CONFIG_FILE env var or "config.yaml".
    """
    if path is None:
        path = os.getenv("FA_CONFIG_FILE", "config.yaml")

    config_data = {}

    if os.path.exists(path):
        try:
            with open(path, "r") as f:
                config_data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise RuntimeError(f"Failed to load configuration from {path}: {e}") from e

    for env_var, field_name in ENV_OVERRIDES.items():
        if os.getenv(env_var):
            config_data[field_name] = os.getenv(env_var)

    return SystemSettings(**config_data)


def configure_logging(settings: SystemSettings) -> None:
    """Apply the configured level to the root logger."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
