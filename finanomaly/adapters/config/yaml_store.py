"""
YAML Profile Store Adapter - File-based detection profiles.
"""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from finanomaly.core.domain.profile import DetectionProfile
from finanomaly.core.domain.settings import SystemSettings
from finanomaly.core.ports.profile_store import ProfileStore

logger = logging.getLogger(__name__)


class YamlProfileStore(ProfileStore):
    """
    Profile store that reads profiles from a YAML file.
    """

    def __init__(self, config_path: str | Path):
        self.config_path = Path(config_path)
        self._profiles: dict[str, DetectionProfile] = {}
        self._loaded = False

    @classmethod
    def from_settings(cls, settings: SystemSettings) -> "YamlProfileStore":
        """Store backed by the configured `profiles_file`."""
        return cls(settings.profiles_file)

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self._load_profiles()
            self._loaded = True

    def _load_profiles(self) -> None:
        if not self.config_path.exists():
            return

        with open(self.config_path) as f:
            data = yaml.safe_load(f) or {}

        for profile_data in data.get("profiles", []):
            try:
                profile = DetectionProfile(**profile_data)
                self._profiles[profile.name] = profile
            except ValidationError as e:
                logger.error(f"Skipping invalid profile in {self.config_path}: {e}")

    def list_profiles(self) -> list[DetectionProfile]:
        self._ensure_loaded()
        return list(self._profiles.values())

    def get_profile(self, name: str) -> DetectionProfile | None:
        self._ensure_loaded()
        return self._profiles.get(name)

    def save_profile(self, profile: DetectionProfile) -> None:
        self._ensure_loaded()
        self._profiles[profile.name] = profile
        self._save_to_file()

    def delete_profile(self, name: str) -> bool:
        self._ensure_loaded()
        if name in self._profiles:
            del self._profiles[name]
            self._save_to_file()
            return True
        return False

    def _save_to_file(self) -> None:
        profiles_data = [
            p.model_dump(mode="json")
            for p in self._profiles.values()
        ]

        with open(self.config_path, "w") as f:
            yaml.dump({"profiles": profiles_data}, f, default_flow_style=False)
