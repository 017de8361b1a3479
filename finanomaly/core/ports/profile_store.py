"""
ProfileStore Port - Interface for loading and persisting detection profiles.

Implementations are file-based (YAML); callers only depend on this contract.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from finanomaly.core.domain.profile import DetectionProfile


class ProfileStore(ABC):
    """
    Abstract interface for detection profile storage.
    """

    @abstractmethod
    def list_profiles(self) -> list["DetectionProfile"]:
        """
        List all configured profiles.
        """
        ...

    @abstractmethod
    def get_profile(self, name: str) -> "DetectionProfile | None":
        """
        Get a specific profile by name.

        Args:
            name: Profile name

        Returns:
            DetectionProfile if found, None otherwise
        """
        ...

    @abstractmethod
    def save_profile(self, profile: "DetectionProfile") -> None:
        """
        Save or update a profile.
        """
        ...

    @abstractmethod
    def delete_profile(self, name: str) -> bool:
        """
        Delete a profile by name.

        Returns:
            True if deleted, False if not found
        """
        ...
