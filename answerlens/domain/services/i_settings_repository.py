# answerlens/domain/services/i_settings_repository.py
"""
Settings repository interface for application configuration.
"""
from abc import ABC, abstractmethod
from typing import Dict, Any

from answerlens.domain.common.result import Result
from answerlens.domain.models.match_settings import MatchSettings


class ISettingsRepository(ABC):
    """Loads, caches and saves the application settings."""

    @abstractmethod
    def load_settings(self, force_reload: bool = False) -> Result[Dict[str, Any]]:
        """
        Load settings from storage, merged over the defaults.

        Args:
            force_reload: Whether to bypass the cache

        Returns:
            Result containing the settings dictionary
        """
        pass

    @abstractmethod
    def save_settings(self, settings: Dict[str, Any]) -> Result[bool]:
        """Persist the full settings dictionary."""
        pass

    @abstractmethod
    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a single setting, or default when absent or unreadable."""
        pass

    @abstractmethod
    def get_match_settings(self) -> MatchSettings:
        """Thresholds used by the match cascade."""
        pass
