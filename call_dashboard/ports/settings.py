"""Settings port."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class SettingsPort(ABC):
    """Interface for reading deployment-time configuration values."""

    @abstractmethod
    def get_optional_setting(self, key: str) -> Optional[str]:
        """Return the value if it is configured."""
