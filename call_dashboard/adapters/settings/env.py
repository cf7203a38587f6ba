"""Environment-based settings adapter."""
from __future__ import annotations

import os
from typing import Mapping, Optional

from call_dashboard.ports.settings import SettingsPort


class EnvSettingsAdapter(SettingsPort):
    """Reads settings from environment variables with an optional prefix."""

    def __init__(self, prefix: str = "", environ: Optional[Mapping[str, str]] = None) -> None:
        self._prefix = prefix
        self._environ = environ if environ is not None else os.environ

    def _build_key(self, key: str) -> str:
        return f"{self._prefix}_{key}" if self._prefix else key

    def get_optional_setting(self, key: str) -> Optional[str]:
        value = self._environ.get(self._build_key(key))
        if value is None:
            return None
        value = value.strip()
        # blank values count as unset
        return value or None
