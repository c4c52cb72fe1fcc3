"""System-wide settings, kept as one initialised record."""

from __future__ import annotations

from typing import Any, Mapping

from .store import Store

SETTINGS_TABLE = "settings"

_INITIALISED = {"is_init": 1}


class SettingsRepo:
    """The single settings record, marked by ``is_init``."""

    def __init__(self, store: Store) -> None:
        self._store = store

    def create(self, settings: Mapping[str, Any]) -> dict:
        """Store the settings, marked as initialised."""
        record = dict(settings)
        record.update(_INITIALISED)
        return self._store.create(SETTINGS_TABLE, record)

    def update(self, settings: Mapping[str, Any]) -> int:
        values = {key: value for key, value in settings.items() if key != "is_init"}
        return self._store.updates(SETTINGS_TABLE, _INITIALISED, values)

    def get(self) -> dict:
        """The initialised settings, or an empty dict when none exist."""
        found = self._store.find(SETTINGS_TABLE, _INITIALISED)
        return found[0] if found else {}

    def check(self) -> bool:
        """True once settings have been saved."""
        return self._store.count(SETTINGS_TABLE, _INITIALISED) > 0


__all__ = ["SETTINGS_TABLE", "SettingsRepo"]