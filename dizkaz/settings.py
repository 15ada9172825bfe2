"""Per-visitor UI settings kept in a key-value client."""

from __future__ import annotations

import dataclasses
import json
from datetime import timedelta
from enum import Enum
from typing import Any

__all__ = ["SettingsNotFoundError", "SettingsManager", "DEFAULT_SETTINGS_LIFETIME"]

DEFAULT_SETTINGS_LIFETIME = timedelta(days=30)


class SettingsNotFoundError(KeyError):
    """No settings are stored for the requested id."""


def _key(uuid: str) -> str:
    return f"ui_settings__{uuid}"


def _jsonable(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"value of type {type(value).__name__} is not JSON serializable")


class SettingsManager:
    """Saves and loads UI settings as JSON under a per-visitor key."""

    def __init__(self, client: Any, lifetime: timedelta = DEFAULT_SETTINGS_LIFETIME) -> None:
        self.client = client
        self.lifetime = lifetime

    def save_settings(self, uuid: str, settings: Any) -> None:
        """Store ``settings`` for ``uuid``."""
        payload = json.dumps(settings, default=_jsonable)
        self.client.set(_key(uuid), payload, ex=self.lifetime or None)

    def get_settings(self, uuid: str) -> Any:
        """Return the stored settings or raise ``SettingsNotFoundError``."""
        key = _key(uuid)
        raw = self.client.get(key)
        if raw is None:
            raise SettingsNotFoundError(key)
        if isinstance(raw, (bytes, bytearray)):
            raw = raw.decode("utf-8")
        return json.loads(raw)