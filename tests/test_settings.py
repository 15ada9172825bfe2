from dataclasses import dataclass
from datetime import timedelta

import pytest

from dizkaz.settings import SettingsManager, SettingsNotFoundError


class FakeClient:
    def __init__(self):
        self.data = {}
        self.expiry = {}

    def set(self, name, value, ex=None):
        self.data[name] = value.encode("utf-8") if isinstance(value, str) else value
        self.expiry[name] = ex
        return True

    def get(self, name):
        return self.data.get(name)


@dataclass
class UI:
    theme: str
    lang: str


def test_dict_round_trip():
    manager = SettingsManager(FakeClient())
    settings = {"theme": "dark", "lang": "en"}
    manager.save_settings("abc", settings)
    assert manager.get_settings("abc") == settings


def test_dataclass_saved_as_mapping():
    manager = SettingsManager(FakeClient())
    manager.save_settings("abc", UI("light", "zh"))
    assert manager.get_settings("abc") == {"theme": "light", "lang": "zh"}


def test_missing_raises():
    manager = SettingsManager(FakeClient())
    with pytest.raises(SettingsNotFoundError):
        manager.get_settings("nobody")


def test_ids_are_separate():
    manager = SettingsManager(FakeClient())
    manager.save_settings("one", {"theme": "dark"})
    with pytest.raises(KeyError):
        manager.get_settings("two")


def test_overwrite_keeps_latest():
    manager = SettingsManager(FakeClient())
    manager.save_settings("abc", {"theme": "dark"})
    manager.save_settings("abc", {"theme": "light"})
    assert manager.get_settings("abc") == {"theme": "light"}


def test_default_lifetime():
    client = FakeClient()
    SettingsManager(client).save_settings("abc", {})
    assert list(client.expiry.values()) == [timedelta(days=30)]