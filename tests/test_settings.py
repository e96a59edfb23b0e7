import json

import pytest

from assetKeeper.errors import SettingsLoadError, SettingsValidationError
from assetKeeper.events.library_events import SettingsChangedEvent
from assetKeeper.settings import SettingsManager, default_settings_path


def test_default_path_uses_xdg(monkeypatch, tmp_path):
    monkeypatch.setattr("os.name", "posix")
    monkeypatch.setattr("sys.platform", "linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    assert default_settings_path() == tmp_path / "AssetKeeper" / "settings.json"


def test_load_creates_defaults(tmp_path):
    path = tmp_path / "settings.json"
    manager = SettingsManager(path)

    manager.load()

    assert path.exists()
    assert manager.get("search.default_sort") == "name"
    assert manager.get("missing.key", "fallback") == "fallback"
    assert manager.library_path().name == "AssetLibrary.json"


def test_library_root_setting(tmp_path):
    manager = SettingsManager(tmp_path / "settings.json")
    manager.load()

    manager.set("library_root", tmp_path / "library")

    assert manager.library_path() == tmp_path / "library" / "AssetLibrary.json"
    on_disk = json.loads((tmp_path / "settings.json").read_text(encoding="utf-8"))
    assert on_disk["library_root"] == str(tmp_path / "library")


def test_set_publishes_change(tmp_path, event_bus):
    received = []
    event_bus.subscribe(SettingsChangedEvent, received.append)
    manager = SettingsManager(tmp_path / "settings.json", event_bus=event_bus)
    manager.load()

    manager.set("search.case_sensitive", True)

    assert manager.get("search.case_sensitive") is True
    assert received[0].key == "search.case_sensitive"


def test_invalid_values_are_rejected(tmp_path):
    manager = SettingsManager(tmp_path / "settings.json")
    manager.load()

    with pytest.raises(SettingsValidationError):
        manager.set("search.default_sort", "colour")
    assert manager.get("search.default_sort") == "name"


def test_invalid_file_raises(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(SettingsLoadError):
        SettingsManager(path).load()

    path.write_text(json.dumps({"validation": {"large_file_threshold_bytes": 0}}), encoding="utf-8")
    with pytest.raises(SettingsValidationError):
        SettingsManager(path).load()
