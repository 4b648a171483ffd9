from __future__ import annotations

import json
from pathlib import Path
from typing import List

import pytest

from sanbot_sdk.config import DEFAULT_API_KEY, DEFAULT_BASE_URL, PipelineConfig
from sanbot_sdk.settings import DEFAULTS, SettingsStore


def test_defaults_without_file() -> None:
    store = SettingsStore()
    assert store.api_base_url == DEFAULT_BASE_URL
    assert store.api_key == DEFAULT_API_KEY
    assert store.branch_location == "Dubai Office"
    assert store.check_admin_password("admin123")
    assert not store.check_admin_password("guess")


def test_values_persist_across_instances(tmp_path) -> None:
    path = tmp_path / "kiosk" / "settings.json"
    store = SettingsStore(str(path))
    store.update_api_key("live-key")
    store.update_branch_location("Abu Dhabi")

    reopened = SettingsStore(str(path))
    assert reopened.api_key == "live-key"
    assert reopened.branch_location == "Abu Dhabi"
    assert json.loads(path.read_text())["api_key"] == "live-key"


def test_corrupted_file_falls_back_to_defaults(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{not json")
    store = SettingsStore(str(path))
    assert store.api_key == DEFAULTS["api_key"]


def test_undecodable_file_falls_back_to_defaults(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_bytes(b"\xff\xfe\x00garbage")
    store = SettingsStore(str(path))
    assert store.api_key == DEFAULT_API_KEY
    assert store.api_base_url == DEFAULT_BASE_URL


def test_failed_write_keeps_previous_value(tmp_path, monkeypatch) -> None:
    store = SettingsStore(str(tmp_path / "settings.json"))
    config = store.bind(PipelineConfig())
    seen: List[str] = []
    store.observe(seen.append, lambda url: None)

    def fail_write(self, *args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(Path, "write_text", fail_write)
    with pytest.raises(OSError):
        store.update_api_key("rotated")

    assert store.api_key == DEFAULT_API_KEY
    assert config.api_key == DEFAULT_API_KEY
    assert seen == [DEFAULT_API_KEY]


def test_unknown_key_rejected() -> None:
    with pytest.raises(KeyError):
        SettingsStore().get("volume")


def test_observe_fires_immediately_and_on_change() -> None:
    store = SettingsStore()
    keys: List[str] = []
    urls: List[str] = []
    store.observe(keys.append, urls.append)

    store.update_api_base_url("http://192.168.1.20:3000/api/")

    assert keys == [DEFAULT_API_KEY, DEFAULT_API_KEY]
    assert urls == [DEFAULT_BASE_URL, "http://192.168.1.20:3000/api/"]


def test_bind_keeps_pipeline_config_in_step() -> None:
    store = SettingsStore()
    config = store.bind(PipelineConfig(base_url="https://stale.example.com/api/", api_key="stale"))
    assert config.base_url == DEFAULT_BASE_URL

    store.update_api_key("rotated")
    store.update_api_base_url("")

    assert config.api_key == "rotated"
    assert config.base_url == DEFAULT_BASE_URL

    store.clear()
    assert config.api_key == DEFAULT_API_KEY
