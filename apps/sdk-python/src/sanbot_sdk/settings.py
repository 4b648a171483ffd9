"""File-backed kiosk settings with change notification."""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from .config import DEFAULT_API_KEY, DEFAULT_BASE_URL, PipelineConfig

logger = logging.getLogger("sanbot.settings")

API_BASE_URL_KEY = "api_base_url"
API_KEY_KEY = "api_key"
BRANCH_LOCATION_KEY = "branch_location"
ADMIN_PASSWORD_KEY = "admin_password"

DEFAULTS: Dict[str, str] = {
    API_BASE_URL_KEY: DEFAULT_BASE_URL,
    API_KEY_KEY: DEFAULT_API_KEY,
    BRANCH_LOCATION_KEY: "Dubai Office",
    ADMIN_PASSWORD_KEY: "admin123",
}

SettingListener = Callable[[str], None]


class SettingsStore:
    """Stores the operator-editable settings of one kiosk.

    Values live in a JSON file when ``path`` is given and in memory otherwise.
    Listeners registered through :meth:`observe` run with the current values
    straight away and again after every write.
    """

    def __init__(self, path: Optional[str] = None) -> None:
        self._path = Path(path) if path else None
        self._lock = threading.Lock()
        self._values: Dict[str, str] = {}
        self._observers: List[Tuple[SettingListener, SettingListener]] = []
        if self._path is not None:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._values = self._load()

    def _load(self) -> Dict[str, str]:
        if self._path is None or not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as exc:
            logger.warning("Settings file %s is corrupted (%s); using defaults", self._path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Settings file %s does not hold an object; using defaults", self._path)
            return {}
        return {key: str(value) for key, value in data.items() if key in DEFAULTS}

    def _persist(self, values: Dict[str, str]) -> None:
        if self._path is None:
            return
        self._path.write_text(json.dumps(values, indent=2), encoding="utf-8")

    def get(self, key: str) -> str:
        if key not in DEFAULTS:
            raise KeyError(key)
        with self._lock:
            return self._values.get(key, DEFAULTS[key])

    @property
    def api_base_url(self) -> str:
        return self.get(API_BASE_URL_KEY)

    @property
    def api_key(self) -> str:
        return self.get(API_KEY_KEY)

    @property
    def branch_location(self) -> str:
        return self.get(BRANCH_LOCATION_KEY)

    @property
    def admin_password(self) -> str:
        return self.get(ADMIN_PASSWORD_KEY)

    def _set(self, key: str, value: str) -> None:
        with self._lock:
            updated = dict(self._values)
            updated[key] = value
            # in-memory values only change once the file write succeeded
            self._persist(updated)
            self._values = updated
        logger.info("Setting %s updated", key)
        self._notify()

    def update_api_base_url(self, url: str) -> None:
        self._set(API_BASE_URL_KEY, url)

    def update_api_key(self, key: str) -> None:
        self._set(API_KEY_KEY, key)

    def update_branch_location(self, location: str) -> None:
        self._set(BRANCH_LOCATION_KEY, location)

    def update_admin_password(self, password: str) -> None:
        self._set(ADMIN_PASSWORD_KEY, password)

    def check_admin_password(self, password: str) -> bool:
        return password == self.admin_password

    def clear(self) -> None:
        with self._lock:
            self._persist({})
            self._values = {}
        self._notify()

    def observe(self, on_api_key_changed: SettingListener, on_base_url_changed: SettingListener) -> None:
        with self._lock:
            self._observers.append((on_api_key_changed, on_base_url_changed))
        on_api_key_changed(self.api_key)
        on_base_url_changed(self.api_base_url)

    def bind(self, config: PipelineConfig) -> PipelineConfig:
        """Keep ``config`` in step with this store. Empty values fall back to defaults."""

        def set_key(value: str) -> None:
            config.api_key = value

        def set_base_url(value: str) -> None:
            config.base_url = value

        self.observe(set_key, set_base_url)
        return config

    def _notify(self) -> None:
        with self._lock:
            observers = list(self._observers)
        api_key = self.api_key
        base_url = self.api_base_url
        for on_api_key_changed, on_base_url_changed in observers:
            on_api_key_changed(api_key)
            on_base_url_changed(base_url)


__all__ = ["DEFAULTS", "SettingsStore"]
