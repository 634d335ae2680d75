"""Client-side UI preferences (meals view mode, theme).

Kept apart from the document store: nothing here is synced or shared between
devices. Values are plain strings.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from domain.enums import Theme, ViewMode

logger = logging.getLogger("unimeal.preferences")

VIEW_MODE_KEY = "meals.viewMode"
THEME_KEY = "theme"


class PreferenceStore(ABC):
    @abstractmethod
    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    def scoped(self, scope: str) -> "ScopedPreferenceStore":
        """View of this store whose keys are prefixed with scope (e.g. a user id)."""
        return ScopedPreferenceStore(self, scope)


class ScopedPreferenceStore(PreferenceStore):
    def __init__(self, inner: PreferenceStore, scope: str):
        self._inner = inner
        self._scope = scope

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._inner.get(f"{self._scope}:{key}", default)

    def set(self, key: str, value: str) -> None:
        self._inner.set(f"{self._scope}:{key}", value)


class InMemoryPreferenceStore(PreferenceStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._values.get(key, default)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value


class JsonFilePreferenceStore(PreferenceStore):
    """Preferences persisted to a small JSON file, rewritten on every change."""

    def __init__(self, path):
        self.path = Path(path)
        self._values: Dict[str, str] = self._load()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable preferences file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._values.get(key, default)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._values, indent=2, sort_keys=True), encoding="utf-8")


def get_view_mode(prefs: PreferenceStore) -> ViewMode:
    """Stored meals layout, list when absent or unrecognized."""
    try:
        return ViewMode(prefs.get(VIEW_MODE_KEY, ViewMode.LIST.value))
    except ValueError:
        return ViewMode.LIST


def set_view_mode(prefs: PreferenceStore, mode: ViewMode) -> None:
    prefs.set(VIEW_MODE_KEY, ViewMode(mode).value)


def get_theme(prefs: PreferenceStore) -> Theme:
    try:
        return Theme(prefs.get(THEME_KEY, Theme.LIGHT.value))
    except ValueError:
        return Theme.LIGHT


def toggle_theme(prefs: PreferenceStore) -> Theme:
    theme = Theme.DARK if get_theme(prefs) == Theme.LIGHT else Theme.LIGHT
    prefs.set(THEME_KEY, theme.value)
    return theme


def set_theme(prefs: PreferenceStore, theme: Theme) -> None:
    prefs.set(THEME_KEY, Theme(theme).value)
