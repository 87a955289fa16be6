"""Persisted theme preference."""

from wall_client.errors import PersistenceUnavailable
from wall_client.local_storage import LocalStorage
from wall_client.logging_setup import get_logger

log = get_logger(__name__)

THEME_KEY = "anonWallTheme"
THEMES = ("light", "dark")
DEFAULT_THEME = "dark"


class ThemePreference:
    def __init__(self, storage: LocalStorage):
        self.storage = storage
        self.theme = DEFAULT_THEME

    def load(self) -> str:
        try:
            stored = self.storage.get(THEME_KEY)
        except PersistenceUnavailable as e:
            log.warning("theme_load_failed", error=str(e))
            return self.theme
        if stored in THEMES:
            self.theme = stored
        return self.theme

    def set(self, theme: str) -> str:
        if theme not in THEMES:
            raise ValueError(f"theme must be one of {THEMES}, got {theme!r}")
        self.theme = theme
        try:
            self.storage.set(THEME_KEY, theme)
        except PersistenceUnavailable as e:
            log.warning("theme_save_failed", error=str(e))
        return self.theme

    def toggle(self) -> str:
        return self.set("light" if self.theme == "dark" else "dark")
