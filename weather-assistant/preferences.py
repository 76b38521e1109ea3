import json
import logging
from pathlib import Path

MAX_RECENT = 5
RECENT_KEY = "weathernow_recent"
THEME_KEY = "weathernow_theme"
THEMES = ("dark", "light")
DEFAULT_THEME = "dark"

logger = logging.getLogger(__name__)


def add_recent_city(cities: list[str], city: str) -> list[str]:
    """Return a new recent list with ``city`` at the front.

    Matching is case-insensitive and the newest spelling wins. The list
    never grows past MAX_RECENT.
    """
    normalised = city.strip()
    if not normalised:
        return list(cities)
    rest = [c for c in cities if c.lower() != normalised.lower()]
    return [normalised, *rest][:MAX_RECENT]


class PreferenceStore:
    """Opaque key-value preferences kept in one JSON file.

    A missing or corrupt file reads as empty, and failed writes are only
    logged.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> dict:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable preferences file %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str, default=None):
        return self._read().get(key, default)

    def set(self, key: str, value) -> None:
        data = self._read()
        data[key] = value
        try:
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not save preference %r: %s", key, exc)

    def load_recent_cities(self) -> list[str]:
        stored = self.get(RECENT_KEY, [])
        if not isinstance(stored, list):
            return []
        return [c for c in stored if isinstance(c, str)][:MAX_RECENT]

    def add_recent_city(self, city: str) -> list[str]:
        cities = add_recent_city(self.load_recent_cities(), city)
        self.set(RECENT_KEY, cities)
        return cities

    def load_theme(self) -> str:
        theme = self.get(THEME_KEY)
        return theme if theme in THEMES else DEFAULT_THEME

    def save_theme(self, theme: str) -> None:
        self.set(THEME_KEY, theme)
