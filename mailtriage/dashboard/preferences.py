import json
import logging
import os

logger = logging.getLogger(__name__)

THEME_KEY = "theme"
DARK = "dark"
LIGHT = "light"

class PreferenceStore:
    """Small persistent key-value store backed by one JSON file."""

    def __init__(self, path: str):
        self.path = path

    def _load(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
            return data if isinstance(data, dict) else {}
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read preferences at {self.path}: {e}")
            return {}

    def get(self, key: str, default=None):
        return self._load().get(key, default)

    def set(self, key: str, value) -> None:
        data = self._load()
        data[key] = value
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(data, f)

    def is_dark_theme(self) -> bool:
        return self.get(THEME_KEY) == DARK

    def save_theme(self, dark: bool) -> None:
        self.set(THEME_KEY, DARK if dark else LIGHT)
