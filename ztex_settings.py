# ztex_settings.py
import configparser
import logging
from pathlib import Path

from ZTEX.ztex_mipmaps import MipSkipMode

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path.home() / ".ztex_viewer.ini"

DEFAULTS = {
    "viewer": {
        "last_directory": "",
        "mip_skip_mode": MipSkipMode.EXACT.value,
        "background": "white",
    },
    "log": {
        "directory": "",
        "level": "INFO",
    },
}


class Settings:
    """INI backed settings shared by the converter and the viewer."""

    def __init__(self, path=None):
        self.path = Path(path) if path else DEFAULT_SETTINGS_PATH
        self.config = configparser.ConfigParser()
        self.config.read_dict(DEFAULTS)

    def load(self):
        if not self.path.is_file():
            return self
        try:
            self.config.read(self.path, encoding="utf-8")
        except configparser.Error as e:
            logger.warning(f"Ignoring malformed settings file {self.path}: {e}")
        return self

    def save(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            self.config.write(f)

    @property
    def last_directory(self):
        return self.config.get("viewer", "last_directory")

    @last_directory.setter
    def last_directory(self, value):
        self.config.set("viewer", "last_directory", str(value))

    @property
    def mip_skip_mode(self):
        value = self.config.get("viewer", "mip_skip_mode").strip().lower()
        try:
            return MipSkipMode(value)
        except ValueError:
            logger.warning(f"Unknown mip_skip_mode '{value}', using '{MipSkipMode.EXACT.value}'")
            return MipSkipMode.EXACT

    @property
    def background(self):
        return self.config.get("viewer", "background")

    @property
    def log_directory(self):
        return self.config.get("log", "directory") or None

    @property
    def log_level(self):
        name = self.config.get("log", "level").strip().upper()
        level = logging.getLevelName(name)
        return level if isinstance(level, int) else logging.INFO
