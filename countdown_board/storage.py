import json
import logging
from typing import Any

from PySide6 import QtCore

from . import APP_NAME, ORG_NAME

LOGGER = logging.getLogger(__name__)

KEY_FONT_SIZE = "fontSize"
KEY_PAUSED = "isPaused"
KEY_MANUAL_MODE = "isManualMode"
KEY_TIME_LEFT = "timeLeft"
KEY_MANUAL_TIME_SET = "manualTimeSet"
KEY_GEOMETRY = "window/geometry"


class SettingsStore:
    """Best-effort key/value persistence on top of QSettings.

    Values are stored as JSON text so every entry is a plain scalar or a small
    object. Nothing here raises: failed writes are logged and dropped, failed
    reads fall back to the caller's default.
    """

    def __init__(self, settings: QtCore.QSettings | None = None):
        if settings is None:
            settings = QtCore.QSettings(ORG_NAME, APP_NAME)
        self.settings = settings

    def save(self, key: str, value: Any) -> None:
        try:
            self.settings.setValue(key, json.dumps(value))
        except Exception:
            LOGGER.warning("could not save %r", key, exc_info=True)

    def load(self, key: str, default: Any = None) -> Any:
        try:
            raw = self.settings.value(key, None)
            if raw is None or raw == "":
                return default
            if isinstance(raw, QtCore.QByteArray):
                raw = bytes(raw).decode("utf-8")
            return json.loads(raw)
        except Exception:
            LOGGER.warning("could not read %r, using default %r", key, default, exc_info=True)
            return default

    # Raw Qt blobs (window geometry) bypass JSON.
    def save_raw(self, key: str, value: Any) -> None:
        try:
            self.settings.setValue(key, value)
        except Exception:
            LOGGER.warning("could not save %r", key, exc_info=True)

    def load_raw(self, key: str) -> Any:
        try:
            return self.settings.value(key, None)
        except Exception:
            LOGGER.warning("could not read %r", key, exc_info=True)
            return None

    def clear(self) -> None:
        try:
            self.settings.clear()
            self.settings.sync()
        except Exception:
            LOGGER.warning("could not clear settings", exc_info=True)

    def sync(self) -> None:
        try:
            self.settings.sync()
        except Exception:
            LOGGER.warning("could not sync settings", exc_info=True)
