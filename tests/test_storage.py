from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from PySide6 import QtCore

from countdown_board import storage
from countdown_board.storage import SettingsStore


def make_store(directory: str) -> SettingsStore:
    path = Path(directory) / "settings.ini"
    return SettingsStore(QtCore.QSettings(str(path), QtCore.QSettings.IniFormat))


class TestSettingsStore(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.store = make_store(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_values_round_trip_as_json(self) -> None:
        self.store.save(storage.KEY_FONT_SIZE, 72)
        self.store.save(storage.KEY_PAUSED, True)
        self.store.save(storage.KEY_MANUAL_TIME_SET, None)
        self.store.save(storage.KEY_TIME_LEFT, {"days": 1, "hours": 2, "minutes": 3, "seconds": 4})

        self.assertEqual(self.store.load(storage.KEY_FONT_SIZE, 60), 72)
        self.assertIs(self.store.load(storage.KEY_PAUSED, False), True)
        self.assertIsNone(self.store.load(storage.KEY_MANUAL_TIME_SET, False))
        self.assertEqual(
            self.store.load(storage.KEY_TIME_LEFT, None),
            {"days": 1, "hours": 2, "minutes": 3, "seconds": 4},
        )

    def test_values_survive_a_new_settings_object(self) -> None:
        self.store.save(storage.KEY_MANUAL_MODE, True)
        self.store.save(storage.KEY_TIME_LEFT, {"days": 0, "hours": 0, "minutes": 1, "seconds": 30})
        self.store.sync()

        reopened = make_store(self._tmp.name)
        self.assertIs(reopened.load(storage.KEY_MANUAL_MODE, False), True)
        self.assertEqual(
            reopened.load(storage.KEY_TIME_LEFT, None),
            {"days": 0, "hours": 0, "minutes": 1, "seconds": 30},
        )

    def test_missing_key_returns_default(self) -> None:
        self.assertEqual(self.store.load("missing", 60), 60)
        self.assertIsNone(self.store.load("missing"))

    def test_corrupt_value_returns_default_and_logs(self) -> None:
        self.store.settings.setValue(storage.KEY_FONT_SIZE, "{not json")
        with self.assertLogs("countdown_board.storage", level="WARNING"):
            self.assertEqual(self.store.load(storage.KEY_FONT_SIZE, 60), 60)

    def test_unserializable_value_is_dropped_and_logged(self) -> None:
        self.store.save(storage.KEY_FONT_SIZE, 40)
        with self.assertLogs("countdown_board.storage", level="WARNING"):
            self.store.save(storage.KEY_FONT_SIZE, object())
        self.assertEqual(self.store.load(storage.KEY_FONT_SIZE, 60), 40)

    def test_clear_removes_everything(self) -> None:
        self.store.save(storage.KEY_FONT_SIZE, 40)
        self.store.clear()
        self.assertEqual(self.store.load(storage.KEY_FONT_SIZE, 60), 60)

    def test_raw_values_bypass_json(self) -> None:
        blob = QtCore.QByteArray(b"\x01\x02geometry")
        self.store.save_raw(storage.KEY_GEOMETRY, blob)
        self.assertEqual(self.store.load_raw(storage.KEY_GEOMETRY), blob)
        self.assertIsNone(self.store.load_raw("missing"))


if __name__ == "__main__":
    unittest.main()
