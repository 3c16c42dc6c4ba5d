from __future__ import annotations

import random
import unittest

from PySide6 import QtWidgets

from countdown_board.confetti import PALETTE, ConfettiField, ConfettiOverlay


def setUpModule() -> None:
    global _app
    _app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])


class TestConfettiField(unittest.TestCase):
    def test_default_parameters(self) -> None:
        field = ConfettiField(800, 600, rng=random.Random(1))
        self.assertEqual(len(field.pieces), 200)
        self.assertEqual(field.gravity, 0.15)
        self.assertEqual(field.wind, 0.01)
        self.assertEqual(field.initial_velocity_y, 3)
        self.assertEqual(len(PALETTE), 6)
        self.assertTrue(all(p.color in PALETTE for p in field.pieces))
        self.assertTrue(all(0 <= p.vy <= 3 for p in field.pieces))

    def test_gravity_accelerates_fall(self) -> None:
        field = ConfettiField(800, 10_000, pieces=1, rng=random.Random(2))
        piece = field.pieces[0]
        vy = piece.vy
        y = piece.y
        field.step()
        self.assertAlmostEqual(piece.vy, vy + 0.15)
        self.assertAlmostEqual(piece.y, y + vy)

    def test_recycle_keeps_piece_count(self) -> None:
        field = ConfettiField(100, 50, pieces=30, rng=random.Random(3))
        for _ in range(500):
            field.step()
        self.assertEqual(len(field.pieces), 30)
        self.assertTrue(all(p.y <= 50 + max(p.w, p.h) for p in field.pieces))

    def test_without_recycle_pieces_drain(self) -> None:
        field = ConfettiField(100, 50, pieces=30, recycle=False, rng=random.Random(4))
        for _ in range(500):
            field.step()
        self.assertEqual(field.pieces, [])


class TestConfettiOverlay(unittest.TestCase):
    def test_start_and_stop(self) -> None:
        host = QtWidgets.QWidget()
        host.resize(400, 300)
        overlay = ConfettiOverlay(host)
        self.assertFalse(overlay.is_running())

        overlay.start()
        self.assertTrue(overlay.is_running())
        self.assertEqual((overlay.width(), overlay.height()), (400, 300))
        self.assertEqual(overlay.field.width, 400)

        overlay.stop()
        self.assertFalse(overlay.is_running())
        self.assertIsNone(overlay.field)
        host.deleteLater()


if __name__ == "__main__":
    unittest.main()
