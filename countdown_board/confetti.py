import math
import random
from dataclasses import dataclass
from typing import List, Sequence

from PySide6 import QtCore, QtGui, QtWidgets

PALETTE = ["#0857b3", "#54d2e0", "#FFD700", "#FF69B4", "#00FF00", "#FFA500"]

PIECES = 200
GRAVITY = 0.15
WIND = 0.01
INITIAL_VELOCITY_Y = 3.0
FRICTION = 0.99
FRAME_MS = 16


@dataclass
class Piece:
    x: float
    y: float
    vx: float
    vy: float
    w: float
    h: float
    angle: float
    spin: float
    color: str


class ConfettiField:
    """Confetti pieces falling under gravity with a slight horizontal drift."""

    def __init__(
        self,
        width: int,
        height: int,
        pieces: int = PIECES,
        gravity: float = GRAVITY,
        wind: float = WIND,
        initial_velocity_y: float = INITIAL_VELOCITY_Y,
        colors: Sequence[str] = PALETTE,
        recycle: bool = True,
        rng: random.Random | None = None,
    ) -> None:
        self.width = max(1, int(width))
        self.height = max(1, int(height))
        self.count = pieces
        self.gravity = gravity
        self.wind = wind
        self.initial_velocity_y = initial_velocity_y
        self.colors = list(colors)
        self.recycle = recycle
        self.rng = rng or random.Random()
        self.pieces: List[Piece] = [self._spawn() for _ in range(self.count)]

    def _spawn(self) -> Piece:
        r = self.rng
        return Piece(
            x=r.uniform(0, self.width),
            y=r.uniform(-self.height * 0.5, 0),
            vx=r.uniform(-4.0, 4.0),
            vy=r.uniform(0.0, self.initial_velocity_y),
            w=r.uniform(5.0, 20.0),
            h=r.uniform(5.0, 20.0),
            angle=r.uniform(0, 2 * math.pi),
            spin=r.uniform(-0.2, 0.2),
            color=r.choice(self.colors),
        )

    def resize(self, width: int, height: int) -> None:
        self.width = max(1, int(width))
        self.height = max(1, int(height))

    def _off_field(self, p: Piece) -> bool:
        margin = max(p.w, p.h)
        return p.y > self.height + margin or p.x < -margin * 4 or p.x > self.width + margin * 4

    def step(self) -> None:
        for i, p in enumerate(self.pieces):
            p.x += p.vx
            p.y += p.vy
            p.vy += self.gravity
            p.vx += self.wind
            p.vx *= FRICTION
            p.angle += p.spin
            if self._off_field(p) and self.recycle:
                fresh = self._spawn()
                fresh.y = -fresh.h
                self.pieces[i] = fresh
        if not self.recycle:
            self.pieces = [p for p in self.pieces if not self._off_field(p)]


class ConfettiOverlay(QtWidgets.QWidget):
    """Transparent layer painting a ConfettiField over its parent."""

    def __init__(self, parent: QtWidgets.QWidget | None = None):
        super().__init__(parent)
        self.setAttribute(QtCore.Qt.WA_TransparentForMouseEvents, True)
        self.setAttribute(QtCore.Qt.WA_NoSystemBackground, True)
        self.setAttribute(QtCore.Qt.WA_TranslucentBackground, True)

        self.field: ConfettiField | None = None
        self._frame_timer = QtCore.QTimer(self)
        self._frame_timer.setInterval(FRAME_MS)
        self._frame_timer.timeout.connect(self._advance)
        self.hide()

    def is_running(self) -> bool:
        return self._frame_timer.isActive()

    def start(self) -> None:
        if self.is_running():
            return
        parent = self.parentWidget()
        if parent is not None:
            self.setGeometry(parent.rect())
        self.field = ConfettiField(self.width(), self.height())
        self.show()
        self.raise_()
        self._frame_timer.start()

    def stop(self) -> None:
        self._frame_timer.stop()
        self.field = None
        self.hide()

    def _advance(self) -> None:
        if self.field is None:
            return
        self.field.step()
        self.update()

    def resizeEvent(self, event: QtGui.QResizeEvent):
        super().resizeEvent(event)
        if self.field is not None:
            self.field.resize(self.width(), self.height())

    def paintEvent(self, event: QtGui.QPaintEvent):
        if self.field is None:
            return
        p = QtGui.QPainter(self)
        p.setRenderHint(QtGui.QPainter.Antialiasing, True)
        p.setPen(QtCore.Qt.NoPen)
        for piece in self.field.pieces:
            p.save()
            p.translate(piece.x, piece.y)
            p.rotate(math.degrees(piece.angle))
            p.setBrush(QtGui.QColor(piece.color))
            p.drawRect(QtCore.QRectF(-piece.w / 2, -piece.h / 2, piece.w, piece.h))
            p.restore()
        p.end()
