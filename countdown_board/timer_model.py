import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from PySide6 import QtCore

from . import storage
from .storage import SettingsStore
from .timecalc import FIELD_LIMITS, FIELDS, TimeRemaining, local_now, time_until

LOGGER = logging.getLogger(__name__)

TICK_MS = 1000

FONT_SIZE_MIN = 20
FONT_SIZE_MAX = 200
DEFAULT_FONT_SIZE = 60


class Mode(enum.Enum):
    AUTOMATIC = "automatic"
    MANUAL = "manual"


# -----------------------------
# State
# -----------------------------
@dataclass
class CountdownState:
    time_left: TimeRemaining = field(default_factory=TimeRemaining.zero)
    mode: Mode = Mode.AUTOMATIC
    paused: bool = False
    # None: never configured, False: cleared by a reset or a switch to automatic
    manual_time_set: Optional[bool] = None
    font_size: int = DEFAULT_FONT_SIZE

    @property
    def is_manual(self) -> bool:
        return self.mode is Mode.MANUAL


def font_size_valid(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return FONT_SIZE_MIN <= value <= FONT_SIZE_MAX


# -----------------------------
# Controller
# -----------------------------
class CountdownController(QtCore.QObject):
    """Owns the countdown state and the one-second tick.

    All mutation goes through the transition methods below; each one mirrors
    the fields it touched to the store before returning and emits
    ``state_changed``.
    """

    state_changed = QtCore.Signal()

    def __init__(
        self,
        store: SettingsStore,
        target: datetime,
        clock: Callable[[], datetime] = local_now,
        parent: QtCore.QObject | None = None,
    ):
        super().__init__(parent)
        self.store = store
        self.target = target
        self.clock = clock
        self.state = CountdownState()

        self._timer = QtCore.QTimer(self)
        self._timer.setInterval(TICK_MS)
        self._timer.timeout.connect(self.tick)
        self._stopped = False

    # ---------------- Persistence ----------------
    def load_state(self) -> CountdownState:
        store = self.store

        font_size = store.load(storage.KEY_FONT_SIZE, DEFAULT_FONT_SIZE)
        if isinstance(font_size, bool) or not isinstance(font_size, (int, float)):
            font_size = DEFAULT_FONT_SIZE
        font_size = max(FONT_SIZE_MIN, min(FONT_SIZE_MAX, int(font_size)))

        paused = store.load(storage.KEY_PAUSED, False)
        manual = store.load(storage.KEY_MANUAL_MODE, False)

        time_left = TimeRemaining.from_dict(store.load(storage.KEY_TIME_LEFT, None))
        if time_left is None:
            time_left = TimeRemaining.zero()

        manual_time_set = store.load(storage.KEY_MANUAL_TIME_SET, None)
        if not isinstance(manual_time_set, bool):
            manual_time_set = None

        self.state = CountdownState(
            time_left=time_left,
            mode=Mode.MANUAL if manual is True else Mode.AUTOMATIC,
            paused=paused is True,
            manual_time_set=manual_time_set,
            font_size=font_size,
        )
        LOGGER.info(
            "loaded state: mode=%s paused=%s time_left=%s",
            self.state.mode.value,
            self.state.paused,
            self.state.time_left.to_dict(),
        )

        # A running automatic countdown shows wall-clock time from the first frame.
        if self.state.mode is Mode.AUTOMATIC and not self.state.paused:
            self._set_time_left(self._automatic_time_left())

        self._reschedule()
        self.state_changed.emit()
        return self.state

    def _save_time_left(self) -> None:
        self.store.save(storage.KEY_TIME_LEFT, self.state.time_left.to_dict())

    def _save_flags(self) -> None:
        self.store.save(storage.KEY_PAUSED, self.state.paused)
        self.store.save(storage.KEY_MANUAL_MODE, self.state.is_manual)
        self.store.save(storage.KEY_MANUAL_TIME_SET, self.state.manual_time_set)

    # ---------------- Scheduling ----------------
    def _reschedule(self) -> None:
        self._timer.stop()
        if self._stopped or self.state.paused:
            return
        self._timer.start()

    def is_ticking(self) -> bool:
        return self._timer.isActive()

    def stop(self) -> None:
        self._stopped = True
        self._timer.stop()

    # ---------------- Helpers ----------------
    def _automatic_time_left(self) -> TimeRemaining:
        return time_until(self.target, self.clock())

    def _set_time_left(self, new_time: TimeRemaining) -> bool:
        old = self.state.time_left
        if new_time == old:
            return False
        self.state.time_left = new_time
        self._save_time_left()
        if new_time.is_zero() and not old.is_zero():
            LOGGER.info("countdown reached zero")
        return True

    # ---------------- Transitions ----------------
    def tick(self) -> None:
        if self.state.paused:
            return
        if self.state.is_manual:
            remaining = max(0, self.state.time_left.total_seconds() - 1)
            new_time = TimeRemaining.from_total_seconds(remaining)
        else:
            new_time = self._automatic_time_left()
        if self._set_time_left(new_time):
            self.state_changed.emit()

    def toggle_pause(self) -> None:
        self.state.paused = not self.state.paused
        LOGGER.debug("paused=%s", self.state.paused)
        self.store.save(storage.KEY_PAUSED, self.state.paused)
        self._reschedule()
        self.state_changed.emit()

    def reset(self, confirm: Callable[[], bool]) -> bool:
        # the tick is held while the prompt is open
        self._timer.stop()
        if not confirm():
            LOGGER.debug("reset declined")
            self._reschedule()
            return False

        if self.state.is_manual:
            self._set_time_left(TimeRemaining.zero())
            self.state.manual_time_set = False
        else:
            self._set_time_left(self._automatic_time_left())
        self.state.paused = False
        self._save_flags()
        LOGGER.debug("reset applied in %s mode", self.state.mode.value)
        self._reschedule()
        self.state_changed.emit()
        return True

    def toggle_mode(self) -> None:
        if self.state.is_manual:
            self.state.mode = Mode.AUTOMATIC
            self._set_time_left(self._automatic_time_left())
            self.state.manual_time_set = False
        else:
            # the last computed value becomes the manual starting duration
            self.state.mode = Mode.MANUAL
        LOGGER.debug("mode=%s", self.state.mode.value)
        self._save_flags()
        self._reschedule()
        self.state_changed.emit()

    def set_manual_field(self, name: str, value: int) -> bool:
        if name not in FIELDS or not _in_range(name, value):
            return False
        return self.set_time_left(self.state.time_left.replace_field(name, value))

    def set_time_left(self, new_time: Optional[TimeRemaining]) -> bool:
        if new_time is None or not self.state.is_manual:
            return False
        for name in FIELDS:
            if not _in_range(name, getattr(new_time, name)):
                return False
        self._set_time_left(new_time)
        self.state.manual_time_set = True
        self.store.save(storage.KEY_MANUAL_TIME_SET, True)
        self._reschedule()
        self.state_changed.emit()
        return True

    def set_font_size(self, value: int) -> bool:
        if not font_size_valid(value):
            LOGGER.debug("rejected font size %r", value)
            return False
        if value != self.state.font_size:
            self.state.font_size = value
            self.store.save(storage.KEY_FONT_SIZE, value)
            self.state_changed.emit()
        return True


def _in_range(name: str, value) -> bool:
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return 0 <= value <= FIELD_LIMITS[name]
