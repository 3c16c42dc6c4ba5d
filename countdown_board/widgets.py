from typing import Callable, Dict

from PySide6 import QtCore, QtGui, QtWidgets

from .timecalc import FIELD_LIMITS, FIELDS, format_block_value, parse_field_input
from .timer_model import FONT_SIZE_MAX, FONT_SIZE_MIN, CountdownController, CountdownState

ACCENT = "#0857b3"
ACCENT_LIGHT = "#54d2e0"

BLOCK_CAPTIONS = {
    "days": "DAYS",
    "hours": "HOURS",
    "minutes": "MINUTES",
    "seconds": "SECONDS",
}

INPUT_LABELS = {
    "days": "Days",
    "hours": "Hours",
    "minutes": "Minutes",
    "seconds": "Seconds",
}


# -----------------------------
# Countdown view
# -----------------------------
class TimeBlock(QtWidgets.QFrame):
    clicked = QtCore.Signal()

    def __init__(self, caption: str, parent: QtWidgets.QWidget | None = None):
        super().__init__(parent)
        self.setObjectName("timeBlock")
        self.setMinimumWidth(160)
        self.setCursor(QtCore.Qt.PointingHandCursor)

        self.value_label = QtWidgets.QLabel("00")
        self.value_label.setObjectName("blockValue")
        self.value_label.setAlignment(QtCore.Qt.AlignHCenter)

        self.caption_label = QtWidgets.QLabel(caption)
        self.caption_label.setObjectName("blockCaption")
        self.caption_label.setAlignment(QtCore.Qt.AlignHCenter)

        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(8)
        layout.addWidget(self.value_label)
        layout.addWidget(self.caption_label)

        self._font_size = 0

    def set_value(self, value: int) -> None:
        self.value_label.setText(format_block_value(value))

    def set_font_size(self, px: int) -> None:
        if px == self._font_size:
            return
        self._font_size = px
        self.value_label.setStyleSheet(
            f"QLabel {{ font-size: {px}px; font-weight: 700; color: {ACCENT}; }}"
        )

    def mousePressEvent(self, event: QtGui.QMouseEvent):
        if event.button() == QtCore.Qt.LeftButton:
            self.clicked.emit()
            event.accept()
            return
        super().mousePressEvent(event)


class CountdownView(QtWidgets.QWidget):
    """Four time blocks, swapped for a celebration message at zero.

    The swap is one-way until ``rearm`` is called with a non-zero time.
    """

    block_clicked = QtCore.Signal(str)
    celebration_started = QtCore.Signal()

    def __init__(self, year: int, parent: QtWidgets.QWidget | None = None):
        super().__init__(parent)
        self.year = year
        self._manual = False
        self._celebrating = False
        self._last_state: CountdownState | None = None

        self.stack = QtWidgets.QStackedLayout(self)

        blocks_page = QtWidgets.QWidget()
        page_layout = QtWidgets.QVBoxLayout(blocks_page)
        page_layout.setSpacing(36)

        self.title = QtWidgets.QLabel(f"Countdown to {year}")
        self.title.setObjectName("countdownTitle")
        self.title.setAlignment(QtCore.Qt.AlignHCenter)
        page_layout.addWidget(self.title)

        row = QtWidgets.QHBoxLayout()
        row.setSpacing(24)
        row.addStretch(1)
        self.blocks: Dict[str, TimeBlock] = {}
        for name in FIELDS:
            block = TimeBlock(BLOCK_CAPTIONS[name])
            block.clicked.connect(lambda name=name: self._on_block_clicked(name))
            self.blocks[name] = block
            row.addWidget(block)
        row.addStretch(1)
        page_layout.addLayout(row)

        self.celebration = QtWidgets.QLabel(f"HAPPY {year}!")
        self.celebration.setObjectName("celebration")
        self.celebration.setAlignment(QtCore.Qt.AlignCenter)

        self.stack.addWidget(blocks_page)
        self.stack.addWidget(self.celebration)

    @property
    def celebrating(self) -> bool:
        return self._celebrating

    def render_state(self, state: CountdownState) -> None:
        self._last_state = state
        self._manual = state.is_manual
        for name, block in self.blocks.items():
            block.set_value(getattr(state.time_left, name))
            block.set_font_size(state.font_size)

        if state.time_left.is_zero() and not self._celebrating:
            self._celebrating = True
            self.stack.setCurrentIndex(1)
            self.celebration_started.emit()

    def rearm(self) -> bool:
        state = self._last_state
        if not self._celebrating or state is None or state.time_left.is_zero():
            return False
        self._celebrating = False
        self.stack.setCurrentIndex(0)
        return True

    def _on_block_clicked(self, name: str) -> None:
        if self._manual:
            self.block_clicked.emit(name)


# -----------------------------
# Admin overlay
# -----------------------------
class TimeInput(QtWidgets.QWidget):
    """Labelled numeric field; entries outside [0, maximum] are ignored."""

    value_changed = QtCore.Signal(int)

    def __init__(self, label: str, maximum: int, parent: QtWidgets.QWidget | None = None):
        super().__init__(parent)
        self.maximum = maximum
        self._value = 0

        self.label = QtWidgets.QLabel(label)
        self.label.setAlignment(QtCore.Qt.AlignHCenter)

        self.edit = QtWidgets.QLineEdit("0")
        self.edit.setAlignment(QtCore.Qt.AlignHCenter)
        self.edit.setFixedWidth(80)
        self.edit.setToolTip(f"0 to {maximum}")
        self.edit.textEdited.connect(self._on_text_edited)
        self.edit.editingFinished.connect(self._on_editing_finished)

        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(4)
        layout.addWidget(self.label)
        layout.addWidget(self.edit, 0, QtCore.Qt.AlignHCenter)

    def value(self) -> int:
        return self._value

    def set_value(self, value: int) -> None:
        self._value = int(value)
        if not self.edit.hasFocus():
            self.edit.setText(str(self._value))

    def _on_text_edited(self, text: str) -> None:
        value = parse_field_input(text, self.maximum)
        if value is None:
            return
        self._value = value
        self.value_changed.emit(value)

    def _on_editing_finished(self) -> None:
        self.edit.setText(str(self._value))


class ClickableSlider(QtWidgets.QSlider):
    """Horizontal slider that jumps to the clicked position."""

    def mousePressEvent(self, event: QtGui.QMouseEvent):
        if event.button() != QtCore.Qt.LeftButton:
            super().mousePressEvent(event)
            return

        opt = QtWidgets.QStyleOptionSlider()
        self.initStyleOption(opt)
        handle = self.style().subControlRect(
            QtWidgets.QStyle.CC_Slider, opt, QtWidgets.QStyle.SC_SliderHandle, self
        )
        pos = event.position().toPoint()
        if handle.contains(pos):
            super().mousePressEvent(event)
            return

        x = max(0, min(self.width() - 1, pos.x()))
        ratio = x / max(1, self.width() - 1)
        self.setValue(self.minimum() + int(round(ratio * (self.maximum() - self.minimum()))))
        event.accept()


class AdminPanel(QtWidgets.QDialog):
    reset_applied = QtCore.Signal()

    def __init__(
        self,
        controller: CountdownController,
        year: int,
        confirm_reset: Callable[[], bool],
        parent: QtWidgets.QWidget | None = None,
    ):
        super().__init__(parent)
        self.controller = controller
        self.year = year
        self.confirm_reset = confirm_reset

        self.setWindowTitle("Control panel")
        self.setModal(True)
        self.setMinimumWidth(500)
        self.setStyleSheet(
            f"""
            QDialog {{ background: #fff; }}
            QLabel#panelTitle {{ font-size: 22px; font-weight: 700; color: {ACCENT}; }}
            QLabel#modeHint {{ color: #6b7280; font-size: 12px; }}
            QGroupBox {{ background: #f9fafb; border: 1px solid #e5e7eb; border-radius: 8px; margin-top: 18px; padding: 12px; }}
            QLineEdit {{ border: 1px solid #d1d5db; border-radius: 6px; padding: 6px; }}
            QPushButton {{ padding: 10px; border-radius: 8px; font-weight: 500; }}
            QPushButton#pauseButton {{ background: {ACCENT}; color: #fff; }}
            QPushButton#resetButton {{ background: #ef4444; color: #fff; }}
            QPushButton#closeButton {{ background: #e5e7eb; color: #374151; }}
            """
        )

        root = QtWidgets.QVBoxLayout(self)
        root.setContentsMargins(28, 24, 28, 24)
        root.setSpacing(14)

        title = QtWidgets.QLabel("Control panel")
        title.setObjectName("panelTitle")
        root.addWidget(title)

        # Mode
        self.mode_check = QtWidgets.QCheckBox("Manual mode")
        self.mode_check.toggled.connect(self._on_mode_toggled)
        self.mode_hint = QtWidgets.QLabel()
        self.mode_hint.setObjectName("modeHint")
        self.mode_hint.setWordWrap(True)
        root.addWidget(self.mode_check)
        root.addWidget(self.mode_hint)

        # Manual time inputs
        self.manual_group = QtWidgets.QGroupBox("Manual time adjustment")
        grid = QtWidgets.QGridLayout(self.manual_group)
        self.inputs: Dict[str, TimeInput] = {}
        for col, name in enumerate(FIELDS):
            time_input = TimeInput(INPUT_LABELS[name], FIELD_LIMITS[name])
            time_input.value_changed.connect(lambda value, name=name: self._on_field_changed(name, value))
            self.inputs[name] = time_input
            grid.addWidget(time_input, 0, col)
        root.addWidget(self.manual_group)

        # Font size
        self.font_label = QtWidgets.QLabel()
        self.font_slider = ClickableSlider(QtCore.Qt.Horizontal)
        self.font_slider.setRange(FONT_SIZE_MIN, FONT_SIZE_MAX)
        self.font_slider.setSingleStep(1)
        self.font_slider.setPageStep(10)
        self.font_slider.valueChanged.connect(self._on_font_size_changed)
        root.addWidget(self.font_label)
        root.addWidget(self.font_slider)

        # Timer controls
        self.pause_btn = QtWidgets.QPushButton()
        self.pause_btn.setObjectName("pauseButton")
        self.pause_btn.clicked.connect(self.controller.toggle_pause)

        self.reset_btn = QtWidgets.QPushButton()
        self.reset_btn.setObjectName("resetButton")
        self.reset_btn.clicked.connect(self._on_reset)

        self.close_btn = QtWidgets.QPushButton("Close")
        self.close_btn.setObjectName("closeButton")
        self.close_btn.clicked.connect(self.accept)

        root.addWidget(self.pause_btn)
        root.addWidget(self.reset_btn)
        root.addSpacing(6)
        root.addWidget(self.close_btn)

        self.controller.state_changed.connect(self.refresh)
        self.refresh()

    def refresh(self) -> None:
        state = self.controller.state
        manual = state.is_manual

        self.mode_check.blockSignals(True)
        self.mode_check.setChecked(manual)
        self.mode_check.blockSignals(False)
        if manual:
            self.mode_hint.setText("Adjust the time by clicking the blocks or using the fields below")
        else:
            self.mode_hint.setText(f"Time is computed automatically until {self.year}")

        self.manual_group.setVisible(manual)
        for name, time_input in self.inputs.items():
            time_input.set_value(getattr(state.time_left, name))

        self.font_slider.blockSignals(True)
        self.font_slider.setValue(state.font_size)
        self.font_slider.blockSignals(False)
        self.font_label.setText(f"Font size: {state.font_size}px")

        self.pause_btn.setText("Resume countdown" if state.paused else "Pause countdown")
        self.reset_btn.setText("Clear timer" if manual else f"Reset to {self.year}")

    def focus_field(self, name: str) -> None:
        time_input = self.inputs.get(name)
        if time_input is None or not self.controller.state.is_manual:
            return
        time_input.edit.setFocus(QtCore.Qt.OtherFocusReason)
        time_input.edit.selectAll()

    # ---------------- Handlers ----------------
    def _on_mode_toggled(self, checked: bool) -> None:
        if checked != self.controller.state.is_manual:
            self.controller.toggle_mode()

    def _on_field_changed(self, name: str, value: int) -> None:
        self.controller.set_manual_field(name, value)

    def _on_font_size_changed(self, value: int) -> None:
        self.controller.set_font_size(int(value))

    def _on_reset(self) -> None:
        if self.controller.reset(self.confirm_reset):
            self.reset_applied.emit()
