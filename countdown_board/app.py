import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from PySide6 import QtCore, QtGui, QtWidgets

from . import APP_NAME, ORG_NAME, __version__
from . import storage
from .confetti import ConfettiOverlay
from .storage import SettingsStore
from .timecalc import target_instant
from .timer_model import CountdownController
from .widgets import ACCENT, ACCENT_LIGHT, AdminPanel, CountdownView

LOGGER = logging.getLogger("countdown_board")


# -----------------------------
# Resources (dev + PyInstaller onefile)
# -----------------------------
def resource_path(rel: str) -> str:
    base = getattr(sys, "_MEIPASS", str(Path(__file__).resolve().parent))
    return str(Path(base) / rel)


LOGO_PATH = resource_path("assets/logo.png")


def setup_logging(level: str = "INFO", log_path: str | None = None) -> None:
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    LOGGER.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    LOGGER.addHandler(handler)

    if log_path:
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        LOGGER.addHandler(file_handler)
    LOGGER.propagate = False


def log_unhandled_exception(exc_type, exc, tb) -> None:
    LOGGER.error("Unhandled exception", exc_info=(exc_type, exc, tb))


# -----------------------------
# Main UI
# -----------------------------
class MainWindow(QtWidgets.QMainWindow):
    def __init__(self, controller: CountdownController, year: int, store: SettingsStore):
        super().__init__()
        self.controller = controller
        self.year = year
        self.store = store
        self.admin_panel: AdminPanel | None = None

        self.setWindowTitle(f"Countdown to {year}")
        self.resize(1100, 640)
        self.setMinimumSize(720, 480)
        self.setStyleSheet(
            f"""
            QMainWindow {{ background: qlineargradient(x1:0, y1:0, x2:1, y2:1, stop:0 #ffffff, stop:1 #f3f4f6); }}
            QFrame#timeBlock {{ background: #fff; border: 1px solid #f3f4f6; border-radius: 16px; }}
            QLabel#blockCaption {{ color: #4b5563; font-weight: 500; font-size: 13px; letter-spacing: 2px; }}
            QLabel#countdownTitle {{ color: {ACCENT}; font-size: 48px; font-weight: 700; }}
            QLabel#celebration {{ color: {ACCENT}; font-size: 120px; font-weight: 900; }}
            QLabel#pausedBadge {{ background: #ef4444; color: #fff; border-radius: 14px; padding: 6px 14px; }}
            QLabel#manualBadge {{ background: #a855f7; color: #fff; border-radius: 14px; padding: 6px 14px; }}
            QToolButton#gearButton {{
                background: qlineargradient(x1:0, y1:0, x2:1, y2:0, stop:0 {ACCENT}, stop:1 {ACCENT_LIGHT});
                color: #fff; border: none; border-radius: 16px; font-size: 16px;
            }}
            """
        )

        central = QtWidgets.QWidget()
        self.setCentralWidget(central)
        root = QtWidgets.QVBoxLayout(central)
        root.setContentsMargins(16, 16, 16, 16)

        top = QtWidgets.QHBoxLayout()
        self.gear_btn = QtWidgets.QToolButton()
        self.gear_btn.setObjectName("gearButton")
        self.gear_btn.setText("⚙")
        self.gear_btn.setToolTip("Settings")
        self.gear_btn.setFixedSize(32, 32)
        self.gear_opacity = QtWidgets.QGraphicsOpacityEffect(self.gear_btn)
        self.gear_opacity.setOpacity(0.2)
        self.gear_btn.setGraphicsEffect(self.gear_opacity)
        self.gear_btn.installEventFilter(self)
        self.gear_btn.clicked.connect(self.open_admin_panel)
        top.addWidget(self.gear_btn)
        top.addStretch(1)

        self.paused_badge = QtWidgets.QLabel("Countdown paused")
        self.paused_badge.setObjectName("pausedBadge")
        self.manual_badge = QtWidgets.QLabel("Manual mode")
        self.manual_badge.setObjectName("manualBadge")
        top.addWidget(self.paused_badge)
        top.addWidget(self.manual_badge)
        root.addLayout(top)

        root.addStretch(1)

        self.logo = QtWidgets.QLabel()
        self.logo.setAlignment(QtCore.Qt.AlignHCenter)
        pixmap = QtGui.QPixmap(LOGO_PATH)
        if pixmap.isNull():
            self.logo.hide()
        else:
            self.logo.setPixmap(pixmap.scaled(128, 128, QtCore.Qt.KeepAspectRatio, QtCore.Qt.SmoothTransformation))
        root.addWidget(self.logo)

        self.view = CountdownView(year)
        self.view.block_clicked.connect(self._on_block_clicked)
        self.view.celebration_started.connect(self._on_celebration_started)
        root.addWidget(self.view)
        root.addStretch(1)

        self.confetti = ConfettiOverlay(central)

        self.controller.state_changed.connect(self._render)
        self._restore_geometry()
        self._render()

    # ---------------- Rendering ----------------
    def _render(self) -> None:
        state = self.controller.state
        self.paused_badge.setVisible(state.paused)
        self.manual_badge.setVisible(state.is_manual)
        self.view.render_state(state)

    def _on_celebration_started(self) -> None:
        LOGGER.info("celebration started")
        self.confetti.start()

    def _on_reset_applied(self) -> None:
        if self.view.rearm():
            self.confetti.stop()

    # ---------------- Admin panel ----------------
    def confirm_reset(self) -> bool:
        answer = QtWidgets.QMessageBox.question(
            self,
            "Reset countdown",
            "Are you sure you want to reset the countdown?",
            QtWidgets.QMessageBox.Yes | QtWidgets.QMessageBox.No,
            QtWidgets.QMessageBox.No,
        )
        return answer == QtWidgets.QMessageBox.Yes

    def _ensure_admin_panel(self) -> AdminPanel:
        if self.admin_panel is None:
            self.admin_panel = AdminPanel(self.controller, self.year, self.confirm_reset, parent=self)
            self.admin_panel.reset_applied.connect(self._on_reset_applied)
        return self.admin_panel

    def open_admin_panel(self) -> AdminPanel:
        panel = self._ensure_admin_panel()
        panel.refresh()
        panel.show()
        panel.raise_()
        panel.activateWindow()
        return panel

    def _on_block_clicked(self, name: str) -> None:
        self.open_admin_panel().focus_field(name)

    # ---------------- Qt events ----------------
    def eventFilter(self, obj, event):
        if obj is self.gear_btn:
            if event.type() == QtCore.QEvent.Enter:
                self.gear_opacity.setOpacity(1.0)
            elif event.type() == QtCore.QEvent.Leave:
                self.gear_opacity.setOpacity(0.2)
        return super().eventFilter(obj, event)

    def resizeEvent(self, event: QtGui.QResizeEvent):
        super().resizeEvent(event)
        self.confetti.setGeometry(self.centralWidget().rect())

    def _restore_geometry(self) -> None:
        geo = self.store.load_raw(storage.KEY_GEOMETRY)
        if isinstance(geo, QtCore.QByteArray):
            self.restoreGeometry(geo)

    def closeEvent(self, event: QtGui.QCloseEvent):
        self.controller.stop()
        self.confetti.stop()
        self.store.save_raw(storage.KEY_GEOMETRY, self.saveGeometry())
        self.store.sync()
        super().closeEvent(event)


# -----------------------------
# Entry point
# -----------------------------
def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="countdown-board",
        description="Full-window countdown to the start of a year, with an admin overlay",
    )
    parser.add_argument(
        "--target-year",
        type=int,
        default=datetime.now().year + 1,
        help="count down to local midnight on January 1st of this year (default: next year)",
    )
    parser.add_argument("--reset-settings", action="store_true", help="clear persisted state before starting")
    parser.add_argument("--log-level", default="INFO", help="logging level (default: INFO)")
    parser.add_argument("--log-file", default=None, help="also write logs to this file")
    parser.add_argument("--version", action="version", version=f"countdown-board {__version__}")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level, args.log_file)
    sys.excepthook = log_unhandled_exception

    app = QtWidgets.QApplication(sys.argv[:1])
    QtCore.QCoreApplication.setOrganizationName(ORG_NAME)
    QtCore.QCoreApplication.setApplicationName(APP_NAME)

    store = SettingsStore()
    if args.reset_settings:
        LOGGER.info("clearing persisted settings")
        store.clear()

    controller = CountdownController(store, target_instant(args.target_year))
    controller.load_state()
    LOGGER.info("counting down to %s", controller.target.isoformat())

    w = MainWindow(controller, args.target_year, store)
    w.show()
    return app.exec()
