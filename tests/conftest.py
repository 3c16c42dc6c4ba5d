import os

# Widgets are created without a display.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
