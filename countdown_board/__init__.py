__version__ = "1.0.0"

ORG_NAME = "CountdownBoard"
APP_NAME = "Countdown Board"
