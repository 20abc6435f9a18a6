import os

# Must be set before the first QGuiApplication is created
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtWidgets import QApplication


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture()
def fake_scheduler():
    """Collects (delay_ms, callback) pairs instead of starting real timers."""
    calls: list = []

    def schedule(delay_ms, callback):
        calls.append((delay_ms, callback))

    schedule.calls = calls
    return schedule
