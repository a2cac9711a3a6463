"""Shared pytest fixtures for SerenityBreath tests."""

import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication  # noqa: E402

from serenitybreath.database.db import configure_engine, init_db  # noqa: E402
from serenitybreath.engine.facade import BreathingEngine  # noqa: E402

from helpers import FakeClock  # noqa: E402


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def engine(qapp, clock):
    """Fresh BreathingEngine with DB enabled, driven by a fake clock."""
    return BreathingEngine(parent=None, db_enabled=True, time_source=clock)


@pytest.fixture
def engine_no_db(qapp, clock):
    """Fresh BreathingEngine with DB disabled (pure state-machine tests)."""
    return BreathingEngine(parent=None, db_enabled=False, time_source=clock)
