"""Database package."""

from .db import get_session, init_db, configure_engine
from .models import BreathingSession
from .history import recent_sessions, total_cycles

__all__ = [
    "get_session",
    "init_db",
    "configure_engine",
    "BreathingSession",
    "recent_sessions",
    "total_cycles",
]
