"""Read-side queries over recorded breathing sessions."""

from __future__ import annotations

from sqlalchemy import func, select

from .db import get_session
from .models import BreathingSession


def recent_sessions(limit: int = 10) -> list[BreathingSession]:
    """Most recent finished sessions, newest first."""
    with get_session() as db:
        stmt = (
            select(BreathingSession)
            .where(BreathingSession.end_time.is_not(None))
            .order_by(BreathingSession.start_time.desc(), BreathingSession.id.desc())
            .limit(limit)
        )
        return list(db.scalars(stmt))


def total_cycles() -> int:
    """Cycles completed across every recorded session."""
    with get_session() as db:
        total = db.scalar(select(func.sum(BreathingSession.completed_cycles)))
        return int(total or 0)
