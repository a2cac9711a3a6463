"""SQLAlchemy ORM models for SerenityBreath."""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class BreathingSession(Base):
    """One run of an exercise, from start until stop."""

    __tablename__ = "breathing_sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    exercise_id = Column(String(64), nullable=False)
    start_time = Column(DateTime, nullable=False, default=datetime.now)
    end_time = Column(DateTime, nullable=True)
    duration_seconds = Column(Integer, nullable=False, default=0)
    completed_cycles = Column(Integer, nullable=False, default=0)

    @property
    def finished(self) -> bool:
        return self.end_time is not None

    def __repr__(self) -> str:
        return (
            f"<BreathingSession id={self.id} exercise={self.exercise_id} "
            f"cycles={self.completed_cycles}>"
        )
