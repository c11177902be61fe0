"""SQLAlchemy ORM models for RepTimer."""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class WorkoutPreset(Base):
    """A saved interval or head-to-head workout.

    Columns that do not apply to the preset's mode stay NULL.
    """

    __tablename__ = "workout_presets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True)
    mode = Column(String(20), nullable=False, default="interval")  # interval | head_to_head
    setup_duration = Column(Integer, nullable=False, default=10)
    warmup_duration = Column(Integer, nullable=True)
    work_duration = Column(Integer, nullable=False, default=30)
    rest_duration = Column(Integer, nullable=True)
    long_rest_duration = Column(Integer, nullable=True)
    sets_per_round = Column(Integer, nullable=True)
    number_of_people = Column(Integer, nullable=True)
    number_of_rounds = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<WorkoutPreset name={self.name!r} mode={self.mode}>"


class BreathingPreset(Base):
    """A user-defined breathing pattern (built-ins live in code)."""

    __tablename__ = "breathing_presets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True)
    breath_in = Column(Integer, nullable=False, default=4)
    inhaled_hold = Column(Integer, nullable=False, default=0)
    breath_out = Column(Integer, nullable=False, default=4)
    exhaled_hold = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return (
            f"<BreathingPreset name={self.name!r} "
            f"{self.breath_in}-{self.inhaled_hold}-"
            f"{self.breath_out}-{self.exhaled_hold}>"
        )
