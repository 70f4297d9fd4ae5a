from sqlalchemy import Column, Integer, String, Float, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from .database import Base
from .calculators.volume import DEFAULT_MATERIAL_WEIGHT, DEFAULT_IMPORT_UNIT_COST
import enum


class JobStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


# DECISION: status is stored as VARCHAR, not a database enum. The API layer
# enforces JobStatus values so the column never needs a type migration.


class Job(Base):
    """An excavation project. Owns zero or more estimates."""
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(Text, nullable=False)
    location = Column(Text, nullable=False)
    client = Column(Text, nullable=False)
    start_date = Column(Text, nullable=True)  # ISO date string, e.g. "2024-05-01"
    status = Column(String, nullable=False, default=JobStatus.PENDING.value)
    notes = Column(Text, nullable=True)

    # Estimates are removed explicitly by storage.delete_job before the job row
    estimates = relationship("Estimate", back_populates="job", passive_deletes=True)


class Estimate(Base):
    """Trench volume / cost estimate attached to a job."""
    __tablename__ = "estimates"

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False, index=True)
    description = Column(Text, nullable=True)

    # Dimensions (feet)
    pipe_length = Column(Float, nullable=False)
    trench_width = Column(Float, nullable=False)
    trench_depth = Column(Float, nullable=False)

    # Derived, always recomputed server side from the three dimensions
    cubic_yards = Column(Float, nullable=False)

    material_weight = Column(Float, nullable=False, default=DEFAULT_MATERIAL_WEIGHT)  # lbs / ft³
    import_unit_cost = Column(Float, nullable=False, default=DEFAULT_IMPORT_UNIT_COST)  # $ / ton
    estimated_hours = Column(Float, default=0.0)
    created_at = Column(DateTime, default=datetime.utcnow)
    notes = Column(Text, nullable=True)

    job = relationship("Job", back_populates="estimates")
