"""
Job / estimate persistence.

Thin layer over a SQLAlchemy session. Every mutation commits before
returning. A missing row comes back as None (or False for deletes); the
routers decide what that means over HTTP.

Any SQLAlchemyError rolls the session back and is re-raised as
PersistenceError with the original chained.
"""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import models
from .calculators.volume import cubic_yards
from .errors import PersistenceError

logger = logging.getLogger(__name__)

DIMENSION_FIELDS = ("pipe_length", "trench_width", "trench_depth")

JOB_FIELDS = ("name", "location", "client", "start_date", "status", "notes")
ESTIMATE_FIELDS = (
    "job_id", "description", "pipe_length", "trench_width", "trench_depth",
    "material_weight", "import_unit_cost", "estimated_hours", "notes",
)

JOB_SORTS = ("date-desc", "date-asc", "name-asc", "name-desc")
ESTIMATE_SORTS = ("date-desc", "date-asc", "volume-desc", "volume-asc")


def _pick(fields: dict, allowed) -> dict:
    """Drop keys that are not writable columns (id, cubic_yards, created_at...)."""
    return {k: v for k, v in fields.items() if k in allowed}


def _escape_like(term: str) -> str:
    """Make % and _ in a search term match literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class DbStorage:
    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _persisting(self, action: str):
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Database error while trying to %s", action)
            raise PersistenceError(f"Failed to {action}") from e

    # --- Jobs ---

    def list_jobs(self, search: Optional[str] = None, status: Optional[str] = None,
                  sort: Optional[str] = None) -> List[models.Job]:
        """
        List jobs, optionally filtered and sorted.

        Args:
            search: case-insensitive substring matched against name, location, client
            status: exact status value
            sort: one of JOB_SORTS; None keeps insertion (id) order.
                  Date sorts compare the start_date text, missing dates as "".
        """
        with self._persisting("list jobs"):
            query = self.db.query(models.Job)
            if search:
                pattern = f"%{_escape_like(search.strip())}%"
                query = query.filter(or_(
                    models.Job.name.ilike(pattern, escape="\\"),
                    models.Job.location.ilike(pattern, escape="\\"),
                    models.Job.client.ilike(pattern, escape="\\"),
                ))
            if status:
                query = query.filter(models.Job.status == status)

            start = func.coalesce(models.Job.start_date, "")
            if sort == "date-desc":
                query = query.order_by(start.desc(), models.Job.id.desc())
            elif sort == "date-asc":
                query = query.order_by(start.asc(), models.Job.id.asc())
            elif sort == "name-asc":
                query = query.order_by(func.lower(models.Job.name).asc(), models.Job.id.asc())
            elif sort == "name-desc":
                query = query.order_by(func.lower(models.Job.name).desc(), models.Job.id.desc())
            else:
                query = query.order_by(models.Job.id)
            return query.all()

    def get_job(self, job_id: int) -> Optional[models.Job]:
        with self._persisting("fetch job"):
            return self.db.query(models.Job).filter(models.Job.id == job_id).first()

    def create_job(self, fields: dict) -> models.Job:
        data = _pick(fields, JOB_FIELDS)
        if not data.get("status"):
            data["status"] = models.JobStatus.PENDING.value
        with self._persisting("create job"):
            job = models.Job(**data)
            self.db.add(job)
            self.db.commit()
            self.db.refresh(job)
        logger.info("Created job %s (%s)", job.id, job.name)
        return job

    def update_job(self, job_id: int, fields: dict) -> Optional[models.Job]:
        with self._persisting("update job"):
            job = self.db.query(models.Job).filter(models.Job.id == job_id).first()
            if not job:
                return None
            for field, value in _pick(fields, JOB_FIELDS).items():
                setattr(job, field, value)
            self.db.commit()
            self.db.refresh(job)
        logger.info("Updated job %s", job_id)
        return job

    def delete_job(self, job_id: int) -> bool:
        """Delete a job and, first, every estimate that references it."""
        with self._persisting("delete job"):
            removed = self.db.query(models.Estimate).filter(
                models.Estimate.job_id == job_id
            ).delete(synchronize_session=False)
            deleted = self.db.query(models.Job).filter(
                models.Job.id == job_id
            ).delete(synchronize_session=False)
            self.db.commit()
        if deleted:
            logger.info("Deleted job %s and %d estimate(s)", job_id, removed)
        return deleted > 0

    # --- Estimates ---

    def list_estimates(self, job_id: Optional[int] = None, since: Optional[datetime] = None,
                       sort: Optional[str] = None) -> List[models.Estimate]:
        """
        List estimates, optionally for one job / created on or after `since`.

        sort: one of ESTIMATE_SORTS; None keeps insertion (id) order.
        """
        with self._persisting("list estimates"):
            query = self.db.query(models.Estimate)
            if job_id is not None:
                query = query.filter(models.Estimate.job_id == job_id)
            if since is not None:
                query = query.filter(models.Estimate.created_at >= since)

            if sort == "date-desc":
                query = query.order_by(models.Estimate.created_at.desc(), models.Estimate.id.desc())
            elif sort == "date-asc":
                query = query.order_by(models.Estimate.created_at.asc(), models.Estimate.id.asc())
            elif sort == "volume-desc":
                query = query.order_by(models.Estimate.cubic_yards.desc(), models.Estimate.id.desc())
            elif sort == "volume-asc":
                query = query.order_by(models.Estimate.cubic_yards.asc(), models.Estimate.id.asc())
            else:
                query = query.order_by(models.Estimate.id)
            return query.all()

    def list_estimates_by_job(self, job_id: int) -> List[models.Estimate]:
        return self.list_estimates(job_id=job_id)

    def get_estimate(self, estimate_id: int) -> Optional[models.Estimate]:
        with self._persisting("fetch estimate"):
            return self.db.query(models.Estimate).filter(models.Estimate.id == estimate_id).first()

    def create_estimate(self, fields: dict) -> models.Estimate:
        """
        Persist a new estimate. cubic_yards is always computed here from the
        three dimensions; a caller-supplied value is discarded.
        """
        data = _pick(fields, ESTIMATE_FIELDS)
        data["cubic_yards"] = cubic_yards(
            data["pipe_length"], data["trench_width"], data["trench_depth"],
        )
        with self._persisting("create estimate"):
            estimate = models.Estimate(**data)
            self.db.add(estimate)
            self.db.commit()
            self.db.refresh(estimate)
        logger.info("Created estimate %s for job %s (%.2f yd³)",
                    estimate.id, estimate.job_id, estimate.cubic_yards)
        return estimate

    def update_estimate(self, estimate_id: int, fields: dict) -> Optional[models.Estimate]:
        """
        Apply a partial update. If any dimension is present, cubic_yards is
        recomputed from the stored dimensions overlaid with the new ones.
        """
        data = _pick(fields, ESTIMATE_FIELDS)
        with self._persisting("update estimate"):
            estimate = self.db.query(models.Estimate).filter(
                models.Estimate.id == estimate_id
            ).first()
            if not estimate:
                return None
            for field, value in data.items():
                setattr(estimate, field, value)
            if any(dim in data for dim in DIMENSION_FIELDS):
                estimate.cubic_yards = cubic_yards(
                    estimate.pipe_length, estimate.trench_width, estimate.trench_depth,
                )
            self.db.commit()
            self.db.refresh(estimate)
        logger.info("Updated estimate %s", estimate_id)
        return estimate

    def delete_estimate(self, estimate_id: int) -> bool:
        with self._persisting("delete estimate"):
            deleted = self.db.query(models.Estimate).filter(
                models.Estimate.id == estimate_id
            ).delete(synchronize_session=False)
            self.db.commit()
        if deleted:
            logger.info("Deleted estimate %s", estimate_id)
        return deleted > 0
