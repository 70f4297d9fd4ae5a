from fastapi import APIRouter, Depends, Query, Response
from typing import List, Literal, Optional
from datetime import datetime, timedelta
from .. import errors, models, schemas
from ..calculators.breakdown import estimate_breakdown
from ..storage import DbStorage
from .deps import get_storage

router = APIRouter(prefix="/estimates", tags=["estimates"])

EstimateSort = Literal["date-desc", "date-asc", "volume-desc", "volume-asc"]
DateRange = Literal["all-time", "last-week", "last-month", "last-quarter"]

# Look-back windows for the `range` filter
RANGE_DAYS = {
    "last-week": 7,
    "last-month": 30,
    "last-quarter": 90,
}


def _get_estimate_or_404(storage: DbStorage, estimate_id: int) -> models.Estimate:
    estimate = storage.get_estimate(estimate_id)
    if not estimate:
        raise errors.NotFoundError("Estimate not found")
    return estimate


def _require_job(storage: DbStorage, job_id: int):
    """An estimate must point at an existing job. A bad jobId is a 400, not a 404."""
    if not storage.get_job(job_id):
        raise errors.ValidationError(
            [{"field": "jobId", "message": f"Job {job_id} does not exist"}],
            message="Invalid estimate data",
        )


@router.get("", response_model=List[schemas.Estimate])
def list_estimates(
    job_id: Optional[int] = Query(None, alias="jobId"),
    date_range: DateRange = Query("all-time", alias="range"),
    sort: Optional[EstimateSort] = None,
    storage: DbStorage = Depends(get_storage),
):
    since = None
    if date_range in RANGE_DAYS:
        since = datetime.utcnow() - timedelta(days=RANGE_DAYS[date_range])
    return storage.list_estimates(job_id=job_id, since=since, sort=sort)


@router.post("/preview", response_model=schemas.CostBreakdown)
def preview_estimate(inputs: schemas.EstimateInputs):
    """
    Cost breakdown for unsaved inputs. Drives the live calculator while a
    user is still typing. Nothing is persisted.
    """
    return estimate_breakdown(**inputs.model_dump())


@router.get("/{estimate_id}", response_model=schemas.Estimate)
def get_estimate(estimate_id: int, storage: DbStorage = Depends(get_storage)):
    return _get_estimate_or_404(storage, estimate_id)


@router.get("/{estimate_id}/breakdown", response_model=schemas.EstimateBreakdown)
def get_estimate_breakdown(estimate_id: int, storage: DbStorage = Depends(get_storage)):
    estimate = _get_estimate_or_404(storage, estimate_id)
    figures = estimate_breakdown(
        pipe_length=estimate.pipe_length,
        trench_width=estimate.trench_width,
        trench_depth=estimate.trench_depth,
        material_weight=estimate.material_weight,
        import_unit_cost=estimate.import_unit_cost,
        estimated_hours=estimate.estimated_hours or 0.0,
    )
    return {"estimate_id": estimate.id, "job_id": estimate.job_id, **figures}


@router.post("", response_model=schemas.Estimate, status_code=201)
def create_estimate(estimate: schemas.EstimateCreate, storage: DbStorage = Depends(get_storage)):
    _require_job(storage, estimate.job_id)
    return storage.create_estimate(estimate.model_dump())


@router.put("/{estimate_id}", response_model=schemas.Estimate)
def update_estimate(estimate_id: int, update: schemas.EstimateUpdate,
                    storage: DbStorage = Depends(get_storage)):
    fields = update.model_dump(exclude_unset=True)
    _get_estimate_or_404(storage, estimate_id)
    if "job_id" in fields:
        _require_job(storage, fields["job_id"])
    estimate = storage.update_estimate(estimate_id, fields)
    if not estimate:
        raise errors.NotFoundError("Estimate not found")
    return estimate


@router.delete("/{estimate_id}", status_code=204)
def delete_estimate(estimate_id: int, storage: DbStorage = Depends(get_storage)):
    if not storage.delete_estimate(estimate_id):
        raise errors.NotFoundError("Estimate not found")
    return Response(status_code=204)
