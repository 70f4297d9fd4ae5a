from fastapi import APIRouter, Depends, Response
from typing import List, Literal, Optional
from .. import errors, models, schemas
from ..storage import DbStorage
from .deps import get_storage

router = APIRouter(prefix="/jobs", tags=["jobs"])

JobSort = Literal["date-desc", "date-asc", "name-asc", "name-desc"]


def _get_job_or_404(storage: DbStorage, job_id: int) -> models.Job:
    job = storage.get_job(job_id)
    if not job:
        raise errors.NotFoundError("Job not found")
    return job


@router.get("", response_model=List[schemas.Job])
def list_jobs(
    search: Optional[str] = None,
    status: Optional[models.JobStatus] = None,
    sort: Optional[JobSort] = None,
    storage: DbStorage = Depends(get_storage),
):
    return storage.list_jobs(
        search=search,
        status=status.value if status else None,
        sort=sort,
    )


@router.get("/{job_id}", response_model=schemas.Job)
def get_job(job_id: int, storage: DbStorage = Depends(get_storage)):
    return _get_job_or_404(storage, job_id)


@router.get("/{job_id}/estimates", response_model=List[schemas.Estimate])
def list_job_estimates(job_id: int, storage: DbStorage = Depends(get_storage)):
    """All estimates for one job. 404 if the job itself does not exist."""
    _get_job_or_404(storage, job_id)
    return storage.list_estimates_by_job(job_id)


@router.post("", response_model=schemas.Job, status_code=201)
def create_job(job: schemas.JobCreate, storage: DbStorage = Depends(get_storage)):
    return storage.create_job(job.model_dump(mode="json"))


@router.put("/{job_id}", response_model=schemas.Job)
def update_job(job_id: int, update: schemas.JobUpdate, storage: DbStorage = Depends(get_storage)):
    job = storage.update_job(job_id, update.model_dump(mode="json", exclude_unset=True))
    if not job:
        raise errors.NotFoundError("Job not found")
    return job


@router.delete("/{job_id}", status_code=204)
def delete_job(job_id: int, storage: DbStorage = Depends(get_storage)):
    """Delete a job and every estimate attached to it."""
    if not storage.delete_job(job_id):
        raise errors.NotFoundError("Job not found")
    return Response(status_code=204)
