import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.core.exceptions import ValidationError
from app.core.locks import job_locks
from app.database import get_db
from app.models.job import Job
from app.models.resume import Resume
from app.routers.deps import get_current_owner, get_owned_job
from app.schemas.job import JobCreate, JobUpdate, JobResponse
from app.services.job_weights import JobWeightPropagator, complementary_weights
from app.services.storage import LocalFileStorage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/jobs",
    tags=["Jobs"],
)

@router.post("/", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
def create_job(
    job_in: JobCreate,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner)
):
    """
    Create a job posting. The experience weight is derived as 100 - skills_weight.
    """
    skills_weight, experience_weight = complementary_weights(job_in.skills_weight)
    db_job = Job(
        owner_id=owner_id,
        title=job_in.title,
        description=job_in.description,
        skills_weight=skills_weight,
        experience_weight=experience_weight,
    )
    db.add(db_job)
    db.commit()
    db.refresh(db_job)

    logger.info(f"Created job {db_job.id} '{db_job.title}'", extra={"job_id": db_job.id})
    return db_job

@router.get("/", response_model=List[JobResponse])
def get_jobs(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner)
):
    """
    List the caller's jobs, newest first.
    """
    return (
        db.query(Job)
        .filter(Job.owner_id == owner_id)
        .order_by(Job.created_at.desc(), Job.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )

@router.get("/{job_id}", response_model=JobResponse)
def get_job(
    job_id: int,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner)
):
    return get_owned_job(db, job_id, owner_id)

@router.put("/{job_id}", response_model=JobResponse)
def update_job(
    job_id: int,
    job_in: JobUpdate,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner)
):
    """
    Update a job posting. A new skills weight re-weights and re-ranks every
    resume of the job.
    """
    job = get_owned_job(db, job_id, owner_id)
    update_data = job_in.model_dump(exclude_unset=True)

    for field in ("title", "description"):
        if field in update_data:
            value = (update_data[field] or "").strip()
            if not value:
                raise ValidationError(f"Job {field} must not be empty")
            setattr(job, field, value)

    if db.dirty:
        db.commit()
        db.refresh(job)

    new_weight = update_data.get("skills_weight")
    if new_weight is not None and new_weight != job.skills_weight:
        job = JobWeightPropagator(db).on_weight_change(job.id, new_weight)

    return job

@router.delete("/{job_id}")
def delete_job(
    job_id: int,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
    storage: LocalFileStorage = Depends(get_storage)
):
    """
    Delete a job together with all of its resumes and their stored files.
    """
    job = get_owned_job(db, job_id, owner_id)
    with job_locks.hold(job.id):
        stored_names = [
            name for (name,) in db.query(Resume.stored_name).filter(Resume.job_id == job.id).all()
        ]
        # Resumes go with the job via cascade="all, delete-orphan"
        db.delete(job)
        db.commit()
    job_locks.forget(job_id)

    for name in stored_names:
        storage.delete(name)

    logger.info(f"Deleted job {job_id} and {len(stored_names)} resumes", extra={"job_id": job_id})
    return {"message": "Job and associated resumes deleted successfully"}
