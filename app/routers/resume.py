import logging
from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from sqlalchemy.orm import Session
from typing import List, Optional

from app.core.config import settings
from app.core.limiter import limiter
from app.database import get_db
from app.models.job import Job
from app.models.resume import Resume
from app.routers.deps import get_current_owner, get_owned_resume, job_for_owner
from app.schemas.resume import RankMoveResponse, ResumeResponse, ResumeStats
from app.services.rank_manager import RankManager
from app.services.screening import compute_stats, process_resume_upload
from app.services.storage import LocalFileStorage, get_storage

logger = logging.getLogger(__name__)

# Routes nested under a job: /jobs/{job_id}/resumes
job_resumes_router = APIRouter()

# Routes addressing a resume directly: /resumes/{resume_id}
router = APIRouter(prefix="/resumes")


@job_resumes_router.post(
    "/{job_id}/resumes", response_model=ResumeResponse, status_code=status.HTTP_201_CREATED
)
@limiter.limit(settings.upload_rate_limit)
def upload_resume(
    request: Request,
    file: UploadFile = File(...),
    candidate_name: Optional[str] = Form(None),
    position: Optional[str] = Form(None),
    job: Job = Depends(job_for_owner),
    db: Session = Depends(get_db),
    storage: LocalFileStorage = Depends(get_storage),
):
    """
    Upload a PDF resume for a job. The resume is analyzed, scored and ranked
    before the response is returned.
    """
    # Read one byte past the ceiling so oversized files are detected without loading them whole
    content = file.file.read(settings.max_upload_size_bytes + 1)
    logger.info(
        f"Resume upload for job {job.id}: {file.filename} ({len(content)} bytes)",
        extra={"job_id": job.id, "content_type": file.content_type},
    )
    return process_resume_upload(
        db,
        job,
        content,
        file.filename,
        file.content_type,
        storage,
        candidate_name=candidate_name,
        position=position,
    )


@job_resumes_router.get("/{job_id}/resumes", response_model=List[ResumeResponse])
def get_resumes(
    job: Job = Depends(job_for_owner),
    db: Session = Depends(get_db),
):
    """List a job's resumes, best rank first."""
    return db.query(Resume).filter(
        Resume.job_id == job.id
    ).order_by(Resume.rank.asc(), Resume.id.asc()).all()


@job_resumes_router.get("/{job_id}/resumes/stats", response_model=ResumeStats)
def get_resume_stats(
    job: Job = Depends(job_for_owner),
    db: Session = Depends(get_db),
):
    resumes = db.query(Resume).filter(Resume.job_id == job.id).all()
    return compute_stats(resumes)


@router.get("/{resume_id}", response_model=ResumeResponse)
def get_resume(
    resume_id: int,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
):
    return get_owned_resume(db, resume_id, owner_id)


@router.put("/{resume_id}/rank/{direction}", response_model=RankMoveResponse)
def move_resume_rank(
    resume_id: int,
    direction: str,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
):
    """
    Move a resume one place up or down, swapping it with its neighbour.
    """
    get_owned_resume(db, resume_id, owner_id)
    resume = RankManager(db).move(resume_id, direction)
    return RankMoveResponse(resume=ResumeResponse.model_validate(resume))


@router.delete("/{resume_id}")
def delete_resume(
    resume_id: int,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
    storage: LocalFileStorage = Depends(get_storage),
):
    """
    Delete a resume and its stored file; the remaining resumes are re-ranked by score.
    """
    stored_name = get_owned_resume(db, resume_id, owner_id).stored_name
    RankManager(db).delete(resume_id)
    storage.delete(stored_name)
    return {"message": "Resume deleted successfully"}
