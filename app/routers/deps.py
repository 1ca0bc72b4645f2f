"""
Request-scoped dependencies: caller identity and owner-scoped lookups.

Authentication happens upstream; the gateway forwards the caller's id in the
owner header. Every job (and through it every resume) belongs to one owner,
and records of other owners are reported as not found.
"""
import logging
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import AuthenticationError, NotFoundError
from app.database import get_db
from app.models.job import Job
from app.models.resume import Resume

logger = logging.getLogger(__name__)


def get_current_owner(owner_id: Optional[str] = Header(default=None, alias=settings.owner_header)) -> str:
    if owner_id is None or not owner_id.strip():
        logger.warning(f"Request rejected: missing {settings.owner_header} header")
        raise AuthenticationError(f"Missing {settings.owner_header} header")
    return owner_id.strip()


def get_owned_job(db: Session, job_id: int, owner_id: str) -> Job:
    job = db.query(Job).filter(Job.id == job_id, Job.owner_id == owner_id).first()
    if not job:
        raise NotFoundError("Job", job_id)
    return job


def get_owned_resume(db: Session, resume_id: int, owner_id: str) -> Resume:
    resume = db.query(Resume).join(Job).filter(
        Resume.id == resume_id,
        Job.owner_id == owner_id
    ).first()
    if not resume:
        raise NotFoundError("Resume", resume_id)
    return resume


def job_for_owner(
    job_id: int,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
) -> Job:
    return get_owned_job(db, job_id, owner_id)
