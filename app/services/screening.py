"""
Resume upload pipeline: validate the file, extract and analyze its text,
score it against the job, store it and slot it into the job's ranking.
"""
import logging
import os
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import CapacityError, UnsupportedFileTypeError, ValidationError
from app.models.job import Job
from app.models.resume import Resume
from app.schemas.resume import ResumeStats
from app.services import pdf_text, score_calculator, text_analyzer
from app.services.rank_manager import RankManager
from app.services.storage import LocalFileStorage

logger = logging.getLogger(__name__)

HIGH_SCORE = 80
MEDIUM_SCORE = 60


def validate_upload(file_name: Optional[str], content_type: Optional[str], size: int) -> None:
    """Reject anything that is not a PDF within the size ceiling, before any analysis."""
    if not file_name:
        raise ValidationError("No resume file uploaded")
    file_ext = os.path.splitext(file_name)[1].lower()
    if content_type not in settings.allowed_content_types or file_ext != ".pdf":
        raise UnsupportedFileTypeError()
    if size > settings.max_upload_size_bytes:
        raise CapacityError(
            f"File exceeds the {settings.max_upload_size_mb} MB upload limit"
        )
    if size == 0:
        raise ValidationError("Uploaded file is empty")


def build_resume(
    job: Job,
    resume_text: str,
    candidate_name: Optional[str] = None,
    position: Optional[str] = None,
) -> Resume:
    """Analyze and score resume text for a job; the returned record is not yet ranked or stored."""
    analysis = text_analyzer.analyze(resume_text, job.description)
    scores = score_calculator.score(
        analysis.matched_count,
        analysis.required_count,
        analysis.experience_months,
        job.skills_weight,
        job.experience_weight,
    )
    return Resume(
        job_id=job.id,
        name=(candidate_name or "").strip() or analysis.name,
        position=(position or "").strip() or analysis.position,
        skill_score=scores.skill_score,
        experience_score=scores.experience_score,
        overall_score=scores.overall_score,
        skill_description=score_calculator.describe_skills(analysis.matched_count, analysis.required_count),
        experience_description=score_calculator.describe_experience(analysis.experience_months),
        summary=analysis.summary,
    )


def process_resume_upload(
    db: Session,
    job: Job,
    content: bytes,
    file_name: str,
    content_type: Optional[str],
    storage: LocalFileStorage,
    candidate_name: Optional[str] = None,
    position: Optional[str] = None,
) -> Resume:
    validate_upload(file_name, content_type, len(content))

    resume_text = pdf_text.extract_pdf_text(content)
    if not resume_text:
        logger.warning(f"No text extracted from {file_name}; resume will score zero", extra={"job_id": job.id})

    resume = build_resume(job, resume_text, candidate_name, position)
    stored = storage.save(content, file_name)
    resume.file_name = os.path.basename(file_name)
    resume.stored_name = stored.stored_name
    resume.file_url = stored.url

    try:
        return RankManager(db).insert(resume)
    except Exception:
        # The record never made it in; do not leave an orphaned file behind
        storage.delete(stored.stored_name)
        raise


def compute_stats(resumes: List[Resume]) -> ResumeStats:
    total = len(resumes)

    def average(values: List[int]) -> int:
        return score_calculator.round_half_up(sum(values), total) if total else 0

    overall = [r.overall_score or 0 for r in resumes]
    return ResumeStats(
        total_count=total,
        avg_skill_score=average([r.skill_score or 0 for r in resumes]),
        avg_experience_score=average([r.experience_score or 0 for r in resumes]),
        avg_overall_score=average(overall),
        high_score_candidates=sum(1 for s in overall if s >= HIGH_SCORE),
        medium_score_candidates=sum(1 for s in overall if MEDIUM_SCORE <= s < HIGH_SCORE),
        low_score_candidates=sum(1 for s in overall if s < MEDIUM_SCORE),
    )
