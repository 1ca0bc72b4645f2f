"""
Cascades a job's new skills/experience weighting to all of its resumes.
"""
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import ValidationError
from app.core.locks import JobLockRegistry, job_locks
from app.models.job import Job
from app.models.resume import Resume
from app.services import score_calculator
from app.services.base import BaseService
from app.services.rank_manager import RankManager


def complementary_weights(skills_weight: int, experience_weight: Optional[int] = None) -> tuple[int, int]:
    """Validate a skills weight and derive the experience weight that completes 100."""
    if skills_weight is None or not 0 <= skills_weight <= 100:
        raise ValidationError("skills_weight must be between 0 and 100")
    derived = 100 - skills_weight
    if experience_weight is not None and experience_weight != derived:
        raise ValidationError(
            "skills_weight and experience_weight must add up to 100",
            details={"skills_weight": skills_weight, "experience_weight": experience_weight},
        )
    return skills_weight, derived


class JobWeightPropagator(BaseService):
    def __init__(self, db: Session, locks: JobLockRegistry = job_locks):
        super().__init__(db)
        self.ranks = RankManager(db, locks)

    def on_weight_change(
        self,
        job_id: int,
        new_skills_weight: int,
        new_experience_weight: Optional[int] = None,
    ) -> Job:
        """
        Store the job's new weights, re-weight every resume from its stored
        sub-scores and resequence the job.

        Either every resume reflects the new weights and a fresh ranking, or
        nothing changes and ConsistencyError is raised.
        """
        skills_weight, experience_weight = complementary_weights(new_skills_weight, new_experience_weight)

        with self.ranks.exclusive(job_id) as job:
            job.skills_weight = skills_weight
            job.experience_weight = experience_weight

            resumes: List[Resume] = self.ranks.resumes_by_rank(job_id)
            for resume in resumes:
                resume.overall_score = score_calculator.overall_score(
                    resume.skill_score, resume.experience_score, skills_weight, experience_weight
                )
            ordered = self.ranks.assign_by_score(resumes)
            self.ranks.commit_ranking(job_id, ordered, "weight_change")

        self.db.refresh(job)
        self.log_info(
            f"Re-weighted {len(resumes)} resumes for job {job_id} to {skills_weight}/{experience_weight}",
            job_id=job_id, skills_weight=skills_weight, experience_weight=experience_weight,
        )
        return job
