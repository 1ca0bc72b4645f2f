"""
Dense per-job ranking of resumes.

Every public operation runs under the job's lock, works on freshly loaded
rows and ends in a single commit. After each one the ranks of a job's
resumes are exactly 1..N.
"""
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import ConsistencyError, NotFoundError, RankMoveError, ValidationError
from app.core.locks import JobLockRegistry, job_locks
from app.models.job import Job
from app.models.resume import Resume
from app.services import score_calculator
from app.services.base import BaseService

DIRECTIONS = ("up", "down")


def insertion_rank(existing_scores: List[int], new_score: int) -> int:
    """New entrants go below every resume scoring the same or higher."""
    return 1 + sum(1 for s in existing_scores if s >= new_score)


def is_dense(ranks: List[Optional[int]]) -> bool:
    return sorted(r or 0 for r in ranks) == list(range(1, len(ranks) + 1))


class RankManager(BaseService):
    def __init__(self, db: Session, locks: JobLockRegistry = job_locks):
        super().__init__(db)
        self.locks = locks

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    @contextmanager
    def exclusive(self, job_id: int) -> Iterator[Job]:
        """Hold the job's lock and its row lock; yields the job."""
        with self.locks.hold(job_id):
            job = (
                self.db.query(Job)
                .filter(Job.id == job_id)
                .with_for_update()
                .populate_existing()
                .first()
            )
            if job is None:
                raise NotFoundError("Job", job_id)
            try:
                yield job
            except Exception:
                # Release the row lock and drop half-applied rank changes
                self.db.rollback()
                raise

    def resumes_by_rank(self, job_id: int, exclude_id: Optional[int] = None) -> List[Resume]:
        query = self.db.query(Resume).filter(Resume.job_id == job_id)
        if exclude_id is not None:
            query = query.filter(Resume.id != exclude_id)
        return query.order_by(Resume.rank.asc(), Resume.id.asc()).populate_existing().all()

    def _get_resume(self, resume_id: int) -> Resume:
        resume = self.db.query(Resume).filter(Resume.id == resume_id).populate_existing().first()
        if resume is None:
            raise NotFoundError("Resume", resume_id)
        return resume

    # ------------------------------------------------------------------
    # Ranking rules
    # ------------------------------------------------------------------
    @staticmethod
    def assign_by_score(resumes: List[Resume]) -> List[Resume]:
        """
        Rank by overall score, highest first. Ties keep their current relative
        order, so resequencing an already ordered list changes nothing.
        """
        current = sorted(resumes, key=lambda r: (r.rank if r.rank is not None else float("inf"), r.id or 0))
        ordered = sorted(current, key=lambda r: -(r.overall_score or 0))
        for position, resume in enumerate(ordered, start=1):
            resume.rank = position
        return ordered

    def commit_ranking(self, job_id: int, resumes: List[Resume], action: str) -> None:
        """Verify the planned ranks are dense, then commit everything pending in one go."""
        planned = [
            {"resume_id": r.id, "rank": r.rank, "overall_score": r.overall_score}
            for r in resumes
        ]
        if not is_dense([r.rank for r in resumes]):
            self.db.rollback()
            self._logger.error(
                f"Refusing non-dense ranking for job {job_id} during {action}",
                extra={"job_id": job_id, "action": action, "planned": planned},
            )
            raise ConsistencyError(
                "Ranking update produced an inconsistent order and was rolled back.",
                details={"job_id": job_id, "action": action},
            )
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            self._logger.error(
                f"Ranking update for job {job_id} failed during {action}: {e}",
                extra={"job_id": job_id, "action": action, "planned": planned},
            )
            raise ConsistencyError(
                "Ranking update could not be saved; no ranks were changed.",
                details={"job_id": job_id, "action": action},
            ) from e

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def insert(self, resume: Resume) -> Resume:
        """Add a scored resume to its job's ranking, shifting lower ranks down by one."""
        with self.exclusive(resume.job_id) as job:
            # Weights may have changed since the resume was scored
            resume.overall_score = score_calculator.overall_score(
                resume.skill_score or 0, resume.experience_score or 0,
                job.skills_weight, job.experience_weight,
            )
            existing = self.resumes_by_rank(resume.job_id)
            new_rank = insertion_rank([r.overall_score for r in existing], resume.overall_score)
            for other in existing:
                if other.rank >= new_rank:
                    other.rank += 1
            resume.rank = new_rank
            self.db.add(resume)
            self.commit_ranking(resume.job_id, existing + [resume], "insert")

        self.db.refresh(resume)
        self.log_info(
            f"Inserted resume {resume.id} at rank {resume.rank} for job {resume.job_id}",
            job_id=resume.job_id, resume_id=resume.id, rank=resume.rank,
        )
        return resume

    def resequence(self, job_id: int) -> List[Resume]:
        with self.exclusive(job_id):
            ordered = self.assign_by_score(self.resumes_by_rank(job_id))
            self.commit_ranking(job_id, ordered, "resequence")
        self.log_info(f"Resequenced {len(ordered)} resumes for job {job_id}", job_id=job_id)
        return ordered

    def move(self, resume_id: int, direction: str) -> Resume:
        """
        Swap a resume with its neighbour one place up or down. Scores are
        ignored, which lets reviewers override the computed order.
        """
        direction = (direction or "").lower()
        if direction not in DIRECTIONS:
            raise ValidationError(f"Direction must be one of: {', '.join(DIRECTIONS)}")

        job_id = self._get_resume(resume_id).job_id
        with self.exclusive(job_id):
            resumes = self.resumes_by_rank(job_id)
            resume = next((r for r in resumes if r.id == resume_id), None)
            if resume is None:
                raise NotFoundError("Resume", resume_id)

            current = resume.rank
            if direction == "up" and current <= 1:
                raise RankMoveError("Cannot move higher than rank 1", details={"rank": current})
            if direction == "down" and current >= len(resumes):
                raise RankMoveError(
                    f"Cannot move lower than rank {len(resumes)}", details={"rank": current}
                )

            target = current - 1 if direction == "up" else current + 1
            neighbour = next((r for r in resumes if r.rank == target), None)
            if neighbour is None:
                self._logger.error(
                    f"No resume holds rank {target} in job {job_id}",
                    extra={"job_id": job_id, "ranks": [r.rank for r in resumes]},
                )
                raise ConsistencyError(
                    f"Ranks for job {job_id} are not contiguous; resequence the job.",
                    details={"job_id": job_id, "missing_rank": target},
                )

            neighbour.rank, resume.rank = current, target
            self.commit_ranking(job_id, resumes, f"move_{direction}")

        self.db.refresh(resume)
        self.log_info(
            f"Moved resume {resume_id} {direction} to rank {resume.rank}",
            job_id=job_id, resume_id=resume_id, rank=resume.rank,
        )
        return resume

    def delete(self, resume_id: int) -> None:
        """Remove a resume and close the gap by resequencing the rest by score."""
        job_id = self._get_resume(resume_id).job_id
        with self.exclusive(job_id):
            resume = self._get_resume(resume_id)
            remaining = self.resumes_by_rank(job_id, exclude_id=resume_id)
            self.db.delete(resume)
            ordered = self.assign_by_score(remaining)
            self.commit_ranking(job_id, ordered, "delete")

        self.log_info(
            f"Deleted resume {resume_id}; {len(ordered)} remain for job {job_id}",
            job_id=job_id, resume_id=resume_id,
        )


def find_inconsistent_jobs(db: Session) -> List[int]:
    """IDs of jobs whose resume ranks are not exactly 1..N."""
    ranks_by_job = {}
    for job_id, rank in db.query(Resume.job_id, Resume.rank).all():
        ranks_by_job.setdefault(job_id, []).append(rank)
    return sorted(job_id for job_id, ranks in ranks_by_job.items() if not is_dense(ranks))
