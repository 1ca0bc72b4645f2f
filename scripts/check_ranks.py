"""
Reports jobs whose resume ranks have drifted from 1..N and, with --fix,
resequences them by overall score.

Usage: python -m scripts.check_ranks [--fix]
"""
import sys

from app.database import SessionLocal, init_db
from app.services.rank_manager import RankManager, find_inconsistent_jobs


def check_ranks(fix: bool = False) -> int:
    init_db()
    db = SessionLocal()
    try:
        broken = find_inconsistent_jobs(db)
        if not broken:
            print("All job rankings are consistent.")
            return 0

        print(f"Found {len(broken)} job(s) with inconsistent ranks: {broken}")
        if not fix:
            print("Run again with --fix to resequence them by score.")
            return 1

        manager = RankManager(db)
        for job_id in broken:
            ordered = manager.resequence(job_id)
            print(f" - Job {job_id}: resequenced {len(ordered)} resumes")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(check_ranks(fix="--fix" in sys.argv[1:]))
