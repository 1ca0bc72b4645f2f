"""
Turns extracted counts into 0-100 sub-scores and a weighted overall score.

All arithmetic is done on integers so that halves round up exactly
(Python's round() would send 72.5 to 72).
"""
from typing import Optional

from app.core.config import settings
from app.schemas.analysis import ScoreBreakdown

MAX_SCORE = 100


def round_half_up(numerator: int, denominator: int) -> int:
    """Nearest integer to numerator / denominator, halves rounded up. Non-negative inputs only."""
    return (2 * numerator + denominator) // (2 * denominator)


def skill_score(matched_count: int, required_count: int) -> int:
    required = max(1, required_count)
    return min(MAX_SCORE, round_half_up(max(0, matched_count) * 100, required))


def experience_score(experience_months: int, ideal_months: Optional[int] = None) -> int:
    ideal = ideal_months or settings.scoring.ideal_experience_months
    return min(MAX_SCORE, round_half_up(max(0, experience_months) * 100, ideal))


def overall_score(skill: int, experience: int, skills_weight: int, experience_weight: int) -> int:
    return min(MAX_SCORE, round_half_up(skill * skills_weight + experience * experience_weight, 100))


def weigh(skill: int, experience: int, skills_weight: int, experience_weight: int) -> ScoreBreakdown:
    """Re-weight stored sub-scores; extraction is not repeated."""
    return ScoreBreakdown(
        skill_score=skill,
        experience_score=experience,
        overall_score=overall_score(skill, experience, skills_weight, experience_weight),
    )


def score(
    matched_count: int,
    required_count: int,
    experience_months: int,
    skills_weight: int,
    experience_weight: int,
) -> ScoreBreakdown:
    skill = skill_score(matched_count, required_count)
    experience = experience_score(experience_months)
    return weigh(skill, experience, skills_weight, experience_weight)


def describe_skills(matched_count: int, required_count: int) -> str:
    return f"Matched {matched_count} out of {required_count} required skills."


def describe_experience(experience_months: int) -> str:
    years = round_half_up(max(0, experience_months), 12)
    return f"Approximately {years} years of experience."
