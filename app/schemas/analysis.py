from typing import Set
from pydantic import BaseModel, Field

from app.models.resume import UNNAMED_CANDIDATE, UNSPECIFIED_POSITION

class ResumeAnalysis(BaseModel):
    """Everything extracted from one resume's text against one job description."""
    name: str = UNNAMED_CANDIDATE
    position: str = UNSPECIFIED_POSITION
    required_skills: Set[str] = Field(default_factory=set)
    candidate_skills: Set[str] = Field(default_factory=set)
    matched_skills: Set[str] = Field(default_factory=set)
    experience_months: int = 0
    summary: str = ""

    @property
    def matched_count(self) -> int:
        return len(self.matched_skills)

    @property
    def required_count(self) -> int:
        return len(self.required_skills)

class ScoreBreakdown(BaseModel):
    skill_score: int = Field(ge=0, le=100)
    experience_score: int = Field(ge=0, le=100)
    overall_score: int = Field(ge=0, le=100)
