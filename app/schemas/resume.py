from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

class ResumeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    job_id: int
    name: str
    position: str
    file_name: str
    file_url: Optional[str]

    skill_score: int
    experience_score: int
    overall_score: int
    skill_description: Optional[str]
    experience_description: Optional[str]
    summary: Optional[str]

    rank: int
    created_at: Optional[datetime] = None

class ResumeStats(BaseModel):
    total_count: int
    avg_skill_score: int
    avg_experience_score: int
    avg_overall_score: int
    high_score_candidates: int
    medium_score_candidates: int
    low_score_candidates: int

class RankMoveResponse(BaseModel):
    message: str = "Rank updated successfully"
    resume: ResumeResponse
