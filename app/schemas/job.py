from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator
from datetime import datetime

from app.core.config import settings

class JobBase(BaseModel):
    title: str = Field(..., max_length=255)
    description: str

    @field_validator("title", "description")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be empty")
        return value.strip()

class JobCreate(JobBase):
    skills_weight: int = Field(default=settings.scoring.default_skills_weight, ge=0, le=100)

class JobUpdate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    # The experience weight is derived, never accepted from the client
    skills_weight: Optional[int] = Field(default=None, ge=0, le=100)

class JobResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    
    id: int
    owner_id: str
    title: str
    description: str
    skills_weight: int
    experience_weight: int
    created_at: Optional[datetime] = None
