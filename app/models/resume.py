from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base

UNNAMED_CANDIDATE = "Unnamed Candidate"
UNSPECIFIED_POSITION = "Unspecified Position"

class Resume(Base):
    __tablename__ = "resumes"
    
    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False, default=UNNAMED_CANDIDATE)
    position = Column(String(255), nullable=False, default=UNSPECIFIED_POSITION)

    # Uploaded PDF, owned by the storage backend
    file_name = Column(String(255), nullable=False)
    stored_name = Column(String(255), nullable=True)
    file_url = Column(String(1024), nullable=True)

    skill_score = Column(Integer, nullable=False, default=0)
    experience_score = Column(Integer, nullable=False, default=0)
    overall_score = Column(Integer, nullable=False, default=0, index=True)
    skill_description = Column(Text)
    experience_description = Column(Text)
    summary = Column(Text)

    # Dense 1..N within job_id, 1 = best
    rank = Column(Integer, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    job = relationship("Job", back_populates="resumes")
