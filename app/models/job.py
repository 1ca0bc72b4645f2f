from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base

class Job(Base):
    __tablename__ = "jobs"
    
    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(String(128), nullable=False, index=True)
    title = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False)
    # experience_weight is always 100 - skills_weight
    skills_weight = Column(Integer, nullable=False, default=50)
    experience_weight = Column(Integer, nullable=False, default=50)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    resumes = relationship(
        "Resume",
        back_populates="job",
        cascade="all, delete-orphan",
        order_by="Resume.rank",
    )
