import pytest
import os
import tempfile
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["EXPERIENCE_POLICY"] = "sum"
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="resume-uploads-"))

from app.database import Base, get_db
from app.main import app
from app.models.job import Job
from app.models.resume import Resume
from app.services import pdf_text
from app.services.storage import LocalFileStorage, get_storage
from fastapi.testclient import TestClient

# SQLite in-memory database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

OWNER_ID = "owner-alpha"

@pytest.fixture(scope="function")
def db_session():
    """Fresh schema and session for each test function."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    
    yield session
    
    session.close()
    Base.metadata.drop_all(bind=engine)

@pytest.fixture(scope="function")
def storage(tmp_path):
    return LocalFileStorage(base_dir=str(tmp_path / "uploads"), public_base_url="http://testserver")

@pytest.fixture(scope="function")
def owner_headers():
    return {"X-Owner-ID": OWNER_ID}

@pytest.fixture(scope="function")
def make_job(db_session):
    """Factory creating a job directly in the database."""
    def _make_job(skills_weight=70, description="Python, Docker, Kubernetes, AWS and React", owner_id=OWNER_ID):
        job = Job(
            owner_id=owner_id,
            title="Platform Engineer",
            description=description,
            skills_weight=skills_weight,
            experience_weight=100 - skills_weight,
        )
        db_session.add(job)
        db_session.commit()
        db_session.refresh(job)
        return job
    return _make_job

@pytest.fixture(scope="function")
def add_resume(db_session):
    """Factory inserting a resume row with explicit scores and rank, bypassing ranking."""
    def _add_resume(job, rank, overall_score, skill_score=0, experience_score=0, name=None):
        resume = Resume(
            job_id=job.id,
            name=name or f"Candidate {rank}",
            position="Software Engineer",
            file_name="cv.pdf",
            skill_score=skill_score,
            experience_score=experience_score,
            overall_score=overall_score,
            rank=rank,
        )
        db_session.add(resume)
        db_session.commit()
        db_session.refresh(resume)
        return resume
    return _add_resume

@pytest.fixture(scope="function")
def plain_text_pdfs(monkeypatch):
    """Treat uploaded bytes as the PDF's extracted text."""
    monkeypatch.setattr(pdf_text, "extract_pdf_text", lambda content: content.decode("utf-8"))

@pytest.fixture(scope="function")
def client(db_session, storage):
    """Get a TestClient that uses the test database session via dependency override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass
            
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()

@pytest.fixture(scope="function")
def ranks_of(db_session):
    """Reads {resume_id: rank} for a job fresh from the database."""
    def _ranks_of(job_id):
        db_session.expire_all()
        return {
            r.id: r.rank
            for r in db_session.query(Resume).filter(Resume.job_id == job_id).all()
        }
    return _ranks_of
