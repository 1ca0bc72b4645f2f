from fastapi import APIRouter
from app.routers import jobs, resume

# Centralized API router hub
# Routers are aggregated here, and main.py only imports this single hub.
api_router = APIRouter()

api_router.include_router(jobs.router, tags=["Jobs"])
api_router.include_router(resume.job_resumes_router, prefix="/jobs", tags=["Resumes"])
api_router.include_router(resume.router, tags=["Resumes"])
