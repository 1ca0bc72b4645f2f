# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import job, resume

# Explicit class exports for cleaner imports
from .job import Job
from .resume import Resume

__all__ = [
    "Job",
    "Resume",
]
