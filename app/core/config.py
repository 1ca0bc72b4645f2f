import os
import logging
from pydantic import BaseModel, Field
from typing import List
from dotenv import load_dotenv

load_dotenv()

class ScoringSettings(BaseModel):
    # "sum" adds every year/month mention, "max" keeps the largest year figure
    experience_policy: str = Field(default=os.getenv("EXPERIENCE_POLICY", "sum").lower())
    ideal_experience_months: int = int(os.getenv("IDEAL_EXPERIENCE_MONTHS", "60"))
    default_skills_weight: int = int(os.getenv("DEFAULT_SKILLS_WEIGHT", "50"))

class Config(BaseModel):
    app_name: str = "Resume Screener"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = "/api"
    version: str = "1.0.0"

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./database.db")

    # Uploaded resumes (local disk storage served under /uploads)
    upload_dir: str = os.getenv("UPLOAD_DIR", "uploads")
    public_base_url: str = os.getenv("PUBLIC_BASE_URL", "http://localhost:8000")
    max_upload_size_mb: int = int(os.getenv("MAX_UPLOAD_SIZE_MB", "10"))
    allowed_content_types: List[str] = ["application/pdf"]

    # Scoring
    scoring: ScoringSettings = ScoringSettings()

    # Identity of the caller, set by the upstream auth gateway
    owner_header: str = os.getenv("OWNER_HEADER", "X-Owner-ID")
    request_id_header: str = "X-Request-ID"

    # CORS: comma-separated origins loaded from env.
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            o.strip()
            for o in os.getenv(
                "CORS_ORIGINS",
                "http://localhost:3000,http://localhost:5173,"
                "http://127.0.0.1:3000,http://127.0.0.1:5173",
            ).split(",")
            if o.strip()
        ]
    )

    # Rate limiting
    rate_limit_enabled: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
    upload_rate_limit: str = os.getenv("UPLOAD_RATE_LIMIT", "10/minute")

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

settings = Config()

# --- Startup Validation ---
_logger = logging.getLogger(__name__)
if settings.scoring.experience_policy not in ("sum", "max"):
    raise RuntimeError(
        f"FATAL: EXPERIENCE_POLICY must be 'sum' or 'max', got '{settings.scoring.experience_policy}'."
    )
if settings.scoring.ideal_experience_months <= 0:
    raise RuntimeError("FATAL: IDEAL_EXPERIENCE_MONTHS must be a positive number of months.")
if settings.scoring.experience_policy == "max":
    _logger.warning("⚠ Using the maximum-mention experience policy instead of the summation policy.")
