"""
Local disk storage for uploaded resume files.

Files are written under settings.upload_dir and served by the app at
/uploads/<stored_name>.
"""
import logging
import os
import re
import uuid
from typing import NamedTuple, Optional

from app.core.config import settings

logger = logging.getLogger(__name__)

PUBLIC_MOUNT = "/uploads"


class StoredFile(NamedTuple):
    stored_name: str
    url: str


class LocalFileStorage:
    def __init__(self, base_dir: Optional[str] = None, public_base_url: Optional[str] = None):
        self.base_dir = base_dir or settings.upload_dir
        self.public_base_url = (public_base_url or settings.public_base_url).rstrip("/")
        os.makedirs(self.base_dir, exist_ok=True)

    @staticmethod
    def _safe_name(original_name: str) -> str:
        base = os.path.basename(original_name or "resume.pdf")
        base = re.sub(r"[^A-Za-z0-9._-]+", "_", base).strip("._") or "resume.pdf"
        return f"{uuid.uuid4().hex}-{base}"

    def path_for(self, stored_name: str) -> str:
        return os.path.join(self.base_dir, os.path.basename(stored_name))

    def url_for(self, stored_name: str) -> str:
        return f"{self.public_base_url}{PUBLIC_MOUNT}/{stored_name}"

    def save(self, content: bytes, original_name: str) -> StoredFile:
        stored_name = self._safe_name(original_name)
        with open(self.path_for(stored_name), "wb") as f:
            f.write(content)
        logger.info(f"Stored upload {original_name} as {stored_name} ({len(content)} bytes)")
        return StoredFile(stored_name=stored_name, url=self.url_for(stored_name))

    def delete(self, stored_name: Optional[str]) -> bool:
        if not stored_name:
            return False
        path = self.path_for(stored_name)
        try:
            os.remove(path)
        except FileNotFoundError:
            logger.warning(f"Stored file {stored_name} already gone")
            return False
        logger.info(f"Deleted stored file {stored_name}")
        return True


def get_storage() -> LocalFileStorage:
    """Dependency provider; tests override it with a temporary directory."""
    return LocalFileStorage()
