"""
Object storage for uploaded files (photos, contracts, receipts)
"""

import logging
import os
import re
import secrets
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Optional

from wedding_planner.core.config import settings
from wedding_planner.services.repositories import use_firestore

logger = logging.getLogger(__name__)


def build_object_path(folder: str, owner_id: str, filename: str) -> str:
    """``folder/<owner>-<random>.<ext>`` so uploads never overwrite each other"""
    filename = filename or ""
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    if not re.fullmatch(r"[a-z0-9]{1,10}", ext):
        ext = "bin"
    return f"{folder}/{owner_id}-{secrets.token_hex(6)}.{ext}"


class ObjectStorage(ABC):
    @abstractmethod
    def upload(self, path: str, content: bytes, content_type: Optional[str] = None) -> str:
        """Store ``content`` at ``path`` and return its public URL"""

    @abstractmethod
    def remove(self, path: str) -> None:
        ...


class LocalObjectStorage(ObjectStorage):
    """Files under UPLOAD_DIR, served by the app at /uploads"""

    def __init__(self, root: str, base_url: str):
        self.root = root
        self.base_url = base_url.rstrip("/")

    def _full_path(self, path: str) -> str:
        full_path = os.path.abspath(os.path.join(self.root, path))
        if not full_path.startswith(os.path.abspath(self.root) + os.sep):
            raise ValueError(f"Invalid object path '{path}'")
        return full_path

    def upload(self, path, content, content_type=None):
        full_path = self._full_path(path)
        os.makedirs(os.path.dirname(full_path), exist_ok=True)
        with open(full_path, "wb") as f:
            f.write(content)
        logger.info(f"Stored {len(content)} bytes at {path}")
        return f"{self.base_url}/uploads/{path}"

    def remove(self, path):
        full_path = self._full_path(path)
        if os.path.exists(full_path):
            os.remove(full_path)


class FirebaseObjectStorage(ObjectStorage):
    """Cloud Storage bucket of the Firebase project"""

    def __init__(self, bucket):
        self.bucket = bucket

    def upload(self, path, content, content_type=None):
        blob = self.bucket.blob(path)
        blob.upload_from_string(content, content_type=content_type or "application/octet-stream")
        blob.make_public()
        logger.info(f"Uploaded {len(content)} bytes to gs://{self.bucket.name}/{path}")
        return blob.public_url

    def remove(self, path):
        self.bucket.blob(path).delete()


@lru_cache(maxsize=1)
def get_object_storage() -> ObjectStorage:
    if use_firestore():
        from wedding_planner.services.firebase_client import get_storage_bucket
        return FirebaseObjectStorage(get_storage_bucket())
    return LocalObjectStorage(settings.UPLOAD_DIR, settings.BASE_URL)
