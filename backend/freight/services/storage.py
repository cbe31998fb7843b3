"""
Blob storage on the local filesystem

Files live under UPLOAD_DIR and are served back by the app's static
files mount at PUBLIC_BASE_URL.

    profile_pictures/<user_id>-<uuid>.<ext>
    user_documents/<user_id>-<filename>-<uuid>
    app_assets/logo-<uuid>.<ext>
"""

import os
import uuid
from typing import Tuple

import anyio

from freight.core.config import settings
from freight.core.exceptions import PersistenceError, ValidationError
from freight.core.logging_config import get_logger

logger = get_logger(__name__)


def _extension(filename: str) -> str:
    extension = filename.rsplit(".", 1)[-1] if "." in filename else ""
    return extension if extension.isalnum() else "bin"


def _safe_name(filename: str) -> str:
    return os.path.basename(filename.replace("\\", "/"))


def profile_picture_path(user_id: str, filename: str) -> str:
    return f"profile_pictures/{user_id}-{uuid.uuid4()}.{_extension(filename)}"


def document_path(user_id: str, filename: str) -> str:
    return f"user_documents/{user_id}-{_safe_name(filename)}-{uuid.uuid4()}"


def logo_path(filename: str) -> str:
    return f"app_assets/logo-{uuid.uuid4()}.{_extension(filename)}"


class BlobStorage:
    def __init__(self, root: str, base_url: str):
        self.root = root
        self.base_url = base_url.rstrip("/")

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path}"

    async def save(self, path: str, content: bytes) -> str:
        """Write content under path and return its public URL"""
        root = await anyio.Path(self.root).resolve()
        target = await (root / path).resolve()
        if not target.is_relative_to(root):
            logger.warning(f"⚠️ Rejected upload path outside storage root: {path}")
            raise ValidationError("Invalid file path.")
        try:
            await target.parent.mkdir(parents=True, exist_ok=True)
            await target.write_bytes(content)
        except OSError as e:
            logger.error(f"❌ Failed to store {path}: {e}", exc_info=True)
            raise PersistenceError("Failed to store file.") from e
        logger.info(f"📁 Stored {path} ({len(content)} bytes)")
        return self.url_for(path)


def get_blob_storage() -> BlobStorage:
    return BlobStorage(settings.UPLOAD_DIR, settings.PUBLIC_BASE_URL)


def _require(user_id: str, filename: str, content: bytes) -> None:
    if not user_id or not filename or not content:
        raise ValidationError("File and user ID are required.")
    if "/" in user_id or "\\" in user_id or ".." in user_id:
        raise ValidationError("Invalid user ID.")


async def upload_profile_picture(
    storage: BlobStorage, user_id: str, filename: str, content: bytes
) -> Tuple[str, str]:
    _require(user_id, filename, content)
    path = profile_picture_path(user_id, filename)
    return path, await storage.save(path, content)


async def upload_document(
    storage: BlobStorage, user_id: str, filename: str, content: bytes
) -> Tuple[str, str]:
    _require(user_id, filename, content)
    path = document_path(user_id, filename)
    return path, await storage.save(path, content)


async def upload_app_logo(storage: BlobStorage, filename: str, content: bytes) -> Tuple[str, str]:
    if not filename or not content:
        raise ValidationError("No file provided.")
    path = logo_path(filename)
    return path, await storage.save(path, content)
