# storefront/core/storage_utils.py
"""
Media store for product images.

Two backends share the same contract:

  - LocalMediaStore   : writes into the content directory, served at /uploads
  - SupabaseMediaStore: uploads into a Supabase Storage bucket

A batch is validated as a whole before any byte is written, so a rejected
request never leaves files behind.
"""
import logging
import os
import threading
import time
from pathlib import Path
from typing import Iterable, NamedTuple, Sequence

from fastapi import Request

from storefront.core.config import Settings
from storefront.core.errors import StorageError, UploadError
from storefront.core.supabase_client import supabase_admin

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_CONTENT_TYPES: dict[str, str] = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
}

UNSUPPORTED_TYPE_MESSAGE = "Only JPEG, JPG, and PNG images are allowed!"
FILE_TOO_LARGE_MESSAGE = "File too large"
TOO_MANY_FILES_MESSAGE = "Too many files"


class UploadedImage(NamedTuple):
    content_type: str
    filename: str
    data: bytes


class MediaStore:
    """
    Validation and filename assignment shared by every backend.

    Subclasses implement `_write(filename, data) -> stored path` and
    `_remove(stored path)`.
    """

    def __init__(self, max_files: int = 5, max_bytes: int = 5 * 1024 * 1024):
        self.max_files = max_files
        self.max_bytes = max_bytes
        self._lock = threading.Lock()
        self._last_token = 0

    # ----- Helpers -----

    def _next_token(self) -> int:
        """
        Millisecond timestamp, bumped when two files land in the same ms.
        """
        with self._lock:
            token = max(int(time.time() * 1000), self._last_token + 1)
            self._last_token = token
            return token

    def generate_filename(self, original_name: str, content_type: str) -> str:
        """
        Build "<ms-timestamp><ext>" keeping the original extension.

        Falls back to the extension of the content type when the
        original name has none.
        """
        ext = os.path.splitext(original_name or "")[1].lower()
        if not ext:
            ext = ALLOWED_IMAGE_CONTENT_TYPES.get(content_type, "")
        return f"{self._next_token()}{ext}"

    # ----- Public API -----

    def validate(self, files: Sequence[UploadedImage]) -> None:
        """
        Check count, content type and size of every file.

        Raises:
            UploadError: on the first violation.
        """
        if len(files) > self.max_files:
            raise UploadError(TOO_MANY_FILES_MESSAGE)

        for f in files:
            if f.content_type not in ALLOWED_IMAGE_CONTENT_TYPES:
                raise UploadError(UNSUPPORTED_TYPE_MESSAGE)
            if len(f.data) > self.max_bytes:
                raise UploadError(FILE_TOO_LARGE_MESSAGE)

    def store(self, files: Sequence[UploadedImage]) -> list[str]:
        """
        Validate then persist a batch of images.

        Returns:
            Stored paths, in the order of `files`.

        Raises:
            UploadError: batch rejected, nothing written.
            StorageError: a write failed; files already written in this
                          batch have been removed.
        """
        self.validate(files)

        stored: list[str] = []
        for f in files:
            filename = self.generate_filename(f.filename, f.content_type)
            try:
                stored.append(self._write(filename, f.data))
            except Exception as e:
                logger.error("Failed to store %s: %s", filename, e)
                self.discard(stored)
                raise StorageError(f"Could not store {filename}") from e

        if stored:
            logger.info("Stored %d image(s): %s", len(stored), ", ".join(stored))
        return stored

    def discard(self, paths: Iterable[str]) -> None:
        """
        Best-effort removal of previously stored files.
        """
        for path in paths:
            try:
                self._remove(path)
                logger.info("Discarded %s", path)
            except Exception as e:
                logger.warning("Could not discard %s: %s", path, e)

    def _write(self, filename: str, data: bytes) -> str:
        raise NotImplementedError

    def _remove(self, path: str) -> None:
        raise NotImplementedError


class LocalMediaStore(MediaStore):
    """
    Stores images in a content directory on the local filesystem.

    Stored paths look like "uploads/1718000000000.png": the URL prefix the
    directory is served under, followed by the filename.
    """

    def __init__(
        self,
        upload_dir: str | os.PathLike,
        url_prefix: str = "/uploads",
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.upload_dir = Path(upload_dir)
        self.url_prefix = url_prefix.strip("/")

    def _write(self, filename: str, data: bytes) -> str:
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        (self.upload_dir / filename).write_bytes(data)
        return f"{self.url_prefix}/{filename}"

    def _remove(self, path: str) -> None:
        (self.upload_dir / Path(path).name).unlink(missing_ok=True)


class SupabaseMediaStore(MediaStore):
    """
    Stores images in a Supabase Storage bucket and returns public URLs.

    Object path pattern:
        products/<filename>
    """

    def __init__(self, client, bucket: str = "assets", **kwargs):
        super().__init__(**kwargs)
        self.client = client
        self.bucket = bucket

    def _object_path(self, filename: str) -> str:
        return f"products/{filename}"

    def _write(self, filename: str, data: bytes) -> str:
        path = self._object_path(filename)
        self.client.storage.from_(self.bucket).upload(path, data)
        return self.client.storage.from_(self.bucket).get_public_url(path)

    def extract_path_from_public_url(self, url: str) -> str | None:
        """
        Given a public URL, extract the object path relative to the bucket.

        Example:
            https://<proj>.supabase.co/storage/v1/object/public/assets/products/1.png
            -> 'products/1.png'
        """
        marker = f"/storage/v1/object/public/{self.bucket}/"
        idx = url.find(marker)
        if idx == -1:
            return None
        return url[idx + len(marker):].split("?", 1)[0]

    def _remove(self, path: str) -> None:
        object_path = self.extract_path_from_public_url(path)
        if object_path:
            # Supabase Python client expects a list of paths.
            self.client.storage.from_(self.bucket).remove([object_path])


def build_media_store(settings: Settings) -> MediaStore:
    """
    Pick the media backend configured by STORAGE_BACKEND.
    """
    limits = {
        "max_files": settings.MAX_UPLOAD_FILES,
        "max_bytes": settings.MAX_UPLOAD_BYTES,
    }
    if settings.STORAGE_BACKEND == "supabase":
        return SupabaseMediaStore(
            supabase_admin(settings), bucket=settings.SUPABASE_BUCKET, **limits
        )
    return LocalMediaStore(
        settings.UPLOAD_DIR, url_prefix=settings.UPLOAD_URL_PREFIX, **limits
    )


def get_media_store(request: Request) -> MediaStore:
    """
    FastAPI dependency returning the media store built at startup.
    """
    return request.app.state.media_store
