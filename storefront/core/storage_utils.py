# storefront/core/storage_utils.py
import logging
import re
import uuid
from abc import ABC, abstractmethod
from pathlib import Path

from storefront.core.config import Settings

logger = logging.getLogger(__name__)


class FileStore(ABC):
    """
    Where uploaded model files live. Returns the reference recorded on
    the product (a served path or a public URL).
    """

    @abstractmethod
    def save(self, path: str, file_bytes: bytes, content_type: str | None = None) -> str: ...

    @abstractmethod
    def delete(self, url: str) -> None:
        """Delete a previously saved file. No-op for foreign URLs."""


class LocalFileStore(FileStore):
    """
    Files on local disk, served back verbatim under url_prefix.
    """

    def __init__(self, root: str | Path, url_prefix: str = "/uploads"):
        self.root = Path(root)
        self.url_prefix = url_prefix.rstrip("/")

    def save(self, path: str, file_bytes: bytes, content_type: str | None = None) -> str:
        target = self.root / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(file_bytes)
        return f"{self.url_prefix}/{path}"

    def delete(self, url: str) -> None:
        marker = self.url_prefix + "/"
        if not url.startswith(marker):
            return
        root = self.root.resolve()
        target = (root / url[len(marker):]).resolve()
        # Never follow a reference out of the upload directory
        if target == root or not target.is_relative_to(root):
            logger.warning("Refusing to delete %s outside %s", url, root)
            return
        if target.is_file():
            target.unlink()
            logger.info("Removed upload %s", target)


class SupabaseFileStore(FileStore):
    """
    Files in a Supabase Storage bucket, referenced by public URL.
    """

    def __init__(self, client, bucket: str = "assets"):
        self.client = client
        self.bucket = bucket

    def save(self, path: str, file_bytes: bytes, content_type: str | None = None) -> str:
        """
        Upload raw bytes and return the public URL.

        If a file already exists at this path, it will be overwritten
        thanks to the 'upsert' option.
        """
        options = {"upsert": "true"}
        if content_type:
            options["content-type"] = content_type
        self.client.storage.from_(self.bucket).upload(path, file_bytes, options)
        return self.client.storage.from_(self.bucket).get_public_url(path)

    def extract_path(self, url: str) -> str | None:
        """
        Given a public URL, extract the object path relative to the bucket.

        Example:
            https://<proj>.supabase.co/storage/v1/object/public/assets/models/x.stl
            -> 'models/x.stl'
        """
        marker = f"/storage/v1/object/public/{self.bucket}/"
        idx = url.find(marker)
        if idx == -1:
            return None
        return url[idx + len(marker):].split("?", 1)[0]

    def delete(self, url: str) -> None:
        path = self.extract_path(url)
        if path:
            self.client.storage.from_(self.bucket).remove([path])


def build_file_store(settings: Settings) -> FileStore:
    if settings.FILE_STORE == "supabase":
        from storefront.core.supabase_client import supabase_admin

        client = supabase_admin(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
        return SupabaseFileStore(client, settings.SUPABASE_BUCKET)
    return LocalFileStore(settings.UPLOAD_DIR, settings.UPLOAD_URL_PREFIX)


def generate_filename(original: str | None, ext: str = "stl") -> str:
    """
    Unique, filesystem-safe name that keeps the original stem readable.

    "My Dragon (v2).STL" -> "<uuid4 hex>-my-dragon-v2.stl"
    """
    stem = Path(original or "").stem.lower()
    stem = re.sub(r"[^a-z0-9]+", "-", stem).strip("-")
    prefix = uuid.uuid4().hex
    if stem:
        return f"{prefix}-{stem}.{ext}"
    return f"{prefix}.{ext}"
