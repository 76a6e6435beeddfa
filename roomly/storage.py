import mimetypes
import os
from functools import lru_cache
from pathlib import Path

from google.cloud import storage as gcs

from roomly import config


class ObjectStorage:
    """
    Binary upload collaborator: ``upload(path, data)`` returns a public URL.
    """

    def upload(self, path: str, data: bytes) -> str:
        raise NotImplementedError


def _clean_path(path: str) -> str:
    relative = path.lstrip("/")
    if not relative or ".." in Path(relative).parts:
        raise ValueError("upload path must stay inside the storage root")
    return relative.replace(os.sep, "/")


class GCSStorage(ObjectStorage):
    def __init__(self, bucket_name: str | None = None, client=None):
        self.bucket_name = bucket_name or config.GCS_BUCKET_NAME
        if not self.bucket_name:
            raise ValueError("GCS_BUCKET_NAME is not set")
        self.client = client or gcs.Client()

    def upload(self, path: str, data: bytes) -> str:
        relative = _clean_path(path)
        content_type, _ = mimetypes.guess_type(relative)

        bucket = self.client.bucket(self.bucket_name)
        blob = bucket.blob(relative)
        blob.upload_from_string(data, content_type=content_type or "application/octet-stream")

        return blob.public_url


class LocalStorage(ObjectStorage):
    """
    Development storage: files land under STORAGE_ROOT and ``roomly.main``
    serves that directory at the path of STORAGE_PUBLIC_URL.
    """

    def __init__(self, root: str | None = None, public_url: str | None = None):
        self.root = Path(root or config.STORAGE_ROOT)
        self.public_url = (public_url or config.STORAGE_PUBLIC_URL).rstrip("/")

    def upload(self, path: str, data: bytes) -> str:
        relative = _clean_path(path)

        target = self.root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        # upsert
        with open(target, "wb") as fh:
            fh.write(data)

        return f"{self.public_url}/{relative}"


def build_storage(backend: str | None = None) -> ObjectStorage:
    backend = (backend or config.STORAGE_BACKEND).lower()
    if backend == "gcs":
        return GCSStorage()
    if backend == "local":
        return LocalStorage()
    raise ValueError(f"Unknown STORAGE_BACKEND: {backend!r}")


@lru_cache
def get_storage() -> ObjectStorage:
    return build_storage()
