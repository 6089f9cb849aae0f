"""Storage backends."""

from config import StorageSettings

from .abstract_storage import AbstractStorage
from .local_storage import LocalStorage
from .s3_storage import S3Storage


def build_storage(settings: StorageSettings) -> AbstractStorage:
    """Return the backend selected by ``STORAGE_BACKEND``."""

    if settings.backend == "local":
        return LocalStorage(settings.upload_dir)
    if settings.backend == "s3":
        return S3Storage(settings.bucket_name, region=settings.region)
    raise ValueError(f"Unknown storage backend: {settings.backend}")


__all__ = ["AbstractStorage", "LocalStorage", "S3Storage", "build_storage"]
