"""Local filesystem storage implementation."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import IO

from werkzeug.utils import secure_filename

from .abstract_storage import AbstractStorage

logger = logging.getLogger(__name__)


class LocalStorage(AbstractStorage):
    """Persist files to the local filesystem under the configured upload directory."""

    def __init__(self, upload_dir: str | None = None):
        self.base_directory = Path(upload_dir or Path("workspace") / "uploads").resolve()
        os.makedirs(self.base_directory, exist_ok=True)

    def _path(self, key: str) -> Path:
        safe_name = secure_filename(key)
        if not safe_name:
            raise ValueError("Key must contain at least one valid character.")
        return self.base_directory / safe_name

    def save(self, file_obj: IO[bytes], key: str, content_type: str | None = None) -> str:
        """Save a file and return a file:// URL for it."""

        destination = self._path(key)
        if hasattr(file_obj, "save"):
            file_obj.save(destination)  # type: ignore[arg-type]
        else:
            with open(destination, "wb") as output:
                output.write(file_obj.read())

        logger.info("Stored %s in %s", key, self.base_directory)
        return destination.as_uri()

    def delete(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()

    def exists(self, key: str) -> bool:
        return self._path(key).exists()
