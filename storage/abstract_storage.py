"""Storage abstraction layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import IO


class AbstractStorage(ABC):
    """Interface for storage backends."""

    def check_configured(self) -> None:
        """Raise ``InternalConfiguration`` when the backend cannot be used."""

    @abstractmethod
    def save(self, file_obj: IO[bytes], key: str, content_type: str | None = None) -> str:
        """Persist a file under ``key`` and return its public URL."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove the object stored under ``key``."""

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Return whether an object is stored under ``key``."""
