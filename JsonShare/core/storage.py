from __future__ import annotations

import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, Optional

from .config import Settings
from .errors import StorageFailure
from .naming import is_valid_key

log = logging.getLogger("jsonshare.storage")


@dataclass(frozen=True)
class StoredFile:
    key: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


class FileStore(ABC):
    """
    Key -> bytes store behind the upload pipeline; backed by memory, a local
    directory or an S3-compatible object store.
    """

    name: str = "abstract"

    @abstractmethod
    def put(self, key: str, content: bytes) -> None:
        raise NotImplementedError

    @abstractmethod
    def list_keys(self) -> Iterator[str]:
        raise NotImplementedError

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        raise NotImplementedError

    @staticmethod
    def _require_valid_key(key: str) -> None:
        if not is_valid_key(key):
            raise ValueError(f"Refusing to store under unsafe key {key!r}")


class InMemoryFileStore(FileStore):
    """Volatile store; contents are gone when the process exits."""

    name = "memory"

    def __init__(self) -> None:
        self._files: Dict[str, bytes] = {}
        self._lock = threading.Lock()

    def put(self, key: str, content: bytes) -> None:
        self._require_valid_key(key)
        with self._lock:
            self._files[key] = bytes(content)

    def list_keys(self) -> Iterator[str]:
        with self._lock:
            keys = list(self._files)
        return iter(keys)

    def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            return self._files.get(key)


class LocalDirectoryFileStore(FileStore):
    """
    One file per key inside `root`.

    Writes land in a hidden temp file next to the target and are renamed into
    place, so a reader sees either the old content or the new, never a prefix.
    """

    name = "local"

    def __init__(self, root: str | os.PathLike[str]) -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def put(self, key: str, content: bytes) -> None:
        self._require_valid_key(key)
        tmp_path: Optional[str] = None
        try:
            fd, tmp_path = tempfile.mkstemp(dir=self.root, prefix=".upload-", suffix=".tmp")
            with os.fdopen(fd, "wb") as handle:
                handle.write(content)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, self.root / key)
            tmp_path = None
        except OSError as exc:
            log.error("Failed to write %s under %s: %s", key, self.root, exc)
            raise StorageFailure(f"Could not write {key}") from exc
        finally:
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    log.warning("Could not remove temp file %s", tmp_path)

    def list_keys(self) -> Iterator[str]:
        try:
            entries = os.scandir(self.root)
        except OSError as exc:
            log.error("Failed to list %s: %s", self.root, exc)
            raise StorageFailure("Error listing files") from exc
        return self._iter_keys(entries)

    def _iter_keys(self, entries) -> Iterator[str]:
        with entries:
            try:
                for entry in entries:
                    if is_valid_key(entry.name) and entry.is_file():
                        yield entry.name
            except OSError as exc:
                log.error("Listing %s failed mid-scan: %s", self.root, exc)
                raise StorageFailure("Error listing files") from exc

    def get(self, key: str) -> Optional[bytes]:
        if not is_valid_key(key):
            return None
        try:
            return (self.root / key).read_bytes()
        except (FileNotFoundError, IsADirectoryError):
            return None
        except OSError as exc:
            log.error("Failed to read %s under %s: %s", key, self.root, exc)
            raise StorageFailure(f"Could not read {key}") from exc


def build_file_store(settings: Settings) -> FileStore:
    backend = settings.STORAGE_BACKEND.lower()
    if backend == "memory":
        return InMemoryFileStore()
    if backend == "local":
        return LocalDirectoryFileStore(settings.STORAGE_DIR)
    if backend == "minio":
        from .object_store import MinioFileStore

        return MinioFileStore.from_settings(settings)
    raise ValueError(f"Unknown STORAGE_BACKEND {settings.STORAGE_BACKEND!r}")
