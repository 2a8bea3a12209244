from __future__ import annotations

import logging
import threading
from io import BytesIO
from typing import Iterator, Optional

from minio import Minio
from minio.error import MinioException, S3Error
from urllib3.exceptions import HTTPError

from .config import Settings
from .errors import StorageFailure
from .naming import is_valid_key
from .storage import FileStore

log = logging.getLogger("jsonshare.storage")

MISSING_OBJECT_CODES = {"NoSuchKey", "NoSuchObject", "NoSuchBucket"}
BUCKET_EXISTS_CODES = {"BucketAlreadyOwnedByYou", "BucketAlreadyExists"}
BACKEND_ERRORS = (MinioException, HTTPError)


class MinioFileStore(FileStore):
    """S3-compatible object store; keys live under an optional prefix in one bucket."""

    name = "minio"

    def __init__(self, client: Minio, bucket_name: str, prefix: str = "") -> None:
        self.client = client
        self.bucket_name = bucket_name
        self.prefix = prefix.strip("/") + "/" if prefix.strip("/") else ""
        self._bucket_ready = False
        self._bucket_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "MinioFileStore":
        client = Minio(
            endpoint=settings.MINIO_ENDPOINT,
            access_key=settings.MINIO_ACCESS_KEY,
            secret_key=settings.MINIO_SECRET_KEY,
            secure=settings.MINIO_SECURE,
        )
        return cls(client, settings.MINIO_BUCKET, prefix=settings.MINIO_PREFIX)

    def _object_name(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def _ensure_bucket(self) -> None:
        if self._bucket_ready:
            return
        with self._bucket_lock:
            if self._bucket_ready:
                return
            if not self.client.bucket_exists(bucket_name=self.bucket_name):
                try:
                    self.client.make_bucket(bucket_name=self.bucket_name)
                except S3Error as exc:
                    # another process created it first
                    if exc.code not in BUCKET_EXISTS_CODES:
                        raise
            self._bucket_ready = True

    def put(self, key: str, content: bytes) -> None:
        self._require_valid_key(key)
        try:
            self._ensure_bucket()
            self.client.put_object(
                bucket_name=self.bucket_name,
                object_name=self._object_name(key),
                data=BytesIO(content),
                length=len(content),
                content_type="application/json",
            )
        except BACKEND_ERRORS as exc:
            log.error("Failed to put %s into bucket %s: %s", key, self.bucket_name, exc)
            raise StorageFailure(f"Could not write {key}") from exc

    def list_keys(self) -> Iterator[str]:
        try:
            if not self.client.bucket_exists(bucket_name=self.bucket_name):
                return iter(())
            objects = self.client.list_objects(
                bucket_name=self.bucket_name,
                prefix=self.prefix or None,
                recursive=True,
            )
        except BACKEND_ERRORS as exc:
            log.error("Failed to list bucket %s: %s", self.bucket_name, exc)
            raise StorageFailure("Error listing files") from exc
        return self._iter_keys(objects)

    def _iter_keys(self, objects) -> Iterator[str]:
        try:
            for obj in objects:
                key = obj.object_name[len(self.prefix):]
                if is_valid_key(key):
                    yield key
        except BACKEND_ERRORS as exc:
            log.error("Listing bucket %s failed mid-stream: %s", self.bucket_name, exc)
            raise StorageFailure("Error listing files") from exc

    def get(self, key: str) -> Optional[bytes]:
        if not is_valid_key(key):
            return None
        response = None
        try:
            response = self.client.get_object(
                bucket_name=self.bucket_name,
                object_name=self._object_name(key),
            )
            return response.read()
        except S3Error as exc:
            if exc.code in MISSING_OBJECT_CODES:
                return None
            log.error("Failed to get %s from bucket %s: %s", key, self.bucket_name, exc)
            raise StorageFailure(f"Could not read {key}") from exc
        except BACKEND_ERRORS as exc:
            log.error("Failed to get %s from bucket %s: %s", key, self.bucket_name, exc)
            raise StorageFailure(f"Could not read {key}") from exc
        finally:
            if response is not None:
                response.close()
                response.release_conn()
