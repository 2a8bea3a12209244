from __future__ import annotations

import logging
from typing import List, Optional

from .errors import InvalidJson, MissingField, NotFound, UnsupportedMediaType
from .naming import derive_key
from .storage import FileStore, StoredFile
from .validation import check_size, is_json_filename, validate_json

log = logging.getLogger("jsonshare.service")


class FileService:
    """
    Upload pipeline plus the list/download read paths over one `FileStore`.

    Every check in `upload` runs before the single `put`, so a rejected upload
    never touches the store.
    """

    def __init__(self, store: FileStore, max_upload_bytes: int = 0) -> None:
        self.store = store
        self.max_upload_bytes = max_upload_bytes

    def upload(
        self,
        content: Optional[bytes],
        declared_file_name: Optional[str],
        file_name: Optional[str],
        author_name: Optional[str],
    ) -> StoredFile:
        if declared_file_name is not None and not is_json_filename(declared_file_name):
            log.info("Rejected upload %r: not a .json file", declared_file_name)
            raise UnsupportedMediaType()
        if not content or not file_name or not author_name:
            log.info("Rejected upload: missing file, fileName or authorName")
            raise MissingField()
        check_size(content, self.max_upload_bytes)

        validation = validate_json(content)
        if not validation.ok:
            log.info("Rejected upload %r: %s", declared_file_name, validation.reason)
            raise InvalidJson()

        key = derive_key(file_name, author_name)
        self.store.put(key, content)
        log.info("Stored %s (%d bytes) in %s store", key, len(content), self.store.name)
        return StoredFile(key=key, content=content)

    def list_files(self) -> List[str]:
        return sorted(self.store.list_keys())

    def download(self, key: str) -> StoredFile:
        content = self.store.get(key)
        if content is None:
            raise NotFound()
        return StoredFile(key=key, content=content)
