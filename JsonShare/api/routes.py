from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, File, Form, Response, UploadFile

from JsonShare.core.models import ErrorResponse, UploadReceipt

from .dependencies import FileServiceDep

router = APIRouter(tags=["Files"])

GUARD_RESPONSES = {
    403: {"model": ErrorResponse, "description": "Bot detected"},
    429: {"model": ErrorResponse, "description": "Rate limited"},
}


def _read_upload(file: Optional[UploadFile], max_bytes: int) -> Optional[bytes]:
    if file is None:
        return None
    # One byte past the limit is enough to know the upload is too large.
    return file.file.read(max_bytes + 1 if max_bytes > 0 else -1)


@router.post(
    "/upload",
    response_model=UploadReceipt,
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        **GUARD_RESPONSES,
    },
)
@router.post("/api/upload", response_model=UploadReceipt, include_in_schema=False)
def upload_file(
    files: FileServiceDep,
    file: Optional[UploadFile] = File(default=None),
    fileName: Optional[str] = Form(default=None),
    authorName: Optional[str] = Form(default=None),
) -> UploadReceipt:
    content = _read_upload(file, files.max_upload_bytes)
    stored = files.upload(
        content,
        declared_file_name=file.filename if file is not None else None,
        file_name=fileName,
        author_name=authorName,
    )
    return UploadReceipt(key=stored.key, size=stored.size)


@router.get("/files", response_model=List[str], responses={500: {"model": ErrorResponse}, **GUARD_RESPONSES})
@router.get("/api/files", response_model=List[str], include_in_schema=False)
def list_files(files: FileServiceDep) -> List[str]:
    return files.list_files()


@router.get(
    "/files/{key}",
    response_class=Response,
    responses={200: {"content": {"application/json": {}}}, 404: {"model": ErrorResponse}, **GUARD_RESPONSES},
)
@router.get("/api/download/{key}", response_class=Response, include_in_schema=False)
def download_file(key: str, files: FileServiceDep) -> Response:
    stored = files.download(key)
    return Response(
        content=stored.content,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{stored.key}"'},
    )
