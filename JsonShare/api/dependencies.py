from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from JsonShare.core.config import Settings
from JsonShare.core.service import FileService


def get_settings_from_app(request: Request) -> Settings:
    return request.app.state.settings


def get_file_service(request: Request) -> FileService:
    return request.app.state.file_service


FileServiceDep = Annotated[FileService, Depends(get_file_service)]
SettingsDep = Annotated[Settings, Depends(get_settings_from_app)]
