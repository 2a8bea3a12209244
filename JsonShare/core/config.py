from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "JsonShare"
    VERSION: str = "0.1.0"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    # Storage: "local" (directory), "memory" (volatile) or "minio" (object store)
    STORAGE_BACKEND: str = "local"
    STORAGE_DIR: str = "files"
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024
    # allowance for multipart boundaries and the name fields around the file part
    MULTIPART_OVERHEAD_BYTES: int = 64 * 1024

    # MinIO settings
    MINIO_ENDPOINT: str = "localhost:9000"
    MINIO_ACCESS_KEY: str = "minioadmin"
    MINIO_SECRET_KEY: str = "minioadmin"
    MINIO_BUCKET: str = "jsonshare"
    MINIO_PREFIX: str = ""
    MINIO_SECURE: bool = False

    # Abuse protection
    RATE_LIMIT: int = 100
    RATE_WINDOW_SECONDS: int = 15 * 60
    BOT_USER_AGENTS: List[str] = ["bot", "spider", "crawl", "slurp", "scrape"]

    # Front end
    STATIC_DIR: Optional[str] = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
