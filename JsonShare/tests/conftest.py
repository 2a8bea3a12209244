from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from JsonShare.api.main import create_app
from JsonShare.core.config import Settings
from JsonShare.core.storage import InMemoryFileStore, LocalDirectoryFileStore


def make_settings(**overrides) -> Settings:
    values = {"STORAGE_BACKEND": "memory", "LOG_LEVEL": "WARNING"}
    values.update(overrides)
    return Settings(**values)


@pytest.fixture()
def memory_store() -> InMemoryFileStore:
    return InMemoryFileStore()


@pytest.fixture()
def directory_store(tmp_path: Path) -> LocalDirectoryFileStore:
    return LocalDirectoryFileStore(tmp_path / "files")


@pytest.fixture()
def client(memory_store: InMemoryFileStore) -> TestClient:
    app = create_app(make_settings(), store=memory_store)
    with TestClient(app) as test_client:
        yield test_client
