from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path

_TEST_ROOT = Path(tempfile.mkdtemp(prefix="unipath-tests-"))
os.environ["APP_ENV"] = "test"
os.environ["DATA_DIR"] = str(_TEST_ROOT)
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_ROOT / 'unipath-test.db'}"
os.environ["UPLOAD_DIR"] = str(_TEST_ROOT / "uploads")
os.environ["JWT_SECRET_KEY"] = "test-secret"

import pytest
from fastapi.testclient import TestClient

from unipath.api.app import create_app
from unipath.config import get_settings
from unipath.db import models  # noqa: F401
from unipath.db.base import Base
from unipath.db.session import engine

from tests.helpers import APPLICATION_TEXT


@pytest.fixture(autouse=True)
def reset_db() -> None:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def upload_dir() -> Path:
    path = get_settings().upload_dir
    shutil.rmtree(path, ignore_errors=True)
    path.mkdir(parents=True, exist_ok=True)
    return path


@pytest.fixture
def application_text() -> str:
    return APPLICATION_TEXT


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())
