"""
Pytest configuration and fixtures for Intake tests.
"""

import os
from unittest.mock import MagicMock

import pytest

# Set test environment before importing intake modules
os.environ["INTAKE_ENV"] = "development"
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key-not-real")

from onboarding.gateway import GatewayUploadError, GatewayWriteError
from onboarding.store import MemoryStepStore

PUBLIC_URL = "https://test-project.supabase.co/storage/v1/object/public/project-files"


class FakeGateway:
    """
    Stand-in for SubmissionGateway.

    Records every call. Set the *_error attributes to make a call fail.
    """

    def __init__(self):
        self.partials: list[dict] = []
        self.finals: list[dict] = []
        self.uploads: list[str] = []
        self.deletes: list[str] = []
        self.write_error: Exception | None = None
        self.upload_error: Exception | None = None

    async def submit_partial(self, name: str, session_id: str | None = None) -> list[dict]:
        if self.write_error:
            raise self.write_error
        row = {"name": name}
        if session_id:
            row["session_id"] = session_id
        self.partials.append(row)
        return [row]

    async def submit_final(self, form, session_id: str | None = None) -> list[dict]:
        if self.write_error:
            raise self.write_error
        row = {"name": form.name, "request": form.request, "files": list(form.files)}
        if session_id:
            row["session_id"] = session_id
        self.finals.append(row)
        return [row]

    async def upload_file(self, content: bytes, filename: str, content_type: str | None = None) -> str:
        if self.upload_error:
            raise self.upload_error
        self.uploads.append(filename)
        return f"{PUBLIC_URL}/public/{filename}"

    async def remove_file(self, url: str) -> None:
        self.deletes.append(url)


@pytest.fixture
def gateway():
    """Recording fake gateway."""
    return FakeGateway()


@pytest.fixture
def failing_gateway():
    """Gateway whose writes and uploads all fail."""
    fake = FakeGateway()
    fake.write_error = GatewayWriteError("insert failed: 503")
    fake.upload_error = GatewayUploadError("upload failed: bucket not found")
    return fake


@pytest.fixture
def browser():
    """Backing dict shared by step stores, standing in for one browser."""
    return {}


@pytest.fixture
def step_store(browser):
    return MemoryStepStore(browser)


@pytest.fixture
def mock_supabase():
    """Mock Supabase client for unit tests."""
    mock_client = MagicMock()

    # Mock table operations
    mock_table = MagicMock()
    mock_table.select.return_value = mock_table
    mock_table.insert.return_value = mock_table
    mock_table.limit.return_value = mock_table
    mock_table.execute.return_value = MagicMock(data=[{"id": 1}])

    mock_client.table.return_value = mock_table

    # Mock storage bucket operations
    mock_bucket = MagicMock()
    mock_bucket.upload.return_value = MagicMock(path="public/logo.png")
    mock_bucket.get_public_url.side_effect = lambda path: f"{PUBLIC_URL}/{path}"
    mock_bucket.remove.return_value = []

    mock_client.storage.from_.return_value = mock_bucket

    return mock_client
