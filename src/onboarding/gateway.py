"""
Remote Submission Gateway.

Talks to Supabase: inserts project rows into the projects table and stores
uploaded files in a public storage bucket.

Every operation raises a GatewayError subclass on failure. Deciding what to
do about a failure (log it, move on) is the caller's job.
"""

import logging
from pathlib import PurePosixPath
from urllib.parse import unquote, urlparse

from supabase import Client

from intake.config import get_settings
from intake.db.client import get_client

from .state import OnboardingForm, ProjectRecord

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """Base class for remote submission failures."""


class GatewayWriteError(GatewayError):
    """Insert into the projects table failed."""


class GatewayUploadError(GatewayError):
    """Storing a file in the bucket failed."""


class GatewayDeleteError(GatewayError):
    """Deleting a stored file failed."""


class SubmissionGateway:
    """
    Supabase-backed gateway for the wizard's remote writes.

    The client is resolved lazily so the gateway can be built before any
    Supabase settings are loaded.
    """

    def __init__(
        self,
        client: Client | None = None,
        table: str = "projects",
        bucket: str = "project-files",
        prefix: str = "public",
    ):
        self._client = client
        self.table = table
        self.bucket = bucket
        self.prefix = prefix.strip("/")

    @classmethod
    def from_settings(cls) -> "SubmissionGateway":
        settings = get_settings()
        return cls(
            table=settings.projects_table,
            bucket=settings.storage_bucket,
            prefix=settings.upload_prefix,
        )

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_client()
        return self._client

    # =========================================================================
    # Project rows
    # =========================================================================

    async def insert_record(self, record: ProjectRecord) -> list[dict]:
        """Insert one row and return whatever the API echoes back."""
        row = record.to_row()
        try:
            response = self.client.table(self.table).insert(row).execute()
        except Exception as e:
            raise GatewayWriteError(f"Insert into {self.table} failed: {e}") from e
        return response.data or []

    async def submit_partial(self, name: str, session_id: str | None = None) -> list[dict]:
        """Early write after the name step: just the name."""
        return await self.insert_record(ProjectRecord.partial(name, session_id))

    async def submit_final(self, form: OnboardingForm, session_id: str | None = None) -> list[dict]:
        """Late write after the files step: name, request and file URLs."""
        return await self.insert_record(ProjectRecord.final(form, session_id))

    # =========================================================================
    # Storage
    # =========================================================================

    def object_path(self, filename: str) -> str:
        """Bucket path for an uploaded file. Directory parts are dropped."""
        name = PurePosixPath(filename.replace("\\", "/")).name
        if not name:
            raise GatewayUploadError(f"Unusable file name: {filename!r}")
        return f"{self.prefix}/{name}" if self.prefix else name

    async def upload_file(
        self,
        content: bytes,
        filename: str,
        content_type: str | None = None,
    ) -> str:
        """Store a file and return its public URL."""
        path = self.object_path(filename)
        bucket = self.client.storage.from_(self.bucket)

        file_options = {"content-type": content_type} if content_type else None
        try:
            bucket.upload(path, content, file_options)
            url = bucket.get_public_url(path)
        except Exception as e:
            raise GatewayUploadError(f"Upload of {path} to {self.bucket} failed: {e}") from e

        if not url:
            raise GatewayUploadError(f"No public URL for {path} in {self.bucket}")
        return url

    def path_from_url(self, url: str) -> str | None:
        """Recover the bucket path from a public URL, or None if it isn't ours."""
        marker = f"/object/public/{self.bucket}/"
        path = urlparse(url).path
        if marker not in path:
            return None
        return unquote(path.split(marker, 1)[1])

    async def remove_file(self, url: str) -> None:
        """Delete the blob behind a public URL produced by upload_file()."""
        path = self.path_from_url(url)
        if path is None:
            raise GatewayDeleteError(f"Not a {self.bucket} URL: {url}")
        try:
            self.client.storage.from_(self.bucket).remove([path])
        except Exception as e:
            raise GatewayDeleteError(f"Delete of {path} from {self.bucket} failed: {e}") from e
