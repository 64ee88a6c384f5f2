"""
Media storage for uploaded images.

Local filesystem by default, S3 when ``media_backend`` is ``s3``. Both store
an upload under a generated name and hand it back for the /uploads route.
"""

import logging
import mimetypes
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

import boto3
from botocore.exceptions import ClientError

from portfolio_api.config.settings import Settings

logger = logging.getLogger(__name__)

ABSOLUTE_URL_PREFIXES = ("http://", "https://")
CHUNK_SIZE = 64 * 1024


class InvalidMediaName(ValueError):
    """Raised for names that are not a single plain filename"""


@dataclass
class StoredMedia:
    """A stored file opened for streaming"""
    body: Iterator[bytes]
    content_type: str
    size: Optional[int] = None


def generate_stored_name(original_name: Optional[str]) -> str:
    """Millisecond timestamp plus a random suffix, keeping the original extension."""
    extension = Path(original_name or "").suffix.lower()
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:12]}{extension}"


def is_absolute_url(reference: Optional[str]) -> bool:
    return bool(reference) and reference.lower().startswith(ABSOLUTE_URL_PREFIXES)


def validate_media_name(name: str) -> str:
    if not name or name != Path(name).name or name.startswith(".") or "\\" in name:
        raise InvalidMediaName(f"Invalid media name: {name!r}")
    return name


def guess_content_type(name: str) -> str:
    return mimetypes.guess_type(name)[0] or "application/octet-stream"


class BaseMediaStore:
    """Base class for media storage (to be extended by specific implementations)"""

    def __init__(self, static_prefix: str = "/uploads"):
        self.static_prefix = static_prefix

    def store(self, data: bytes, original_name: Optional[str], content_type: Optional[str] = None) -> str:
        raise NotImplementedError

    def exists(self, name: str) -> bool:
        raise NotImplementedError

    def fetch(self, name: str) -> StoredMedia:
        raise NotImplementedError

    def delete(self, name: str) -> bool:
        raise NotImplementedError

    def resolve(self, name: str, origin: str) -> str:
        """URL a stored name is served from; no existence check."""
        return f"{origin.rstrip('/')}{self.static_prefix}/{name}"

    def render(self, reference: Optional[str], origin: str) -> str:
        """Pass absolute URLs through, resolve bare filenames."""
        if not reference:
            return ""
        if is_absolute_url(reference):
            return reference
        return self.resolve(reference, origin)


class LocalMediaStore(BaseMediaStore):
    """Stores uploads in a directory on the local filesystem"""

    def __init__(self, root: str, static_prefix: str = "/uploads"):
        super().__init__(static_prefix)
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        logger.info("LocalMediaStore initialized at: %s", self.root)

    def _path(self, name: str) -> Path:
        return self.root / validate_media_name(name)

    def store(self, data: bytes, original_name: Optional[str], content_type: Optional[str] = None) -> str:
        name = generate_stored_name(original_name)
        # the directory may have been removed since startup
        self.root.mkdir(parents=True, exist_ok=True)
        self._path(name).write_bytes(data)
        logger.info("Stored upload %s as %s (%d bytes)", original_name, name, len(data))
        return name

    def exists(self, name: str) -> bool:
        return self._path(name).is_file()

    def fetch(self, name: str) -> StoredMedia:
        path = self._path(name)
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {path}")

        def iter_file() -> Iterator[bytes]:
            with open(path, "rb") as f:
                yield from iter(lambda: f.read(CHUNK_SIZE), b"")

        return StoredMedia(body=iter_file(), content_type=guess_content_type(name), size=path.stat().st_size)

    def delete(self, name: str) -> bool:
        path = self._path(name)
        if not path.is_file():
            return False
        path.unlink()
        logger.info("Deleted stored media %s", name)
        return True


class S3MediaStore(BaseMediaStore):
    """Stores uploads as objects in an S3 bucket"""

    def __init__(self, bucket_name: str, s3_client, static_prefix: str = "/uploads", key_prefix: str = "uploads/"):
        super().__init__(static_prefix)
        self.bucket_name = bucket_name
        self.key_prefix = key_prefix
        self._client = s3_client
        logger.info("Using S3 bucket: %s", bucket_name)

    def _key(self, name: str) -> str:
        return f"{self.key_prefix}{validate_media_name(name)}"

    def store(self, data: bytes, original_name: Optional[str], content_type: Optional[str] = None) -> str:
        name = generate_stored_name(original_name)
        try:
            self._client.put_object(
                Bucket=self.bucket_name,
                Key=self._key(name),
                Body=data,
                ContentType=content_type or guess_content_type(name),
            )
        except ClientError as e:
            logger.error("Error uploading to S3: %s", str(e))
            raise
        logger.info("Uploaded %s to S3 as %s", original_name, name)
        return name

    def exists(self, name: str) -> bool:
        try:
            self._client.head_object(Bucket=self.bucket_name, Key=self._key(name))
            return True
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') in ('404', 'NoSuchKey', 'NotFound'):
                return False
            raise

    def fetch(self, name: str) -> StoredMedia:
        try:
            obj = self._client.get_object(Bucket=self.bucket_name, Key=self._key(name))
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') in ('404', 'NoSuchKey'):
                raise FileNotFoundError(name) from e
            raise
        return StoredMedia(
            body=obj["Body"].iter_chunks(CHUNK_SIZE),
            content_type=obj.get("ContentType") or guess_content_type(name),
            size=obj.get("ContentLength"),
        )

    def delete(self, name: str) -> bool:
        if not self.exists(name):
            return False
        self._client.delete_object(Bucket=self.bucket_name, Key=self._key(name))
        logger.info("Deleted S3 object %s", name)
        return True


class MediaStoreFactory:
    """Factory for creating the configured media store"""

    @staticmethod
    def create(settings: Settings) -> BaseMediaStore:
        if settings.media_backend == "s3":
            if not settings.s3_bucket_name:
                raise ValueError("s3_bucket_name is required when media_backend is s3")
            s3_client = boto3.client(
                's3',
                region_name=settings.aws_region,
                endpoint_url=settings.aws_endpoint_url,
                aws_access_key_id=settings.aws_access_key_id,
                aws_secret_access_key=settings.aws_secret_access_key,
            )
            return S3MediaStore(settings.s3_bucket_name, s3_client, static_prefix=settings.static_prefix)
        return LocalMediaStore(settings.uploads_dir, static_prefix=settings.static_prefix)
