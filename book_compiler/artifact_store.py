"""Artifact Store Module

Persists compiled artifacts and returns their public URLs.
"""
import os
import tempfile
from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

from .exceptions import ArtifactStoreError


class ArtifactStore(ABC):
    """Stores artifact bytes under (bucket, path) and returns a public URL."""

    @abstractmethod
    def upload(self, bucket: str, path: str, data: bytes, content_type: str) -> str:
        """
        Store one artifact, overwriting any previous artifact at the same path.

        Args:
            bucket: Storage bucket ("pdf", "epub" or "docx")
            path: Path inside the bucket, e.g. "42/book.pdf"
            data: Complete artifact bytes
            content_type: MIME type of the artifact

        Returns:
            Public URL of the stored artifact

        Raises:
            ArtifactStoreError: If the artifact cannot be stored
        """


class InMemoryArtifactStore(ArtifactStore):
    """Keeps artifacts in a dictionary; useful for tests and local runs."""

    def __init__(self):
        self.blobs: Dict[Tuple[str, str], Tuple[bytes, str]] = {}

    def upload(self, bucket: str, path: str, data: bytes, content_type: str) -> str:
        self.blobs[(bucket, path)] = (bytes(data), content_type)
        return f"memory://{bucket}/{path}"

    def get(self, bucket: str, path: str) -> Optional[bytes]:
        entry = self.blobs.get((bucket, path))
        return entry[0] if entry else None


class LocalArtifactStore(ArtifactStore):
    """Writes artifacts under a local directory.

    Each artifact is written to a temporary file and moved into place, so a
    reader never sees a partially written artifact.
    """

    def __init__(self, root_dir: str, public_base_url: Optional[str] = None):
        """
        Initialize LocalArtifactStore.

        Args:
            root_dir: Directory holding one sub-directory per bucket
            public_base_url: Base URL the directory is served from
                             (file:// URLs are returned when None)
        """
        self.root_dir = os.path.abspath(root_dir)
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None

    def upload(self, bucket: str, path: str, data: bytes, content_type: str) -> str:
        target = os.path.join(self.root_dir, bucket, *path.split("/"))
        directory = os.path.dirname(target)

        temp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(temp_path, target)
            temp_path = None
        except OSError as e:
            raise ArtifactStoreError(bucket, path, str(e))
        finally:
            if temp_path and os.path.exists(temp_path):
                os.remove(temp_path)

        print(f"DEBUG: Stored {bucket}/{path} ({len(data)} bytes)")
        if self.public_base_url:
            return f"{self.public_base_url}/{bucket}/{path}"
        return f"file://{target}"


class S3ArtifactStore(ArtifactStore):
    """Uploads artifacts to S3-compatible object storage with boto3.

    Configuration defaults come from S3_ENDPOINT, S3_KEY, S3_SECRET,
    S3_REGION and S3_PUBLIC environment variables.
    """

    def __init__(
        self,
        endpoint_url: Optional[str] = None,
        access_key: Optional[str] = None,
        secret_key: Optional[str] = None,
        public_url: Optional[str] = None,
        bucket_prefix: str = "",
        region_name: Optional[str] = None,
        client=None,
    ):
        """
        Initialize S3ArtifactStore.

        Args:
            endpoint_url: S3 endpoint (MinIO, R2, AWS)
            access_key: Access key ID
            secret_key: Secret access key
            public_url: Base URL artifacts are publicly served from
            bucket_prefix: Prefix prepended to the "pdf"/"epub"/"docx" bucket names
            region_name: Region of the endpoint
            client: Pre-built boto3 S3 client (skips client creation)
        """
        self.endpoint_url = endpoint_url or os.getenv("S3_ENDPOINT")
        self.public_url = (public_url or os.getenv("S3_PUBLIC") or self.endpoint_url or "").rstrip("/")
        self.bucket_prefix = bucket_prefix

        if client is None:
            # Optional extra: pip install book-compiler[s3]
            import boto3
            from botocore.client import Config

            client = boto3.client(
                "s3",
                endpoint_url=self.endpoint_url,
                aws_access_key_id=access_key or os.getenv("S3_KEY"),
                aws_secret_access_key=secret_key or os.getenv("S3_SECRET"),
                config=Config(signature_version="s3v4"),
                region_name=region_name or os.getenv("S3_REGION", "us-east-1"),
            )
        self.client = client

    def upload(self, bucket: str, path: str, data: bytes, content_type: str) -> str:
        bucket_name = f"{self.bucket_prefix}{bucket}"
        try:
            self.client.put_object(Bucket=bucket_name, Key=path, Body=data, ContentType=content_type)
        except Exception as e:
            raise ArtifactStoreError(bucket_name, path, str(e))
        return f"{self.public_url}/{bucket_name}/{path}"
