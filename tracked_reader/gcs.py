"""
GCS (Google Cloud Storage) integration for tracking reads of stored objects.

Objects are downloaded into memory so they can be wrapped by a TrackedReader,
which needs a seekable stream.
"""

from google.cloud import storage
from typing import Optional
import io
import logging

from .sources import decompress_zst

logger = logging.getLogger(__name__)


class GCSSource:
    """Open objects from Google Cloud Storage as seekable streams."""

    def __init__(self, project_id: Optional[str] = None):
        """
        Initialize GCS client.

        Args:
            project_id: GCP project ID (optional, uses default credentials)
        """
        self.client = storage.Client(project=project_id)
        logger.info(f"Initialized GCS client for project: {project_id or 'default'}")

    def open(self, bucket_name: str, blob_path: str) -> io.BytesIO:
        """
        Download an object and return it as an in-memory stream.

        Objects ending in ``.zst`` are decompressed first.

        Args:
            bucket_name: Name of the GCS bucket
            blob_path: Path to the object in the bucket

        Returns:
            Seekable stream positioned at the start of the data

        Example:
            >>> source = GCSSource()
            >>> stream = source.open("my-bucket", "frozen/db/bucket1/rawdata/journal.zst")
            >>> reader = TrackedReader(stream)
        """
        bucket = self.client.bucket(bucket_name)
        blob = bucket.blob(blob_path)

        logger.info(f"Downloading gs://{bucket_name}/{blob_path}")
        data = blob.download_as_bytes()
        logger.info(f"Downloaded {len(data)} bytes")

        if blob_path.endswith('.zst'):
            stream = decompress_zst(io.BytesIO(data))
            logger.info(f"Decompressed to {stream.getbuffer().nbytes} bytes")
            return stream

        return io.BytesIO(data)
