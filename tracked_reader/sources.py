"""
Opening of local, compressed and remote inputs as seekable binary streams.
"""

import io
import logging
from pathlib import Path
from typing import BinaryIO, Optional, Tuple
from urllib.parse import urlparse

import zstandard as zstd

logger = logging.getLogger(__name__)


def parse_gcs_path(path: str) -> Tuple[str, str]:
    """Parse gs://bucket/blob path into (bucket, blob)."""
    parsed = urlparse(path)
    return parsed.netloc, parsed.path.lstrip("/")


def decompress_zst(fh: BinaryIO) -> io.BytesIO:
    """
    Decompress a zstd stream into memory, across every frame it holds.

    zstd stream readers cannot seek backwards or from the end, so the whole
    payload is materialized.
    """
    out = io.BytesIO()
    zstd.ZstdDecompressor().copy_stream(fh, out)
    out.seek(0)
    return out


def open_zst(path: Path) -> io.BytesIO:
    """Decompress a zstd file into memory."""
    with open(path, 'rb') as fh:
        out = decompress_zst(fh)
    logger.info(f"Decompressed {path} to {out.getbuffer().nbytes} bytes")
    return out


def open_source(path: str, project_id: Optional[str] = None) -> BinaryIO:
    """
    Open an input as a readable, seekable binary stream.

    Args:
        path: Local path, ``*.zst`` compressed path, or gs://bucket/blob URL
        project_id: GCP project for gs:// inputs (optional)

    Returns:
        A binary stream owned by the caller

    Raises:
        FileNotFoundError: If a local path does not exist
        ValueError: If a gs:// URL has no object path
    """
    if path.startswith("gs://"):
        bucket, blob = parse_gcs_path(path)
        if not bucket or not blob:
            raise ValueError(f"Expected gs://bucket/object, got {path}")
        from .gcs import GCSSource
        return GCSSource(project_id=project_id).open(bucket, blob)

    local = Path(path)
    if not local.is_file():
        raise FileNotFoundError(f"Input not found at {local}")

    if local.suffix == ".zst":
        return open_zst(local)

    logger.info(f"Opening {local}")
    return open(local, 'rb')
