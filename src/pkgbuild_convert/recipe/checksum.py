"""Source checksum derivation by download."""

from __future__ import annotations

import hashlib
import logging
import urllib.request

from pkgbuild_convert.errors import ChecksumError

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


def fetch_sha256(url: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """Download a source and return its SHA-256 hex digest.

    The body is hashed as it streams in, never held in memory as a whole.

    Raises:
        ChecksumError: If the URL cannot be fetched
    """
    digest = hashlib.sha256()
    logger.info("Fetching %s", url)

    try:
        with urllib.request.urlopen(url) as response:
            while chunk := response.read(chunk_size):
                digest.update(chunk)
    except (OSError, ValueError) as e:
        raise ChecksumError(f"Failed to fetch {url}: {e}") from e

    return digest.hexdigest()
