"""
Network access for release manifests and archives.

This module provides:
- JSON fetches with an optional ``Authorization`` header
- Streaming archive downloads with retry and exponential backoff
- SHA256 verification while streaming
"""

import hashlib
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

import requests
from requests.exceptions import RequestException

from gosetup.core.exceptions import ChecksumError, DownloadError

logger = logging.getLogger(__name__)

USER_AGENT = "gosetup"
CHUNK_SIZE = 8192


def _headers(auth: Optional[str], accept: Optional[str] = None) -> Dict[str, str]:
    headers = {"User-Agent": USER_AGENT}
    if auth:
        headers["Authorization"] = auth
    if accept:
        headers["Accept"] = accept
    return headers


def fetch_json(url: str, auth: Optional[str] = None, timeout: int = 30) -> Any:
    """
    Fetch and decode a JSON document.

    Args:
        url: Document URL
        auth: Authorization header value, or None
        timeout: Request timeout in seconds

    Returns:
        Decoded JSON value

    Raises:
        DownloadError: If the request fails or the body is not JSON
    """
    logger.debug(f"Fetching {url}")
    try:
        response = requests.get(
            url, headers=_headers(auth, "application/json"), timeout=timeout
        )
        response.raise_for_status()
        return response.json()
    except (RequestException, ValueError) as e:
        raise DownloadError(f"Failed to fetch {url}: {e}") from e


def download_file(
    url: str,
    destination: Path,
    auth: Optional[str] = None,
    expected_sha256: Optional[str] = None,
    timeout: int = 30,
    max_retries: int = 3,
) -> Path:
    """
    Download a file with retry logic and optional checksum verification.

    Args:
        url: URL to download from
        destination: Local path to save the file
        auth: Authorization header value, or None
        expected_sha256: Expected SHA256 hash (verified during download)
        timeout: Request timeout in seconds
        max_retries: Maximum number of attempts

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If download fails after retries
        ChecksumError: If checksum doesn't match expected value
        ValueError: If URL is empty

    Example:
        >>> download_file(
        ...     "https://go.dev/dl/go1.21.0.linux-amd64.tar.gz",
        ...     Path("downloads/go1.21.0.linux-amd64.tar.gz"),
        ... )
    """
    if not url:
        raise ValueError("URL cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    for attempt in range(max_retries):
        try:
            return _download(url, destination, auth, expected_sha256, timeout)
        except RequestException as e:
            if attempt == max_retries - 1:
                raise DownloadError(
                    f"Download failed after {max_retries} attempts: {e}"
                ) from e

            backoff_seconds = 2**attempt
            logger.warning(
                f"Download attempt {attempt + 1} failed: {e}. "
                f"Retrying in {backoff_seconds}s..."
            )
            time.sleep(backoff_seconds)

    raise DownloadError(f"Download failed: {url}")


def _download(
    url: str,
    destination: Path,
    auth: Optional[str],
    expected_sha256: Optional[str],
    timeout: int,
) -> Path:
    logger.info(f"Downloading from {url}")

    response = requests.get(
        url, headers=_headers(auth), stream=True, timeout=timeout, allow_redirects=True
    )
    response.raise_for_status()

    hasher = hashlib.sha256() if expected_sha256 else None
    with open(destination, "wb") as f:
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            if chunk:
                f.write(chunk)
                if hasher:
                    hasher.update(chunk)

    if hasher:
        actual = hasher.hexdigest()
        if actual.lower() != expected_sha256.lower():
            destination.unlink()
            raise ChecksumError(
                f"Checksum mismatch for {destination.name}: "
                f"expected {expected_sha256}, got {actual}"
            )
        logger.debug("Checksum verified successfully")

    logger.debug(f"Download complete: {destination}")
    return destination


__all__ = ["fetch_json", "download_file"]
