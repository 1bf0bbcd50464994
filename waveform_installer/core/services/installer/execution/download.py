"""
L4 Execution — Release asset download.

Fetches one release asset to a local path. No retries, no resume and
no checksum: a truncated download surfaces later as an extraction
failure.
"""

from __future__ import annotations

import logging
import shutil
import urllib.error
import urllib.request
from pathlib import Path

from waveform_installer import __version__
from waveform_installer.core.errors import DownloadError

logger = logging.getLogger(__name__)

_USER_AGENT = f"waveform-installer/{__version__}"


def release_url(base_url: str, version: str, asset_file_name: str) -> str:
    """Build ``{base}/{version}/{asset}`` for a release asset."""
    return f"{base_url.rstrip('/')}/{version}/{asset_file_name}"


def download(url: str, destination: Path, *, timeout: float | None = None) -> Path:
    """Download ``url`` to ``destination``, overwriting any existing file.

    Args:
        url: Asset URL.
        destination: File to write. Its parent directory must exist.
        timeout: Socket timeout in seconds (None = wait indefinitely).

    Returns:
        ``destination``.

    Raises:
        DownloadError: On a non-success HTTP status or a network error.
    """
    logger.info("Downloading %s...", destination.name)

    req = urllib.request.Request(url, headers={"User-Agent": _USER_AGENT})
    try:
        kwargs = {"timeout": timeout} if timeout is not None else {}
        with urllib.request.urlopen(req, **kwargs) as resp:
            status = resp.getcode()
            if status is not None and not 200 <= status < 300:
                raise DownloadError(url, status=status)
            with open(destination, "wb") as f:
                shutil.copyfileobj(resp, f, 8192)
    except urllib.error.HTTPError as exc:
        raise DownloadError(url, status=exc.code) from exc
    except urllib.error.URLError as exc:
        raise DownloadError(url, reason=str(exc.reason)) from exc
    except OSError as exc:
        raise DownloadError(url, reason=str(exc)) from exc

    logger.debug("Downloaded %s (%d bytes)", destination, destination.stat().st_size)
    return destination
