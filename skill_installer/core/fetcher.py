"""Archive download and extraction.

Provides the fetcher used by SkillInstaller plus helpers to unpack a
GitHub branch archive and find the directory holding the skill content.
"""

from __future__ import annotations

import logging
import time
import zipfile
import zlib
from pathlib import Path
from typing import Callable, Protocol

import httpx

from skill_installer.core.errors import FetchError

logger = logging.getLogger(__name__)

# Statuses worth another attempt
RETRYABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})

CHUNK_SIZE = 64 * 1024

USER_AGENT = "spring-skill-installer/0.1.0"


class ArchiveFetcher(Protocol):
    """Anything that can download an archive URL to a local file."""

    def fetch(self, url: str, dest: Path) -> None: ...


class HttpArchiveFetcher:
    """Download archives over HTTPS with a bounded number of retries."""

    def __init__(
        self,
        timeout: float = 30.0,
        retries: int = 3,
        retry_backoff: float = 1.0,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize the fetcher.

        Args:
            timeout: Per-request timeout in seconds
            retries: Extra attempts after the first one fails
            retry_backoff: Delay before the first retry, doubled each time
            transport: Optional httpx transport (tests use MockTransport)
            sleep: Function used to wait between attempts
        """
        self.timeout = timeout
        self.retries = retries
        self.retry_backoff = retry_backoff
        self._transport = transport
        self._sleep = sleep

    def fetch(self, url: str, dest: Path) -> None:
        """
        Download url into dest.

        Raises:
            FetchError: On a non-retryable status or request error, or when
                retries run out
        """
        attempts = self.retries + 1
        delay = self.retry_backoff
        last_error = ""

        with httpx.Client(
            timeout=self.timeout,
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
            transport=self._transport,
        ) as client:
            for attempt in range(1, attempts + 1):
                try:
                    self._download(client, url, dest)
                    logger.info("Downloaded %s (%d bytes)", url, dest.stat().st_size)
                    return
                except httpx.HTTPStatusError as e:
                    status = e.response.status_code
                    last_error = f"HTTP {status}"
                    if status not in RETRYABLE_STATUS_CODES:
                        raise FetchError(f"Failed to download {url}: {last_error}") from e
                except httpx.TransportError as e:
                    last_error = f"{type(e).__name__}: {e}"
                except httpx.RequestError as e:
                    raise FetchError(f"Failed to download {url}: {type(e).__name__}: {e}") from e
                except OSError as e:
                    raise FetchError(f"Could not save {url} to {dest}: {e}") from e

                if attempt < attempts:
                    logger.debug(
                        "Attempt %d/%d for %s failed (%s), retrying in %.1fs",
                        attempt,
                        attempts,
                        url,
                        last_error,
                        delay,
                    )
                    self._sleep(delay)
                    delay *= 2

        raise FetchError(f"Failed to download {url} after {attempts} attempt(s): {last_error}")

    def _download(self, client: httpx.Client, url: str, dest: Path) -> None:
        """Stream one response body to dest."""
        with client.stream("GET", url) as response:
            response.raise_for_status()
            with dest.open("wb") as f:
                for chunk in response.iter_bytes(CHUNK_SIZE):
                    f.write(chunk)


def extract_archive(archive: Path, dest: Path) -> Path:
    """
    Extract a zip archive into dest.

    Members that would land outside dest are rejected.

    Returns:
        The extraction directory

    Raises:
        FetchError: If the archive is corrupt or unsafe
    """
    dest.mkdir(parents=True, exist_ok=True)
    root = dest.resolve()

    try:
        with zipfile.ZipFile(archive) as zf:
            for member in zf.namelist():
                target = (root / member).resolve()
                if target != root and root not in target.parents:
                    raise FetchError(f"Archive member escapes extraction directory: {member}")
            zf.extractall(root)
    except (zipfile.BadZipFile, zlib.error, EOFError) as e:
        raise FetchError(f"Corrupt archive {archive.name}: {e}") from e
    except OSError as e:
        raise FetchError(f"Could not extract {archive.name}: {e}") from e

    logger.info("Extracted %s", archive.name)
    return dest


def locate_content_root(extracted: Path, expected_name: str) -> Path:
    """
    Find the directory holding the skill content.

    GitHub branch archives wrap everything in '<repo>-<branch>/'. Falls back
    to the only top-level directory, then to the extraction directory.
    """
    expected = extracted / expected_name
    if expected.is_dir():
        return expected

    entries = list(extracted.iterdir())
    if len(entries) == 1 and entries[0].is_dir():
        return entries[0]

    return extracted
