"""Download tools: plain files over HTTP and online videos through yt-dlp."""

from __future__ import annotations

import mimetypes
import shutil
from pathlib import Path
from typing import Optional, Tuple

import httpx

from ...logger import get_logger
from .process import execute_process, expand_path
from .web import new_http_client

logger = get_logger(__name__)

_GENERIC_BINARY = "application/octet-stream"


def content_type_matches(filename: str, content_type: str) -> bool:
    """Check a server supplied Content-Type against the type implied by the file extension.

    Unknown extensions and generic binary streams always match; otherwise the
    full type or at least its top-level part (``image``, ``video``...) must agree.
    """
    expected, _ = mimetypes.guess_type(filename)
    actual = content_type.split(";", 1)[0].strip().lower()
    if not expected or not actual or actual == _GENERIC_BINARY:
        return True
    expected = expected.lower()
    return actual == expected or actual.split("/", 1)[0] == expected.split("/", 1)[0]


def download_file(filename: str, url: str, client: Optional[httpx.Client] = None) -> Tuple[str, int]:
    """Stream ``url`` into ``filename`` after a best-effort Content-Type check."""
    target = expand_path(filename)
    owns_client = client is None
    http = client or new_http_client()
    try:
        content_type = ""
        try:
            head = http.head(url)
            if head.is_success:
                content_type = head.headers.get("content-type", "")
        except httpx.HTTPError as exc:
            # HEAD is advisory only; some servers refuse it.
            logger.debug("HEAD request for %s failed: %s", url, exc)

        if content_type and not content_type_matches(target.name, content_type):
            expected, _ = mimetypes.guess_type(target.name)
            return f"File type mismatch: Expected {expected} but got '{content_type}'. Download cancelled.", 1

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            return f"Failed to create directory '{target.parent}': {exc}", 1

        with http.stream("GET", url) as response:
            if not response.is_success:
                return f"HTTP {response.status_code} while downloading {url}", 1
            with target.open("wb") as handle:
                for chunk in response.iter_bytes():
                    handle.write(chunk)
    except httpx.HTTPError as exc:
        return f"Error downloading file: {exc}", -1
    except OSError as exc:
        return f"Error writing downloaded file: {exc}", -1
    finally:
        if owns_client:
            http.close()

    message = f"File downloaded successfully: {target}"
    if content_type:
        message += f" (Content-Type: {content_type})"
    return message, 0


def default_video_directory() -> Path:
    desktop = Path.home() / "Desktop"
    return desktop if desktop.is_dir() else Path.home()


def download_video(url: str, output_dir: Optional[Path] = None) -> Tuple[str, int]:
    """Download an online video with yt-dlp into the user's desktop."""
    executable = shutil.which("yt-dlp")
    if executable is None:
        return "yt-dlp was not found on PATH.", -1

    directory = output_dir or default_video_directory()
    template = str(directory / "%(title)s.%(ext)s")
    try:
        output, exit_code = execute_process([executable, "--no-progress", "-o", template, url])
    except OSError as exc:
        return f"Error running yt-dlp: {exc}", -1

    if exit_code != 0:
        return f"yt-dlp exited with code {exit_code}:\n{output}", exit_code
    return f"Video downloaded successfully to {directory}\n{output}", 0
