"""Local file system tools."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Optional, Tuple

from ...logger import get_logger
from .process import expand_path

logger = get_logger(__name__)


def _parse_offset(offset: str) -> int:
    try:
        return max(0, int(offset.strip())) if offset else 0
    except ValueError:
        return 0


def read_file(filename: str, offset: str, max_content_length: int) -> Tuple[str, int]:
    """Read up to ``max_content_length`` characters of a text file starting at ``offset``."""
    path = expand_path(filename)
    if not path.is_file():
        return f"File not found: {path}", 1

    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        return f"Error reading file: {exc}", -1

    total_length = len(content)
    if total_length == 0:
        return "File length = 0 characters.", 0

    start = _parse_offset(offset)
    if start >= total_length:
        return f"File length = {total_length} characters. Offset {start} exceeds file length.", 1

    end = min(start + max_content_length, total_length)
    result = f"File length = {total_length} characters, reading chars {start}-{end - 1}\n---\n{content[start:end]}"
    if end < total_length:
        result += "\n...[truncated]\n"
    return result, 0


def write_file(filename: str, content: str) -> Tuple[str, int]:
    """Create or overwrite a text file, creating parent directories as needed."""
    path = expand_path(filename)
    error = _ensure_directory(path.parent)
    if error:
        return error, 1
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        return f"Error writing file: {exc}", -1
    return f"File written successfully: {path}", 0


def move_file(source_path: str, destination_path: str) -> Tuple[str, int]:
    """Move or rename a file; the destination must not exist yet."""
    source, destination = expand_path(source_path), expand_path(destination_path)
    error = _validate_transfer(source, destination)
    if error:
        return error, 1
    try:
        shutil.move(str(source), str(destination))
    except OSError as exc:
        return f"Error moving file: {exc}", -1
    return f"File moved successfully from '{source}' to '{destination}'", 0


def copy_file(source_path: str, destination_path: str) -> Tuple[str, int]:
    """Copy a file; the destination must not exist yet."""
    source, destination = expand_path(source_path), expand_path(destination_path)
    error = _validate_transfer(source, destination)
    if error:
        return error, 1
    try:
        shutil.copy2(source, destination)
    except OSError as exc:
        return f"Error copying file: {exc}", -1
    return f"File copied successfully from '{source}' to '{destination}'", 0


def delete_file(file_path: str) -> Tuple[str, int]:
    path = expand_path(file_path)
    if not path.is_file():
        return f"File not found: {path}", 1
    try:
        path.unlink()
    except OSError as exc:
        return f"Error deleting file: {exc}", -1
    return f"File deleted successfully: {path}", 0


def list_directory(directory_path: str) -> Tuple[str, int]:
    """List subdirectories and files (with sizes) of a directory."""
    path = expand_path(directory_path)
    if not path.is_dir():
        return f"Directory not found: {path}", 1

    try:
        entries = sorted(path.iterdir(), key=lambda p: p.name.lower())
        directories = [p for p in entries if p.is_dir()]
        files = [p for p in entries if p.is_file()]
        lines = [f"Contents of: {path}", ""]
        if directories:
            lines.append("Directories:")
            lines.extend(f"  [DIR]  {p.name}" for p in directories)
            lines.append("")
        if files:
            lines.append("Files:")
            lines.extend(f"  [FILE] {p.name} ({format_file_size(p.stat().st_size)})" for p in files)
        if not directories and not files:
            lines.append("Directory is empty.")
    except OSError as exc:
        return f"Error listing directory: {exc}", -1

    return "\n".join(lines) + "\n", 0


def extract_file(archive_path: str, destination_path: str) -> Tuple[str, int]:
    """Unpack an archive into a directory using the formats known to :mod:`shutil`."""
    archive, destination = expand_path(archive_path), expand_path(destination_path)
    if not archive.is_file():
        return f"Archive not found: {archive}", 1

    error = _ensure_directory(destination)
    if error:
        return error, 1

    try:
        shutil.unpack_archive(str(archive), str(destination))
    except shutil.ReadError as exc:
        return f"Unsupported or corrupt archive: {exc}", 1
    except (OSError, ValueError) as exc:
        return f"Error extracting archive: {exc}", -1

    return f"Archive extracted successfully to: {destination}", 0


def format_file_size(size: int) -> str:
    units = ["B", "KB", "MB", "GB", "TB"]
    value = float(size)
    order = 0
    while value >= 1024 and order < len(units) - 1:
        order += 1
        value /= 1024
    return f"{value:.2f}".rstrip("0").rstrip(".") + f" {units[order]}"


def _validate_transfer(source: Path, destination: Path) -> Optional[str]:
    if not source.is_file():
        return f"Source file not found: {source}"
    if destination.exists():
        return f"Destination file already exists: {destination}"
    return _ensure_directory(destination.parent)


def _ensure_directory(directory: Path) -> Optional[str]:
    if not str(directory) or directory.is_dir():
        return None
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.warning("Failed to create directory %s: %s", directory, exc)
        return f"Failed to create directory '{directory}': {exc}"
    return None
