"""Filesystem helpers for tinyblog."""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path
from typing import TextIO

from .constants import DEFAULT_MAX_FILE_SIZE, MARKDOWN_EXTENSION
from .exceptions import FileTooLargeError


def safe_read(filepath: Path) -> TextIO:
    """Open a file for reading with consistent error handling.

    Args:
        filepath: Path to the file.

    Returns:
        TextIO: File handle opened for reading in UTF-8.

    Raises:
        IOError: If the path is missing, inaccessible, or not a file.

    Examples:
        with safe_read(Path("posts.json")) as handle:
            data = handle.read()
    """
    try:
        return open(filepath, "r", encoding="UTF-8")
    except (
        FileNotFoundError,
        PermissionError,
        IsADirectoryError,
        NotADirectoryError,
    ) as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Return stat information for a regular file.

    Raises:
        IOError: If the path is inaccessible or not a regular file.
    """
    try:
        stat_result = os.stat(filepath)
    except OSError as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error

    if not stat.S_ISREG(stat_result.st_mode):
        error_message = f"{filepath} is not a regular file."
        raise IOError(error_message)

    return stat_result


def read_text(filepath: Path, max_size: int = DEFAULT_MAX_FILE_SIZE) -> str:
    """Read a UTF-8 text file after checking its size.

    Args:
        filepath: File to read.
        max_size: Maximum allowed size in bytes.

    Returns:
        str: File contents.

    Raises:
        FileTooLargeError: If the file exceeds `max_size`.
        IOError: If the file cannot be accessed or is not valid UTF-8.

    Examples:
        body = read_text(Path("posts/hello.md"), max_size=1_048_576)
    """
    if collect_file_stat(filepath).st_size > max_size:
        raise FileTooLargeError(filepath, max_size)

    try:
        with safe_read(filepath) as file:
            return file.read()
    except UnicodeDecodeError as error:
        error_message = f"Invalid UTF-8 sequence in {filepath}: {error}"
        raise IOError(error_message) from error


def list_markdown_files(directory: Path) -> list[Path]:
    """Return the Markdown files directly inside `directory`, sorted by name.

    Raises:
        IOError: If the directory does not exist or cannot be listed.
    """
    try:
        entries = list(directory.iterdir())
    except OSError as error:
        error_message = f"Error accessing {directory}: {error}"
        raise IOError(error_message) from error

    return sorted(
        entry for entry in entries if entry.suffix == MARKDOWN_EXTENSION and entry.is_file()
    )


def write_atomic(filepath: Path, text: str) -> None:
    """Write `text` to `filepath` through a temporary file and `os.replace`.

    Readers never observe a partially written file. Existing permissions are
    kept when the target already exists.

    Args:
        filepath: Destination file.
        text: Content to write (UTF-8).

    Raises:
        IOError: If the temporary file cannot be written or moved into place.

    Examples:
        write_atomic(Path("feed.xml"), feed_xml)
    """
    permissions = None
    if filepath.exists():
        permissions = stat.S_IMODE(filepath.stat().st_mode)

    parent = filepath.parent
    temp_path: Path | None = None
    try:
        parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="w", encoding="UTF-8", delete=False, dir=parent
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            tmp_file.write(text)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())

        if permissions is not None:
            os.chmod(temp_path, permissions)
        else:
            os.chmod(temp_path, 0o644)
        os.replace(temp_path, filepath)
    except OSError as error:
        error_message = f"Error writing {filepath}: {error}"
        raise IOError(error_message) from error
    finally:
        if temp_path is not None:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                pass
