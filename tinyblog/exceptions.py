"""Package-specific exception types."""

from __future__ import annotations

from pathlib import Path


class BlogError(ValueError):
    """Base class for errors raised by the file-based layers.

    The Markdown renderer itself never raises; these cover manifests, post
    files and generated outputs.
    """


class ManifestError(BlogError):
    """Raised when the post manifest cannot be read or has the wrong shape.

    Args:
        path: Location of the manifest.
        reason: Human-readable description of the problem.
    """

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class FileTooLargeError(BlogError):
    """Raised when a post file exceeds the configured maximum size.

    Args:
        path: Offending file.
        max_size: Maximum allowed size in bytes.
    """

    def __init__(self, path: Path, max_size: int):
        self.path = path
        self.max_size = max_size
        super().__init__(f"{path} exceeds the maximum allowed size of {max_size} bytes.")
