"""Post manifest loading and plain-text helpers."""

from __future__ import annotations

import datetime as dt
import json
import re
from dataclasses import fields
from pathlib import Path

from .constants import DEFAULT_MAX_FILE_SIZE, MARKDOWN_EXTENSION
from .exceptions import ManifestError
from .filesystem import read_text
from .models import Post

_POST_FIELDS = {item.name for item in fields(Post)} - {"extra"}

PLAIN_TEXT_RULES: list[tuple[re.Pattern, str]] = [
    (re.compile(r"```.*?```", re.DOTALL), ""),
    (re.compile(r"`[^`]+`"), ""),
    (re.compile(r"!\[([^\]]*)\]\([^)]+\)"), r"\1"),
    (re.compile(r"\[([^\]]+)\]\([^)]+\)"), r"\1"),
    (re.compile(r"[*_]{1,2}([^*_]+)[*_]{1,2}"), r"\1"),
    (re.compile(r"^#{1,6}\s+", re.MULTILINE), ""),
    (re.compile(r"^[-*]\s+", re.MULTILINE), ""),
    (re.compile(r"^\d+\.\s+", re.MULTILINE), ""),
    (re.compile(r"^>\s?", re.MULTILINE), ""),
]


def post_from_mapping(data: dict) -> Post:
    """Build a `Post` from one manifest entry.

    Known keys become attributes (non-string scalars are stringified); any
    other keys are kept in `Post.extra`. A comma-separated ``tags`` string is
    split into a list.
    """
    known: dict[str, object] = {}
    extra: dict[str, object] = {}
    for key, value in data.items():
        if key not in _POST_FIELDS:
            extra[key] = value
        elif key == "tags":
            if isinstance(value, str):
                value = [item.strip() for item in value.split(",") if item.strip()]
            known[key] = [str(item) for item in value] if isinstance(value, list) else []
        else:
            known[key] = "" if value is None else str(value)
    return Post(**known, extra=extra)


def parse_post_date(value: str) -> dt.datetime | None:
    """Parse an ISO date or datetime string; return None when it is invalid.

    Aware datetimes are converted to naive UTC so all dates compare.
    """
    try:
        parsed = dt.datetime.fromisoformat(value.strip())
    except (AttributeError, ValueError):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(dt.timezone.utc).replace(tzinfo=None)
    return parsed


def sort_posts(posts: list[Post]) -> list[Post]:
    """Return posts newest first; undated posts keep their order at the end."""

    def _key(post: Post) -> tuple[bool, dt.datetime]:
        parsed = parse_post_date(post.date)
        return (parsed is not None, parsed or dt.datetime.min)

    return sorted(posts, key=_key, reverse=True)


def read_manifest(manifest_path: Path, max_size: int = DEFAULT_MAX_FILE_SIZE) -> list[Post]:
    """Read the post manifest, keeping manifest order.

    Args:
        manifest_path: JSON file holding an array of post objects.
        max_size: Maximum manifest size in bytes.

    Returns:
        list[Post]: Posts in the order they appear in the file.

    Raises:
        ManifestError: If the manifest cannot be read, is not valid JSON, or
            is not an array of objects.

    Examples:
        posts = read_manifest(Path("posts.json"))
    """
    try:
        content = read_text(manifest_path, max_size)
    except (IOError, ValueError) as error:
        raise ManifestError(manifest_path, str(error)) from error

    try:
        data = json.loads(content)
    except json.JSONDecodeError as error:
        raise ManifestError(manifest_path, f"invalid JSON: {error}") from error

    if not isinstance(data, list):
        raise ManifestError(manifest_path, "expected a JSON array of posts")

    posts = []
    for index, entry in enumerate(data, start=1):
        if not isinstance(entry, dict):
            raise ManifestError(manifest_path, f"post #{index} is not an object")
        posts.append(post_from_mapping(entry))

    return posts


def load_posts(manifest_path: Path, max_size: int = DEFAULT_MAX_FILE_SIZE) -> list[Post]:
    """Load the post manifest, newest post first.

    Raises:
        ManifestError: See `read_manifest`.
    """
    return sort_posts(read_manifest(manifest_path, max_size))


def post_markdown_path(posts_dir: Path, slug: str) -> Path:
    return posts_dir / f"{slug}{MARKDOWN_EXTENSION}"


def read_post_markdown(
    posts_dir: Path, slug: str, max_size: int = DEFAULT_MAX_FILE_SIZE
) -> str | None:
    """Read the Markdown body of a post.

    Returns:
        str | None: The body, or None when the post has no Markdown file.

    Raises:
        FileTooLargeError: If the file exceeds `max_size`.
        IOError: If the file exists but cannot be read.
    """
    path = post_markdown_path(posts_dir, slug)
    if not path.exists():
        return None
    return read_text(path, max_size)


def markdown_to_text(markdown: str) -> str:
    """Strip Markdown syntax, keeping readable text.

    Code is dropped, images become their alt text, links their label.

    Examples:
        markdown_to_text("# Title\\n\\nSee [docs](https://x.y).")  # "Title\\n\\nSee docs."
    """
    text = markdown.replace("\r\n", "\n")
    for pattern, replacement in PLAIN_TEXT_RULES:
        text = pattern.sub(replacement, text)
    return text.strip()


def summarize(text: str, length: int = 200) -> str:
    """Return the first `length` characters of `text`, marking truncation."""
    if len(text) <= length:
        return text
    return text[:length] + "..."


def post_url(site_url: str, slug: str) -> str:
    return f"{site_url.rstrip('/')}/#{slug}"
