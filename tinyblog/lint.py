"""Markdown content linting for blog posts."""

from __future__ import annotations

import re
from collections.abc import Callable
from pathlib import Path

from .constants import (
    DEFAULT_MAX_FILE_SIZE,
    FENCED_CODE_PATTERN,
    INLINE_CODE_PATTERN,
    UNSAFE_URL_SCHEMES,
)
from .filesystem import list_markdown_files, read_text
from .models import LintResult

EMPTY_ALT_PATTERN = re.compile(r"!\[\]\([^)]+\)")
IMAGE_ALT_PATTERN = re.compile(r"!\[([^\]]+)\]\([^)]+\)")
UNSAFE_URL_PATTERN = re.compile(
    r"!?\[[^\]]*\]\(\s*(?:"
    + "|".join(re.escape(scheme) for scheme in UNSAFE_URL_SCHEMES)
    + r")[^)]*\)",
    re.IGNORECASE,
)
FIRST_HEADING_PATTERN = re.compile(r"^(#+)\s", re.MULTILINE)
H1_PATTERN = re.compile(r"^# \S", re.MULTILINE)
IMAGE_WITH_SPACE_PATTERN = re.compile(r"!\[[^\]]*\]\([^)]*\s[^)]+\)")
LINK_WITH_SPACE_PATTERN = re.compile(r"(?<!!)\[[^\]]+\]\([^)]*\s[^)]+\)")
BARE_URL_PATTERN = re.compile(r"(?<![\[(])https?://[^\s)]+")

LintCheck = Callable[[str, LintResult, int], None]


def _strip_code(content: str) -> str:
    content = FENCED_CODE_PATTERN.sub("", content.replace("\r\n", "\n"))
    return INLINE_CODE_PATTERN.sub("", content)


def _check_empty_alt(content: str, result: LintResult, max_alt_length: int) -> None:
    count = len(EMPTY_ALT_PATTERN.findall(content))
    if count:
        result.issues.append(f"{count} image(s) missing alt text (accessibility issue)")


def _check_long_alt(content: str, result: LintResult, max_alt_length: int) -> None:
    count = sum(1 for alt in IMAGE_ALT_PATTERN.findall(content) if len(alt) > max_alt_length)
    if count:
        result.warnings.append(
            f"{count} image(s) with alt text >{max_alt_length} chars (should be concise)"
        )


def _check_unsafe_urls(content: str, result: LintResult, max_alt_length: int) -> None:
    matches = [match.group(0) for match in UNSAFE_URL_PATTERN.finditer(content)]
    if matches:
        result.issues.append(
            f"SECURITY: Found {len(matches)} unsafe URL(s): {', '.join(matches)}"
        )


def _check_headings(content: str, result: LintResult, max_alt_length: int) -> None:
    first_heading = FIRST_HEADING_PATTERN.search(content)
    if first_heading is None:
        result.warnings.append("No headings found (posts should have structure)")
        return

    if first_heading.group(1) != "#":
        result.warnings.append(
            f"First heading should be H1 (single #), found: {first_heading.group(1)}"
        )

    h1_count = len(H1_PATTERN.findall(content))
    if h1_count > 1:
        result.warnings.append(f"Found {h1_count} H1 headings (recommend only one per post)")


def _check_spaces_in_urls(content: str, result: LintResult, max_alt_length: int) -> None:
    images = len(IMAGE_WITH_SPACE_PATTERN.findall(content))
    if images:
        result.issues.append(f"{images} image(s) with spaces in URL (should be URL-encoded)")

    links = len(LINK_WITH_SPACE_PATTERN.findall(content))
    if links:
        result.issues.append(f"{links} link(s) with spaces in URL (should be URL-encoded)")


def _check_bare_urls(content: str, result: LintResult, max_alt_length: int) -> None:
    count = len(BARE_URL_PATTERN.findall(content))
    if count:
        result.warnings.append(
            f"{count} bare URL(s) found (consider wrapping in markdown links)"
        )


CHECKS: list[LintCheck] = [
    _check_empty_alt,
    _check_long_alt,
    _check_unsafe_urls,
    _check_headings,
    _check_spaces_in_urls,
    _check_bare_urls,
]


def lint_markdown(content: str, max_alt_length: int = 125) -> LintResult:
    """Check one Markdown document for accessibility and safety problems.

    Code blocks and inline code are ignored. Issues cover missing alt text,
    ``javascript:``/``data:``/``vbscript:`` URLs and unencoded spaces in URLs;
    warnings cover long alt text, heading structure and bare URLs.

    Args:
        content: Markdown source.
        max_alt_length: Alt text length above which a warning is raised.

    Returns:
        LintResult: Issues and warnings, in check order.

    Examples:
        lint_markdown("![](cat.png)").issues  # ["1 image(s) missing alt text ..."]
    """
    result = LintResult()
    prose = _strip_code(content)
    for check in CHECKS:
        check(prose, result, max_alt_length)
    return result


def lint_directory(
    posts_dir: Path, max_alt_length: int = 125, max_file_size: int = DEFAULT_MAX_FILE_SIZE
) -> dict[str, LintResult]:
    """Lint every Markdown file in `posts_dir`.

    Returns:
        dict[str, LintResult]: Results keyed by file name, in name order.

    Raises:
        IOError: If the directory or a file cannot be read.
        FileTooLargeError: If a file exceeds `max_file_size`.
    """
    return {
        path.name: lint_markdown(read_text(path, max_file_size), max_alt_length)
        for path in list_markdown_files(posts_dir)
    }
