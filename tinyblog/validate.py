"""Post manifest validation."""

from __future__ import annotations

from pathlib import Path

from .constants import DEFAULT_MAX_FILE_SIZE, PLACEHOLDER_DESCRIPTION, REQUIRED_POST_FIELDS
from .exceptions import ManifestError
from .filesystem import list_markdown_files
from .models import Post, ValidationReport
from .posts import post_markdown_path, read_manifest


def _check_post(number: int, post: Post, posts_dir: Path, report: ValidationReport) -> None:
    for key in REQUIRED_POST_FIELDS:
        if not getattr(post, key):
            hint = ' (should be "post" or "guide")' if key == "type" else ""
            report.errors.append(f"Post #{number}: Missing '{key}' field{hint}")

    if post.slug:
        markdown_path = post_markdown_path(posts_dir, post.slug)
        if not markdown_path.is_file():
            report.errors.append(
                f"Post #{number} ({post.slug}): Markdown file not found at {markdown_path}"
            )

    if post.type == "guide":
        label = f"Guide #{number} ({post.slug})"
        if not post.problem:
            report.warnings.append(f"{label}: Missing 'problem' field (recommended for guides)")
        if not post.difficulty:
            report.warnings.append(
                f"{label}: Missing 'difficulty' field "
                "(should be Beginner/Intermediate/Advanced)"
            )
        if not post.tags:
            report.warnings.append(f"{label}: Missing 'tags' field (recommended for guides)")

    if not post.description or post.description == PLACEHOLDER_DESCRIPTION:
        report.warnings.append(
            f"Post #{number} ({post.slug}): Description is placeholder or missing (bad for SEO)"
        )


def validate_posts(
    manifest_path: Path, posts_dir: Path, max_size: int = DEFAULT_MAX_FILE_SIZE
) -> ValidationReport:
    """Validate the post manifest against the posts directory.

    Problems are collected rather than raised, so one run reports everything:
    an unreadable manifest, missing required fields, missing Markdown files,
    incomplete guides, placeholder descriptions and orphaned Markdown files.

    Args:
        manifest_path: JSON post manifest.
        posts_dir: Directory holding ``<slug>.md`` files.
        max_size: Maximum manifest size in bytes.

    Returns:
        ValidationReport: Errors and warnings; post numbers are one-based
            manifest positions.

    Examples:
        report = validate_posts(Path("posts.json"), Path("posts"))
        report.ok  # False when any error was found
    """
    report = ValidationReport()

    try:
        posts = read_manifest(manifest_path, max_size)
    except ManifestError as error:
        report.errors.append(f"{manifest_path} could not be loaded: {error.reason}")
        return report

    report.post_count = len(posts)
    for number, post in enumerate(posts, start=1):
        _check_post(number, post, posts_dir, report)

    try:
        markdown_files = list_markdown_files(posts_dir)
    except IOError as error:
        report.errors.append(str(error))
        return report

    referenced = {post_markdown_path(posts_dir, post.slug).name for post in posts if post.slug}
    orphaned = [path.name for path in markdown_files if path.name not in referenced]
    if orphaned:
        report.warnings.append(
            f"Found {len(orphaned)} orphaned markdown files "
            f"(not in {manifest_path.name}): {', '.join(orphaned)}"
        )

    return report
