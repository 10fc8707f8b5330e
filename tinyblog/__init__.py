"""
tinyblog: a minimal static-blog toolchain.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    tinyblog render posts/hello.md
    tinyblog --site-url https://example.com seo

Library Usage:
    from pathlib import Path
    from tinyblog import render_markdown

    html = render_markdown(Path("posts/hello.md").read_text())
"""

from .config import BlogConfig, ConfigError
from .exceptions import BlogError, FileTooLargeError, ManifestError
from .feed import generate_feed
from .lint import lint_markdown
from .models import LintResult, Post, ValidationReport
from .posts import load_posts, markdown_to_text
from .renderer import render_inline, render_markdown
from .sitemap import generate_sitemap
from .slugify import generate_slug
from .validate import validate_posts

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "render_markdown",
    "render_inline",
    "generate_slug",
    # Site files
    "load_posts",
    "markdown_to_text",
    "generate_feed",
    "generate_sitemap",
    "lint_markdown",
    "validate_posts",
    # Data models
    "BlogConfig",
    "Post",
    "LintResult",
    "ValidationReport",
    # Exceptions
    "BlogError",
    "ConfigError",
    "FileTooLargeError",
    "ManifestError",
    # Version
    "__version__",
]
