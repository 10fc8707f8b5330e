"""XML sitemap generation."""

from __future__ import annotations

import datetime as dt
import html
from pathlib import Path

from .config import BlogConfig
from .filesystem import write_atomic
from .models import Post
from .posts import parse_post_date, post_url

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"


def _lastmod(post: Post) -> str | None:
    parsed = parse_post_date(post.date)
    return parsed.date().isoformat() if parsed is not None else None


def _url_entry(loc: str, lastmod: str | None, changefreq: str, priority: str) -> str:
    lines = ["  <url>", f"    <loc>{html.escape(loc)}</loc>"]
    if lastmod:
        lines.append(f"    <lastmod>{lastmod}</lastmod>")
    lines.extend(
        [
            f"    <changefreq>{changefreq}</changefreq>",
            f"    <priority>{priority}</priority>",
            "  </url>",
        ]
    )
    return "\n".join(lines)


def generate_sitemap(posts: list[Post], config: BlogConfig, today: dt.date | None = None) -> str:
    """Generate a sitemap listing the homepage, every post, and the feed.

    Args:
        posts: Posts, newest first.
        config: Supplies `site_url`.
        today: Fallback ``lastmod`` for the homepage and feed when no post has
            a valid date; defaults to the current date.

    Returns:
        str: The sitemap XML.

    Examples:
        xml = generate_sitemap(posts, BlogConfig(site_url="https://example.com"))
    """
    today = today or dt.date.today()
    site_url = config.site_url.rstrip("/")
    dated = [lastmod for lastmod in (_lastmod(post) for post in posts) if lastmod]
    site_lastmod = max(dated) if dated else today.isoformat()

    entries = [_url_entry(f"{site_url}/", site_lastmod, "weekly", "1.0")]
    for post in posts:
        entries.append(_url_entry(post_url(site_url, post.slug), _lastmod(post), "monthly", "0.8"))
    feed_url = f"{site_url}/{Path(config.feed_file).name}"
    entries.append(_url_entry(feed_url, site_lastmod, "weekly", "0.5"))

    return "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            f'<urlset xmlns="{SITEMAP_NAMESPACE}">',
            *entries,
            "</urlset>",
            "",
        ]
    )


def write_sitemap(
    posts: list[Post], config: BlogConfig, output: Path, today: dt.date | None = None
) -> str:
    """Generate the sitemap and write it atomically to `output`; return the XML."""
    xml = generate_sitemap(posts, config, today)
    write_atomic(output, xml)
    return xml
