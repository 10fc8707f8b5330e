"""RSS 2.0 feed generation."""

from __future__ import annotations

import datetime as dt
import html
from collections.abc import Callable
from email.utils import format_datetime
from pathlib import Path

from .config import BlogConfig
from .constants import DEFAULT_FEED_CATEGORY
from .exceptions import BlogError
from .filesystem import write_atomic
from .models import Post
from .posts import markdown_to_text, parse_post_date, post_url, read_post_markdown, summarize
from .renderer import render_markdown


def rfc822_date(value: dt.datetime) -> str:
    """Format a datetime as an RFC 822 date in GMT; naive values are UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    return format_datetime(value.astimezone(dt.timezone.utc), usegmt=True)


def cdata(text: str) -> str:
    """Wrap `text` in a CDATA section, splitting any embedded terminator."""
    return "<![CDATA[" + text.replace("]]>", "]]]]><![CDATA[>") + "]]>"


def _read_body(
    post: Post, posts_dir: Path | None, config: BlogConfig, warn: Callable[[str], None] | None
) -> str | None:
    if posts_dir is None or not post.slug:
        return None
    try:
        return read_post_markdown(posts_dir, post.slug, config.max_file_size)
    except (IOError, BlogError) as error:
        if warn is not None:
            warn(f"Warning: Could not read content for {post.slug}: {error}")
        return None


def build_item(
    post: Post,
    config: BlogConfig,
    posts_dir: Path | None = None,
    warn: Callable[[str], None] | None = None,
) -> str:
    """Render one ``<item>`` element for `post`.

    The description is an excerpt of the post body when the Markdown file can
    be read, otherwise the manifest description (or the title). The full body
    is embedded as rendered HTML in ``content:encoded``.
    """
    link = html.escape(post_url(config.site_url, post.slug))
    body = _read_body(post, posts_dir, config, warn)

    if body is not None:
        description = summarize(markdown_to_text(body), config.feed_description_length)
    else:
        description = post.description or post.title

    lines = [
        "    <item>",
        f"      <title>{html.escape(post.title)}</title>",
        f"      <link>{link}</link>",
        f'      <guid isPermaLink="true">{link}</guid>',
    ]
    published = parse_post_date(post.date)
    if published is not None:
        lines.append(f"      <pubDate>{rfc822_date(published)}</pubDate>")
    if config.author:
        lines.append(f"      <dc:creator>{html.escape(config.author)}</dc:creator>")
    lines.append(f"      <description>{html.escape(description)}</description>")
    if body is not None:
        content = cdata(render_markdown(body, config))
        lines.append(f"      <content:encoded>{content}</content:encoded>")
    lines.append(f"      <category>{html.escape(post.chapter or DEFAULT_FEED_CATEGORY)}</category>")
    lines.append("    </item>")
    return "\n".join(lines)


def generate_feed(
    posts: list[Post],
    config: BlogConfig,
    posts_dir: Path | None = None,
    build_date: dt.datetime | None = None,
    warn: Callable[[str], None] | None = None,
) -> str:
    """Generate an RSS 2.0 feed document.

    Args:
        posts: Posts, newest first.
        config: Site settings; `feed_limit` caps the number of items.
        posts_dir: Directory of Markdown bodies. Items carry only manifest
            data when omitted.
        build_date: Value of ``lastBuildDate``; defaults to now.
        warn: Callback receiving non-fatal warnings (unreadable posts).

    Returns:
        str: The feed XML.

    Examples:
        xml = generate_feed(load_posts(Path("posts.json")), config, Path("posts"))
    """
    build_date = build_date or dt.datetime.now(dt.timezone.utc)
    site_url = html.escape(config.site_url)
    feed_url = f"{site_url}/{html.escape(Path(config.feed_file).name)}"
    selected = posts if config.feed_limit is None else posts[: config.feed_limit]

    channel = [
        f"    <title>{html.escape(config.site_title)}</title>",
        f"    <link>{site_url}</link>",
        f"    <description>{html.escape(config.site_description)}</description>",
        f"    <language>{html.escape(config.language)}</language>",
        f"    <lastBuildDate>{rfc822_date(build_date)}</lastBuildDate>",
        f'    <atom:link href="{feed_url}" rel="self" type="application/rss+xml"/>',
    ]
    if config.email:
        contact = html.escape(f"{config.email} ({config.author})" if config.author else config.email)
        channel.append(f"    <managingEditor>{contact}</managingEditor>")
        channel.append(f"    <webMaster>{contact}</webMaster>")
    for category in config.categories:
        channel.append(f"    <category>{html.escape(category)}</category>")
    if config.image_url:
        channel.extend(
            [
                "    <image>",
                f"      <url>{html.escape(config.image_url)}</url>",
                f"      <title>{html.escape(config.site_title)}</title>",
                f"      <link>{site_url}</link>",
                "    </image>",
            ]
        )

    items = [build_item(post, config, posts_dir, warn) for post in selected]

    return "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<rss version="2.0"',
            '     xmlns:atom="http://www.w3.org/2005/Atom"',
            '     xmlns:content="http://purl.org/rss/1.0/modules/content/"',
            '     xmlns:dc="http://purl.org/dc/elements/1.1/">',
            "  <channel>",
            *channel,
            *items,
            "  </channel>",
            "</rss>",
            "",
        ]
    )


def write_feed(
    posts: list[Post],
    config: BlogConfig,
    output: Path,
    posts_dir: Path | None = None,
    build_date: dt.datetime | None = None,
    warn: Callable[[str], None] | None = None,
) -> str:
    """Generate the feed and write it atomically to `output`; return the XML."""
    xml = generate_feed(posts, config, posts_dir, build_date, warn)
    write_atomic(output, xml)
    return xml
