from __future__ import annotations

import datetime as dt
from pathlib import Path

from tinyblog.config import BlogConfig
from tinyblog.feed import build_item, cdata, generate_feed, rfc822_date, write_feed
from tinyblog.models import Post
from tinyblog.posts import load_posts

BUILD_DATE = dt.datetime(2024, 3, 1, 12, 0, tzinfo=dt.timezone.utc)


def test_rfc822_date_treats_naive_as_utc():
    assert rfc822_date(dt.datetime(2024, 1, 15)) == "Mon, 15 Jan 2024 00:00:00 GMT"


def test_rfc822_date_converts_offsets():
    value = dt.datetime(2024, 1, 15, 1, 0, tzinfo=dt.timezone(dt.timedelta(hours=2)))
    assert rfc822_date(value) == "Sun, 14 Jan 2024 23:00:00 GMT"


def test_cdata_splits_terminator():
    assert cdata("a]]>b") == "<![CDATA[a]]]]><![CDATA[>b]]>"
    assert cdata("<p>x</p>") == "<![CDATA[<p>x</p>]]>"


def test_generate_feed_channel(site: Path):
    config = BlogConfig(
        site_url="https://example.com",
        site_title="Circuits & Code",
        site_description="Learning electronics",
        author="Sam",
        email="sam@example.com",
        categories=["Electronics"],
        image_url="https://example.com/logo.png",
    )
    posts = load_posts(site / "posts.json")

    xml = generate_feed(posts, config, site / "posts", build_date=BUILD_DATE)

    assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>\n<rss version="2.0"\n')
    assert xml.endswith("  </channel>\n</rss>\n")
    assert "    <title>Circuits &amp; Code</title>" in xml
    assert "    <lastBuildDate>Fri, 01 Mar 2024 12:00:00 GMT</lastBuildDate>" in xml
    assert (
        '    <atom:link href="https://example.com/feed.xml" rel="self" '
        'type="application/rss+xml"/>'
    ) in xml
    assert "    <managingEditor>sam@example.com (Sam)</managingEditor>" in xml
    assert "    <webMaster>sam@example.com (Sam)</webMaster>" in xml
    assert "    <category>Electronics</category>" in xml
    assert "      <url>https://example.com/logo.png</url>" in xml


def test_generate_feed_omits_optional_channel_elements():
    xml = generate_feed([], BlogConfig(), build_date=BUILD_DATE)

    assert "managingEditor" not in xml
    assert "<image>" not in xml
    assert "<item>" not in xml


def test_generate_feed_items_newest_first(site: Path):
    config = BlogConfig(author="Sam")
    posts = load_posts(site / "posts.json")

    xml = generate_feed(posts, config, site / "posts", build_date=BUILD_DATE)

    assert xml.index("#ohms-law") < xml.index("#first-post")
    assert "      <title>Ohm&#x27;s Law &amp; You</title>" in xml
    assert "      <link>https://example.com/#first-post</link>" in xml
    assert '      <guid isPermaLink="true">https://example.com/#first-post</guid>' in xml
    assert "      <pubDate>Mon, 15 Jan 2024 00:00:00 GMT</pubDate>" in xml
    assert "      <pubDate>Thu, 01 Feb 2024 00:00:00 GMT</pubDate>" in xml
    assert "      <dc:creator>Sam</dc:creator>" in xml
    assert "      <category>Basics</category>" in xml
    assert "      <category>General</category>" in xml


def test_build_item_embeds_rendered_body(site: Path):
    post = Post(slug="first-post", title="First Post", date="2024-01-15")

    item = build_item(post, BlogConfig(), site / "posts")

    assert "      <description>First Post\n\nHello world.</description>" in item
    assert (
        "      <content:encoded><![CDATA["
        '<h1 id="first-post"><a href="#first-post" class="heading-anchor">First Post</a></h1>\n'
        "<p>Hello <strong>world</strong>.</p>\n"
        "]]></content:encoded>"
    ) in item


def test_build_item_truncates_description(site: Path):
    post = Post(slug="first-post", title="First Post")

    item = build_item(post, BlogConfig(feed_description_length=5), site / "posts")

    assert "      <description>First...</description>" in item
    assert "pubDate" not in item


def test_build_item_without_body_uses_manifest_fields():
    post = Post(slug="x", title="Title", description="")

    item = build_item(post, BlogConfig())

    assert "      <description>Title</description>" in item
    assert "content:encoded" not in item


def test_unreadable_body_warns_and_falls_back(tmp_path: Path):
    posts_dir = tmp_path / "posts"
    (posts_dir / "broken.md").mkdir(parents=True)
    warnings: list[str] = []
    post = Post(slug="broken", title="Broken", description="Manifest text")

    item = build_item(post, BlogConfig(), posts_dir, warn=warnings.append)

    assert "      <description>Manifest text</description>" in item
    assert len(warnings) == 1
    assert warnings[0].startswith("Warning: Could not read content for broken:")


def test_feed_limit_caps_items():
    posts = [Post(slug=f"p{index}", title=f"P{index}") for index in range(5)]

    xml = generate_feed(posts, BlogConfig(feed_limit=2), build_date=BUILD_DATE)

    assert xml.count("<item>") == 2
    assert "#p1<" in xml
    assert "#p2<" not in xml


def test_write_feed_writes_file(site: Path):
    output = site / "public" / "feed.xml"
    posts = load_posts(site / "posts.json")

    xml = write_feed(posts, BlogConfig(), output, site / "posts", build_date=BUILD_DATE)

    assert output.read_text(encoding="utf-8") == xml
