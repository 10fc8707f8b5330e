"""Slug generation for heading anchors."""

from __future__ import annotations

import re


def generate_slug(text: str) -> str:
    """Generate a URL-style slug from heading text.

    Lowercases the text, drops everything except Unicode word characters,
    whitespace and hyphens, collapses whitespace to single hyphens, collapses
    repeated hyphens, and trims hyphens and whitespace from both ends.

    Args:
        text: Raw heading text (before inline formatting is applied).

    Returns:
        str: Hyphen-separated slug. May be empty when nothing survives.

    Examples:
        generate_slug("Hello World")  # "hello-world"
        generate_slug("What's New?")  # "whats-new"
        generate_slug("Café au lait")  # "café-au-lait"
    """
    slug = text.lower()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-{2,}", "-", slug)
    return slug.strip("- \t\n\r\f\v")


def unique_slug(base_slug: str, counters: dict[str, int], used: set[str]) -> str:
    """Return a page-unique variant of `base_slug`.

    Uses GitHub-style numbering: the first occurrence keeps the slug, later
    ones get ``-1``, ``-2`` and so on. Cascading collisions (``"Header"``,
    ``"Header"``, ``"Header 1"`` yields ``header``, ``header-1``,
    ``header-1-1``) are resolved by checking each candidate against the ids
    already issued.

    Args:
        base_slug: Slug generated from the heading text.
        counters: Next counter to try for each base slug. Updated in place.
        used: Ids already issued on this page. Updated in place.

    Returns:
        str: An id not previously issued for this page.

    Examples:
        counters, used = {}, set()
        unique_slug("intro", counters, used)  # "intro"
        unique_slug("intro", counters, used)  # "intro-1"
    """
    count = counters.get(base_slug, 0)
    candidate = base_slug if count == 0 else f"{base_slug}-{count}"

    while candidate in used:
        count += 1
        candidate = f"{base_slug}-{count}"

    counters[base_slug] = count + 1
    used.add(candidate)
    return candidate
