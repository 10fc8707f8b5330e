from __future__ import annotations

import os

import pytest

from tinyblog.renderer import render_markdown
from tinyblog.slugify import generate_slug

atheris = pytest.importorskip("atheris")


def test_generate_slug_with_fuzzed_input():
    data = os.urandom(4096)
    provider = atheris.FuzzedDataProvider(data)
    generated = set()

    for _ in range(128):
        if provider.remaining_bytes() == 0:
            break
        text = provider.ConsumeUnicodeNoSurrogates(64)
        slug = generate_slug(text)
        assert slug == slug.lower()
        generated.add(slug)

    assert generated  # ensure we exercised the loop


def test_render_markdown_with_fuzzed_documents():
    data = os.urandom(8192)
    provider = atheris.FuzzedDataProvider(data)
    fragments = ["# ", "- ", "1. ", "> ", "```", "`", "**", "_", "[", "](", ")", "![", "\n"]
    pieces: list[str] = []

    while provider.remaining_bytes() > 0 and len(pieces) < 256:
        if provider.ConsumeBool():
            pieces.append(fragments[provider.ConsumeIntInRange(0, len(fragments) - 1)])
        else:
            pieces.append(provider.ConsumeUnicodeNoSurrogates(16))

    rendered = render_markdown("".join(pieces))
    assert "\x00" not in rendered
