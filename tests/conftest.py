from __future__ import annotations

import json
import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


def write_site(base: Path, posts: list[dict], bodies: dict[str, str]) -> Path:
    """Write a manifest and post bodies under `base`; return the posts dir."""
    (base / "posts.json").write_text(json.dumps(posts), encoding="utf-8")
    posts_dir = base / "posts"
    posts_dir.mkdir(exist_ok=True)
    for slug, body in bodies.items():
        (posts_dir / f"{slug}.md").write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return posts_dir


@pytest.fixture()
def site_writer():
    """Exposes `write_site` to tests that build their own manifest."""
    return write_site


@pytest.fixture()
def site(tmp_path: Path) -> Path:
    """A small blog with one post and one guide."""
    write_site(
        tmp_path,
        [
            {
                "slug": "first-post",
                "title": "First Post",
                "date": "2024-01-15",
                "description": "Where it all began.",
                "type": "post",
                "chapter": "Basics",
            },
            {
                "slug": "ohms-law",
                "title": "Ohm's Law & You",
                "date": "2024-02-01",
                "description": "V = I * R",
                "type": "guide",
                "problem": "Sizing resistors",
                "difficulty": "Beginner",
                "tags": ["circuits"],
            },
        ],
        {
            "first-post": """
                # First Post

                Hello **world**.
                """,
            "ohms-law": """
                # Ohm's Law

                Use `V = I * R` to size a resistor.
                """,
        },
    )
    return tmp_path
