"""
Command line interface for tinyblog.

Renders posts to HTML, writes the RSS feed and sitemap, and checks posts and
the post manifest for problems.
"""

from __future__ import annotations

from pathlib import Path

import click

from .config import BlogConfig, ConfigError, apply_overrides, build_config
from .exceptions import BlogError
from .feed import write_feed
from .filesystem import read_text
from .lint import lint_directory
from .models import Post
from .posts import load_posts
from .renderer import render_markdown
from .sitemap import write_sitemap
from .validate import validate_posts

__all__ = ["cli"]

RULE_WIDTH = 60


def _warn(message: str) -> None:
    click.echo(message, err=True)


def _load_posts(config: BlogConfig) -> list[Post]:
    try:
        return load_posts(Path(config.posts_file), config.max_file_size)
    except BlogError as error:
        raise click.ClickException(str(error)) from error


@click.group()
@click.version_option()
@click.option("--site-url", help="Absolute base URL of the site")
@click.option("--posts-file", help="Path of the JSON post manifest")
@click.option("--posts-dir", help="Directory holding <slug>.md files")
@click.pass_context
def cli(
    ctx: click.Context,
    site_url: str | None = None,
    posts_file: str | None = None,
    posts_dir: str | None = None,
):
    """
    Render Markdown posts and generate blog site files.

    Settings are read from ``[tool.tinyblog]`` in the nearest
    `pyproject.toml` or ``[tinyblog]`` in `.tinyblog.toml`; options given
    here take precedence.

    Raises:
        click.BadParameter: If the resulting configuration is invalid.

    Examples:
        tinyblog --site-url https://example.com seo
    """
    try:
        ctx.obj = build_config(
            Path.cwd(), site_url=site_url, posts_file=posts_file, posts_dir=posts_dir
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error


@cli.command()
@click.option("--unique-ids", is_flag=True, help="Number duplicate heading ids")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def render(config: BlogConfig, filepath: Path, unique_ids: bool = False):
    """Print the HTML rendering of a Markdown file."""
    if unique_ids:
        config = apply_overrides(config, unique_heading_ids=True)
    try:
        text = read_text(filepath, config.max_file_size)
    except (IOError, BlogError) as error:
        raise click.ClickException(str(error)) from error
    click.echo(render_markdown(text, config), nl=False)


def _write_feed(config: BlogConfig, posts: list[Post], output: Path) -> None:
    try:
        write_feed(posts, config, output, Path(config.posts_dir), warn=_warn)
    except IOError as error:
        raise click.ClickException(str(error)) from error
    click.echo(f"✓ Generated {output} ({len(posts)} posts)")


def _write_sitemap(config: BlogConfig, posts: list[Post], output: Path) -> None:
    try:
        write_sitemap(posts, config, output)
    except IOError as error:
        raise click.ClickException(str(error)) from error
    click.echo(f"✓ Generated {output}")


@cli.command()
@click.option("--output", type=click.Path(dir_okay=False, path_type=Path), help="Feed path")
@click.pass_obj
def feed(config: BlogConfig, output: Path | None = None):
    """Write the RSS feed."""
    _write_feed(config, _load_posts(config), output or Path(config.feed_file))


@cli.command()
@click.option("--output", type=click.Path(dir_okay=False, path_type=Path), help="Sitemap path")
@click.pass_obj
def sitemap(config: BlogConfig, output: Path | None = None):
    """Write the XML sitemap."""
    _write_sitemap(config, _load_posts(config), output or Path(config.sitemap_file))


@cli.command()
@click.pass_obj
def seo(config: BlogConfig):
    """Write both the sitemap and the RSS feed."""
    posts = _load_posts(config)
    click.echo(f"Loaded {len(posts)} posts")
    _write_sitemap(config, posts, Path(config.sitemap_file))
    _write_feed(config, posts, Path(config.feed_file))


@cli.command()
@click.pass_context
def lint(ctx: click.Context):
    """Lint Markdown posts; exit with status 1 when issues are found."""
    config: BlogConfig = ctx.obj
    try:
        results = lint_directory(
            Path(config.posts_dir), config.max_alt_length, config.max_file_size
        )
    except (IOError, BlogError) as error:
        raise click.ClickException(str(error)) from error

    if not results:
        click.echo(f"No markdown files found in {config.posts_dir}")
        return

    click.echo(f"Found {len(results)} markdown file(s)\n")
    total_issues = 0
    total_warnings = 0
    for name, result in results.items():
        if result.clean:
            continue
        click.echo(name)
        if result.issues:
            click.secho("  Issues:", fg="red")
            for issue in result.issues:
                click.echo(f"     - {issue}")
        if result.warnings:
            click.secho("  Warnings:", fg="yellow")
            for warning in result.warnings:
                click.echo(f"     - {warning}")
        click.echo("")
        total_issues += len(result.issues)
        total_warnings += len(result.warnings)

    click.echo("=" * RULE_WIDTH)
    if not total_issues and not total_warnings:
        click.secho("All markdown files passed linting!", fg="green")
        return

    click.echo(f"Summary: {total_issues} issue(s), {total_warnings} warning(s)")
    if total_issues:
        click.secho("Linting failed. Please fix the issues above.", fg="red")
        ctx.exit(1)
    click.secho("Linting passed with warnings.", fg="yellow")


@cli.command()
@click.pass_context
def validate(ctx: click.Context):
    """Validate the post manifest; exit with status 1 on errors."""
    config: BlogConfig = ctx.obj
    report = validate_posts(Path(config.posts_file), Path(config.posts_dir), config.max_file_size)

    click.echo(f"Found {report.post_count} posts\n")
    click.echo("=" * RULE_WIDTH)
    if not report.errors and not report.warnings:
        click.secho("All validations passed!", fg="green")
        return

    if report.errors:
        click.secho(f"ERRORS ({len(report.errors)}):", fg="red")
        for error in report.errors:
            click.echo(f"  - {error}")
        click.echo("")
    if report.warnings:
        click.secho(f"WARNINGS ({len(report.warnings)}):", fg="yellow")
        for warning in report.warnings:
            click.echo(f"  - {warning}")
        click.echo("")

    click.echo("=" * RULE_WIDTH)
    if not report.ok:
        ctx.exit(1)


if __name__ == "__main__":
    cli()
