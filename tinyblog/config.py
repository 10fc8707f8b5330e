"""Configuration loading and management."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from .constants import DEFAULT_HEADING_ANCHOR_CLASS, DEFAULT_MAX_FILE_SIZE

MAX_FILE_SIZE_ENV_VAR = "TINYBLOG_MAX_FILE_SIZE"


@dataclass
class BlogConfig:
    """Configuration for rendering posts and generating site files.

    Attributes:
        site_url: Absolute base URL of the published site.
        site_title: Channel title used in the feed.
        site_description: Channel description used in the feed.
        author: Author name for feed items.
        email: Contact address for ``managingEditor``/``webMaster``; omitted
            from the feed when empty.
        language: Feed language code.
        categories: Channel-level feed categories.
        image_url: Channel image; omitted from the feed when empty.
        posts_file: Path of the JSON post manifest.
        posts_dir: Directory holding ``<slug>.md`` files.
        feed_file: Output path of the RSS feed.
        sitemap_file: Output path of the sitemap.
        feed_limit: Maximum number of feed items, or None for all posts.
        feed_description_length: Characters of post text used as the item
            description.
        max_alt_length: Alt text length above which the linter warns.
        max_file_size: Maximum size in bytes of a post file that will be read.
        heading_anchor_class: CSS class of the self-referencing heading anchor.
        unique_heading_ids: Number duplicate heading ids within one page.

    Examples:
        BlogConfig(site_url="https://example.com", feed_limit=20)
    """

    # Site
    site_url: str = "https://example.com"
    site_title: str = "My Blog"
    site_description: str = ""
    author: str = ""
    email: str = ""
    language: str = "en"
    categories: list[str] = field(default_factory=list)
    image_url: str = ""

    # Files
    posts_file: str = "posts.json"
    posts_dir: str = "posts"
    feed_file: str = "feed.xml"
    sitemap_file: str = "sitemap.xml"

    # Feed and lint
    feed_limit: int | None = None
    feed_description_length: int = 200
    max_alt_length: int = 125
    max_file_size: int = DEFAULT_MAX_FILE_SIZE

    # Rendering
    heading_anchor_class: str = DEFAULT_HEADING_ANCHOR_CLASS
    unique_heading_ids: bool = False


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`site_url` must start with http:// or https://")
    """


def load_config(search_path: Path) -> BlogConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.tinyblog]`` table from `pyproject.toml` and the ``[tinyblog]``
    or ``[tool.tinyblog]`` table from `.tinyblog.toml` when present. Returns
    defaults when no configuration is found. TOML files that cannot be read or
    decoded are skipped.

    Args:
        search_path: Directory used as the starting point for lookup.

    Returns:
        BlogConfig: Loaded configuration with defaults applied.

    Raises:
        ConfigError: If a table is present but is not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("site"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "tinyblog")]
        )
        if pyproject_config is not None:
            return normalize_config(pyproject_config)

        dotfile_config = _load_from_file(
            current / ".tinyblog.toml",
            table_paths=[("tinyblog",), ("tool", "tinyblog")],
        )
        if dotfile_config is not None:
            return normalize_config(dotfile_config)

        parent = current.parent
        if parent == current:
            break
        current = parent

    return BlogConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> BlogConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> BlogConfig:
    table_display = ".".join(table_path)

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    # TOML keys may use dashes; dataclass fields use underscores.
    settings = {key.replace("-", "_"): value for key, value in raw_config.items()}
    try:
        return BlogConfig(**settings)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def normalize_config(config: BlogConfig) -> BlogConfig:
    site_url = config.site_url.rstrip("/") if isinstance(config.site_url, str) else config.site_url
    categories = config.categories
    if isinstance(categories, str):
        categories = [item.strip() for item in categories.split(",") if item.strip()]
    return replace(config, site_url=site_url, categories=categories)


def validate_config(config: BlogConfig) -> None:
    """Validate a `BlogConfig` instance.

    Args:
        config: Configuration to validate.

    Raises:
        ConfigError: If the site URL is not absolute, a file name is empty,
            numeric limits are not positive integers, or flags are not booleans.

    Examples:
        validate_config(BlogConfig(site_url="https://example.com"))
    """
    config = normalize_config(config)

    for key in ("site_url", "site_title", "posts_file", "posts_dir", "feed_file", "sitemap_file"):
        value = getattr(config, key)
        if not isinstance(value, str) or not value:
            raise ConfigError(f"`{key}` must be a non-empty string")

    if not config.site_url.startswith(("http://", "https://")):
        raise ConfigError("`site_url` must start with http:// or https://")

    if not isinstance(config.categories, list) or not all(
        isinstance(item, str) for item in config.categories
    ):
        raise ConfigError("`categories` must be a list of strings")

    limits = {
        "feed_description_length": config.feed_description_length,
        "max_alt_length": config.max_alt_length,
        "max_file_size": config.max_file_size,
    }
    if config.feed_limit is not None:
        limits["feed_limit"] = config.feed_limit
    _ensure_integers(limits)
    _ensure_positive(limits)

    if not isinstance(config.unique_heading_ids, bool):
        raise ConfigError("`unique_heading_ids` must be a boolean")
    if not isinstance(config.heading_anchor_class, str):
        raise ConfigError("`heading_anchor_class` must be a string")


def apply_overrides(config: BlogConfig, **overrides: object) -> BlogConfig:
    """Apply override values to a `BlogConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by field name; None values are ignored.

    Returns:
        BlogConfig: New configuration, or `config` itself when nothing changes.

    Raises:
        TypeError: If an override name is not defined on `BlogConfig`.

    Examples:
        updated = apply_overrides(config, site_url="https://blog.example.org")
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Resolve the maximum post file size, honoring `TINYBLOG_MAX_FILE_SIZE`.

    Raises:
        ConfigError: If the environment value is not a positive integer.
    """
    env_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if env_value is None:
        return default

    try:
        max_size = int(env_value)
    except ValueError as error:
        error_message = (
            f"Invalid value for {MAX_FILE_SIZE_ENV_VAR}: {env_value} (expected positive integer)"
        )
        raise ConfigError(error_message) from error

    if max_size <= 0:
        raise ConfigError(f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {max_size}.")

    return max_size


def build_config(search_path: Path, **overrides: object) -> BlogConfig:
    """Load, override, and validate configuration.

    The `TINYBLOG_MAX_FILE_SIZE` environment variable takes precedence over
    the file value; explicit overrides take precedence over both.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by field name; None values are ignored.

    Returns:
        BlogConfig: Validated configuration.

    Raises:
        ConfigError: If loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), site_url="https://example.com")
    """
    config = load_config(search_path)
    config = replace(config, max_file_size=get_max_file_size(default=config.max_file_size))
    config = apply_overrides(config, **overrides)
    config = normalize_config(config)
    validate_config(config)
    return config


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
