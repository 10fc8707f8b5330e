"""Data models for tinyblog."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class ListType(Enum):
    """List currently open while scanning block-level Markdown.

    Attributes:
        NONE: No list is open.
        UNORDERED: Inside a ``<ul>`` element.
        ORDERED: Inside an ``<ol>`` element.
    """

    NONE = auto()
    UNORDERED = auto()
    ORDERED = auto()

    @property
    def tag(self) -> str:
        return {ListType.UNORDERED: "ul", ListType.ORDERED: "ol"}.get(self, "")


@dataclass
class ProtectedSpan:
    """A code region lifted out of the text before block processing.

    Attributes:
        html: Rendered, escaped HTML restored after processing.
        raw: Original code text, used where plain text is needed (heading ids).
    """

    html: str
    raw: str


@dataclass
class ProtectedSpans:
    """Call-local side table of protected code regions.

    Indices are positions within each list and are never reused during a
    single render call.

    Attributes:
        blocks: Fenced code blocks in first-seen order.
        inline: Inline code spans in first-seen order.
    """

    blocks: list[ProtectedSpan] = field(default_factory=list)
    inline: list[ProtectedSpan] = field(default_factory=list)


@dataclass
class RendererContext:
    """Encapsulate renderer state while walking Markdown lines.

    Attributes:
        list_type: List currently open, if any.
        blockquote: Buffered blockquote lines with the ``>`` marker removed.
        output: HTML fragments emitted so far.
        slug_counters: Next numbering suffix per base heading slug.
        used_ids: Heading ids issued so far. Both are only consulted when
            heading ids are deduplicated.
    """

    list_type: ListType = ListType.NONE
    blockquote: list[str] = field(default_factory=list)
    output: list[str] = field(default_factory=list)
    slug_counters: dict[str, int] = field(default_factory=dict)
    used_ids: set[str] = field(default_factory=set)


@dataclass
class Post:
    """One entry of the post manifest.

    Attributes:
        slug: Identifier used for the Markdown file name and URL fragment.
        title: Human-readable title.
        date: Publication date as an ISO ``YYYY-MM-DD`` string.
        description: Short summary shown in listings and feeds.
        type: ``"post"`` or ``"guide"``.
        chapter: Optional grouping used as the feed category.
        thumbnail: Optional hero image path.
        problem: Guide-only problem statement.
        difficulty: Guide-only difficulty label.
        tags: Guide tags.
        extra: Any other manifest keys, preserved as-is.
    """

    slug: str = ""
    title: str = ""
    date: str = ""
    description: str = ""
    type: str = ""
    chapter: str = ""
    thumbnail: str = ""
    problem: str = ""
    difficulty: str = ""
    tags: list[str] = field(default_factory=list)
    extra: dict[str, object] = field(default_factory=dict)


@dataclass
class LintResult:
    """Problems found in one Markdown file.

    Attributes:
        issues: Problems that fail the lint run.
        warnings: Advisory findings.
    """

    issues: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.issues and not self.warnings


@dataclass
class ValidationReport:
    """Outcome of validating the post manifest.

    Attributes:
        post_count: Number of entries read from the manifest.
        errors: Problems that fail validation.
        warnings: Advisory findings.
    """

    post_count: int = 0
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors
