"""Markdown to HTML rendering.

The renderer is a single linear pass over the lines of a post:

1. fenced code blocks, then inline code spans, are lifted into a call-local
   side table and replaced by NUL-delimited placeholder tokens;
2. lines are classified one by one (headings, rules, blockquotes, list items,
   paragraphs) while a `RendererContext` tracks the open list and the pending
   blockquote;
3. every emitted content fragment goes through `render_inline`, a flat,
   ordered series of regex substitutions (images, links, bold, italic);
4. placeholders are swapped back for the protected code HTML.

`render_markdown` is total over `str` input: malformed constructs fall back to
their literal text instead of raising.
"""

from __future__ import annotations

import html
import re
from collections.abc import Callable

from .config import BlogConfig
from .constants import (
    BLOCKQUOTE_PATTERN,
    CODE_BLOCK_PLACEHOLDER,
    CODE_BLOCK_PLACEHOLDER_PATTERN,
    EMPHASIS_STAR_PATTERN,
    EMPHASIS_UNDERSCORE_PATTERN,
    FENCED_CODE_PATTERN,
    HEADING_PATTERN,
    HORIZONTAL_RULE_PATTERN,
    IMAGE_PATTERN,
    INLINE_CODE_PATTERN,
    INLINE_CODE_PLACEHOLDER,
    INLINE_CODE_PLACEHOLDER_PATTERN,
    LINK_PATTERN,
    ORDERED_ITEM_PATTERN,
    STRONG_STAR_PATTERN,
    STRONG_UNDERSCORE_PATTERN,
    UNORDERED_ITEM_PATTERN,
)
from .models import ListType, ProtectedSpan, ProtectedSpans, RendererContext
from .slugify import generate_slug, unique_slug


def escape_html(text: str) -> str:
    """Escape ``&``, ``<`` and ``>`` for use in an HTML text node."""
    return html.escape(text, quote=False)


def _escape_attribute(value: str) -> str:
    # Input is already text-escaped; emphasis delimiters become character
    # references so later inline rules cannot rewrite inside the attribute.
    return value.replace('"', "&quot;").replace("*", "&#42;").replace("_", "&#95;")


def _normalize(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n").replace("\x00", "\ufffd")


def _fence_body(code: str, indent: str) -> str:
    # Drop the indentation in front of a closing fence, then the fence's own
    # indentation from each code line.
    head, _, last_line = code.rpartition("\n")
    if not last_line.strip():
        code = head
    if indent:
        code = "\n".join(
            line[len(indent) :] if line.startswith(indent) else line for line in code.split("\n")
        )
    return code.strip("\n")


def protect_code(text: str) -> tuple[str, ProtectedSpans]:
    """Lift fenced code blocks and inline code spans out of `text`.

    Fenced blocks are handled first so backticks inside them are never seen
    by the inline-code scan. Fences may be indented (for example under a list
    item); that indentation is removed from the code. A fence that is never
    closed extends to the end of the input.

    Args:
        text: Normalized Markdown source.

    Returns:
        tuple[str, ProtectedSpans]: Text with placeholder tokens, and the side
            table needed by `restore_code`.

    Examples:
        protect_code("Use `pip`")  # ("Use \\x00INLINECODE0\\x00", ProtectedSpans(...))
    """
    spans = ProtectedSpans()

    def _protect_block(match: re.Match) -> str:
        language = match.group("lang")
        code = _fence_body(match.group("code"), match.group("indent"))
        class_attribute = f' class="language-{language}"' if language else ""
        block_html = f"<pre><code{class_attribute}>{escape_html(code)}</code></pre>"
        spans.blocks.append(ProtectedSpan(html=block_html, raw=code))
        return CODE_BLOCK_PLACEHOLDER.format(index=len(spans.blocks) - 1)

    def _protect_inline(match: re.Match) -> str:
        code = match.group(1)
        spans.inline.append(ProtectedSpan(html=f"<code>{escape_html(code)}</code>", raw=code))
        return INLINE_CODE_PLACEHOLDER.format(index=len(spans.inline) - 1)

    text = FENCED_CODE_PATTERN.sub(_protect_block, text)
    text = INLINE_CODE_PATTERN.sub(_protect_inline, text)
    return text, spans


def _substitute(pattern: re.Pattern, table: list[ProtectedSpan], text: str, raw: bool) -> str:
    def _lookup(match: re.Match) -> str:
        index = int(match.group(1))
        if index >= len(table):
            return match.group(0)
        return table[index].raw if raw else table[index].html

    return pattern.sub(_lookup, text)


def restore_code(rendered: str, spans: ProtectedSpans) -> str:
    """Replace every placeholder token with its stored HTML.

    Args:
        rendered: HTML produced by the block-level pass.
        spans: Side table returned by `protect_code` for the same call.

    Returns:
        str: HTML with protected code restored.
    """
    rendered = _substitute(INLINE_CODE_PLACEHOLDER_PATTERN, spans.inline, rendered, raw=False)
    return _substitute(CODE_BLOCK_PLACEHOLDER_PATTERN, spans.blocks, rendered, raw=False)


def _image(match: re.Match) -> str:
    return f'<img src="{_escape_attribute(match.group(2))}" alt="{_escape_attribute(match.group(1))}">'


def _link(match: re.Match) -> str:
    return f'<a href="{_escape_attribute(match.group(2))}">{match.group(1)}</a>'


INLINE_RULES: list[tuple[re.Pattern, str | Callable[[re.Match], str]]] = [
    (IMAGE_PATTERN, _image),
    (LINK_PATTERN, _link),
    (STRONG_STAR_PATTERN, r"<strong>\1</strong>"),
    (STRONG_UNDERSCORE_PATTERN, r"<strong>\1</strong>"),
    (EMPHASIS_STAR_PATTERN, r"<em>\1</em>"),
    (EMPHASIS_UNDERSCORE_PATTERN, r"<em>\1</em>"),
]


def render_inline(text: str) -> str:
    """Render inline spans (images, links, bold, italic) in one fragment.

    The text is HTML-escaped first, then each rule in `INLINE_RULES` is applied
    once, globally and without nesting. Triple delimiters such as ``***x***``
    are not supported.

    Args:
        text: Content of a heading, list item, blockquote or paragraph.

    Returns:
        str: HTML fragment.

    Examples:
        render_inline("**bold** and [link](https://example.com)")
        # '<strong>bold</strong> and <a href="https://example.com">link</a>'
    """
    text = escape_html(text)
    for pattern, replacement in INLINE_RULES:
        text = pattern.sub(replacement, text)
    return text


def _close_list(ctx: RendererContext) -> None:
    if ctx.list_type is ListType.NONE:
        return
    ctx.output.append(f"</{ctx.list_type.tag}>\n")
    ctx.list_type = ListType.NONE


def _open_list(ctx: RendererContext, list_type: ListType) -> None:
    if ctx.list_type is list_type:
        return
    _close_list(ctx)
    ctx.output.append(f"<{list_type.tag}>\n")
    ctx.list_type = list_type


def _flush_blockquote(ctx: RendererContext) -> None:
    if not ctx.blockquote:
        return
    content = render_inline(" ".join(ctx.blockquote))
    ctx.output.append(f"<blockquote><p>{content}</p></blockquote>\n")
    ctx.blockquote = []


def _close_blocks(ctx: RendererContext) -> None:
    _close_list(ctx)
    _flush_blockquote(ctx)


def _heading_id(ctx: RendererContext, content: str, spans: ProtectedSpans, config: BlogConfig) -> str:
    raw_text = _substitute(INLINE_CODE_PLACEHOLDER_PATTERN, spans.inline, content, raw=True)
    slug = generate_slug(raw_text)
    if config.unique_heading_ids:
        return unique_slug(slug, ctx.slug_counters, ctx.used_ids)
    return slug


def _try_heading(
    ctx: RendererContext, line: str, spans: ProtectedSpans, config: BlogConfig
) -> bool:
    """Emit a heading with a self-referencing anchor.

    Args:
        ctx: Renderer context; open lists and blockquotes are closed first.
        line: Current line.
        spans: Side table, used to build the id from raw inline code text.
        config: Supplies the anchor class and id deduplication setting.

    Returns:
        bool: True when the line is a heading.

    Examples:
        _try_heading(RendererContext(), "## Setup", ProtectedSpans(), BlogConfig())
    """
    match = HEADING_PATTERN.match(line)
    if not match:
        return False

    _close_blocks(ctx)
    level = len(match.group("marks"))
    content = match.group("content").strip()
    heading_id = _heading_id(ctx, content, spans, config)
    anchor_class = html.escape(config.heading_anchor_class)
    ctx.output.append(
        f'<h{level} id="{heading_id}"><a href="#{heading_id}" class="{anchor_class}">'
        f"{render_inline(content)}</a></h{level}>\n"
    )
    return True


def _try_rule(ctx: RendererContext, line: str) -> bool:
    if not HORIZONTAL_RULE_PATTERN.match(line):
        return False
    _close_blocks(ctx)
    ctx.output.append("<hr>\n")
    return True


def _try_blockquote(ctx: RendererContext, line: str) -> bool:
    """Buffer a blockquote line; output is deferred until the quote ends.

    Returns:
        bool: True when the line starts with ``>``.

    Examples:
        ctx = RendererContext()
        _try_blockquote(ctx, "> quoted")  # ctx.blockquote == ["quoted"]
    """
    match = BLOCKQUOTE_PATTERN.match(line)
    if not match:
        return False
    _close_list(ctx)
    ctx.blockquote.append(line[match.end() :])
    return True


def _try_list_item(ctx: RendererContext, line: str) -> bool:
    """Emit a list item, switching the open list type when needed.

    Returns:
        bool: True when the line is an unordered or ordered list item.

    Examples:
        _try_list_item(RendererContext(), "1. first")
    """
    for pattern, list_type in (
        (UNORDERED_ITEM_PATTERN, ListType.UNORDERED),
        (ORDERED_ITEM_PATTERN, ListType.ORDERED),
    ):
        match = pattern.match(line)
        if match:
            _open_list(ctx, list_type)
            ctx.output.append(f"<li>{render_inline(line[match.end() :].strip())}</li>\n")
            return True
    return False


def _try_code_placeholder(ctx: RendererContext, line: str) -> bool:
    stripped = line.strip()
    if not CODE_BLOCK_PLACEHOLDER_PATTERN.fullmatch(stripped):
        return False
    _close_list(ctx)
    ctx.output.append(f"{stripped}\n")
    return True


def render_markdown(text: str, config: BlogConfig | None = None) -> str:
    """Render a Markdown post body to an HTML fragment.

    Supports ATX headings (with slug ids and anchors), horizontal rules,
    single-paragraph blockquotes, flat unordered and ordered lists, fenced and
    inline code, images, links, bold and italic. Never raises; unsupported or
    malformed syntax renders as literal text.

    Args:
        text: Markdown source.
        config: Rendering options. Defaults to a new `BlogConfig` when omitted.

    Returns:
        str: HTML fragment, one block element per line.

    Examples:
        render_markdown("# Hello World")
        # '<h1 id="hello-world"><a href="#hello-world" class="heading-anchor">Hello World</a></h1>\\n'
    """
    config = config or BlogConfig()
    text, spans = protect_code(_normalize(text))
    ctx = RendererContext()

    for line in text.split("\n"):
        if _try_heading(ctx, line, spans, config):
            continue

        if _try_rule(ctx, line):
            continue

        if _try_blockquote(ctx, line):
            continue

        # Any other line ends a pending blockquote
        _flush_blockquote(ctx)

        if _try_list_item(ctx, line):
            continue

        if not line.strip():
            _close_list(ctx)
            continue

        if _try_code_placeholder(ctx, line):
            continue

        _close_list(ctx)
        ctx.output.append(f"<p>{render_inline(line.strip())}</p>\n")

    _close_list(ctx)
    _flush_blockquote(ctx)

    return restore_code("".join(ctx.output), spans)
