"""Constants used across the tinyblog package."""

from __future__ import annotations

import re

# Protected-span placeholders; NUL never survives input normalization.
CODE_BLOCK_PLACEHOLDER = "\x00CODEBLOCK{index}\x00"
INLINE_CODE_PLACEHOLDER = "\x00INLINECODE{index}\x00"
CODE_BLOCK_PLACEHOLDER_PATTERN = re.compile(r"\x00CODEBLOCK(\d+)\x00")
INLINE_CODE_PLACEHOLDER_PATTERN = re.compile(r"\x00INLINECODE(\d+)\x00")

# Phase 1: code protection
# An opening fence may be indented and must end its line without further
# backticks. Three backticks at the end of any later line close the block;
# an unterminated fence runs to the end of the input.
FENCED_CODE_PATTERN = re.compile(
    r"^(?P<indent>[ \t]*)`{3,}(?P<lang>[\w+-]*)[^`\n]*\n(?P<code>.*?)(?:`{3,}[ \t]*$|\Z)",
    re.MULTILINE | re.DOTALL,
)
INLINE_CODE_PATTERN = re.compile(r"`([^`\n]+)`")

# Phase 2: block-level line patterns
HEADING_PATTERN = re.compile(r"^(?P<marks>#{1,6})\s+(?P<content>.*)$")
HORIZONTAL_RULE_PATTERN = re.compile(r"^(?:-{3,}|\*{3,}|_{3,})[ \t]*$")
BLOCKQUOTE_PATTERN = re.compile(r"^> ?")
UNORDERED_ITEM_PATTERN = re.compile(r"^[*-]\s")
ORDERED_ITEM_PATTERN = re.compile(r"^\d+\.\s")

# Phase 3: inline spans, applied in this order
# Link text and URLs are length-bounded.
MAX_LINK_TEXT_LENGTH = 500
MAX_LINK_URL_LENGTH = 2000
IMAGE_PATTERN = re.compile(
    rf"!\[([^\]\n]{{0,{MAX_LINK_TEXT_LENGTH}}})\]\(([^)\n]{{1,{MAX_LINK_URL_LENGTH}}})\)"
)
LINK_PATTERN = re.compile(
    rf"\[([^\]\n]{{1,{MAX_LINK_TEXT_LENGTH}}})\]\(([^)\n]{{1,{MAX_LINK_URL_LENGTH}}})\)"
)
STRONG_STAR_PATTERN = re.compile(r"\*\*([^*]+)\*\*")
STRONG_UNDERSCORE_PATTERN = re.compile(r"__([^_]+)__")
EMPHASIS_STAR_PATTERN = re.compile(r"\*([^*]+)\*")
EMPHASIS_UNDERSCORE_PATTERN = re.compile(r"_([^_]+)_")

DEFAULT_HEADING_ANCHOR_CLASS = "heading-anchor"

# Posts and generated files
MARKDOWN_EXTENSION = ".md"
PLACEHOLDER_DESCRIPTION = "Add your description here"
REQUIRED_POST_FIELDS = ("slug", "title", "date", "type")
UNSAFE_URL_SCHEMES = ("javascript:", "data:", "vbscript:")
DEFAULT_FEED_CATEGORY = "General"
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
