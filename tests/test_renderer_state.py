from tinyblog.config import BlogConfig
from tinyblog.models import ListType, ProtectedSpan, ProtectedSpans, RendererContext
from tinyblog.renderer import (
    _try_blockquote,
    _try_code_placeholder,
    _try_heading,
    _try_list_item,
    _try_rule,
    protect_code,
    restore_code,
)


def test_try_blockquote_buffers_without_emitting():
    ctx = RendererContext()

    assert _try_blockquote(ctx, "> quoted") is True
    assert _try_blockquote(ctx, ">tight") is True
    assert ctx.blockquote == ["quoted", "tight"]
    assert ctx.output == []


def test_try_blockquote_closes_open_list():
    ctx = RendererContext(list_type=ListType.UNORDERED)

    assert _try_blockquote(ctx, "> quoted") is True
    assert ctx.list_type is ListType.NONE
    assert ctx.output == ["</ul>\n"]


def test_try_blockquote_ignores_other_lines():
    ctx = RendererContext()

    assert _try_blockquote(ctx, "text > more") is False
    assert ctx.blockquote == []


def test_try_list_item_opens_list_once():
    ctx = RendererContext()

    assert _try_list_item(ctx, "- a") is True
    assert _try_list_item(ctx, "* b") is True
    assert ctx.list_type is ListType.UNORDERED
    assert ctx.output == ["<ul>\n", "<li>a</li>\n", "<li>b</li>\n"]


def test_try_list_item_switches_list_type():
    ctx = RendererContext()

    _try_list_item(ctx, "- a")
    assert _try_list_item(ctx, "10. b") is True
    assert ctx.list_type is ListType.ORDERED
    assert ctx.output[-3:] == ["</ul>\n", "<ol>\n", "<li>b</li>\n"]


def test_try_list_item_requires_space_after_marker():
    ctx = RendererContext()

    assert _try_list_item(ctx, "-a") is False
    assert _try_list_item(ctx, "*emphasis*") is False
    assert _try_list_item(ctx, "1.5 volts") is False
    assert ctx.output == []


def test_try_rule_flushes_blockquote():
    ctx = RendererContext(blockquote=["q"])

    assert _try_rule(ctx, "***") is True
    assert ctx.blockquote == []
    assert ctx.output == ["<blockquote><p>q</p></blockquote>\n", "<hr>\n"]


def test_try_rule_rejects_mixed_characters():
    assert _try_rule(RendererContext(), "-*-") is False
    assert _try_rule(RendererContext(), "--") is False


def test_try_heading_closes_list_and_blockquote_in_order():
    ctx = RendererContext(list_type=ListType.ORDERED)
    ctx.blockquote = []

    assert _try_heading(ctx, "### Deep dive", ProtectedSpans(), BlogConfig()) is True
    assert ctx.output == [
        "</ol>\n",
        '<h3 id="deep-dive"><a href="#deep-dive" class="heading-anchor">Deep dive</a></h3>\n',
    ]


def test_try_heading_records_ids_when_deduplicating():
    ctx = RendererContext()
    config = BlogConfig(unique_heading_ids=True)

    _try_heading(ctx, "# Intro", ProtectedSpans(), config)
    _try_heading(ctx, "# Intro", ProtectedSpans(), config)

    assert ctx.used_ids == {"intro", "intro-1"}
    assert 'id="intro-1"' in ctx.output[-1]


def test_try_code_placeholder_requires_whole_line():
    ctx = RendererContext(list_type=ListType.UNORDERED)

    assert _try_code_placeholder(ctx, "text \x00CODEBLOCK0\x00") is False
    assert _try_code_placeholder(ctx, "\x00CODEBLOCK0\x00") is True
    assert ctx.output == ["</ul>\n", "\x00CODEBLOCK0\x00\n"]


def test_protect_code_assigns_indices_in_order():
    text, spans = protect_code("`a` and `b`\n```sh\nls\n```")

    assert text == "\x00INLINECODE0\x00 and \x00INLINECODE1\x00\n\x00CODEBLOCK0\x00"
    assert [span.raw for span in spans.inline] == ["a", "b"]
    assert spans.blocks == [
        ProtectedSpan(html='<pre><code class="language-sh">ls</code></pre>', raw="ls")
    ]


def test_protect_code_tables_are_call_local():
    _, first = protect_code("`a`")
    _, second = protect_code("`b`")

    assert first is not second
    assert [span.raw for span in second.inline] == ["b"]


def test_inline_code_does_not_span_lines():
    text, spans = protect_code("`open\nclose`")

    assert text == "`open\nclose`"
    assert spans.inline == []


def test_restore_code_replaces_every_token():
    spans = ProtectedSpans(
        blocks=[ProtectedSpan(html="<pre><code>x</code></pre>", raw="x")],
        inline=[ProtectedSpan(html="<code>y</code>", raw="y")],
    )

    restored = restore_code("\x00CODEBLOCK0\x00\n<p>\x00INLINECODE0\x00</p>", spans)
    assert restored == "<pre><code>x</code></pre>\n<p><code>y</code></p>"


def test_restore_code_leaves_unknown_tokens():
    assert restore_code("\x00INLINECODE7\x00", ProtectedSpans()) == "\x00INLINECODE7\x00"


def test_protect_code_strips_fence_indentation():
    text, spans = protect_code("- a\n  ```\n  x\n    y\n  ```\nafter")

    assert text == "- a\n\x00CODEBLOCK0\x00\nafter"
    assert spans.blocks[0].raw == "x\n  y"


def test_protect_code_ignores_backticks_after_opening_fence():
    text, spans = protect_code("```a``` b\nc")

    assert spans.blocks == []
    assert [span.raw for span in spans.inline] == ["a"]
    assert text == "``\x00INLINECODE0\x00`` b\nc"
