from tinyblog.models import (
    ListType,
    LintResult,
    Post,
    ProtectedSpans,
    RendererContext,
    ValidationReport,
)


def test_list_type_members_and_tags():
    assert list(ListType) == [ListType.NONE, ListType.UNORDERED, ListType.ORDERED]
    assert ListType.NONE.tag == ""
    assert ListType.UNORDERED.tag == "ul"
    assert ListType.ORDERED.tag == "ol"


def test_renderer_context_defaults():
    ctx = RendererContext()

    assert ctx.list_type is ListType.NONE
    assert ctx.blockquote == []
    assert ctx.output == []
    assert ctx.slug_counters == {}
    assert ctx.used_ids == set()


def test_renderer_contexts_do_not_share_buffers():
    first = RendererContext()
    second = RendererContext()
    first.output.append("<p>x</p>\n")

    assert second.output == []


def test_protected_spans_defaults():
    spans = ProtectedSpans()

    assert spans.blocks == []
    assert spans.inline == []


def test_post_defaults():
    post = Post(slug="hello")

    assert post.title == ""
    assert post.tags == []
    assert post.extra == {}


def test_lint_result_clean():
    assert LintResult().clean is True
    assert LintResult(warnings=["w"]).clean is False


def test_validation_report_ok_ignores_warnings():
    assert ValidationReport(warnings=["w"]).ok is True
    assert ValidationReport(errors=["e"]).ok is False
