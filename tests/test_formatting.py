"""
Tests for the plain-text rendering of stories and comments.
"""
from __future__ import annotations

from datetime import datetime

from hackernews_mcp.formatting import (
    clean_text,
    format_time,
    render_comment_list,
    render_story_detail,
    render_story_list,
    to_formatted_comment,
    to_formatted_story,
)
from hackernews_mcp.models import Comment, FormattedComment, FormattedStory, Story


def _story(**overrides) -> FormattedStory:
    fields = dict(
        id=1,
        title="Show HN: a thing",
        by="pg",
        time="Mon Jan  1 00:00:00 2024",
        score=42,
        comments_count=3,
        url="https://example.com",
    )
    fields.update(overrides)
    return FormattedStory(**fields)


class TestCleanText:

    def test_decodes_entities_and_strips_tags(self):
        assert clean_text("A &amp; B <i>ok</i>") == "A & B ok"

    def test_decode_runs_before_strip(self):
        assert clean_text("<p>&amp;</p>") == "&"
        # decoded markup is stripped in the same pass
        assert clean_text("&lt;b&gt;hi&lt;/b&gt;") == "hi"

    def test_quotes_decoded(self):
        assert clean_text("say &quot;hi&quot;") == 'say "hi"'

    def test_other_entities_left_alone(self):
        assert clean_text("it&#x27;s") == "it&#x27;s"

    def test_plain_text_unchanged(self):
        assert clean_text("nothing to do here") == "nothing to do here"
        assert clean_text(clean_text("nothing to do here")) == "nothing to do here"

    def test_unterminated_tag_is_stripped(self):
        assert clean_text("keep <a href") == "keep "

    def test_absent_input(self):
        assert clean_text(None) == ""
        assert clean_text("") == ""


def test_format_time_uses_local_time():
    ts = 1700000000
    assert format_time(ts, "%Y-%m-%d %H:%M:%S") == datetime.fromtimestamp(ts).strftime("%Y-%m-%d %H:%M:%S")
    assert format_time(ts) == datetime.fromtimestamp(ts).strftime("%c")


def test_to_formatted_story_counts_direct_kids():
    story = Story(id=7, title="T", by="me", time=1700000000, score=5, kids=(1, 2, 3))
    formatted = to_formatted_story(story, "%Y")
    assert formatted.comments_count == 3
    assert formatted.time == datetime.fromtimestamp(1700000000).strftime("%Y")
    assert formatted.url is None
    assert formatted.text is None


def test_to_formatted_story_without_kids():
    story = Story(id=7, title="T", by="me", time=0)
    assert to_formatted_story(story).comments_count == 0


def test_to_formatted_story_cleans_text_when_requested():
    story = Story(id=7, title="T", by="me", time=0, text="<p>Hi &amp; bye")
    assert to_formatted_story(story, include_text=True).text == "Hi & bye"


def test_to_formatted_comment():
    comment = Comment(id=9, by="bob", time=1700000000, text="I &gt; you<p>", kids=(4,))
    formatted = to_formatted_comment(comment, "%Y")
    assert formatted.text == "I > you"
    assert formatted.replies == 1
    assert formatted.by == "bob"


def test_render_story_list_empty():
    assert render_story_list([]) == "No stories found."


def test_render_story_list_layout():
    text = render_story_list([_story(), _story(id=2, title="Second", url=None, comments_count=0)])
    expected = (
        "1. Show HN: a thing\n"
        "   ID: 1\n"
        "   By: pg\n"
        "   Published: Mon Jan  1 00:00:00 2024\n"
        "   Score: 42\n"
        "   Comments: 3\n"
        "   URL: https://example.com\n"
        "   ------------------------------\n"
        "\n"
        "2. Second\n"
        "   ID: 2\n"
        "   By: pg\n"
        "   Published: Mon Jan  1 00:00:00 2024\n"
        "   Score: 42\n"
        "   Comments: 0\n"
        "   URL: N/A\n"
        "   ------------------------------"
    )
    assert text == expected


def test_render_story_detail_with_content():
    text = render_story_detail(_story(text="Body text"))
    assert text == (
        "Title: Show HN: a thing\n"
        "ID: 1\n"
        "By: pg\n"
        "Published: Mon Jan  1 00:00:00 2024\n"
        "Score: 42\n"
        "Comments: 3\n"
        "URL: https://example.com\n"
        "\n"
        "Content:\n"
        "Body text"
    )


def test_render_story_detail_without_content():
    text = render_story_detail(_story(url=None, text=""))
    assert text.endswith("URL: N/A")
    assert "Content:" not in text


def test_render_story_detail_missing():
    assert render_story_detail(None) == "Story not found."


def test_render_comment_list_empty():
    assert render_comment_list("Any", []) == "No comments found."


def test_render_comment_list_layout():
    comments = [
        FormattedComment(id=1, by="alice", time="T1", text="First!", replies=2),
        FormattedComment(id=2, by="bob", time="T2", text="Second", replies=0),
    ]
    assert render_comment_list("My story", comments) == (
        'Comments for "My story" (Total: 2):\n'
        "\n"
        "1. Comment by alice at T1:\n"
        '   "First!"\n'
        "   (2 replies)\n"
        "   ------------------------------\n"
        "\n"
        "2. Comment by bob at T2:\n"
        '   "Second"\n'
        "   (no replies)\n"
        "   ------------------------------"
    )
