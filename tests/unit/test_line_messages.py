from daily_hn_bot.line.messages import (
    MAX_CAROUSEL_BUBBLES,
    MAX_TEXT_LENGTH,
    build_stories_carousel,
    build_summary_bubble,
    build_text_message,
    format_latest_story,
)
from daily_hn_bot.schemas.story import Story


def test_text_message_is_clipped():
    """
    WHY: LINE rejects text messages over 5000 characters outright.
    HOW: Build a message from 6000 characters.
    EXPECTED: Text is exactly MAX_TEXT_LENGTH long and ends with an ellipsis.
    """
    message = build_text_message("x" * 6000)

    assert message["type"] == "text"
    assert len(message["text"]) == MAX_TEXT_LENGTH
    assert message["text"].endswith("…")


def test_format_latest_story():
    story = Story(title="Show HN: A thing", link="https://example.com/thing")
    assert format_latest_story(story) == "Latest story: Show HN: A thing\nhttps://example.com/thing"


def test_summary_bubble_with_title_and_link():
    """
    WHY: Summaries are shown as flex bubbles with a button back to the article.
    HOW: Build a bubble with summary, title and link.
    EXPECTED: Title and summary in the body, a uri action to the link in the footer.
    """
    message = build_summary_bubble("It does things.", title="A thing", link="https://example.com/thing")

    assert message["type"] == "flex"
    assert message["altText"] == "A thing"
    texts = [c["text"] for c in message["contents"]["body"]["contents"]]
    assert texts == ["A thing", "It does things."]
    action = message["contents"]["footer"]["contents"][0]["action"]
    assert action == {"type": "uri", "label": "Read", "uri": "https://example.com/thing"}


def test_summary_bubble_without_link_has_no_footer():
    message = build_summary_bubble("Just text")

    assert "footer" not in message["contents"]
    assert message["altText"] == "Just text"


def test_carousel_is_capped():
    """
    WHY: LINE caps a carousel at 12 bubbles and rejects larger ones.
    HOW: Build a carousel from 15 stories.
    EXPECTED: 12 bubbles, in story order.
    """
    pairs = [(Story(title=f"S{i}", link=f"https://e.com/{i}"), f"sum {i}") for i in range(15)]

    message = build_stories_carousel(pairs)

    bubbles = message["contents"]["contents"]
    assert message["contents"]["type"] == "carousel"
    assert len(bubbles) == MAX_CAROUSEL_BUBBLES
    assert bubbles[0]["body"]["contents"][0]["text"] == "S0"
    assert bubbles[-1]["body"]["contents"][0]["text"] == "S11"
