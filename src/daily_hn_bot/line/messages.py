"""LINE message payload builders.

Provides functions to build text and flex messages for the Messaging API.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..schemas.story import Story

MAX_TEXT_LENGTH = 5000
MAX_ALT_TEXT_LENGTH = 400
MAX_CAROUSEL_BUBBLES = 12


def _clip(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 1] + "…"


def build_text_message(text: str) -> Dict[str, Any]:
    return {"type": "text", "text": _clip(text, MAX_TEXT_LENGTH)}


def format_latest_story(story: Story) -> str:
    return f"Latest story: {story.title}\n{story.link}"


def _bubble(summary: str, title: Optional[str], link: Optional[str]) -> Dict[str, Any]:
    body: List[Dict[str, Any]] = []
    if title:
        body.append({"type": "text", "text": title, "weight": "bold", "size": "md", "wrap": True})
    body.append({"type": "text", "text": summary or "-", "size": "sm", "wrap": True})

    bubble: Dict[str, Any] = {
        "type": "bubble",
        "body": {"type": "box", "layout": "vertical", "spacing": "md", "contents": body},
    }
    if link:
        bubble["footer"] = {
            "type": "box",
            "layout": "vertical",
            "contents": [
                {
                    "type": "button",
                    "style": "link",
                    "height": "sm",
                    "action": {"type": "uri", "label": "Read", "uri": link},
                }
            ],
        }
    return bubble


def build_summary_bubble(summary: str, title: Optional[str] = None, link: Optional[str] = None) -> Dict[str, Any]:
    """
    Flex message holding one summary, optionally headed by a story title
    and with a button opening the link.
    """
    return {
        "type": "flex",
        "altText": _clip(title or summary, MAX_ALT_TEXT_LENGTH),
        "contents": _bubble(_clip(summary, MAX_TEXT_LENGTH), title, link),
    }


def build_stories_carousel(stories_with_summaries: Sequence[Tuple[Story, str]]) -> Dict[str, Any]:
    """
    Flex carousel, one bubble per story. LINE caps a carousel at 12 bubbles;
    anything beyond that is dropped.
    """
    bubbles = [
        _bubble(_clip(summary, MAX_TEXT_LENGTH), story.title, story.link)
        for story, summary in stories_with_summaries[:MAX_CAROUSEL_BUBBLES]
    ]
    return {
        "type": "flex",
        "altText": "Today's Hacker News stories",
        "contents": {"type": "carousel", "contents": bubbles},
    }
