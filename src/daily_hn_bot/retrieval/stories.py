"""Hacker News story feed.

Fetches the daily digest RSS feed and parses the latest item's HTML
description into an ordered list of stories.
"""

from typing import List, Optional

import feedparser
from bs4 import BeautifulSoup

from ..config import get_settings
from ..errors import ParseError
from ..http_client import send
from ..log import get_logger
from ..retry import execute
from ..schemas.story import Story

settings = get_settings()
logger = get_logger("stories")

# Daemonology renders entries either as <a class="storylink"> or <span class="storylink"><a>
STORY_SELECTOR = "a.storylink, .storylink a"


def parse_stories(description_html: str) -> List[Story]:
    soup = BeautifulSoup(description_html, "html.parser")
    stories = []
    for anchor in soup.select(STORY_SELECTOR):
        href = anchor.get("href")
        title = " ".join(anchor.get_text(" ", strip=True).split())
        if href and title:
            stories.append(Story(title=title, link=href))
    return stories


class StorySource:
    def __init__(self, feed_url: Optional[str] = None):
        self.feed_url = feed_url or settings.RSS_FEED_URL

    async def fetch_feed(self) -> feedparser.FeedParserDict:
        resp = await execute(lambda: send("rss", "GET", self.feed_url))
        feed = feedparser.parse(resp.content)
        if not feed.entries:
            if feed.bozo:
                raise ParseError(f"RSS feed could not be parsed: {feed.get('bozo_exception')}")
            raise ParseError("RSS feed has no items")
        return feed

    async def fetch(self) -> List[Story]:
        """
        Returns the stories of the most recent digest, in feed order.
        Raises TransportError if the feed cannot be downloaded and
        ParseError if it holds no stories.
        """
        feed = await self.fetch_feed()
        entry = feed.entries[0]
        description = entry.get("description") or entry.get("summary") or ""
        stories = parse_stories(description)
        if not stories:
            raise ParseError("No stories found in RSS feed")
        logger.info(f"Fetched {len(stories)} stories from '{entry.get('title', 'latest item')}'")
        return stories

    async def latest_title(self) -> str:
        """Title of the newest feed item, e.g. "Hacker News Daily for <date>"."""
        feed = await self.fetch_feed()
        title = (feed.entries[0].get("title") or "").strip()
        if not title:
            raise ParseError("Latest RSS item has no title")
        return title


story_source = StorySource()
