"""Broadcasts to every follower of the bot.

Triggered from the HTTP routes (usually by a daily cron), not from chat.
Unlike the webhook path, errors propagate to the caller.
"""

import asyncio
from typing import Optional

from ..line.client import LineClient, line_client
from ..line.messages import MAX_CAROUSEL_BUBBLES, build_stories_carousel, build_summary_bubble
from ..llm.language import summarize_stories
from ..log import get_logger
from ..retrieval.stories import StorySource, story_source
from ..retrieval.summarize import Summarizer, summarizer as default_summarizer
from ..schemas.delivery import Broadcast
from .dispatch import deliver

logger = get_logger("broadcast")

DIGEST_TITLE = "Hacker News daily digest"


class Broadcaster:
    def __init__(
        self,
        stories: Optional[StorySource] = None,
        summarizer: Optional[Summarizer] = None,
        messenger: Optional[LineClient] = None,
    ):
        self.stories = stories or story_source
        self.summarizer = summarizer or default_summarizer
        self.messenger = messenger or line_client

    async def broadcast_today_stories(self) -> int:
        """
        One carousel bubble per story, each with its own summary.
        Returns the number of stories sent.
        """
        stories = (await self.stories.fetch())[:MAX_CAROUSEL_BUBBLES]
        summaries = await asyncio.gather(
            *(self.summarizer.summarize_or_placeholder(story.link) for story in stories)
        )
        await deliver(self.messenger, Broadcast(), [build_stories_carousel(list(zip(stories, summaries)))])
        logger.info(f"Broadcast carousel with {len(stories)} stories")
        return len(stories)

    async def broadcast_daily_summary(self) -> str:
        """Single AI-written digest of the whole feed. Returns the digest text."""
        stories = await self.stories.fetch()
        stories_text = "\n\n".join(
            f"{i}. {story.title} {story.link}" for i, story in enumerate(stories, start=1)
        )
        digest = await summarize_stories(stories_text)
        await deliver(self.messenger, Broadcast(), [build_summary_bubble(digest, title=DIGEST_TITLE)])
        logger.info(f"Broadcast daily digest covering {len(stories)} stories")
        return digest


broadcaster = Broadcaster()
