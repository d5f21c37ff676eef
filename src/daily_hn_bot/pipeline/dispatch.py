"""Dispatch of authenticated webhook events.

Runs detached from the HTTP request: event → command → action → delivery.
Nothing here raises to the webhook caller; every failure ends the run with
a log line naming the stage.
"""

import asyncio
from typing import List, Optional, Sequence

from ..errors import ParseError, TooManyIndexes, TransportError, ValidationError
from ..line.client import LineClient, Message, line_client
from ..line.messages import build_summary_bubble, build_text_message, format_latest_story
from ..llm.language import detect_language, translate_if_needed
from ..llm.resolver import CommandResolver, command_resolver
from ..log import get_logger
from ..retrieval.stories import StorySource, story_source
from ..retrieval.summarize import SUMMARY_UNAVAILABLE, Summarizer, summarizer as default_summarizer
from ..retrieval.url import is_valid_url
from ..schemas.commands import Command, PushPlainMessage, PushSummary, PushUrlSummary, ReplyLatestStory
from ..schemas.delivery import Broadcast, DeliveryTarget, Push, Reply
from ..schemas.story import Story
from ..schemas.webhook import InboundEvent

logger = get_logger("dispatch")


def select_stories(stories: Sequence[Story], indexes: Sequence[int]) -> List[Story]:
    """Stories at the given 1-based indexes, in index order. Out-of-range indexes are skipped."""
    selected = []
    for index in indexes:
        if 1 <= index <= len(stories):
            selected.append(stories[index - 1])
        else:
            logger.info(f"Skipping index {index}, feed has {len(stories)} stories")
    return selected


async def deliver(messenger: LineClient, target: DeliveryTarget, messages: List[Message]) -> None:
    if isinstance(target, Reply):
        await messenger.reply(target.reply_token, messages)
    elif isinstance(target, Push):
        await messenger.push(target.user_id, messages)
    elif isinstance(target, Broadcast):
        await messenger.broadcast(messages)
    logger.info(f"[deliver] Sent {len(messages)} message(s) via {target.kind}")


class Dispatcher:
    def __init__(
        self,
        resolver: Optional[CommandResolver] = None,
        stories: Optional[StorySource] = None,
        summarizer: Optional[Summarizer] = None,
        messenger: Optional[LineClient] = None,
    ):
        self.resolver = resolver or command_resolver
        self.stories = stories or story_source
        self.summarizer = summarizer or default_summarizer
        self.messenger = messenger or line_client

    async def process(self, event: Optional[InboundEvent]) -> None:
        """Parsed → Resolved → Executed → Delivered. Never raises."""
        if event is None:
            logger.info("[parse] Webhook carried no events")
            return
        if event.event_type != "message":
            logger.info(f"[parse] Ignoring non-message event '{event.event_type}'")
            return
        if not event.text:
            logger.info("[parse] Message event without text, ignoring")
            return

        user = event.user_id or "-"
        try:
            command = await self.resolver.resolve(event.text)
        except TooManyIndexes as e:
            logger.warning(f"[resolve] user={user}: {e}")
            return
        except TransportError as e:
            logger.error(f"[resolve] user={user}: AI service unavailable: {e}")
            return

        try:
            await self.execute(event, command)
        except ValidationError as e:
            logger.error(f"[execute] user={user}: {command.kind} rejected: {e}")
        except ParseError as e:
            logger.error(f"[execute] user={user}: {command.kind} got an unusable upstream payload: {e}")
        except TransportError as e:
            logger.error(f"[deliver] user={user}: {command.kind} failed: {e}")
        except Exception:
            logger.exception(f"[execute] user={user}: unexpected error while handling {command.kind}")

    def target_for(self, event: InboundEvent, command: Command) -> DeliveryTarget:
        if isinstance(command, ReplyLatestStory):
            if not event.reply_token:
                raise ValidationError("reply_latest_story needs a reply token, webhook had none")
            return Reply(reply_token=event.reply_token)
        if not event.user_id:
            raise ValidationError(f"{command.kind} needs a user id, webhook had none")
        return Push(user_id=event.user_id)

    async def deliver(self, target: DeliveryTarget, messages: List[Message]) -> None:
        await deliver(self.messenger, target, messages)

    async def execute(self, event: InboundEvent, command: Command) -> None:
        target = self.target_for(event, command)

        if isinstance(command, ReplyLatestStory):
            await self.reply_latest_story(target)
        elif isinstance(command, PushSummary):
            await self.push_summary(event, command, target)
        elif isinstance(command, PushUrlSummary):
            await self.push_url_summary(event, command, target)
        elif isinstance(command, PushPlainMessage):
            await self.deliver(target, [build_text_message(command.text)])

    async def reply_latest_story(self, target: DeliveryTarget) -> None:
        stories = await self.stories.fetch()
        await self.deliver(target, [build_text_message(format_latest_story(stories[0]))])

    async def push_summary(self, event: InboundEvent, command: PushSummary, target: DeliveryTarget) -> None:
        stories = await self.stories.fetch()
        selected = select_stories(stories, command.indexes)
        if not selected:
            logger.warning(f"[execute] None of {command.indexes} is a valid story index, nothing to send")
            return

        language, *summaries = await asyncio.gather(
            detect_language(event.text),
            *(self.summarizer.summarize_or_placeholder(story.link) for story in selected),
        )
        summaries = await asyncio.gather(*(self._translate(s, language) for s in summaries))

        messages = [
            build_summary_bubble(summary, title=story.title, link=story.link)
            for story, summary in zip(selected, summaries)
        ]
        await self.deliver(target, messages)

    async def _translate(self, summary: str, language: str) -> str:
        if summary == SUMMARY_UNAVAILABLE:
            return summary
        return await translate_if_needed(summary, language)

    async def push_url_summary(self, event: InboundEvent, command: PushUrlSummary, target: DeliveryTarget) -> None:
        if not is_valid_url(command.url):
            raise ValidationError(f"Not an http(s) URL with a host: {command.url!r}")

        language, summary = await asyncio.gather(
            detect_language(event.text),
            self.summarizer.summarize_url(command.url),
        )
        summary = await translate_if_needed(summary, language)
        await self.deliver(target, [build_summary_bubble(summary, link=command.url)])


dispatcher = Dispatcher()
