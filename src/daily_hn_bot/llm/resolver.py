"""AI command resolver.

Sends the user's text with the tool catalogue to the chat model and turns
the reply into exactly one Command. The model's output is untyped JSON inside
a JSON string; decode_tool_call() is the only place that touches it.
"""

import json
from typing import Any, Optional

from ..errors import ParseError, ResolverTransportError, TooManyIndexes, TransportError
from ..log import get_logger
from ..schemas.commands import (
    MAX_SUMMARY_INDEXES,
    Command,
    PushPlainMessage,
    PushSummary,
    PushUrlSummary,
    ReplyLatestStory,
)
from .client import LLMClient, llm_client
from .tools import PUSH_SUMMARY, PUSH_URL_SUMMARY, REPLY_LATEST_STORY, TOOL_CATALOGUE

logger = get_logger("resolver")

FALLBACK_TEXT = "no message available"


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _decode_indexes(args: dict, fallback: Command) -> Command:
    indexes = args.get("indexes")
    if not isinstance(indexes, list) or not all(_is_int(i) for i in indexes):
        logger.warning(f"push_summary arguments have the wrong shape: {args!r}")
        return fallback

    if len(indexes) > MAX_SUMMARY_INDEXES:
        raise TooManyIndexes(len(indexes), MAX_SUMMARY_INDEXES)

    # Zero and negatives can never address a story; same treatment as indexes past the end
    positive = [i for i in indexes if i > 0]
    if len(positive) != len(indexes):
        logger.info(f"Dropping non-positive indexes from {indexes}")
    if not positive:
        return fallback
    return PushSummary(indexes=positive)


def decode_tool_call(name: Optional[str], arguments: Optional[str], content: Optional[str]) -> Command:
    """
    Map one AI reply to a Command.

    - no tool name: the reply is a plain message
    - known tool with well-formed arguments: the matching command
    - unknown tool or malformed arguments: PushPlainMessage with the best text we have

    Raises TooManyIndexes when push_summary asks for more than MAX_SUMMARY_INDEXES stories.
    """
    text = content.strip() if content and content.strip() else FALLBACK_TEXT
    fallback = PushPlainMessage(text=text)

    if not name:
        return fallback

    if name == REPLY_LATEST_STORY:
        return ReplyLatestStory()

    if name not in (PUSH_SUMMARY, PUSH_URL_SUMMARY):
        logger.warning(f"AI called unknown tool {name!r}")
        return fallback

    try:
        args = json.loads(arguments or "{}")
    except json.JSONDecodeError:
        logger.warning(f"{name} arguments are not valid JSON")
        return fallback
    if not isinstance(args, dict):
        logger.warning(f"{name} arguments are not a JSON object")
        return fallback

    if name == PUSH_SUMMARY:
        return _decode_indexes(args, fallback)

    url = args.get("url")
    if not isinstance(url, str) or not url.strip():
        logger.warning(f"push_url_summary arguments have the wrong shape: {args!r}")
        return fallback
    return PushUrlSummary(url=url.strip())


class CommandResolver:
    def __init__(self, client: Optional[LLMClient] = None):
        self.client = client or llm_client

    async def resolve(self, user_text: str) -> Command:
        """
        Returns the Command for `user_text`.
        Raises ResolverTransportError if the AI service cannot be reached or
        answers with an error status, TooManyIndexes as described above.
        """
        try:
            message = await self.client.run_with_tools(user_text, TOOL_CATALOGUE)
        except TransportError as e:
            raise ResolverTransportError(
                e.args[0] if e.args else "AI service call failed",
                stage="resolver",
                status=e.status,
                transient=e.transient,
            ) from e
        except ParseError as e:
            logger.warning(f"Unusable AI response: {e}")
            return PushPlainMessage(text=FALLBACK_TEXT)

        name = arguments = None
        if message.tool_calls:
            function = getattr(message.tool_calls[0], "function", None)
            if function is not None:
                name, arguments = function.name, function.arguments

        command = decode_tool_call(name, arguments, message.content)
        logger.info(f"Resolved command: {command.kind}")
        return command


command_resolver = CommandResolver()
